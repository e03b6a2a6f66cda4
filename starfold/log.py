# Copyright 2024, m3shware
#
# Permission is hereby granted, free of charge, to any person obtaining a
# copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
# FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
# IN THE SOFTWARE.


""" Trace collaborators.

Mesh operations report what they are doing through an object with a
single ``record(*args)`` method. Arguments are converted with :func:`str`
and joined by blanks, i.e., ``log.record('split', v)`` reads like a call
to :func:`print`.
"""


class NullLog:
    """ Discards all records.
    """

    def record(self, *args):
        pass


class TextLog:
    """ Accumulates records as lines of text.

    The driver clears the log between operations so that each step of a
    script gets its own trace.
    """

    def __init__(self):
        self._lines = []

    def record(self, *args):
        self._lines.append(' '.join(str(arg) for arg in args))

    @property
    def text(self):
        """ All records so far, one per line.

        :type: str
        """
        return '\n'.join(self._lines)

    def clear(self):
        self._lines.clear()



class PrintLog:
    """ Writes records to standard output as they arrive.

    Used by the command line interface to trace long scripts while they
    run.

    Parameters
    ----------
    indent : str, optional
        Prefix for every line.
    """

    def __init__(self, indent=''):
        self._indent = indent

    def record(self, *args):
        print(self._indent + ' '.join(str(arg) for arg in args))
