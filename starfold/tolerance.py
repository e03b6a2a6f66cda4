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


""" Numeric tolerances.

All thresholds are absolute and empirical. They are collected in one
place so that scripts operating on larger or smaller stars can adjust
them.
"""


class Tolerance:
    """ Tolerance settings.

    Parameters
    ----------
    coincide : float, optional
        Points, coplanarity and flatness tests.
    nearby : float, optional
        Distinct vertices closer than this are reported by
        :meth:`~starfold.star.StarMesh.log_mesh`.
    peer_length : float, optional
        Largest accepted length difference of peer half-edges.
    closure : float, optional
        Largest accepted gap of a star polygon.
    discriminant : float, optional
        Negative point pair discriminants above ``-discriminant`` are
        treated as tangent spheres.
    """

    def __init__(self, *, coincide=1e-8, nearby=1e-4, peer_length=1e-3,
                 closure=1e-6, discriminant=1e-10):
        self.coincide = coincide
        self.nearby = nearby
        self.peer_length = peer_length
        self.closure = closure
        self.discriminant = discriminant

    def __repr__(self):
        return (f'Tolerance(coincide={self.coincide}, nearby={self.nearby}, '
                f'peer_length={self.peer_length}, closure={self.closure}, '
                f'discriminant={self.discriminant})')
