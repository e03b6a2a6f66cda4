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


""" Folding scripts.

A script is a sequence of lines, one operation per line. Blank lines and
comments are skipped (see :func:`~starfold.star.get_lines`). Arguments
are separated by whitespace:

=================================== ====================================
``bend ANGLE V1 V2 [V3 ...]``       :func:`~starfold.ops.bend`
----------------------------------- ------------------------------------
``bend2 +|- P Q R``                 :func:`~starfold.ops.bend2`
----------------------------------- ------------------------------------
``reattach P Q``                    :func:`~starfold.ops.reattach`
----------------------------------- ------------------------------------
``contract N``                      :func:`~starfold.ops.contract`
=================================== ====================================

Angles are given in radians. The step count of ``contract`` may be
written as a decimal number, its fractional part is discarded.
"""

import collections

import starfold.ops as ops

from starfold.star import get_lines


Bend = collections.namedtuple('Bend', ['angle', 'names'])
Bend2 = collections.namedtuple('Bend2', ['choice', 'p', 'q', 'r'])
Reattach = collections.namedtuple('Reattach', ['p', 'q'])
Contract = collections.namedtuple('Contract', ['steps'])

COMMANDS = ('bend', 'bend2', 'reattach', 'contract')


def parse_operation(line):
    """ Parse a single script line.

    Parameters
    ----------
    line : str
        Command name followed by its arguments.

    Returns
    -------
    Bend or Bend2 or Reattach or Contract
        Operation record.

    Raises
    ------
    ValueError
        For unknown commands, wrong argument counts and malformed
        numbers.
    """
    cmd, *args = line.split()

    if cmd == 'bend':
        if len(args) < 3:
            raise ValueError('bend expects 3 or more args')
        try:
            angle = float(args[0])
        except ValueError:
            raise ValueError('first arg of bend should be a number ' +
                             f'(an angle), got {args[0]!r}') from None
        return Bend(angle, tuple(args[1:]))

    if cmd == 'bend2':
        if len(args) != 4:
            raise ValueError('bend2 expects 4 args')
        if args[0] not in ('+', '-'):
            raise ValueError("first arg of bend2 should be '+' or '-'")
        return Bend2(*args)

    if cmd == 'reattach':
        if len(args) != 2:
            raise ValueError('reattach expects 2 args')
        return Reattach(*args)

    if cmd == 'contract':
        if len(args) != 1:
            raise ValueError('contract expects 1 arg')
        try:
            steps = int(float(args[0]))
        except (ValueError, OverflowError):
            steps = 0
        if steps < 1:
            raise ValueError('the argument of contract should be the ' +
                             'number of optimization steps')
        return Contract(steps)

    raise ValueError(f'unknown command {cmd!r}')


def parse_script(text):
    """ Parse all operations of a script.

    Returns
    -------
    list[tuple[str, object]]
        Pairs of source line and operation record.
    """
    return [(line, parse_operation(line)) for line in get_lines(text)]


def apply_operation(mesh, op):
    """ Apply an operation record to a mesh.
    """
    if isinstance(op, Bend):
        ops.bend(mesh, op.angle, op.names)
    elif isinstance(op, Bend2):
        ops.bend2(mesh, op.choice, op.p, op.q, op.r)
    elif isinstance(op, Reattach):
        ops.reattach(mesh, op.p, op.q)
    elif isinstance(op, Contract):
        ops.contract(mesh, op.steps)
    else:
        raise TypeError(f'not an operation: {op!r}')
