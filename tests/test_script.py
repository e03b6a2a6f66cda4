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


"""Tests for the folding script language."""

import math

import numpy as np
import pytest

from starfold.script import (Bend, Bend2, Contract, Reattach, apply_operation,
                             parse_operation, parse_script)
from starfold.star import StarMesh


class TestParseOperation:
    """Single script lines."""

    def test_bend(self):
        op = parse_operation('bend .729 k.1 c e.0')
        assert op == Bend(0.729, ('k.1', 'c', 'e.0'))

    def test_bend2(self):
        assert parse_operation('bend2 + k a b.0') == Bend2('+', 'k', 'a', 'b.0')

    def test_reattach(self):
        assert parse_operation('reattach j.1 a') == Reattach('j.1', 'a')

    def test_contract(self):
        assert parse_operation('contract 20') == Contract(20)

    def test_contract_truncates(self):
        assert parse_operation('contract 2.5') == Contract(2)

    def test_extra_whitespace(self):
        assert parse_operation('  reattach\tj   i ') == Reattach('j', 'i')

    @pytest.mark.parametrize('line', [
        'bend 1.0 a',
        'bend2 + a b',
        'reattach a',
        'reattach a b c',
        'contract',
        'contract 1 2',
    ])
    def test_argument_count(self, line):
        with pytest.raises(ValueError, match='expects'):
            parse_operation(line)

    @pytest.mark.parametrize('line', [
        'bend x a b',
        'bend2 * a b c',
        'contract many',
        'contract 0',
        'contract 0.5',
    ])
    def test_malformed_argument(self, line):
        with pytest.raises(ValueError):
            parse_operation(line)

    def test_unknown_command(self):
        with pytest.raises(ValueError, match='unknown command'):
            parse_operation('fold a b')


def test_parse_script():
    text = """
    // close the notches
    reattach j i

    bend 0.5 a b
    """
    assert parse_script(text) == [
        ('reattach j i', Reattach('j', 'i')),
        ('bend 0.5 a b', Bend(0.5, ('a', 'b'))),
    ]


def test_apply_operation():
    mesh = StarMesh.build('a 12\nb 6')
    apply_operation(mesh, parse_operation(f'bend {math.pi / 2} a b'))

    np.testing.assert_allclose(mesh.find_vertex('[a^b]').point,
                               [0.0, 0.5, 0.5], atol=1e-12)


def test_apply_non_operation():
    mesh = StarMesh.build('a 12\nb 6')
    with pytest.raises(TypeError):
        apply_operation(mesh, ('bend', 1.0))
