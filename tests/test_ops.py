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


"""Tests for the folding operations."""

import math

import numpy as np
import pytest

import starfold.linalg as linalg
import starfold.ops as ops
import starfold.traits as traits

from starfold.examples import EXAMPLES
from starfold.hds import MeshError
from starfold.iterators import region
from starfold.log import TextLog
from starfold.star import StarMesh, is_tip


RHOMBUS = 'a 12\nb 6'
TRIANGLE = 'a 12\nb 8\nc 4'


def borderless(seed, border=()):
    return region(seed)


def tip_at(mesh, point):
    found = [v for v in mesh.vertices
             if is_tip(v) and np.allclose(v.point, point)]
    assert len(found) == 1
    return found[0]


class TestBend:
    """Folding along diagonals."""

    def test_rotated_side(self):
        mesh = StarMesh.build(RHOMBUS)
        ops.bend(mesh, math.pi / 2, ['a', 'b'])

        np.testing.assert_allclose(mesh.find_vertex('[a^b]').point,
                                   [0.0, 0.5, 0.5], atol=1e-12)
        np.testing.assert_allclose(mesh.find_vertex('[b^a]').point,
                                   [0.0, 0.0, 0.0], atol=1e-12)
        mesh.check()

    def test_reversed_order(self):
        mesh = StarMesh.build(RHOMBUS)
        ops.bend(mesh, math.pi / 2, ['b', 'a'])

        np.testing.assert_allclose(mesh.find_vertex('[b^a]').point,
                                   [0.0, 0.5, 0.5], atol=1e-12)
        np.testing.assert_allclose(mesh.find_vertex('[a^b]').point,
                                   [0.0, 1.0, 0.0], atol=1e-12)

    def test_split_face(self):
        mesh = StarMesh.build(RHOMBUS)
        ops.bend(mesh, 0.3, ['a', 'b'])

        assert sorted(l.name for l in mesh.faces) == ['split(a-b)', 'star']
        assert all(len(l) == 3 for l in mesh.faces)
        assert mesh.size == (4, 5, 2)

    def test_coplanarity(self):
        flat = StarMesh.build(RHOMBUS)
        ops.bend(flat, 0.0, ['a', 'b'])
        a, b = flat.find_vertex('a'), flat.find_vertex('b')
        assert traits.is_between_coplanar_loops(flat.find_halfedge(a, b))

        tilted = StarMesh.build(RHOMBUS)
        ops.bend(tilted, math.pi / 2, ['a', 'b'])
        a, b = tilted.find_vertex('a'), tilted.find_vertex('b')
        h = tilted.find_halfedge(a, b)
        assert not traits.is_between_coplanar_loops(h)
        assert traits.dihedral_angle(h) == pytest.approx(90.0)

    def test_edge_lengths_preserved(self):
        mesh = StarMesh.build(TRIANGLE)
        before = {(h.origin.name, h.target.name): np.linalg.norm(h.vector)
                  for h in mesh.boundary._hiter()}
        ops.bend(mesh, 1.1, ['a', 'b'])

        for h in mesh.boundary._hiter():
            length = before[h.origin.name, h.target.name]
            assert np.linalg.norm(h.vector) == pytest.approx(length)
        mesh.check()

    def test_single_vertex(self):
        mesh = StarMesh.build(RHOMBUS)
        with pytest.raises(ops.PreconditionError):
            ops.bend(mesh, 1.0, ['a'])

    def test_unknown_vertex(self):
        mesh = StarMesh.build(RHOMBUS)
        with pytest.raises(ops.PreconditionError):
            ops.bend(mesh, 1.0, ['a', 'z'])

    @pytest.mark.parametrize('degrees', [89.0, 91.0])
    def test_nearly_right_angle(self, degrees):
        mesh = StarMesh.build(RHOMBUS)
        ops.bend(mesh, math.radians(degrees), ['a', 'b'])
        a, b = mesh.find_vertex('a'), mesh.find_vertex('b')
        h = mesh.find_halfedge(a, b)

        assert not traits.is_between_coplanar_loops(h)
        assert traits.dihedral_angle(h) == pytest.approx(degrees)
        assert mesh.size == (4, 5, 2)

    def test_repeated_vertex(self):
        mesh = StarMesh.build(RHOMBUS)
        with pytest.raises(ops.PreconditionError, match='itself'):
            ops.bend(mesh, 1.0, ['a', 'a'])
        assert mesh.size == (4, 4, 1)

    def test_coinciding_vertices(self):
        # The apex of the notch on edge a lies on the opposite corner.
        mesh = StarMesh.build(TRIANGLE)
        corner = tip_at(mesh, [-math.sqrt(0.75), 0.5, 0.0])
        with pytest.raises(ops.GeometryError, match='coincide'):
            ops.bend(mesh, 1.0, ['a', corner.name])
        assert mesh.size == (6, 6, 1)


class TestContract:
    """Relaxation and gluing."""

    def test_rhombus_closes(self):
        log = TextLog()
        mesh = StarMesh.build(RHOMBUS, log=log)
        ops.bend(mesh, math.pi, ['a', 'b'])
        ops.contract(mesh, 5)

        assert mesh.boundary is None
        assert mesh.peers == []
        v, e, f = mesh.size
        assert (v, e, f) == (3, 3, 2)
        assert v - e + f == 2
        assert sum(1 for v in mesh.vertices if is_tip(v)) == 1
        assert 'badness[0]' in log.text
        mesh.check()

    def test_glued_names(self):
        mesh = StarMesh.build(RHOMBUS)
        ops.bend(mesh, math.pi, ['a', 'b'])
        ops.contract(mesh, 1)

        names = sorted(v.name for v in mesh.vertices)
        assert names[1:] == ['a', 'b']
        assert names[0] in ('[[b^a]|[a^b]]', '[[a^b]|[b^a]]')

    def test_non_triangle(self):
        mesh = StarMesh.build(RHOMBUS)
        with pytest.raises(ops.PreconditionError, match='non-triangle'):
            ops.contract(mesh, 3)

    def test_step_count(self):
        mesh = StarMesh.build(RHOMBUS)
        ops.bend(mesh, math.pi, ['a', 'b'])
        with pytest.raises(ops.PreconditionError):
            ops.contract(mesh, 0)

    def test_closed_mesh(self):
        mesh = StarMesh.build(RHOMBUS)
        ops.bend(mesh, math.pi, ['a', 'b'])
        ops.contract(mesh, 5)
        with pytest.raises(ops.PreconditionError):
            ops.contract(mesh, 5)

    def test_bend_after_closing(self):
        mesh = StarMesh.build(RHOMBUS)
        ops.bend(mesh, math.pi, ['a', 'b'])
        ops.contract(mesh, 5)
        with pytest.raises(ops.PreconditionError, match='boundary'):
            ops.bend(mesh, 1.0, ['a', 'b'])

    def test_no_adjacent_peers(self):
        # Opposite sides of the rhombus never share a vertex.
        mesh = StarMesh.build(RHOMBUS)
        e0, e1, e2, e3 = mesh.boundary._hiter()
        for h0, h1 in mesh.peers:
            if h0.index < h1.index:
                mesh.unlink_peers(h0, h1)
        mesh.link_peers(e0, e2)
        mesh.link_peers(e1, e3)

        with pytest.raises(ops.GeometryError, match='no adjacent peers'):
            ops.glue_peers(mesh)
        assert mesh.size == (4, 4, 1)


class TestBend2:
    """Preconditions of closing a notch."""

    def test_not_peers(self):
        mesh = StarMesh.build(TRIANGLE)
        with pytest.raises(ops.PreconditionError, match='non-peers'):
            ops.bend2(mesh, '+', 'a', '[a^b]', 'b')

    def test_invalid_choice(self):
        mesh = StarMesh.build(TRIANGLE)
        with pytest.raises(ops.PreconditionError):
            ops.bend2(mesh, '*', 'a', 'b', 'c')

    def test_unknown_vertex(self):
        mesh = StarMesh.build(TRIANGLE)
        with pytest.raises(ops.PreconditionError):
            ops.bend2(mesh, '+', 'a', 'b', 'z')

    # In TRIANGLE the apex of each notch lies on the opposite corner, so
    # closing the notch at a folds the star into a regular tetrahedron.

    @pytest.mark.parametrize('choice', ['+', '-'])
    def test_tetrahedron(self, choice):
        mesh = StarMesh.build(TRIANGLE)
        before = {v.name for v in mesh.vertices}
        ops.bend2(mesh, choice, 'c', 'a', 'b')
        mesh.check()

        after = {v.name for v in mesh.vertices}
        assert before - after <= {v for v in before if '^' in v}
        (merged, ) = after - before
        assert merged.startswith('[[') and '|' in merged
        assert mesh.size == (5, 7, 3)
        assert sum(1 for v in mesh.vertices if is_tip(v)) == 2

        apex = mesh.find_vertex(merged).point
        for name in 'abc':
            assert linalg.distance(apex, mesh.find_vertex(name).point) == \
                pytest.approx(1.0)
        assert abs(apex[2]) == pytest.approx(math.sqrt(2.0 / 3.0))

    def test_choice_mirrors(self):
        heights = []
        for choice in '+-':
            mesh = StarMesh.build(TRIANGLE)
            ops.bend2(mesh, choice, 'c', 'a', 'b')
            (tip, ) = [v for v in mesh.vertices if '|' in v.name]
            heights.append(tip.point[2])

        assert heights[0] == pytest.approx(-heights[1])

    def test_order_of_outer_vertices(self):
        first = StarMesh.build(TRIANGLE)
        ops.bend2(first, '+', 'c', 'a', 'b')
        second = StarMesh.build(TRIANGLE)
        ops.bend2(second, '+', 'b', 'a', 'c')

        for v in first.vertices:
            np.testing.assert_allclose(second.find_vertex(v.name).point,
                                       v.point, atol=1e-12)

    def test_negative_discriminant(self):
        # Pull a corner away so that its sphere misses the circle on which
        # the other corner can move.
        mesh = StarMesh.build(TRIANGLE)
        tip_at(mesh, [0.0, 1.0, 0.0]).point = np.array([0.0, 3.0, 0.0])
        with pytest.raises(ops.GeometryError, match='negative discriminant'):
            ops.bend2(mesh, '+', 'c', 'a', 'b')

    def test_tips_not_aligned(self):
        # Corners at different distances from a cannot meet.
        mesh = StarMesh.build(TRIANGLE)
        tip_at(mesh, [0.0, 1.0, 0.0]).point = np.array([0.0, 1.2, 0.0])
        with pytest.raises(ops.GeometryError, match='not properly aligned'):
            ops.bend2(mesh, '+', 'c', 'a', 'b')

    def test_tetrahedron_faces_stay_apart(self):
        mesh = StarMesh.build(TRIANGLE)
        ops.bend2(mesh, '+', 'c', 'a', 'b')
        (merged, ) = [v for v in mesh.vertices if '|' in v.name]
        h = mesh.find_halfedge(merged, mesh.find_vertex('a'))

        assert not h.boundary and not h.pair.boundary
        assert not traits.is_between_coplanar_loops(h)
        assert traits.dihedral_angle(h) == \
            pytest.approx(math.degrees(math.acos(-1.0 / 3.0)))

    def test_overlapping_parts(self, monkeypatch):
        # Parts that are already joined reach each other around the
        # diagonals.
        monkeypatch.setattr(ops, 'region', borderless)
        mesh = StarMesh.build(TRIANGLE)
        with pytest.raises(ops.GeometryError, match='overlapping parts'):
            ops.bend2(mesh, '+', 'c', 'a', 'b')


class TestReattach:
    """Cutting and regluing."""

    def test_not_peers(self):
        mesh = StarMesh.build(TRIANGLE)
        with pytest.raises(ops.PreconditionError, match='non-peers'):
            ops.reattach(mesh, 'a', '[a^b]')

    def test_no_common_face(self):
        mesh = StarMesh.build(RHOMBUS)
        ops.bend(mesh, 0.5, ['a', 'b'])
        with pytest.raises(ops.PreconditionError):
            ops.reattach(mesh, '[a^b]', '[b^a]')


    def test_cut_does_not_separate(self, monkeypatch):
        monkeypatch.setattr(ops, 'region', borderless)
        mesh = StarMesh.build(EXAMPLES['icosahedron'].setup)
        with pytest.raises(ops.GeometryError, match='does not separate'):
            ops.reattach(mesh, 'k', 'a')

    def test_faces_not_coplanar(self, monkeypatch):
        monkeypatch.setattr(traits, 'is_between_coplanar_loops',
                            lambda halfedge, tol=1e-8: False)
        mesh = StarMesh.build(EXAMPLES['icosahedron'].setup)
        with pytest.raises(ops.GeometryError, match='faces not coplanar'):
            ops.reattach(mesh, 'k', 'a')

    def test_first_icosahedron_step(self):
        mesh = StarMesh.build(EXAMPLES['icosahedron'].setup)
        ops.reattach(mesh, 'k', 'a')
        mesh.check()

        assert {'k.0', 'k.1'} <= {v.name for v in mesh.vertices}

    def test_errors_are_mesh_errors(self):
        assert issubclass(ops.PreconditionError, MeshError)
        assert issubclass(ops.GeometryError, MeshError)
