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


"""Tests for geometric helpers."""

import math

import numpy as np
import pytest

import starfold.linalg as linalg
import starfold.traits as traits

from starfold.hds import Mesh
from starfold.star import StarMesh


def free_vertices(*points):
    mesh = Mesh()
    return [mesh.make_vertex(f'v{i}', p) for i, p in enumerate(points)]


class TestLinalg:
    """Vector helpers."""

    def test_angle(self):
        ex, ey, ez = np.eye(3)
        assert linalg.angle(ex, ey) == pytest.approx(math.pi / 2)
        assert linalg.angle(ex, ey, ez, deg=True) == pytest.approx(90.0)
        assert linalg.angle(ey, ex, ez, deg=True) == pytest.approx(-90.0)

    def test_unit(self):
        np.testing.assert_allclose(linalg.unit(np.array([3.0, 0.0, 4.0])),
                                   [0.6, 0.0, 0.8])
        with pytest.raises(ZeroDivisionError):
            linalg.unit(np.zeros(3))

    def test_rotate(self):
        ex, ey, ez = np.eye(3)
        np.testing.assert_allclose(linalg.rotate(ex, ez, math.pi / 2), ey,
                                   atol=1e-12)

    def test_reflect(self):
        ex, ey, ez = np.eye(3)
        np.testing.assert_allclose(linalg.reflect(ey, ex), -ey)
        np.testing.assert_allclose(linalg.reflect(ex, ex), ex)

    def test_project_to_line(self):
        p = np.array([1.0, 2.0, 3.0])
        q = np.array([0.0, 0.0, 0.0])
        r = np.array([2.0, 0.0, 0.0])
        np.testing.assert_allclose(linalg.project_to_line(p, q, r),
                                   [1.0, 0.0, 0.0])


class TestLoops:
    """Area and planarity of loops."""

    def test_directed_area(self):
        mesh = StarMesh.build('a 12\nb 6')
        star = mesh.faces[0]
        np.testing.assert_allclose(traits.directed_area(star),
                                   [0.0, 0.0, -math.sqrt(3.0)], atol=1e-12)
        np.testing.assert_allclose(traits.directed_area(mesh.boundary),
                                   [0.0, 0.0, math.sqrt(3.0)], atol=1e-12)

    def test_flat(self):
        mesh = StarMesh.build('a 12\nb 6')
        star = mesh.faces[0]
        assert traits.is_loop_flat(star)

        mesh.find_vertex('a').point = [-0.5, 0.5, 0.3]
        assert not traits.is_loop_flat(star)

    def test_coplanar_requires_flat_loops(self):
        mesh = StarMesh.build('a 12\nb 6')
        mesh.find_vertex('a').point = [-0.5, 0.5, 0.3]
        with pytest.raises(ValueError):
            traits.is_between_coplanar_loops(mesh.boundary.halfedge)

    def test_face_orientation_points_inside(self):
        mesh = StarMesh.build('a 12\nb 6')
        for h in mesh.faces[0]._hiter():
            inward = traits.face_orientation(h)
            # The rhombus is symmetric to its center.
            center = np.array([0.0, 0.5, 0.0])
            assert inward.dot(center - h.midpoint) > 0.0


class TestRotation:
    """Rigid motions of vertex sets."""

    def test_rotate_about_axis(self):
        v, w = free_vertices([1.0, 0.0, 0.0], [1.0, 1.0, 5.0])
        traits.rotate_about_axis(np.array([1.0, 1.0, 0.0]),
                                 np.array([0.0, 0.0, 2.0]),
                                 math.pi / 2, [v, w])

        np.testing.assert_allclose(v.point, [2.0, 1.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(w.point, [1.0, 1.0, 5.0], atol=1e-12)

    def test_rotate_points(self):
        ex, ey, ez = np.eye(3)
        u, v, w = free_vertices(ex, ey, ez)
        traits.rotate_points(np.zeros(3), ex, ey, [u, v, w])

        np.testing.assert_allclose(u.point, ey, atol=1e-12)
        np.testing.assert_allclose(v.point, -ex, atol=1e-12)
        np.testing.assert_allclose(w.point, ez, atol=1e-12)

    def test_rotate_points_about_pivot(self):
        pivot = np.array([1.0, 1.0, 1.0])
        v, = free_vertices([3.0, 1.0, 1.0])
        traits.rotate_points(pivot, pivot + [1.0, 0.0, 0.0],
                             pivot + [0.0, 0.0, 4.0], [v])

        np.testing.assert_allclose(v.point, [1.0, 1.0, 3.0], atol=1e-12)

    def test_opposite_directions(self):
        ex = np.eye(3)[0]
        v, = free_vertices(ex)
        with pytest.raises(ValueError):
            traits.rotate_points(np.zeros(3), ex, -ex, [v])

    def test_positions_are_replaced(self):
        v, = free_vertices([1.0, 0.0, 0.0])
        before = v.point
        traits.rotate_about_axis(np.zeros(3), np.eye(3)[2], math.pi, [v])

        np.testing.assert_allclose(before, [1.0, 0.0, 0.0])
        np.testing.assert_allclose(v.point, [-1.0, 0.0, 0.0], atol=1e-12)
