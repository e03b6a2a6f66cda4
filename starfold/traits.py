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


""" Geometric mesh traits.

Convenience functions to compute geometric traits of loops and
half-edges: directed areas, face orientation vectors, planarity and
dihedral angles, as well as rigid motions of vertex sets.
"""

import math
import numpy as np

import starfold.linalg as linalg


def directed_area(loop):
    r""" Directed area vector.

    The sum :math:`\sum_i \mathbf{p}_i \times \mathbf{p}_{i+1}` over the
    vertices of a loop. For a planar loop this vector is normal to the
    loop's plane with a length of twice the enclosed area; it does not
    depend on the choice of the origin.

    Parameters
    ----------
    loop : Loop
        A loop with vertex coordinates.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        Area vector, oriented by the loop's traversal direction.
    """
    area = np.zeros(3)

    for h in loop._hiter():
        area += linalg.cross(h.origin.point, h.target.point)

    return area


def face_orientation(halfedge):
    """ Face orientation vector.

    Vector in the plane of the loop of `halfedge`, orthogonal to the
    half-edge and pointing into the loop (for loops with a positively
    oriented traversal).

    Parameters
    ----------
    halfedge : Halfedge
        Half-edge of a planar loop.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        Unnormalized orientation vector.
    """
    return linalg.cross(directed_area(halfedge.loop), halfedge.vector)


def is_loop_flat(loop, tol=1e-8):
    """ Planarity test.

    A loop is flat if the volume spanned by its area vector and each of
    its edge vectors vanishes.

    Parameters
    ----------
    loop : Loop
        A loop with vertex coordinates.
    tol : float, optional
        Absolute tolerance.

    Returns
    -------
    bool
        :obj:`True` for a flat loop.
    """
    area = directed_area(loop)

    return all(abs(area.dot(h.vector)) < tol for h in loop._hiter())


def is_between_coplanar_loops(halfedge, tol=1e-8):
    """ Coplanarity of the loops on both sides of an edge.

    Parameters
    ----------
    halfedge : Halfedge
        Half-edge whose loop and pair loop are compared.
    tol : float, optional
        Absolute tolerance, applied to the area vectors as well as to
        the components of the difference of the unit normals.

    Returns
    -------
    bool
        :obj:`True` if both loops lie in a common plane with the same
        orientation. Degenerate loops (vanishing area) are considered
        coplanar with any loop.

    Raises
    ------
    ValueError
        If one of the loops is not flat.
    """
    l1, l2 = halfedge.loop, halfedge.pair.loop

    if not is_loop_flat(l1, tol) or not is_loop_flat(l2, tol):
        raise ValueError(f'loops {l1} and {l2} must be flat')

    a1 = directed_area(l1)
    a2 = directed_area(l2)
    n1 = linalg.norm(a1)
    n2 = linalg.norm(a2)

    if n1 < tol or n2 < tol:
        return True

    return bool(np.all(np.abs(a1 / n1 - a2 / n2) < tol))


def dihedral_angle(halfedge, deg=True):
    """ Dihedral angle at an edge.

    The angle by which the loops on both sides of `halfedge` are folded
    against each other, zero for coplanar loops with equal orientation.

    Parameters
    ----------
    halfedge : Halfedge
        Half-edge between two flat loops.
    deg : bool, optional
        Return degrees instead of radians.

    Returns
    -------
    float
        Angle between the face orientation vectors, subtracted from a
        straight angle.
    """
    phi = math.pi - linalg.angle(face_orientation(halfedge),
                                 face_orientation(halfedge.pair))

    return math.degrees(phi) if deg else phi


def rotate_about_axis(pivot, axis, phi, vertices):
    """ Rotate vertices about an axis.

    Parameters
    ----------
    pivot : ~numpy.ndarray, shape (3, )
        Point on the rotation axis.
    axis : ~numpy.ndarray, shape (3, )
        Direction of the rotation axis, not necessarily normalized.
    phi : float
        Rotation angle in radians, right-hand rule.
    vertices : iterable of Vertex
        Vertices whose coordinates are replaced.
    """
    a = linalg.unit(axis)
    cphi, sphi = math.cos(phi), math.sin(phi)

    for v in vertices:
        v.point = pivot + linalg.rotate(v.point - pivot, a, cphi, sphi)


def rotate_points(pivot, source, target, vertices, log=None):
    """ Rotate vertices about a pivot.

    Applies the rotation in the plane through `pivot`, `source` and
    `target` which takes the direction from `pivot` to `source` to the
    direction from `pivot` to `target`. The rotation is composed of two
    half-turns, about the bisector of both directions and about the
    target direction.

    Parameters
    ----------
    pivot, source, target : ~numpy.ndarray, shape (3, )
        Points in 3-space, `source` and `target` different from `pivot`.
    vertices : iterable of Vertex
        Vertices whose coordinates are replaced.
    log : object, optional
        Trace collaborator.

    Raises
    ------
    ValueError
        If the directions are opposite to each other which leaves the
        rotation plane undetermined.
    """
    u = linalg.unit(target - pivot)
    w = linalg.unit(source - pivot)

    mid = u + w
    if linalg.norm(mid) == 0.0:
        raise ValueError('cannot rotate between opposite directions')
    mid = linalg.unit(mid)

    if log is not None:
        phi = linalg.angle(source - pivot, target - pivot)
        log.record(f'rotation around: {pivot} from {source} to {target};',
                   f'angle: {math.degrees(phi):.5f} deg')

    for v in vertices:
        x = linalg.reflect(linalg.reflect(v.point - pivot, mid), u)

        if log is not None:
            log.record(f'  - rotate {v} from {v.point} to {x + pivot}')

        v.point = x + pivot
