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



""" Vector helpers for points and edge vectors of a star mesh.

All functions operate on single vectors of shape (3, ). Folding
operators compose them into rotations of vertex sets, see
:mod:`starfold.traits`.
"""

import math
import numpy as np


def norm(u):
    """ Euclidean length of `u`.
    """
    return math.sqrt(u.dot(u))


def distance(p, q):
    """ Euclidean distance of two points.
    """
    return norm(q - p)


def unit(u):
    """ Normalized copy of `u`.

    Raises
    ------
    ZeroDivisionError
        For the zero vector, which has no direction.
    """
    length = norm(u)

    if length == 0.0:
        raise ZeroDivisionError('zero vector has no direction')

    return u / length


def cross(u, v):
    r""" Cross product :math:`\mathbf{u} \times \mathbf{v}`.

    Written out by components, which is faster than :func:`numpy.cross`
    for single vectors.
    """
    u0, u1, u2 = u
    v0, v1, v2 = v

    return np.array([u1*v2 - u2*v1,
                     u2*v0 - u0*v2,
                     u0*v1 - u1*v0])


def angle(v, w, a=None, deg=False):
    """ Angle between two non-zero vectors.

    Parameters
    ----------
    v, w : ~numpy.ndarray, shape (3, )
        Non-zero vectors.
    a : ~numpy.ndarray, shape (3, ), optional
        Orientation axis. If given, the angle is negative when `v`, `w`
        and `a` form a left-handed frame.
    deg : bool, optional
        Return degrees instead of radians.

    Returns
    -------
    float
        Unsigned angle in [0, pi] without an axis, signed otherwise.
    """
    c = float(np.clip(v.dot(w) / (norm(v) * norm(w)), -1.0, 1.0))
    phi = math.acos(c)

    if a is not None and a.dot(cross(v, w)) < 0.0:
        phi = -phi

    return math.degrees(phi) if deg else phi


def rotate(x, a, phi, sinphi=None):
    r""" Rotate a vector about an axis through the origin.

    Rodrigues' formula

    .. math::

       \mathbf{x} \cos\varphi + (1 - \cos\varphi)
       (\mathbf{a} \cdot \mathbf{x}) \mathbf{a} +
       \sin\varphi \, \mathbf{a} \times \mathbf{x}

    with the right-hand rule for positive angles.

    Parameters
    ----------
    x : ~numpy.ndarray, shape (3, )
        Vector to rotate.
    a : ~numpy.ndarray, shape (3, )
        Unit axis vector.
    phi : float
        Angle in radians, or its cosine if `sinphi` is given.
    sinphi : float, optional
        Sine of the angle. Star construction passes exact values for
        multiples of 30 degrees this way.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
    """
    if sinphi is None:
        cphi, sphi = math.cos(phi), math.sin(phi)
    else:
        cphi, sphi = phi, sinphi

    return cphi * x + (1.0 - cphi) * a.dot(x) * a + sphi * cross(a, x)


def reflect(x, a):
    r""" Half-turn of `x` about the line spanned by the unit vector `a`.

    Computes :math:`2 (\mathbf{a} \cdot \mathbf{x}) \mathbf{a} - \mathbf{x}`.
    Two half-turns about lines enclosing an angle :math:`\alpha` compose
    to a rotation by :math:`2 \alpha`.
    """
    return 2.0 * a.dot(x) * a - x


def project_to_line(p, q, r):
    """ Foot of the perpendicular from `p` on the line through `q` and `r`.

    Parameters
    ----------
    p, q, r : ~numpy.ndarray, shape (3, )
        Points in 3-space, `q` and `r` distinct.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
    """
    d = r - q

    return q + (d.dot(p - q) / d.dot(d)) * d
