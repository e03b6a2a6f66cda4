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


""" Conformal geometric algebra.

A small numeric Clifford algebra with multivectors stored as dense NumPy
arrays indexed by basis blade bitmaps, and the conformal model of
Euclidean 3-space built on top of it. The only client is
:func:`intersect_spheres` which computes the intersection points of three
spheres as the split of a point pair [DFM09]_.

The representation space has the basis vectors ``x``, ``y``, ``z``, ``p``
and ``m`` with metric (1, 1, 1, 1, -1). The point at infinity is
``ei = m + p``.

.. [DFM09] L. Dorst, D. Fontijne, S. Mann, *Geometric Algebra for Computer
   Science*, revised edition, Morgan Kaufmann, 2009.
"""

import math
import numpy as np


def _bit_count(bitmap):
    return bin(bitmap).count('1')


def product_flips(a, b):
    """ Number of adjacent transpositions in a blade product.

    Parameters
    ----------
    a, b : int
        Basis blade bitmaps.

    Returns
    -------
    int
        Number of swaps needed to bring the product of the blades `a` and
        `b` into canonical order.
    """
    count, flips = 0, 0
    bit = 1

    while bit <= a:
        if bit & a:
            flips += count
        if bit & b:
            count += 1
        bit <<= 1

    return flips


def reverse_flips(bitmap):
    """ Sign change (0 or 1) of a basis blade under reversion.
    """
    return (_bit_count(bitmap) >> 1) & 1


class Algebra:
    """ Clifford algebra with a diagonal metric.

    Parameters
    ----------
    metric : sequence of float
        Squares of the basis vectors.
    names : str
        One letter per basis vector, used for component access.
    """

    def __init__(self, metric, names):
        if len(metric) != len(names):
            raise ValueError('one name per basis vector required')

        self._metric = tuple(float(m) for m in metric)
        self._names = names
        self._size = 1 << len(metric)
        self._full = self._size - 1

    @property
    def full(self):
        """ Bitmap of the pseudoscalar.

        :type: int
        """
        return self._full

    def bitmap(self, name):
        """ Basis blade bitmap from a name like ``'xy'`` or ``'1'``.
        """
        if name == '1':
            return 0

        bitmap = 0
        for letter in name:
            bitmap |= 1 << self._names.index(letter)

        return bitmap

    def zero(self):
        return np.zeros(self._size)

    def mv(self, **components):
        """ Multivector from named components.

        >>> ei = R.mv(m=1.0, p=1.0)
        """
        result = self.zero()

        for name, value in components.items():
            result[self.bitmap(name)] += value

        return result

    def scalar(self, value):
        result = self.zero()
        result[0] = value

        return result

    def value(self, mv, name):
        return mv[self.bitmap(name)]

    def metric_factor(self, bitmap):
        """ Product of the squares of the basis vectors in `bitmap`.
        """
        factor = 1.0
        i = 0

        while bitmap:
            if bitmap & 1:
                factor *= self._metric[i]
            bitmap >>= 1
            i += 1

        return factor

    def _product(self, include, a, b):
        result = self.zero()

        for i in np.flatnonzero(a):
            i = int(i)
            for j in np.flatnonzero(b):
                j = int(j)
                if include(i, j):
                    value = self.metric_factor(i & j) * a[i] * b[j]
                    if product_flips(i, j) & 1:
                        value = -value
                    result[i ^ j] += value

        return result

    def geometric(self, *mvs):
        """ Geometric product, reduced from left to right.
        """
        result = mvs[0]
        for mv in mvs[1:]:
            result = self._product(lambda i, j: True, result, mv)

        return result

    def wedge(self, *mvs):
        """ Outer product, reduced from left to right.
        """
        result = mvs[0]
        for mv in mvs[1:]:
            result = self._product(lambda i, j: not i & j, result, mv)

        return result

    def contract_left(self, a, b):
        """ Left contraction of `b` by `a`.
        """
        return self._product(lambda i, j: not i & ~j, a, b)

    def scalar_product(self, a, b):
        """ Scalar product.

        Returns
        -------
        float
            The scalar part of the geometric product of `a` and `b`.
        """
        total = 0.0

        for i in np.flatnonzero(a):
            i = int(i)
            value = self.metric_factor(i) * a[i] * b[i]
            total += -value if reverse_flips(i) else value

        return total

    def reverse(self, mv):
        result = mv.copy()

        for i in np.flatnonzero(mv):
            i = int(i)
            if reverse_flips(i):
                result[i] = -result[i]

        return result

    def norm_squared(self, mv):
        """ Signed squared norm.

        Sum of ``metric_factor(i) * mv[i]**2`` over all components; the
        signs introduced by reversion and the scalar product cancel.
        """
        return sum(self.metric_factor(int(i)) * mv[i] * mv[i]
                   for i in np.flatnonzero(mv))

    def inverse(self, mv):
        """ Versor inverse.

        Raises
        ------
        ZeroDivisionError
            When trying to invert a null multivector.

        Note
        ----
        This is only correct for versors, in particular for non-null
        vectors.
        """
        norm2 = self.norm_squared(mv)

        if norm2 == 0.0:
            raise ZeroDivisionError('trying to invert null vector')

        return self.reverse(mv) / norm2

    def undual(self, mv):
        """ Contraction onto the pseudoscalar, computed blade by blade.
        """
        result = self.zero()

        for i in np.flatnonzero(mv):
            i = int(i)
            value = self.metric_factor(i) * mv[i]
            if product_flips(i, self._full) & 1:
                value = -value
            result[i ^ self._full] += value

        return result

    def regressive(self, *mvs):
        """ Regressive product, reduced from left to right.

        The regressive product is computed directly on the complements of
        the basis blades and does not depend on the metric.
        """
        result = mvs[0]

        for mv in mvs[1:]:
            acc = self.zero()

            for i in np.flatnonzero(result):
                i = int(i)
                ci = self._full ^ i
                for j in np.flatnonzero(mv):
                    j = int(j)
                    cj = self._full ^ j
                    if not ci & cj:
                        value = result[i] * mv[j]
                        if product_flips(ci, cj) & 1:
                            value = -value
                        acc[i & j] += value

            result = acc

        return result


R = Algebra((1.0, 1.0, 1.0, 1.0, -1.0), 'xyzpm')

# Point at infinity.
ei = R.mv(m=1.0, p=1.0)

_XYZ = (R.bitmap('x'), R.bitmap('y'), R.bitmap('z'))
_P = R.bitmap('p')
_M = R.bitmap('m')


def to_conformal(x):
    """ Embed a point of 3-space into the representation space.

    Parameters
    ----------
    x : array_like, shape (3, )
        Point in 3-space.

    Returns
    -------
    ~numpy.ndarray
        Conformal point ``x + (|x|²/2 + 1/2) m + (|x|²/2 - 1/2) p``.
    """
    x = np.asarray(x, dtype=float)
    i = 0.5 * x.dot(x)

    result = R.zero()
    result[list(_XYZ)] = x
    result[_M] = i + 0.5
    result[_P] = i - 0.5

    return result


def from_conformal(mv, tol=1e-8):
    """ Project a conformal point back to 3-space.

    Parameters
    ----------
    mv : ~numpy.ndarray
        Multivector representing a (not necessarily normalized) point.
    tol : float, optional
        Largest magnitude tolerated for components that are not of
        grade 1.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        Euclidean coordinates.

    Raises
    ------
    ValueError
        If `mv` is not a 1-vector.
    """
    for i in np.flatnonzero(mv):
        i = int(i)
        if _bit_count(i) != 1 and abs(mv[i]) > tol:
            raise ValueError('multivector is not a 1-vector')

    scale = 1.0 / (mv[_M] - mv[_P])

    return scale * mv[list(_XYZ)]


def make_sphere(center, surface):
    """ Sphere through a surface point.

    Parameters
    ----------
    center, surface : ~numpy.ndarray
        Conformal points.

    Returns
    -------
    ~numpy.ndarray
        The sphere as a 4-blade (outer product representation).
    """
    return R.undual(center + R.scalar_product(center, surface) * ei)


def split_point_pair(pp, tol=1e-10):
    """ Split a point pair into its points.

    Parameters
    ----------
    pp : ~numpy.ndarray
        A 2-blade representing a point pair.
    tol : float, optional
        Negative discriminants down to ``-tol`` are treated as zero.

    Returns
    -------
    list[~numpy.ndarray]
        No point for an imaginary point pair, one point for a tangent
        (degenerate) pair, two conformal points otherwise. For two points
        the one obtained with the positive root comes first.
    """
    disc = R.scalar_product(pp, pp)

    if disc < 0.0:
        if disc < -tol:
            return []
        disc = 0.0

    inv = R.inverse(R.contract_left(-ei, pp))

    if disc == 0.0:
        return [R.geometric(pp, inv)]

    root = math.sqrt(disc)

    return [R.geometric(pp + R.scalar(sgn * root), inv) for sgn in (1.0, -1.0)]


def intersect_spheres(c1, p1, c2, p2, c3, p3, tol=1e-10):
    r""" Intersect three spheres.

    Each sphere is given by its center and a point on its surface.

    Parameters
    ----------
    c1, p1, c2, p2, c3, p3 : array_like, shape (3, )
        Centers and surface points in 3-space.
    tol : float, optional
        Discriminant tolerance, see :func:`split_point_pair`.

    Returns
    -------
    list[~numpy.ndarray]
        Zero, one or two intersection points.

    Examples
    --------
    Three unit spheres centered at :math:`\mathbf{e}_1`,
    :math:`\mathbf{e}_2` and :math:`\mathbf{e}_3` share the origin and the
    point :math:`(2/3, 2/3, 2/3)`.

    >>> e = np.eye(3)
    >>> points = intersect_spheres(e[0], e[0]*2, e[1], e[1]*2, e[2], e[2]*2)
    """
    pp = R.regressive(make_sphere(to_conformal(c1), to_conformal(p1)),
                      make_sphere(to_conformal(c2), to_conformal(p2)),
                      make_sphere(to_conformal(c3), to_conformal(p3)))

    return [from_conformal(mv) for mv in split_point_pair(pp, tol)]
