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


""" Star construction.

A star is a flat polygon with an inward equilateral notch on each of its
edges. Gluing the two sides of every notch folds the star into a closed
polyhedral surface. The notch apices are the inner vertices of the star;
they are named after the polygon edge they belong to. The polygon corners
are the tips, named ``[a^b]`` after the two adjacent edges ``a`` and ``b``.

The polygon is defined line by line. Each line holds a name followed by
a sequence of clock directions that add up to the edge vector::

    a 11
    b 10
    c 10 9

Even directions move one unit, odd directions move :math:`\\sqrt{3}`
units, i.e., all vertices lie on a triangular lattice. Empty lines and
lines starting with ``//`` or ``#`` are ignored.
"""

import itertools
import math
import re

import numpy as np

import starfold.linalg as linalg
import starfold.traits as traits

from starfold.hds import Mesh, InvariantError, MeshError
from starfold.tolerance import Tolerance


_R3 = math.sqrt(3.0)
_R3HALF = 0.5 * _R3

STEPS = {
    '12': np.array([0.0, 1.0, 0.0]),
    '1': np.array([_R3HALF, 1.5, 0.0]),
    '2': np.array([_R3HALF, 0.5, 0.0]),
    '3': np.array([_R3, 0.0, 0.0]),
    '4': np.array([_R3HALF, -0.5, 0.0]),
    '5': np.array([_R3HALF, -1.5, 0.0]),
    '6': np.array([0.0, -1.0, 0.0]),
    '7': np.array([-_R3HALF, -1.5, 0.0]),
    '8': np.array([-_R3HALF, -0.5, 0.0]),
    '9': np.array([-_R3, 0.0, 0.0]),
    '10': np.array([-_R3HALF, 0.5, 0.0]),
    '11': np.array([-_R3HALF, 1.5, 0.0]),
}

_EZ = np.array([0.0, 0.0, 1.0])

# Everything from the first dot on, cf. base_name().
_SUFFIX = re.compile(r'\..*$')


def get_lines(text, comments=('//', '#')):
    """ Significant lines of a definition or script.

    Parameters
    ----------
    text : str
        Multi-line text.
    comments : tuple of str, optional
        Prefixes of comment lines.

    Returns
    -------
    list[str]
        Stripped lines that are neither empty nor comments.
    """
    lines = []

    for line in text.strip().splitlines():
        line = line.strip()
        if line and not line.startswith(comments):
            lines.append(line)

    return lines


def parse_star(text):
    """ Parse a star definition.

    Parameters
    ----------
    text : str
        Star definition, one polygon edge per line.

    Returns
    -------
    list[tuple[str, list[str]]]
        Edge names and their clock directions.

    Raises
    ------
    ValueError
        For unknown directions.
    """
    edges = []

    for line in get_lines(text):
        name, *steps = line.split()

        for step in steps:
            if step not in STEPS:
                raise ValueError(f'unknown step {step!r} in line {line!r}')

        edges.append((name, steps))

    return edges


def merge_names(a, b):
    """ Name of a vertex obtained by merging two vertices.

    Children of a split, ``x.0`` and ``x.1``, merge back to ``x``. Other
    names are combined as ``[a|b]``.

    >>> merge_names('j.0', 'j.1')
    'j'
    >>> merge_names('a', 'b')
    '[a|b]'
    """
    if a != b and a[:-2] == b[:-2] and a[-2:] in ('.0', '.1') \
            and b[-2:] in ('.0', '.1'):
        return a[:-2]

    return f'[{a}|{b}]'


def base_name(name):
    """ Name without split suffixes, ``'b.0.1'`` becomes ``'b'``.
    """
    return _SUFFIX.sub('', name)


def is_tip(vertex):
    """ Test whether a vertex is (derived from) a star tip.
    """
    return '^' in vertex.name


class StarMesh(Mesh):
    """ Mesh of a (partially) folded star.

    A :class:`~starfold.hds.Mesh` with a boundary loop whose half-edges
    are paired up as peers. Peers are boundary half-edges that are glued
    together when the star is folded.

    Parameters
    ----------
    tol : Tolerance, optional
        Tolerance settings.
    log : object, optional
        Trace collaborator, see :mod:`starfold.log`.
    """

    def __init__(self, *, tol=None, log=None):
        super().__init__(log=log)

        self.tol = Tolerance() if tol is None else tol
        self._peers = dict()

    @classmethod
    def build(cls, text, *, tol=None, log=None):
        """ Build a star from its definition.

        Parameters
        ----------
        text : str
            Star definition.
        tol : Tolerance, optional
            Tolerance settings.
        log : object, optional
            Trace collaborator.

        Returns
        -------
        StarMesh
            A mesh with one face ``star``, one ``boundary`` loop and one
            pair of peers per polygon edge.

        Raises
        ------
        ValueError
            For invalid definitions and polygons that are not closed.
        """
        mesh = cls(tol=tol, log=log)
        mesh._setup(parse_star(text))

        return mesh

    def _setup(self, edges):
        if not edges:
            raise ValueError('star definition without edges')

        inner, outer = self.add_core()
        star = inner.loop
        star.name = 'star'
        outer.loop.name = 'boundary'
        self.boundary = outer.loop

        dummy = inner.target
        dummy.name = 'dummy'
        dummy.point = np.zeros(3)

        # The core edge is glued to itself until it is contracted.
        self._peers[outer] = outer

        current = np.zeros(3)
        tips = []

        for i, (name, steps) in enumerate(edges):
            start = current
            for step in steps:
                current = current + STEPS[step]

            edge = current - start
            apex = start + linalg.rotate(edge, _EZ, 0.5, _R3HALF)
            self.log.record(f'edge {name}: {start} -> {current}, ' +
                            f'inner vertex {apex}')

            h0, g0 = self.split_edge_across(outer)
            tip = h0.origin
            tip.name = f'#{i}'
            tip.point = start
            tips.append(tip)

            h1, g1 = self.split_edge_across(outer)
            vertex = h1.origin
            vertex.name = name
            vertex.point = apex

            self.link_peers(g0, g1)

        gap = linalg.norm(current)
        if gap > self.tol.closure:
            raise ValueError(f'polygon not closed, end point {current} ' +
                             f'is {gap:.3g} away from the start')

        self.contract_edge(outer)
        del self._peers[outer]

        for tip in tips:
            h0, h1 = list(tip._hiter())[:2]
            if h0.loop is star:
                h0, h1 = h1, h0
            tip.name = f'[{h0.target.name}^{h1.target.name}]'

        self.log.record(f'star with {len(edges)} edges')

    @property
    def peers(self):
        """ Peer pairs.

        Each pair is reported twice, once in each order, in the order of
        registration.

        :type: list[tuple[Halfedge, Halfedge]]
        """
        return list(self._peers.items())

    def peer(self, halfedge):
        """ The peer of a boundary half-edge or :obj:`None`.
        """
        return self._peers.get(halfedge)

    def link_peers(self, h0, h1):
        """ Register two boundary half-edges as peers.
        """
        self._peers[h0] = h1
        self._peers[h1] = h0

    def unlink_peers(self, h0, h1):
        """ Remove a peer pair.

        Raises
        ------
        KeyError
            If the half-edges are not registered.
        """
        del self._peers[h0]
        del self._peers[h1]

    def find_vertex(self, name):
        """ Vertex by name.

        Raises
        ------
        PreconditionError
            Unless exactly one vertex has the given name.
        """
        return find_unique((v for v in self._verts if v.name == name),
                           f'vertex named {name!r}')

    def find_unique_face(self, p, q):
        """ The face containing both vertices.

        Raises
        ------
        PreconditionError
            Unless exactly one face contains `p` and `q`.
        """
        return find_unique((l for l in self.faces if p in l and q in l),
                           f'face containing {p} and {q}')

    def check(self):
        """ Verify all mesh invariants.

        In addition to the combinatorial checks of
        :meth:`~starfold.hds.Mesh.check`, faces have to be flat and the
        boundary has to be covered by consistent peer pairs.

        Raises
        ------
        InvariantError
            Describing the first violation found.
        """
        super().check()

        for l in self.faces:
            if not traits.is_loop_flat(l, self.tol.coincide):
                raise InvariantError(f'face {l} not flat')

        for v in self._verts:
            if v.point is None:
                raise InvariantError(f'vertex {v} without coordinates')

        self._check_peers()
        self.log.record('mesh checked')

    def _check_peers(self):
        boundary = self._boundary

        if boundary is None:
            if self._peers:
                raise InvariantError('peers left on a closed mesh')
            return

        for h in boundary._hiter():
            if h not in self._peers:
                raise InvariantError(f'boundary half-edge {h} has no peer')

        for h0, h1 in self._peers.items():
            if h0.deleted or h0.loop is not boundary:
                raise InvariantError(f'half-edge {h0} with peer {h1} ' +
                                     f'found on non-boundary {h0.loop}')
            if self._peers.get(h1) is not h0:
                raise InvariantError(f'peers not reciprocal: {h0} and {h1}')

            l0 = linalg.norm(h0.vector)
            l1 = linalg.norm(h1.vector)
            if abs(l0 - l1) > self.tol.peer_length:
                raise InvariantError(f'peer lengths do not fit: {h0} ' +
                                     f'({l0}) and {h1} ({l1})')

    def log_mesh(self):
        """ Write a diagnostic description of the mesh to the log.

        Loops with their vertices, vertex neighborhoods, pairs of nearby
        vertices, item counts, dihedral angles of inner edges and peer
        pairs.
        """
        log = self.log

        for l in self._loops:
            names = [v.name for v in l._viter()]
            log.record(f'{l} ({len(names)}):', *names)

        for v in self._verts:
            neighbors = [w.name for w in v._viter()]
            log.record(f'{v.name:15}', v.point, len(neighbors),
                       'neighbors:', ' '.join(neighbors),
                       'loops:', ' '.join(l.name for l in v._liter()))

        for vi, vj in itertools.combinations(self._verts, 2):
            if vi.point is None or vj.point is None:
                continue
            dist = linalg.distance(vi.point, vj.point)
            if dist < self.tol.nearby:
                log.record(f'Nearby: {vi}, {vj} ({dist})')

        tips = sum(1 for v in self._verts if is_tip(v))
        log.record(f'{len(self._verts)} vertices ({tips} tips), ' +
                   f'{len(self._loops)} loops ({len(self.faces)} faces)')

        messages = []
        for h in self._eiter():
            if h.boundary or h.pair.boundary:
                continue
            messages.append(f'{h.origin.name}->{h.target.name}: ' +
                            f'{traits.dihedral_angle(h):.5f} deg ' +
                            f'[{h.loop}|{h.pair.loop}]')
        for message in sorted(messages):
            log.record(message)

        for h0, h1 in self._peers.items():
            if h0.index < h1.index:
                log.record(f'peers: {h0}, {h1}')


def find_unique(items, what):
    """ The only item of an iterable.

    Parameters
    ----------
    items : iterable
        Candidates.
    what : str
        Description used in the error message.

    Raises
    ------
    PreconditionError
        Unless there is exactly one item.
    """
    found = list(items)

    if len(found) != 1:
        raise PreconditionError(f'found {len(found)} instead of one {what}')

    return found[0]


class PreconditionError(MeshError, ValueError):
    """ Raised if an operation is applied to unsuitable mesh items.
    """

    pass


class GeometryError(MeshError):
    """ Raised if an operation is geometrically infeasible.
    """

    pass
