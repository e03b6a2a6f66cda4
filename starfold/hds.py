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


""" Halfedge data structure.

A mesh is described by two containers that are managed by the
:class:`Mesh` class:

    - a collection of named :class:`Vertex` objects,
    - a collection of named :class:`Loop` objects.

Half-edges are not stored in a container of their own. Each
:class:`Halfedge` belongs to exactly one loop and is reached from there
or from the vertices it connects. One loop may be marked as the boundary
of the mesh, all other loops are faces.

Unlike a mesh built from face lists, this kernel admits loops of length
one and two as well as multiple edges between the same pair of vertices.
Such configurations occur as intermediate states of the editing
primitives :meth:`Mesh.split_vertex`, :meth:`Mesh.split_loop`,
:meth:`Mesh.contract_edge` and :meth:`Mesh.drop_edge`.

Note
----
Names of vertices and loops are supposed to be unique but this is only
verified by :meth:`Mesh.check`. Newly created vertices and loops derive
their names from the split item by appending ``.0`` or ``.1``.
"""

from itertools import count

import numpy as np

from starfold.log import NullLog


# Upper bound for the number of half-edges visited around a vertex or
# along a loop. Exceeding it indicates an orphaned cycle.
SIZE_LIMIT = 50


def _chain(first, *rest):
    """ Link half-edges via their prev/next references.
    """
    prev = first

    for h in rest:
        h._prev = prev
        prev._next = h
        prev = h


class Mesh:
    """ Mesh kernel.

    An empty mesh. Use :meth:`add_core` to create the initial cell and
    the splitting primitives to refine it.

    Parameters
    ----------
    log : object, optional
        Trace collaborator with a ``record(*args)`` method, see
        :mod:`starfold.log`.
    """

    def __init__(self, *, log=None):
        # Dictionaries used as insertion ordered sets.
        self._verts = dict()
        self._loops = dict()

        self._ids = count()
        self._boundary = None

        self.log = NullLog() if log is None else log

    def __iter__(self):
        """ Loop iterator.

        Yields
        ------
        Loop
            Next loop in insertion order.
        """
        return iter(list(self._loops))

    def __contains__(self, item):
        return item in self._verts or item in self._loops

    @property
    def vertices(self):
        """ Vertex list.

        Copy of the vertex container in insertion order.

        :type: list[Vertex]
        """
        return list(self._verts)

    @property
    def loops(self):
        """ Loop list.

        Copy of the loop container in insertion order. Contains the
        boundary loop if there is one.

        :type: list[Loop]
        """
        return list(self._loops)

    @property
    def faces(self):
        """ Face list.

        All loops except the boundary.

        :type: list[Loop]
        """
        return [l for l in self._loops if l is not self._boundary]

    @property
    def boundary(self):
        """ Boundary loop.

        The loop which is not considered a face or :obj:`None` for a
        closed mesh.

        :type: Loop
        """
        return self._boundary

    @boundary.setter
    def boundary(self, value):
        if value is not None and value not in self._loops:
            raise TopologyError(f'loop {value} is not part of the mesh')

        self._boundary = value

    @property
    def size(self):
        """ Mesh size.

        The number of vertices, edges and faces (the boundary loop is not
        counted as a face).

        :type: (int, int, int)
        """
        halfs = sum(len(l) for l in self._loops)
        assert halfs % 2 == 0

        return len(self._verts), halfs // 2, len(self.faces)

    def make_vertex(self, name, point=None):
        """ Add an isolated vertex.

        Parameters
        ----------
        name : str
            Vertex name.
        point : array_like, shape (3, ), optional
            Vertex coordinates.

        Returns
        -------
        Vertex
            The new vertex.
        """
        v = Vertex(next(self._ids), name, parent=self)

        if point is not None:
            v.point = point

        self._verts[v] = None

        return v

    def make_loop(self, name):
        """ Add an empty loop.
        """
        l = Loop(next(self._ids), name, parent=self)
        self._loops[l] = None

        return l

    def make_edge(self, l0, l1, v0, v1):
        """ Create a pair of half-edges.

        Parameters
        ----------
        l0, l1 : Loop
            Loops of the new half-edges.
        v0, v1 : Vertex
            End points of the new edge.

        Returns
        -------
        h0 : Halfedge
            Half-edge in `l0` from `v0` to `v1`.
        h1 : Halfedge
            Half-edge in `l1` from `v1` to `v0`.

        Note
        ----
        The new half-edges become the reference half-edges of both loops
        and both vertices but are not linked to any other half-edge.
        """
        h0 = Halfedge(next(self._ids), v1, l0)
        h1 = Halfedge(next(self._ids), v0, l1)

        h0._pair = h1
        h1._pair = h0

        v0._halfedge = h0
        l0._halfedge = h0
        v1._halfedge = h1
        l1._halfedge = h1

        return h0, h1

    def add_core(self):
        """ Create the initial cell.

        A single vertex ``core`` with a loop-shaped edge separating two
        loops ``core1`` and ``core2``.

        Returns
        -------
        (Halfedge, Halfedge)
            The half-edges in ``core1`` and ``core2``.
        """
        v = self.make_vertex('core')
        l0 = self.make_loop('core1')
        l1 = self.make_loop('core2')

        h0, h1 = self.make_edge(l0, l1, v, v)
        _chain(h0, h0)
        _chain(h1, h1)

        return h0, h1

    def split_vertex(self, h0, h1, create='both'):
        """ Split a vertex.

        Both half-edges have to point to the same vertex `v`. The incoming
        half-edges of `v` from `h0` up to (excluding) `h1` are assigned
        to the first child vertex, the remaining ones to the second child
        vertex. The children are connected by a new edge.

        Parameters
        ----------
        h0, h1 : Halfedge
            Incoming half-edges of the vertex to split.
        create : {'both', 'left', 'right'}, optional
            Which children to create. With ``'left'`` only the first child
            is a new vertex and `v` takes the role of the second one, with
            ``'right'`` it is the other way around. With ``'both'`` the
            vertex `v` is replaced by two new vertices.

        Returns
        -------
        (Halfedge, Halfedge)
            The new edge, first half-edge from first to second child, in
            ``h0.loop``.

        Raises
        ------
        TopologyError
            If a half-edge is deleted or the half-edges do not point to
            the same vertex.
        """
        if create not in ('both', 'left', 'right'):
            raise ValueError(f"invalid value for 'create': {create!r}")
        if h0._deleted or h1._deleted:
            raise TopologyError('cannot split vertex at deleted half-edge')

        v = h0._target

        if h1._target is not v:
            raise TopologyError(f'cannot split vertex: {h0} and {h1} ' +
                                f'point to different vertices')

        self.log.record('split vertex', v, 'at', h0, 'and', h1)

        v0 = v if create == 'right' else self.make_vertex(f'{v._name}.0',
                                                          v._point)
        v1 = v if create == 'left' else self.make_vertex(f'{v._name}.1',
                                                         v._point)

        h = h0
        n = 0
        while True:
            h._target = v0
            h = h._pair._prev
            n += 1
            if h is h1:
                break
            if n > SIZE_LIMIT:
                raise InvariantError(f'neighborhood of {v} too large')

        while h is not h0:
            h._target = v1
            h = h._pair._prev
            n += 1
            if n > SIZE_LIMIT:
                raise InvariantError(f'neighborhood of {v} too large')

        g0, g1 = self.make_edge(h0._loop, h1._loop, v0, v1)

        if h0 is h1:
            _chain(h0, g0, g1, h0._next)
        else:
            _chain(h0, g0, h0._next)
            _chain(h1, g1, h1._next)

        if create == 'both':
            self._remove_vertex(v)

        return g0, g1

    def split_loop(self, h0, h1, create='both'):
        """ Split a loop.

        Both half-edges have to belong to the same loop `l`. Walking
        backwards from `h0` up to (excluding) `h1` collects the
        half-edges of the first child loop, the remaining ones make up
        the second child loop. The children are separated by a new edge
        from ``h0.target`` to ``h1.target``.

        Parameters
        ----------
        h0, h1 : Halfedge
            Half-edges of the loop to split, possibly identical.
        create : {'both', 'left', 'right'}, optional
            Which children to create, see :meth:`split_vertex`.

        Returns
        -------
        (Halfedge, Halfedge)
            The new edge, first half-edge in the first child loop.

        Raises
        ------
        TopologyError
            If a half-edge is deleted or the half-edges belong to
            different loops.
        """
        if create not in ('both', 'left', 'right'):
            raise ValueError(f"invalid value for 'create': {create!r}")
        if h0._deleted or h1._deleted:
            raise TopologyError('cannot split loop at deleted half-edge')

        l = h0._loop

        if h1._loop is not l:
            raise TopologyError(f'cannot split loop: {h0} and {h1} ' +
                                f'belong to different loops')

        self.log.record('split loop', l, 'at', h0, 'and', h1)

        l0 = l if create == 'right' else self.make_loop(f'{l._name}.0')
        l1 = l if create == 'left' else self.make_loop(f'{l._name}.1')

        h = h0
        n = 0
        while True:
            h._loop = l0
            h = h._prev
            n += 1
            if h is h1:
                break
            if n > SIZE_LIMIT:
                raise InvariantError(f'loop {l} too long')

        while h is not h0:
            h._loop = l1
            h = h._prev
            n += 1
            if n > SIZE_LIMIT:
                raise InvariantError(f'loop {l} too long')

        g0, g1 = self.make_edge(l0, l1, h0._target, h1._target)

        h0_next = h0._next
        _chain(h0, g0, h1._next)

        if h0 is h1:
            _chain(g1, g1)
        else:
            _chain(h1, g1, h0_next)

        if create == 'both':
            self._remove_loop(l)

        return g0, g1

    def split_edge_across(self, h):
        """ Insert a vertex into an edge.

        The target of `h` is split such that the new vertex becomes the
        target of the predecessor of its pair.

        Returns
        -------
        (Halfedge, Halfedge)
            The new edge, see :meth:`split_vertex`.
        """
        return self.split_vertex(h._pair._prev, h, create='left')

    def split_edge_along(self, h):
        """ Double an edge.

        Creates a loop of length two between `h` and its predecessor.
        """
        return self.split_loop(h, h._prev, create='left')

    def contract_edge(self, h):
        """ Contract an edge.

        The target of `h` is merged into its origin. Both half-edges of
        the edge are deleted.

        Parameters
        ----------
        h : Halfedge
            Half-edge to contract.

        Returns
        -------
        Vertex
            The surviving vertex.

        Raises
        ------
        TopologyError
            For deleted half-edges, edges starting and ending at the same
            vertex and vertices without other edges.
        """
        if h._deleted or h._pair._deleted:
            raise TopologyError(f'cannot contract deleted half-edge {h}')

        pair = h._pair
        target, loop, prev, next = h._target, h._loop, h._prev, h._next
        origin, pair_loop = pair._target, pair._loop
        pair_prev, pair_next = pair._prev, pair._next

        if target is origin:
            raise TopologyError('cannot contract an edge starting and ' +
                                f'ending at the same vertex {target}')
        if pair is next and pair is prev:
            raise TopologyError(f'cannot contract isolated edge {h}')
        if (pair is next or pair is prev) and loop is not pair_loop:
            raise TopologyError(f'half-edges of {h} with a vertex of ' +
                                'degree one are in different loops')

        self.log.record('contract edge', h)

        for g in list(target._iiter()):
            g._target = origin

        if pair is next:
            _chain(prev, pair_next)
            loop._halfedge = pair_next
            origin._halfedge = pair_next
        elif pair is prev:
            _chain(pair_prev, next)
            loop._halfedge = next
            origin._halfedge = next
        else:
            _chain(prev, next)
            _chain(pair_prev, pair_next)
            loop._halfedge = next
            pair_loop._halfedge = pair_next
            origin._halfedge = next

        self._remove_vertex(target)
        h._deleted = True
        pair._deleted = True

        return origin

    def drop_edge(self, h):
        """ Remove an edge.

        The loop of `h` is merged into the loop of its pair.

        Parameters
        ----------
        h : Halfedge
            Half-edge to remove.

        Returns
        -------
        Loop
            The surviving loop.

        Raises
        ------
        TopologyError
            For deleted half-edges, edges with the same loop on both
            sides and edges whose removal would isolate a vertex.
        """
        if h._deleted or h._pair._deleted:
            raise TopologyError(f'cannot drop deleted half-edge {h}')

        pair = h._pair
        target, loop, prev, next = h._target, h._loop, h._prev, h._next
        origin, pair_loop = pair._target, pair._loop
        pair_prev, pair_next = pair._prev, pair._next

        if loop is pair_loop:
            raise TopologyError(f'cannot drop edge {h} adjacent to ' +
                                f'the same loop {loop} twice')
        if next is pair or prev is pair:
            raise TopologyError(f'dropping {h} would isolate a vertex')
        if next is h and pair_next is pair:
            raise TopologyError(f'dropping {h} would leave an empty loop')

        self.log.record('drop edge', h, 'merging', loop, 'into', pair_loop)

        g = next
        n = 0
        while g is not h:
            g._loop = pair_loop
            g = g._next
            n += 1
            if n > SIZE_LIMIT:
                raise InvariantError(f'loop {loop} too long')

        # Loops of length one have no other half-edge to link to.
        if next is h:
            _chain(pair_prev, pair_next)
            next = pair_next
        elif pair_next is pair:
            _chain(prev, next)
            pair_next = next
        else:
            _chain(pair_prev, next)
            _chain(prev, pair_next)

        origin._halfedge = pair_next
        target._halfedge = next
        pair_loop._halfedge = pair_next

        self._remove_loop(loop)
        h._deleted = True
        pair._deleted = True

        return pair_loop

    def find_halfedge(self, v, w):
        """ The half-edge from `v` to `w`.

        Raises
        ------
        TopologyError
            Unless there is exactly one such half-edge.
        """
        found = [h for h in v._hiter() if h._target is w]

        if len(found) != 1:
            raise TopologyError(f'found {len(found)} half-edges ' +
                                f'from {v} to {w}')

        return found[0]

    def check(self):
        """ Verify the combinatorial invariants.

        Raises
        ------
        InvariantError
            Describing the first violation found.
        """
        names = set()

        for v in self._verts:
            if v._mesh is not self or v._deleted:
                raise InvariantError(f'foreign or deleted vertex {v}')
            if v._name in names:
                raise InvariantError(f'duplicate vertex name: {v._name}')
            names.add(v._name)

            for h in v._hiter():
                if h.origin is not v:
                    raise InvariantError(f'inconsistent vertex: {v} has ' +
                                         f'outgoing {h} starting from ' +
                                         f'{h.origin}')
                self._check_halfedge(h)

        names = set()

        for l in self._loops:
            if l._mesh is not self or l._deleted:
                raise InvariantError(f'foreign or deleted loop {l}')
            if l._name in names:
                raise InvariantError(f'duplicate loop name: {l._name}')
            names.add(l._name)

            for h in l._hiter():
                if h._loop is not l:
                    raise InvariantError(f'inconsistent loop: {l} has {h} ' +
                                         f'referencing {h._loop}')
                self._check_halfedge(h)

        if self._boundary is not None and self._boundary not in self._loops:
            raise InvariantError(f'boundary {self._boundary} is not a loop')

    def _check_halfedge(self, h):
        if h._deleted:
            raise InvariantError(f'{h} is deleted')
        if h._target not in self._verts:
            raise InvariantError(f'{h} points to missing vertex {h._target}')
        if h._loop not in self._loops:
            raise InvariantError(f'{h} references missing loop {h._loop}')
        if h._pair._pair is not h:
            raise InvariantError(f'inconsistent pairs: {h} => {h._pair} ' +
                                 f'=> {h._pair._pair}')
        if h._prev._next is not h:
            raise InvariantError(f'inconsistent prev/next: {h} => ' +
                                 f'{h._prev} => {h._prev._next}')
        if h._next._prev is not h:
            raise InvariantError(f'inconsistent next/prev: {h} => ' +
                                 f'{h._next} => {h._next._prev}')

    def _remove_vertex(self, v):
        del self._verts[v]
        v._deleted = True

    def _remove_loop(self, l):
        del self._loops[l]
        l._deleted = True

    def _viter(self):
        """ Iterator over a snapshot of the vertex container.
        """
        return iter(list(self._verts))

    def _liter(self):
        """ Iterator over a snapshot of the loop container.
        """
        return iter(list(self._loops))

    def _hiter(self):
        """ Generator expression visiting all half-edges loop by loop.
        """
        return (h for l in self._loops for h in l._hiter())

    def _eiter(self):
        """ Generator expression visiting one half-edge per edge.
        """
        return (h for h in self._hiter() if h._idx < h._pair._idx)


class Vertex:
    """ Vertex class.

    Parameters
    ----------
    index : int
        Creation stamp, unique within the parent mesh.
    name : str
        Vertex name.
    parent : Mesh
        The parent mesh object.
    """

    def __init__(self, index, name, parent):
        self._idx = index
        self._name = name
        self._mesh = parent
        self._point = None
        self._halfedge = None

        self._deleted = False

    def __repr__(self):
        return f'Vertex({self._name!r})'

    def __str__(self):
        return self._name

    @property
    def index(self):
        """ Creation stamp.

        :type: int
        """
        return self._idx

    @property
    def name(self):
        """ Vertex name.

        Read and write access. Uniqueness is checked by
        :meth:`Mesh.check`.

        :type: str
        """
        return self._name

    @name.setter
    def name(self, value):
        self._name = value

    @property
    def point(self):
        """ Vertex coordinates.

        Assigning coordinates stores a copy of the given array, the array
        returned by this property is never modified in place by the
        kernel.

        :type: ~numpy.ndarray
        """
        return self._point

    @point.setter
    def point(self, value):
        self._point = np.array(value, dtype=float)

    @property
    def halfedge(self):
        """ Outgoing halfedge.

        :type: Halfedge
        """
        return self._halfedge

    @property
    def degree(self):
        """ Number of outgoing half-edges.

        :type: int
        """
        return sum(1 for _ in self._hiter())

    @property
    def deleted(self):
        """ Deletion flag.

        :type: bool
        """
        return self._deleted

    @property
    def boundary(self):
        """ Boundary flag.

        :obj:`True` if one of the outgoing half-edges belongs to the
        boundary loop of the mesh.

        :type: bool
        """
        b = self._mesh._boundary
        return b is not None and any(h._loop is b for h in self._hiter())

    def _hiter(self):
        """ Outgoing halfedge iterator.
        """
        h = self._halfedge

        if h is None:
            return

        n = 0
        while True:
            yield h
            h = h._prev._pair

            if h is self._halfedge:
                return

            n += 1
            if n > SIZE_LIMIT:
                raise InvariantError(f'neighborhood of {self} too large')

    def _iiter(self):
        """ Incoming halfedge iterator.
        """
        return (h._pair for h in self._hiter())

    def _viter(self):
        """ Adjacent vertex iterator.
        """
        return (h._target for h in self._hiter())

    def _liter(self):
        """ Incident loop iterator.
        """
        return (h._loop for h in self._hiter())


class Halfedge:
    """ Halfedge class.

    Halfedges store references to their target vertex, the successor,
    predecessor, and pair halfedge as well as their loop. The origin is
    the target of the pair.

    Parameters
    ----------
    index : int
        Creation stamp, unique within the parent mesh.
    target : Vertex
        Target vertex.
    loop : Loop
        Loop the half-edge belongs to.
    """

    def __init__(self, index, target, loop):
        self._idx = index
        self._target = target
        self._loop = loop

        self._next = None
        self._prev = None
        self._pair = None

        self._deleted = False

    def __repr__(self):
        return f'Halfedge({self.origin!r}, {self._target!r})'

    def __str__(self):
        return f'{self.origin}->{self._target}'

    def __iter__(self):
        """ Origin and target vertex.
        """
        yield self.origin
        yield self._target

    @property
    def index(self):
        """ Creation stamp.

        :type: int
        """
        return self._idx

    @property
    def origin(self):
        """ Origin vertex.

        :type: Vertex
        """
        return self._pair._target

    @property
    def target(self):
        """ Target vertex.

        :type: Vertex
        """
        return self._target

    @property
    def vector(self):
        """ Vector from origin to target.

        :type: ~numpy.ndarray
        """
        return self._target._point - self._pair._target._point

    @property
    def midpoint(self):
        """ Edge midpoint.

        :type: ~numpy.ndarray
        """
        return 0.5 * (self._target._point + self._pair._target._point)

    @property
    def next(self):
        """ Next halfedge in the loop.

        :type: Halfedge
        """
        return self._next

    @property
    def prev(self):
        """ Previous halfedge in the loop.

        :type: Halfedge
        """
        return self._prev

    @property
    def pair(self):
        """ Oppositely oriented halfedge.

        :type: Halfedge
        """
        return self._pair

    @property
    def loop(self):
        """ Loop to the left of the halfedge.

        :type: Loop
        """
        return self._loop

    @property
    def deleted(self):
        """ Deletion flag.

        :type: bool
        """
        return self._deleted

    @property
    def boundary(self):
        """ Boundary flag.

        :type: bool
        """
        return self._loop is self._loop._mesh._boundary


class Loop:
    """ Loop class.

    A closed cycle of half-edges. Each loop is either a face or the
    boundary of the mesh.

    Parameters
    ----------
    index : int
        Creation stamp, unique within the parent mesh.
    name : str
        Loop name.
    parent : Mesh
        The parent mesh object.
    """

    def __init__(self, index, name, parent):
        self._idx = index
        self._name = name
        self._mesh = parent
        self._halfedge = None

        self._deleted = False

    def __repr__(self):
        return f'Loop({self._name!r})'

    def __str__(self):
        return self._name

    def __len__(self):
        """ Number of half-edges.
        """
        return sum(1 for _ in self._hiter())

    def __iter__(self):
        """ Vertex iterator.

        Yields
        ------
        Vertex
            Targets of the loop's half-edges in loop order.
        """
        return self._viter()

    def __contains__(self, vertex):
        return any(v is vertex for v in self._viter())

    @property
    def index(self):
        """ Creation stamp.

        :type: int
        """
        return self._idx

    @property
    def name(self):
        """ Loop name.

        :type: str
        """
        return self._name

    @name.setter
    def name(self, value):
        self._name = value

    @property
    def halfedge(self):
        """ Some halfedge of the loop.

        :type: Halfedge
        """
        return self._halfedge

    @property
    def face(self):
        """ Face flag.

        :obj:`False` only for the boundary loop of the mesh.

        :type: bool
        """
        return self is not self._mesh._boundary

    @property
    def deleted(self):
        """ Deletion flag.

        :type: bool
        """
        return self._deleted

    def _hiter(self):
        """ Halfedge iterator.
        """
        h = self._halfedge

        if h is None:
            return

        n = 0
        while True:
            yield h
            h = h._next

            if h is self._halfedge:
                return

            n += 1
            if n > SIZE_LIMIT:
                raise InvariantError(f'loop {self} too long')

    def _viter(self):
        """ Vertex iterator.
        """
        return (h._target for h in self._hiter())


class MeshError(Exception):
    """ Mesh exception base class.
    """

    pass


class TopologyError(MeshError):
    """ Raised if the preconditions of a mesh primitive are violated.
    """

    pass


class InvariantError(MeshError):
    """ Raised if the halfedge structure is found to be inconsistent.
    """

    pass
