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


""" Folding operations.

Each operation takes a :class:`~starfold.star.StarMesh`, resolves its
vertex arguments by name and either completes or raises. Operations are
not transactional: a failure may leave the mesh partially modified.

=========== ===========================================================
`bend`      fold along diagonals by a given angle
----------- -----------------------------------------------------------
`bend2`     close the notch at a vertex by folding two triangles up
----------- -----------------------------------------------------------
`reattach`  cut off a part of the star and glue it elsewhere
----------- -----------------------------------------------------------
`contract`  relax edge lengths and glue all remaining peers
=========== ===========================================================
"""

import starfold.linalg as linalg
import starfold.traits as traits

from starfold.cga import intersect_spheres
from starfold.iterators import halfs, region, verts
from starfold.star import (GeometryError, PreconditionError, base_name,
                           find_unique, is_tip, merge_names)


def _boundary_vertex(mesh, name):
    v = mesh.find_vertex(name)

    if not v.boundary:
        raise PreconditionError(f'vertex {v} is not adjacent to the boundary')

    return v


def _incoming(vertex, loop):
    return find_unique((h for h in vertex._iiter() if h.loop is loop),
                       f'half-edge of {loop} pointing to {vertex}')


def _rotate(mesh, pivot, source, target, vertices):
    try:
        traits.rotate_points(pivot, source, target, vertices, mesh.log)
    except (ValueError, ZeroDivisionError) as e:
        raise GeometryError(f'rotation undetermined: {e}') from e


def bend(mesh, angle, names):
    """ Fold along diagonals.

    For each consecutive pair of vertices the unique face containing
    both is split along the diagonal and the part of the mesh beyond the
    diagonal is rotated about it.

    Parameters
    ----------
    mesh : StarMesh
        The mesh to modify.
    angle : float
        Rotation angle in radians. Positive angles rotate by the right-hand
        rule about the diagonal directed from the first to the second
        vertex of the pair.
    names : sequence of str
        At least two names of vertices on the boundary.

    Raises
    ------
    PreconditionError
        For less than two vertices, vertices not on the boundary, repeated
        vertices or pairs without a unique common face.
    GeometryError
        If the vertices of a pair coincide.

    Note
    ----
    The rotated part consists of the vertices reachable from the face
    vertex preceding the second vertex without passing one of the pair.
    Reversing the order of the vertices rotates the other side.
    """
    if len(names) < 2:
        raise PreconditionError('bend requires at least two vertices')

    vertices = [_boundary_vertex(mesh, name) for name in names]

    prev = vertices[0]
    for current in vertices[1:]:
        if prev is current:
            raise PreconditionError(f'cannot bend along {prev} to itself')
        if linalg.distance(prev.point, current.point) < mesh.tol.coincide:
            raise GeometryError(f'bending axis undetermined, {prev} and ' +
                                f'{current} coincide')

        face = mesh.find_unique_face(prev, current)
        h_prev = _incoming(prev, face)
        h_current = _incoming(current, face)

        beyond = region(h_current.origin, (prev, current))
        mesh.log.record('bend', prev, current,
                        '{' + ' '.join(v.name for v in beyond) + '}')

        h, _ = mesh.split_loop(h_current, h_prev, create='left')
        h.loop.name = f'split({prev.name}-{current.name})'

        pivot = current.point
        traits.rotate_about_axis(pivot, pivot - prev.point, angle, beyond)

        prev = current


def bend2(mesh, choice, p, q, r):
    """ Close the notch at a vertex.

    The two boundary half-edges at `q` are peers. Diagonals from `q` to
    `p` and `r` are inserted and the parts beyond them are rotated about
    the diagonals until the tips next to `q` meet. The tips are merged
    and the edge between them is glued.

    Parameters
    ----------
    mesh : StarMesh
        The mesh to modify.
    choice : {'+', '-'}
        Which of the two possible positions of the merged tip to use.
    p, q, r : str
        Vertex names.

    Raises
    ------
    PreconditionError
        For vertices off the boundary. Also if the boundary half-edges at
        `q` are not peers or a diagonal cannot be inserted.
    GeometryError
        If the parts to rotate overlap, the tips cannot meet or do not
        meet after rotation.
    """
    if choice not in ('+', '-'):
        raise PreconditionError(f"bend2 expects '+' or '-', got {choice!r}")

    p, q, r = (_boundary_vertex(mesh, name) for name in (p, q, r))
    boundary = mesh.boundary

    h_q_boundary = find_unique((h for h in halfs(q) if h.loop is boundary),
                               f'boundary half-edge leaving {q}')
    h_boundary_q = h_q_boundary.prev

    if mesh.peer(h_boundary_q) is not h_q_boundary:
        raise PreconditionError(f'cannot attach non-peers {h_boundary_q} ' +
                                f'and {h_q_boundary}')

    t1 = h_q_boundary.target
    t2 = h_boundary_q.origin

    # Walking the boundary from q, the first of p and r becomes s1.
    h = h_q_boundary
    for _ in range(len(boundary)):
        if h.target is p:
            s1, s2 = p, r
            break
        if h.target is r:
            s1, s2 = r, p
            break
        h = h.next
    else:
        raise PreconditionError(f'neither {p} nor {r} is on the boundary')

    face = mesh.find_unique_face(s1, q)
    h, _ = mesh.split_loop(_incoming(q, face), _incoming(s1, face),
                           create='left')
    h.loop.name = f'split({q.name}-{s1.name})'

    face = mesh.find_unique_face(q, s2)
    h, _ = mesh.split_loop(_incoming(s2, face), _incoming(q, face),
                           create='left')
    h.loop.name = f'split({q.name}-{s2.name})'

    border = (s1, q, s2)
    beyond1 = region(t1, border)
    beyond2 = region(t2, border)

    if set(beyond1) & set(beyond2):
        raise GeometryError(f'overlapping parts beyond {t1} and {t2}')

    points = intersect_spheres(s1.point, t1.point,
                               q.point, t1.point,
                               s2.point, t2.point,
                               tol=mesh.tol.discriminant)
    mesh.log.record('intersections:', *points)

    if not points:
        raise GeometryError(f'negative discriminant, tips {t1} and {t2} ' +
                            'cannot meet')

    target = points[-1] if choice == '+' else points[0]

    _rotate(mesh, linalg.project_to_line(t1.point, s1.point, q.point),
            t1.point, target, beyond1)
    _rotate(mesh, linalg.project_to_line(t2.point, s2.point, q.point),
            t2.point, target, beyond2)

    dist = linalg.distance(t1.point, t2.point)
    if dist > mesh.tol.coincide:
        raise GeometryError(f'tips not properly aligned: {t1} and {t2} ' +
                            f'are {dist} apart')

    names = t2.name, t1.name

    g, _ = mesh.split_loop(h_q_boundary, h_boundary_q.prev, create='left')
    mesh.contract_edge(g)
    mesh.drop_edge(h_q_boundary)
    mesh.unlink_peers(h_boundary_q, h_q_boundary)
    t1.name = merge_names(*names)

    h = mesh.find_halfedge(t1, q)
    if traits.is_between_coplanar_loops(h, mesh.tol.coincide):
        mesh.drop_edge(h)


def reattach(mesh, p, q):
    """ Move a part of the star to the other side of a notch.

    The star is cut along the diagonal from `p` to `q` (which splits `p`
    into ``p.0`` and ``p.1``). The notch at `q` is closed by rotating the
    smaller of the two parts connected at `q` and gluing its boundary
    edges. The cut half-edges become peers.

    Parameters
    ----------
    mesh : StarMesh
        The mesh to modify.
    p, q : str
        Vertex names, both on the boundary of a common face.

    Raises
    ------
    PreconditionError
        If the boundary half-edges at `q` are not peers, or the vertices
        have no unique common face.
    GeometryError
        If the cut does not separate the mesh at `q` or the faces at the
        glued edge do not become coplanar.
    """
    p = mesh.find_vertex(p)
    q = mesh.find_vertex(q)
    boundary = mesh.boundary

    if boundary is None:
        raise PreconditionError('reattach requires a boundary')

    face = mesh.find_unique_face(p, q)
    h_face_p = _incoming(p, face)
    h_face_q = _incoming(q, face)
    h_boundary_p = _incoming(p, boundary)
    h_boundary_q = _incoming(q, boundary)
    h_q_boundary = h_boundary_q.next

    if mesh.peer(h_boundary_q) is not h_q_boundary \
            or mesh.peer(h_q_boundary) is not h_boundary_q:
        raise PreconditionError(f'cannot reattach at non-peers ' +
                                f'{h_boundary_q} and {h_q_boundary}')

    t1 = h_boundary_q.origin
    t2 = h_q_boundary.target

    h_pq_a, _ = mesh.split_loop(h_face_p, h_face_q, create='right')
    h_qp_b, _ = mesh.split_loop(h_pq_a, h_face_p, create='left')
    h_p0_p1, _ = mesh.split_vertex(h_qp_b, h_boundary_p, create='both')
    mesh.drop_edge(h_p0_p1)
    mesh.link_peers(h_pq_a, h_qp_b)

    mesh.log.record(f'reattach: p = {p}, q = {q}, t1 = {t1}, t2 = {t2}')

    part1 = region(t1, (q,))
    part2 = region(t2, (q,))

    if set(part1) & set(part2):
        raise GeometryError(f'cutting from {p} to {q} does not separate ' +
                            f'{t1} and {t2}')

    if len(part1) <= len(part2):
        source, target, h_source, h_target, part = \
            t1, t2, h_boundary_q, h_q_boundary, part1
    else:
        source, target, h_source, h_target, part = \
            t2, t1, h_q_boundary, h_boundary_q, part2

    # Align the edges from q to both tips, then make the faces behind
    # these edges coplanar.
    _rotate(mesh, q.point, source.point, target.point, part)
    _rotate(mesh, q.point,
            q.point + traits.face_orientation(h_source.pair),
            q.point - traits.face_orientation(h_target.pair), part)

    g, _ = mesh.split_loop(h_q_boundary, h_q_boundary.prev.prev,
                           create='left')
    name = merge_names(g.origin.name, g.target.name)
    t = mesh.contract_edge(g)
    t.name = name

    mesh.drop_edge(h_q_boundary)

    if not traits.is_between_coplanar_loops(h_boundary_q, mesh.tol.coincide):
        raise GeometryError(f'faces not coplanar: {h_boundary_q.loop} ' +
                            f'and {h_boundary_q.pair.loop}')

    mesh.drop_edge(h_boundary_q)
    mesh.unlink_peers(h_boundary_q, h_q_boundary)


def contract(mesh, steps):
    """ Relax and close a triangulated star.

    Every vertex is repeatedly moved to the average of the positions that
    would restore its edge lengths and bring it onto the vertices it is
    to be glued with. Afterwards all peers are glued.

    Parameters
    ----------
    mesh : StarMesh
        Mesh with triangular faces only.
    steps : int
        Maximum number of relaxation steps, at least one.

    Raises
    ------
    PreconditionError
        For non-triangular faces or a step count below one.
    GeometryError
        If the peers cannot be glued.

    Note
    ----
    Vertices to be glued are identified by name: boundary vertices with
    the same base name (see :func:`~starfold.star.base_name`) and all
    boundary tips.
    """
    if steps < 1:
        raise PreconditionError('contract expects at least one step')

    boundary = mesh.boundary

    if boundary is None:
        raise PreconditionError('contract requires a boundary')

    for l in mesh.faces:
        if len(l) != 3:
            raise PreconditionError(f'cannot contract with non-triangle ' +
                                    f'face: {l} has {len(l)} edges')

    border = list(dict.fromkeys(verts(boundary)))
    connections = dict()

    for va in mesh.vertices:
        targets = {vb: linalg.distance(va.point, vb.point)
                   for vb in verts(va)}

        for vb in border:
            if vb is va:
                continue
            if base_name(vb.name) == base_name(va.name) \
                    or (is_tip(va) and is_tip(vb)):
                if vb in targets:
                    raise PreconditionError(f'vertices {va} and {vb} are ' +
                                            'adjacent but are to be glued')
                targets[vb] = 0.0

        connections[va] = targets

    for i in range(steps):
        moves = [(va, _mean_target(va, targets))
                 for va, targets in connections.items()]
        badness = sum(linalg.distance(va.point, x) for va, x in moves)
        mesh.log.record(f'badness[{i}] = {badness}')

        for va, x in moves:
            va.point = x

        if badness == 0.0:
            break

    glue_peers(mesh)


def _mean_target(va, targets):
    total = 0.0

    for vb, length in targets.items():
        if length == 0.0:
            total = total + vb.point
        else:
            vec = va.point - vb.point
            total = total + vb.point + (length / (linalg.norm(vec) or 1.0)) * vec

    return total / len(targets)


def glue_peers(mesh):
    """ Glue all peers.

    Peer pairs meeting at a vertex are glued one by one until a single
    pair is left which is glued by removing the boundary loop.

    Raises
    ------
    GeometryError
        If no peer pair meets at a vertex.
    """
    boundary = mesh.boundary

    while len(mesh.peers) > 2:
        mesh.log.record(f'peers left: {len(mesh.peers)}')

        for h0, h1 in mesh.peers:
            if h0.target is h1.origin:
                break
        else:
            raise GeometryError('no adjacent peers to glue')

        mesh.log.record(f'gluing {h0}, {h1} at {h0.target}')

        g, _ = mesh.split_loop(h0.prev, h1, create='right')
        name = merge_names(g.target.name, g.origin.name)
        mesh.contract_edge(g).name = name
        mesh.drop_edge(h0)
        mesh.unlink_peers(h0, h1)

    h0 = boundary.halfedge
    h1 = h0.next

    if mesh.peer(h0) is not h1 or mesh.peer(h1) is not h0:
        raise GeometryError(f'last boundary half-edges {h0} and {h1} ' +
                            'are not peers')

    mesh.log.record('gluing last peers', h0, h1)
    mesh.drop_edge(h0)
    mesh.unlink_peers(h0, h1)
    mesh.boundary = None
