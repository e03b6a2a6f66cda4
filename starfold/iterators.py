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



""" Neighborhood iterators.

Thin public wrappers around the traversal methods of mesh items. Items
are visited in the order given by the half-edge links, so results are
reproducible for a given sequence of operations.
"""

from collections import deque


def verts(obj):
    """ Vertex iterator.

    Neighbors of a vertex (in rotation order), the vertices of a loop
    (in traversal order) or all vertices of a mesh (in creation order).

    Parameters
    ----------
    obj : Vertex or Loop or Mesh

    Yields
    ------
    Vertex
    """
    return obj._viter()


def halfs(obj):
    """ Half-edge iterator.

    Outgoing half-edges of a vertex, the half-edges of a loop or all
    half-edges of a mesh.

    Parameters
    ----------
    obj : Vertex or Loop or Mesh

    Yields
    ------
    Halfedge
    """
    return obj._hiter()


def edges(mesh):
    """ One half-edge per edge of `mesh`, the one with the lower index.
    """
    return mesh._eiter()


def loops(obj):
    """ Loop iterator.

    Loops on the left of the outgoing half-edges of a vertex, which may
    repeat a loop, or all loops of a mesh including the boundary.

    Yields
    ------
    Loop
    """
    return obj._liter()


def region(seed, border=()):
    """ Vertices connected to `seed` without crossing `border`.

    The folding operators use this to collect the part of a star that
    moves rigidly when it is rotated about an axis through border
    vertices.

    Parameters
    ----------
    seed : Vertex
        Start vertex.
    border : collection of Vertex, optional
        Vertices that block the search. They are never reported.

    Returns
    -------
    list[Vertex]
        Breadth-first order starting with `seed`. Empty if `seed` lies on
        the border.
    """
    border = set(border)

    if seed in border:
        return []

    found = dict.fromkeys([seed])
    queue = deque(found)

    while queue:
        for w in queue.popleft()._viter():
            if w not in found and w not in border:
                found[w] = None
                queue.append(w)

    return list(found)
