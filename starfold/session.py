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


r""" Driving a star through a folding script.

A :class:`Session` owns one :class:`~starfold.star.StarMesh` and applies
operations to it, catching failures so that the caller can inspect the
state reached before the failing step.

Examples
--------
>>> session = Session()
>>> phases = session.run('a 12\nb 6', 'bend 3.14159 a b')
>>> [phase.title for phase in phases]
['initialize', 'bend 3.14159 a b']
"""

import collections

import numpy as np

import starfold.script as script

from starfold.hds import MeshError
from starfold.iterators import edges
from starfold.log import TextLog
from starfold.star import StarMesh, get_lines


Snapshot = collections.namedtuple(
    'Snapshot', ['vertices', 'names', 'edges', 'faces', 'peers'])
Snapshot.__doc__ = """ State of a mesh for display or comparison.

Attributes
----------
vertices : numpy.ndarray
    Vertex positions, one row per vertex.
names : list[str]
    Vertex names in the same order.
edges : list[tuple[str, str]]
    Names of the end points of each edge.
faces : list[list[str]]
    Names of the vertices of each face.
peers : list[tuple[numpy.ndarray, numpy.ndarray]]
    Midpoints of the half-edges of each peer pair.
"""

Phase = collections.namedtuple('Phase', ['title', 'log', 'error', 'snapshot'])


class Session:
    """ Folding session.

    Parameters
    ----------
    tol : Tolerance, optional
        Tolerance settings passed on to the mesh.
    log : object, optional
        Trace collaborator. Defaults to a :class:`~starfold.log.TextLog`.
    """

    def __init__(self, tol=None, log=None):
        self._tol = tol
        self._log = TextLog() if log is None else log
        self._mesh = None
        self._error = None

    @property
    def mesh(self):
        """ The current mesh or :obj:`None` before setup.

        :type: StarMesh
        """
        return self._mesh

    @property
    def log(self):
        """ The trace collaborator.
        """
        return self._log

    @property
    def error(self):
        """ Message of the last failure or :obj:`None`.

        :type: str
        """
        return self._error

    def _fail(self, e):
        self._error = f'{type(e).__name__}: {e}'
        self._log.record('FAILED:', self._error)

        return False

    def setup(self, text):
        """ Build the star, log and check it.

        Returns
        -------
        bool
            :obj:`True` on success. On failure the message is available
            through :attr:`error`.
        """
        self._error = None

        try:
            self._mesh = StarMesh.build(text, tol=self._tol, log=self._log)
            self._mesh.log_mesh()
            self._mesh.check()
        except (MeshError, ValueError) as e:
            return self._fail(e)

        return True

    def run_operation(self, name, args):
        """ Apply a single operation.

        Parameters
        ----------
        name : str
            Command name, one of :data:`~starfold.script.COMMANDS`.
        args : sequence of str
            Command arguments.

        Returns
        -------
        bool
            :obj:`True` if the operation and the subsequent consistency
            check succeeded.
        """
        self._error = None

        try:
            if self._mesh is None:
                raise ValueError('no star set up')
            op = script.parse_operation(' '.join([name, *args]))
            script.apply_operation(self._mesh, op)
            self._mesh.log_mesh()
            self._mesh.check()
        except (MeshError, ValueError) as e:
            return self._fail(e)

        return True

    def check_consistency(self):
        """ Check all mesh invariants.

        Returns
        -------
        bool
            :obj:`True` if no violation was found.
        """
        if self._mesh is None:
            return self._fail(ValueError('no star set up'))

        try:
            self._mesh.check()
        except MeshError as e:
            return self._fail(e)

        return True

    def snapshot(self):
        """ Current state of the mesh.

        Returns
        -------
        Snapshot

        Raises
        ------
        ValueError
            Before a star has been set up successfully.
        """
        mesh = self._mesh

        if mesh is None:
            raise ValueError('no star set up')

        verts = list(mesh.vertices)

        if verts:
            points = np.array([v.point for v in verts])
        else:
            points = np.empty((0, 3))

        links = [(h.origin.name, h.target.name) for h in edges(mesh)]
        faces = [[v.name for v in l] for l in mesh.faces]
        peers = [(h0.midpoint, h1.midpoint) for h0, h1 in mesh.peers
                 if h0.index < h1.index]

        return Snapshot(points, [v.name for v in verts], links, faces, peers)

    def _phase(self, title):
        text = getattr(self._log, 'text', '')
        snapshot = None if self._mesh is None else self.snapshot()

        return Phase(title, text, self._error, snapshot)

    def run(self, star, transform=''):
        """ Set up a star and apply a script to it.

        Processing stops at the first failing step.

        Parameters
        ----------
        star : str
            Star definition.
        transform : str, optional
            Folding script.

        Returns
        -------
        list[Phase]
            One phase per step that was attempted, starting with the
            setup phase ``'initialize'``. Only the last phase can have
            an error.
        """
        clear = getattr(self._log, 'clear', None)

        if clear is not None:
            clear()

        ok = self.setup(star)
        phases = [self._phase('initialize')]

        if not ok:
            return phases

        for line in get_lines(transform):
            if clear is not None:
                clear()

            name, *args = line.split()
            ok = self.run_operation(name, args)
            phases.append(self._phase(line))

            if not ok:
                break

        return phases
