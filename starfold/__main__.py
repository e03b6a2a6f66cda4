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


""" Command line interface.

Run a star definition and folding script from files or one of the
bundled examples and report each step::

    python -m starfold --example icosahedron --log
"""

import argparse
import sys

from starfold.examples import EXAMPLES
from starfold.log import NullLog, PrintLog
from starfold.session import Session
from starfold.tolerance import Tolerance


def _read(path):
    with open(path) as file:
        return file.read()


def main(argv=None):
    CWHITERED = '\33[41m'                   # white on red background
    CBOLD = '\33[1m'                        # bold text
    CEND = '\33[0m'

    parser = argparse.ArgumentParser(
        prog='starfold', description='fold stars into polyhedra')
    parser.add_argument('star', nargs='?', type=str,
                        help='star definition file')
    parser.add_argument('script', nargs='?', type=str,
                        help='folding script file')
    parser.add_argument('--example', type=str, choices=sorted(EXAMPLES),
                        help='run a bundled example')
    parser.add_argument('--list', action='store_true',
                        help='list bundled examples')
    parser.add_argument('--log', action='store_true',
                        help='print the trace of each step')
    parser.add_argument('--trace', action='store_true',
                        help='stream the trace while steps run')
    parser.add_argument('--dump', action='store_true',
                        help='print final vertex positions')
    parser.add_argument('--coincide', type=float, default=1e-8,
                        help='tolerance for coinciding points')
    parser.add_argument('--nearby', type=float, default=1e-4,
                        help='distance reported as nearby vertices')
    parser.add_argument('--peer-length', type=float, default=1e-3,
                        help='tolerated length difference of peers')

    args = parser.parse_args(argv)

    if args.list:
        for key, example in EXAMPLES.items():
            print(f'{key:15} {example.label}: {example.info.strip()}')
        return 0

    if args.example is not None:
        star = EXAMPLES[args.example].setup
        transform = EXAMPLES[args.example].transform
    elif args.star is not None:
        star = _read(args.star)
        transform = '' if args.script is None else _read(args.script)
    else:
        parser.error('either a star definition file or --example is required')

    tol = Tolerance(coincide=args.coincide, nearby=args.nearby,
                    peer_length=args.peer_length)

    if args.trace:
        log = PrintLog(indent='  ')
    elif args.log:
        log = None
    else:
        log = NullLog()

    session = Session(tol=tol, log=log)
    phases = session.run(star, transform)

    for i, phase in enumerate(phases, 1):
        if args.log and not args.trace:
            print(CBOLD + f'{i}. {phase.title}' + CEND)
            print(phase.log)
        if phase.error is not None:
            print(CWHITERED + f'step #{i} ({phase.title}) failed: ' +
                  phase.error + CEND)

    if args.dump and phases[-1].snapshot is not None:
        snapshot = phases[-1].snapshot
        for name, point in zip(snapshot.names, snapshot.vertices):
            print(f'{name:15}', *(f'{x: .6f}' for x in point))

    if phases[-1].error is not None:
        return 1

    print(f'{len(phases)} step{"" if len(phases) == 1 else "s"} succeeded')
    return 0


if __name__ == '__main__':
    sys.exit(main())
