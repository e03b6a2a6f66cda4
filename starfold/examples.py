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


""" Bundled stars and folding scripts.

Each entry of :data:`EXAMPLES` is an :class:`Example` with a short
description, a display label, the star definition and the folding
script.
"""

import collections

Example = collections.namedtuple('Example', ['info', 'label', 'setup',
                                             'transform'])

THURSTON = Example(
    info="""
From https://arxiv.org/pdf/math/9801088, Figure 15;
see also https://mathstodon.xyz/@johncarlosbaez/113369111554515465
""",
    label='Thurston',
    setup="""
a 11
b 10
c 10 9
d 9 8
e 7
f 6 6
g 5
h 4 4
i 4 3
j 2 2
k 1 12 12
""",
    transform="""
reattach j i
reattach i k
reattach b c
reattach e d
reattach j.1 a
bend2 + k a b.0
bend2 + k c d
bend2 + e.0 b j.1
bend2 + k d f
// bend2 + j.1 k h
bend2 + f g h
bend2 + e f k
// bend2 + i.0 h f
reattach k h
// bend2 + j.0 h i.0
reattach i.0 h
bend2 + h k j.1
reattach j.0 h
""")

ICOSAHEDRON = Example(
    info='From https://mathstodon.xyz/@GerardWestendorp/113374197385229562',
    label='Icosahedron',
    setup="""
a 9 8
b 7
c 6
d 5
e 4
f 3
g 2
h 1
i 12
j 11
k 10
""",
    transform="""
reattach k a
reattach i j
reattach j a
reattach k b
reattach e d
reattach i.0 h
reattach g f

// At this point the icosahedron
// faces are reunited.
// Now add edges to separate
// them from one another.

// The dihedral angle in an
// icosahedron is 138.2 deg.
// Thus the bending angle is
// 180 - 138.2 = 41.8 deg = 0.729 rad
// (Use a slightly smaller bending
// angle such as 0.68 to see a
// sliced icosahedron.)
bend .729 k.1 c
bend .729 c e.0
bend .729 b c
bend .729 c d

bend .729 g.1 i.0.0
bend .729 g.1 h
bend .729 h j.0
bend .729 h a
bend .729 f h

bend .729 i.1 k.0
bend .729 j.1 k.0
bend .729 j.1 b
bend .729 a b
bend .729 e.1 g.0
bend .729 e.1 f
bend .729 d f

bend .729 b d
bend .729 f a
bend .729 a d
""")

EMPTY = Example(
    info='Define your own star and folding.',
    label='Empty',
    setup='a',
    transform='')

EXAMPLES = {
    'thurston': THURSTON,
    'icosahedron': ICOSAHEDRON,
    'empty': EMPTY,
}
