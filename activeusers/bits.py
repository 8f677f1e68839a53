#!/usr/bin/python3
# Copyright (c) 2024 by Fred Morris Tacoma WA
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Bitmaps as Integers.

Redis bitmaps are plain strings. Bit 0 is the most significant bit of the
first byte and the string grows to the right as higher bits are set:

    SETBIT k 0 1    -->  b'\\x80'
    SETBIT k 9 1    -->  b'\\x80\\x40'

Read as a big-endian integer this means the same user lands on a different
integer bit depending on how long the string happens to be. So before bitmaps
from different days can be combined they have to be aligned: every buffer is
zero filled on the right to the length of the longest one. After that
normalize() zero fills on the left to a minimum width (MIN_WIDTH bytes), which
changes neither the value nor the number of bits set.

There is no upper bound on the width. Buffers are never truncated.
"""

MIN_WIDTH = 8       # bytes

def normalize(buffer, width=MIN_WIDTH):
    """Zero fill on the left to width bytes and return a big-endian integer.

    A buffer which is already wider than width is converted as is.
    """
    if not isinstance(buffer, (bytes, bytearray, memoryview)):
        raise TypeError('Expected a byte buffer, not {}'.format(type(buffer).__name__))
    buffer = bytes(buffer)
    if len(buffer) < width:
        buffer = bytes(width - len(buffer)) + buffer
    return int.from_bytes(buffer, 'big')

def align(buffers):
    """Align buffers so that bit N means the same thing in all of them.

    None (a missing key) is treated as an empty buffer.

    Returns a tuple of the width in bytes and the list of aligned buffers.
    """
    buffers = [ buffer or b'' for buffer in buffers ]
    width = max([ MIN_WIDTH ] + [ len(buffer) for buffer in buffers ])
    return width, [ bytes(buffer) + bytes(width - len(buffer)) for buffer in buffers ]

def union(buffers):
    """Bitwise OR of all of the (aligned) buffers, as an integer."""
    width, buffers = align(buffers)
    value = 0
    for buffer in buffers:
        value |= normalize(buffer, width)
    return value

def cardinality(value):
    """Number of bits set. Leading zeros are irrelevant."""
    if value < 0:
        raise ValueError('Cardinality is not defined for negative values.')
    return bin(value).count('1')

class BitSet(object):
    """A read-only bitmap over a byte buffer.

    Bits are numbered the way Redis numbers them: bit 0 is the most significant
    bit of the first byte. The length is the number of bits in the buffer,
    whether they are set or not.

        bs = BitSet(b'\\xa0')
        len(bs)             --> 8
        bs[0], bs[1]        --> 1, 0
        list(bs.positions())--> [0, 2]
    """

    def __init__(self, buffer=None):
        self.buffer = bytes(buffer or b'')
        return

    def __len__(self):
        return len(self.buffer) * 8

    def __getitem__(self, i):
        if i < 0:
            i += len(self)
        if i < 0 or i >= len(self):
            raise IndexError('Bit {} out of range'.format(i))
        return (self.buffer[i // 8] >> (7 - i % 8)) & 1

    def __repr__(self):
        return '<{} {}>'.format(type(self).__name__, self.buffer.hex() or '-')

    def positions(self):
        """Yield the positions of the bits which are set, in ascending order."""
        for i, byte in enumerate(self.buffer):
            if not byte:
                continue
            for bit in range(i * 8, i * 8 + 8):
                if self[bit]:
                    yield bit
        return
