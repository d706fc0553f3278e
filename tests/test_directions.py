import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from polymaze.core import directions as dirs
from polymaze.core.directions import N, S, E, W, NW, NE, SW, SE


class TestDirections(unittest.TestCase):
    def test_opposite(self):
        self.assertEqual(dirs.opposite(S), N)
        self.assertEqual(dirs.opposite(SW), NE)
        self.assertEqual(dirs.opposite(W), E)
        self.assertEqual(dirs.opposite(NW), SE)
        for d in dirs.ALL:
            self.assertEqual(dirs.opposite(dirs.opposite(d)), d)

    def test_mirrors(self):
        self.assertEqual(dirs.hmirror(E), W)
        self.assertEqual(dirs.hmirror(NE), NW)
        self.assertEqual(dirs.hmirror(N), N)
        self.assertEqual(dirs.vmirror(N), S)
        self.assertEqual(dirs.vmirror(SW), NW)
        self.assertEqual(dirs.vmirror(E), E)

    def test_rotations(self):
        self.assertEqual(dirs.clockwise(N), E)
        self.assertEqual(dirs.clockwise(NW), NE)
        self.assertEqual(dirs.counter_clockwise(E), N)
        self.assertEqual(dirs.counter_clockwise(SW), SE)
        for d in dirs.ALL:
            self.assertEqual(dirs.counter_clockwise(dirs.clockwise(d)), d)
            # Four quarter turns come back around
            r = d
            for _ in range(4):
                r = dirs.clockwise(r)
            self.assertEqual(r, d)

    def test_multi_bit_fields(self):
        self.assertEqual(dirs.opposite(N | E), S | W)
        self.assertEqual(dirs.hmirror(N | E | SW), N | W | SE)

    def test_under_plane_stays_under(self):
        field = N | dirs.under(E | W)
        self.assertEqual(dirs.opposite(field), S | dirs.under(E | W))
        self.assertEqual(dirs.clockwise(field), E | dirs.under(N | S))
        self.assertEqual(dirs.hmirror(dirs.under(NE)), dirs.under(NW))

    def test_bits_and_popcount(self):
        self.assertEqual(list(dirs.bits(W | N | SE)), [N, W, SE])
        self.assertEqual(list(dirs.bits(dirs.under(N))), [])
        self.assertEqual(dirs.popcount(N | S | dirs.under(E)), 3)

    def test_offsets(self):
        for d in (E, NE, SE):
            self.assertEqual(dirs.DX[d], 1)
        for d in (W, NW, SW):
            self.assertEqual(dirs.DX[d], -1)
        for d in (S, SE, SW):
            self.assertEqual(dirs.DY[d], 1)
        for d in (N, NE, NW):
            self.assertEqual(dirs.DY[d], -1)

    def test_name(self):
        self.assertEqual(dirs.name(N | dirs.under(S)), "N|s")
        self.assertEqual(dirs.name(0), "-")


if __name__ == '__main__':
    unittest.main()
