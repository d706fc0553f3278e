from typing import Dict, Iterator

# Bitmask Constants (primary plane)
N  = 0x01
S  = 0x02
E  = 0x04
W  = 0x08
NW = 0x10
NE = 0x20
SW = 0x40
SE = 0x80

ALL = (N, S, E, W, NW, NE, SW, SE)

# Planes. The under plane holds passages running *beneath* a cell.
UNDER_SHIFT = 8
PRIMARY = 0x00FF
UNDER   = 0xFF00

DX = {N: 0, S: 0, E: 1, W: -1, NW: -1, NE: 1, SW: -1, SE: 1}
DY = {N: -1, S: 1, E: 0, W: 0, NW: -1, NE: -1, SW: 1, SE: 1}

OPPOSITE = {N: S, S: N, E: W, W: E, NW: SE, SE: NW, NE: SW, SW: NE}
HMIRROR  = {N: N, S: S, E: W, W: E, NW: NE, NE: NW, SW: SE, SE: SW}
VMIRROR  = {N: S, S: N, E: E, W: W, NW: SW, SW: NW, NE: SE, SE: NE}
CLOCKWISE = {N: E, E: S, S: W, W: N, NE: SE, SE: SW, SW: NW, NW: NE}
COUNTER_CLOCKWISE = {v: k for k, v in CLOCKWISE.items()}

NAMES = {N: "N", S: "S", E: "E", W: "W", NW: "NW", NE: "NE", SW: "SW", SE: "SE"}


def bits(field: int) -> Iterator[int]:
    """Yields each primary-plane direction set in 'field' (in ALL order)."""
    for d in ALL:
        if field & d:
            yield d


def popcount(field: int) -> int:
    return bin(field).count("1")


def _remap(field: int, table: Dict[int, int]) -> int:
    # Maps every set bit through 'table', keeping each plane in its own plane.
    result = 0
    primary = field & PRIMARY
    under = (field & UNDER) >> UNDER_SHIFT
    for d in bits(primary):
        result |= table[d]
    for d in bits(under):
        result |= table[d] << UNDER_SHIFT
    return result


def opposite(direction: int) -> int:
    return _remap(direction, OPPOSITE)


def hmirror(direction: int) -> int:
    """Reflection across the vertical axis (E <-> W)."""
    return _remap(direction, HMIRROR)


def vmirror(direction: int) -> int:
    """Reflection across the horizontal axis (N <-> S)."""
    return _remap(direction, VMIRROR)


def clockwise(direction: int) -> int:
    return _remap(direction, CLOCKWISE)


def counter_clockwise(direction: int) -> int:
    return _remap(direction, COUNTER_CLOCKWISE)


def under(direction: int) -> int:
    return direction << UNDER_SHIFT


def name(direction: int) -> str:
    parts = [NAMES[d] for d in bits(direction & PRIMARY)]
    parts += [NAMES[d].lower() for d in bits((direction & UNDER) >> UNDER_SHIFT)]
    return "|".join(parts) if parts else "-"
