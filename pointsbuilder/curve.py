"""secp256k1 group arithmetic, scalar multiplication and public key parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass

P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
_B = 7
_GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
_GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8

SCALAR_SIZE = 32

_HEX_RE = re.compile(r"[0-9a-fA-F]+")


class CurveError(ValueError):
    """Raised for invalid scalars, points or serialized public keys."""


def field_inverse(a: int) -> int:
    """Return the multiplicative inverse of ``a`` modulo the field prime."""
    a %= P
    if a == 0:
        raise CurveError("zero has no inverse in the field")
    return pow(a, P - 2, P)


def _field_sqrt(a: int) -> int | None:
    a %= P
    root = pow(a, (P + 1) // 4, P)
    return root if root * root % P == a else None


@dataclass(frozen=True)
class Point:
    """An affine secp256k1 point; ``Point()`` is the point at infinity."""

    x: int | None = None
    y: int | None = None

    def __post_init__(self) -> None:
        if (self.x is None) != (self.y is None):
            raise CurveError("both coordinates must be given, or neither")
        if self.x is None:
            return
        if not (0 <= self.x < P and 0 <= self.y < P):
            raise CurveError("coordinate out of field range")
        if (self.y * self.y - self.x**3 - _B) % P:
            raise CurveError("point is not on the curve")

    @property
    def is_infinity(self) -> bool:
        return self.x is None

    def __add__(self, other: Point) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        if self.is_infinity:
            return other
        if other.is_infinity:
            return self
        if self.x == other.x:
            if (self.y + other.y) % P == 0:
                return INFINITY
            slope = 3 * self.x * self.x * field_inverse(2 * self.y) % P
        else:
            slope = (other.y - self.y) * field_inverse(other.x - self.x) % P
        x3 = (slope * slope - self.x - other.x) % P
        y3 = (slope * (self.x - x3) - self.y) % P
        return Point(x3, y3)

    def __neg__(self) -> Point:
        if self.is_infinity:
            return self
        return Point(self.x, (-self.y) % P)

    def multiply(self, k: int) -> Point:
        """Return ``k`` times this point."""
        k %= N
        result = INFINITY
        addend = self
        while k:
            if k & 1:
                result = result + addend
            addend = addend + addend
            k >>= 1
        return result

    def x_bytes(self) -> bytes:
        """X coordinate as 32 little-endian bytes, the layout kept in the points table."""
        if self.is_infinity:
            raise CurveError("the point at infinity has no X coordinate")
        return self.x.to_bytes(32, "little")

    def y_parity(self) -> int:
        """Lowest bit of the Y coordinate."""
        if self.is_infinity:
            raise CurveError("the point at infinity has no Y coordinate")
        return self.y & 1


INFINITY = Point()
G = Point(_GX, _GY)


def scalar_to_point(k: int) -> Point:
    """Public key ``k * G`` for a private key in ``[1, N - 1]``."""
    if not 0 < k < N:
        raise CurveError("scalar must be in the range [1, N - 1]")
    return G.multiply(k)


def parse_public_key(data: bytes) -> Point:
    """Parse a compressed (33 bytes) or uncompressed (65 bytes) public key."""
    data = bytes(data)
    if len(data) == 33 and data[0] in (0x02, 0x03):
        x = int.from_bytes(data[1:], "big")
        if x >= P:
            raise CurveError("invalid public key")
        y = _field_sqrt(x**3 + _B)
        if y is None:
            raise CurveError("invalid public key")
        if (y & 1) != (data[0] & 1):
            y = P - y
        return Point(x, y)
    if len(data) == 65 and data[0] in (0x04, 0x06, 0x07):
        x = int.from_bytes(data[1:33], "big")
        y = int.from_bytes(data[33:], "big")
        if data[0] != 0x04 and (y & 1) != (data[0] & 1):
            raise CurveError("invalid public key")
        return Point(x, y)
    raise CurveError("invalid public key")


def hex_pub_to_point(hex_pub: str) -> Point:
    """Parse a hex-serialized public key into a point."""
    length = len(hex_pub)
    if length not in (33 * 2, 65 * 2):
        raise CurveError(f"invalid public key length: {length}")
    if not _HEX_RE.fullmatch(hex_pub):
        raise CurveError("invalid public key")
    value = int(hex_pub, 16)
    if value == 0:
        raise CurveError("invalid public key")
    return parse_public_key(value.to_bytes(length // 2, "big"))