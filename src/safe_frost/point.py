"""
This module defines the Point class, which represents points on an elliptic curve.
It includes methods for point arithmetic such as addition, multiplication, and negation,
as well as serialization and deserialization of points for secp256k1.

Two encodings are supported: the SEC 1 compressed form used by the FROST
ciphersuite and the signing artifacts, and the 64-byte uncompressed x || y
form (without the 0x04 prefix) used by the EVM address and ABI encoders.
"""

from __future__ import annotations
from typing import Optional
from .constants import P, Q, G_x, G_y


class Point:
    """Class representing an elliptic curve point."""

    def __init__(self, x: Optional[int] = None, y: Optional[int] = None):
        """
        Initialize a point on an elliptic curve.

        Parameters:
        x (Optional[int], optional): The x-coordinate of the point.
            Defaults to None, representing the point at infinity.
        y (Optional[int], optional): The y-coordinate of the point.
            Defaults to None, also representing the point at infinity.

        The point at infinity serves as the identity element in elliptic curve addition.
        """

        self.x = x
        self.y = y

    @classmethod
    def sec_deserialize(cls, data: bytes) -> Point:
        """
        Deserialize a SEC 1 compressed public key to a Point object.

        Parameters:
        data (bytes): 33 bytes representing the compressed point.

        Returns:
        Point: An instance of Point corresponding to the deserialized point.

        Raises:
        ValueError: If the input has incorrect length, an unknown prefix, or
        does not represent a point on the curve.
        """
        if len(data) != 33:
            raise ValueError("Input must be exactly 33 bytes long.")
        if data[0] not in (2, 3):
            raise ValueError(f"Invalid point prefix {data[0]:#04x}.")

        x = int.from_bytes(data[1:], "big")
        if x >= P:
            raise ValueError("The x-coordinate is not a field element.")
        y_squared = (pow(x, 3, P) + 7) % P
        y = pow(y_squared, (P + 1) // 4, P)
        if (y * y) % P != y_squared:
            raise ValueError("The x-coordinate is not on the curve.")

        if y % 2 != data[0] - 2:
            y = P - y

        return cls(x, y)

    def sec_serialize(self) -> bytes:
        """
        Serialize the point to its SEC 1 compressed format.

        Returns:
        bytes: The SEC 1 compressed format of the point, consisting of a prefix
        and the x-coordinate.

        Raises:
        ValueError: If the point is at infinity.
        """
        if self.x is None or self.y is None:
            raise ValueError("Cannot serialize the point at infinity.")

        prefix = b"\x02" if self.y % 2 == 0 else b"\x03"
        return prefix + self.x.to_bytes(32, "big")

    def xy_serialize(self) -> bytes:
        """
        Serialize the point to its uncompressed x || y coordinates, each
        32-byte big-endian, without the SEC 1 0x04 prefix.

        Raises:
        ValueError: If the point is at infinity.
        """
        if self.x is None or self.y is None:
            raise ValueError("Cannot serialize the point at infinity.")

        return self.x.to_bytes(32, "big") + self.y.to_bytes(32, "big")

    def is_zero(self) -> bool:
        """
        Check if the point is the identity element (point at infinity) in elliptic curve arithmetic.

        Returns:
        bool: True if the point is at infinity, False otherwise.
        """
        return self.x is None or self.y is None

    def __eq__(self, other: object) -> bool:
        """
        Determine if this point is equal to another point by comparing their coordinates.

        Parameters:
        other (object): The object to compare with.

        Returns:
        bool: True if both points have the same coordinates, False otherwise.
        """
        if not isinstance(other, Point):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __neg__(self) -> Point:
        """
        Negate the point on the elliptic curve.

        Returns:
        Point: A new Point that is the negation of the current point. If the
        current point is at infinity, it returns the point at infinity.
        """
        if self.x is None or self.y is None:
            return self

        return self.__class__(self.x, P - self.y)

    def _dbl(self) -> Point:
        """
        Double the point on the elliptic curve. If the point is at infinity or the y-coordinate
        is zero (implying the point is of order 2), the result is the point at infinity.

        Returns:
        Point: A new Point that is the result of doubling the current point.
        """
        if self.x is None or self.y is None or self.y == 0:
            # Return the point at infinity
            return self.__class__()

        x = self.x
        y = self.y
        s = (3 * x * x * pow(2 * y, P - 2, P)) % P
        sum_x = (s * s - 2 * x) % P
        sum_y = (s * (x - sum_x) - y) % P

        return self.__class__(sum_x, sum_y)

    def __add__(self, other: Point) -> Point:
        """
        Add two points on an elliptic curve.

        Parameters:
        other (Point): Another point to add to this point.

        Returns:
        Point: The sum of the two points as a new Point object.

        Raises:
        ValueError: If other is not a Point.
        """
        if not isinstance(other, Point):
            raise ValueError("The other object must be an instance of Point")

        if self == other:
            return self._dbl()
        if self.x is None or self.y is None:
            return other
        if other.x is None or other.y is None:
            return self
        if self.x == other.x and self.y != other.y:
            return self.__class__()  # Point at infinity
        s = ((other.y - self.y) * pow(other.x - self.x, P - 2, P)) % P
        sum_x = (s * s - self.x - other.x) % P
        sum_y = (s * (self.x - sum_x) - self.y) % P

        return self.__class__(sum_x, sum_y)

    def __sub__(self, other: Point) -> Point:
        if not isinstance(other, Point):
            raise ValueError("The other object must be an instance of Point")

        return self + -other

    def __rmul__(self, scalar: int) -> Point:
        """
        Multiply this point by an integer scalar using the double-and-add
        method, reduced modulo the curve order.

        Parameters:
        scalar (int): The scalar to multiply this point by.

        Returns:
        Point: The result of the scalar multiplication.

        Raises:
        ValueError: If the scalar is not an integer.
        """
        if not isinstance(scalar, int):
            raise ValueError("The scalar must be an integer")

        scalar = scalar % Q

        p = self
        r = self.__class__()
        i = 1

        while i <= scalar:
            if i & scalar:
                r = r + p
            p = p._dbl()
            i <<= 1

        return r

    def __str__(self) -> str:
        """
        Render the point as `{0x<x>,0x<y>}` with zero-padded 32-byte
        coordinates, or `0` for the point at infinity.
        """
        if self.is_zero():
            return "0"
        return f"{{0x{self.x:064x},0x{self.y:064x}}}"

    def __repr__(self) -> str:
        if self.is_zero():
            return f"{self.__class__.__name__}(x=None, y=None)"
        return f"{self.__class__.__name__}(x={self.x}, y={self.y})"


# The generator point G
G: Point = Point(G_x, G_y)
