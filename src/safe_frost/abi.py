"""
Solidity ABI encoding of the values consumed by the EVM verifier.

Every value is packed into big-endian 32-byte words: addresses are left
padded with zeros, scalars take one word and points take two (x then y,
without a prefix byte).
"""

from .address import Address
from .point import Point


def address(value: Address) -> bytes:
    return bytes(12) + bytes(value)


def scalar(value: int) -> bytes:
    return value.to_bytes(32, "big")


def point(value: Point) -> bytes:
    return value.xy_serialize()
