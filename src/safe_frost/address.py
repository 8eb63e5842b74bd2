"""Ethereum addresses of secp256k1 public keys."""

from __future__ import annotations
from eth_utils import keccak
from .point import Point


class Address:
    """A 20-byte Ethereum address."""

    def __init__(self, data: bytes):
        if len(data) != 20:
            raise ValueError("An address must be exactly 20 bytes long.")
        self.data = bytes(data)

    @classmethod
    def from_key(cls, public_key: Point) -> Address:
        """The address is the low 20 bytes of the Keccak-256 digest of x || y."""
        return cls(keccak(public_key.xy_serialize())[12:])

    def __bytes__(self) -> bytes:
        return self.data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self.data == other.data

    def __hash__(self) -> int:
        return hash(self.data)

    def checksum(self) -> str:
        """
        Encode the address with the EIP-55 mixed-case checksum: a hex letter
        is uppercased when the matching nibble of the Keccak-256 digest of
        the lowercase hex address is 8 or more.
        """
        lowercase = self.data.hex()
        digest = keccak(lowercase.encode("ascii"))
        characters = []
        for i, character in enumerate(lowercase):
            byte = digest[i // 2]
            nibble = byte >> 4 if i % 2 == 0 else byte & 0x0F
            characters.append(character.upper() if nibble >= 8 else character)
        return "0x" + "".join(characters)

    def __str__(self) -> str:
        return self.checksum()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.checksum()!r})"
