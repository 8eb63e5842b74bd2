"""
Hash functions of the FROST(secp256k1, SHA-256) ciphersuite (RFC 9591).

H1, H2 and H3 map arbitrary bytes to scalars with `hash_to_field` over
`expand_message_xmd` (RFC 9380) using SHA-256, while H4 and H5 are plain
domain-separated SHA-256 digests.
"""

from hashlib import sha256
from .constants import CONTEXT, Q

# L = ceil((ceil(log2(Q)) + k) / 8) for k = 128
_FIELD_BYTES = 48


def expand_message_xmd(message: bytes, dst: bytes, length: int) -> bytes:
    """
    Expand `message` into `length` uniformly random bytes.

    Parameters:
    message (bytes): The input message.
    dst (bytes): The domain separation tag, at most 255 bytes.
    length (int): The number of output bytes, at most 255 * 32.

    Returns:
    bytes: The expanded bytes.

    Raises:
    ValueError: If the tag or the requested length is too long.
    """
    ell = (length + 31) // 32
    if ell > 255 or length > 65535:
        raise ValueError("Requested output length is too long.")
    if len(dst) > 255:
        raise ValueError("Domain separation tag is too long.")

    dst_prime = dst + len(dst).to_bytes(1, "big")
    # Z_pad || msg || l_i_b_str || I2OSP(0, 1) || DST_prime
    b_0 = sha256(
        bytes(64) + message + length.to_bytes(2, "big") + b"\x00" + dst_prime
    ).digest()
    b_i = sha256(b_0 + b"\x01" + dst_prime).digest()
    uniform_bytes = b_i
    for i in range(2, ell + 1):
        mixed = bytes(x ^ y for x, y in zip(b_0, b_i))
        b_i = sha256(mixed + i.to_bytes(1, "big") + dst_prime).digest()
        uniform_bytes += b_i

    return uniform_bytes[:length]


def hash_to_scalar(message: bytes, dst: bytes) -> int:
    """Hash `message` to a scalar in [0, Q) with the given domain separation tag."""
    uniform_bytes = expand_message_xmd(message, dst, _FIELD_BYTES)
    return int.from_bytes(uniform_bytes, "big") % Q


def h1(message: bytes) -> int:
    # binding factors
    return hash_to_scalar(message, CONTEXT + b"rho")


def h2(message: bytes) -> int:
    # challenge
    return hash_to_scalar(message, CONTEXT + b"chal")


def h3(message: bytes) -> int:
    # nonce generation
    return hash_to_scalar(message, CONTEXT + b"nonce")


def h4(message: bytes) -> bytes:
    return sha256(CONTEXT + b"msg" + message).digest()


def h5(message: bytes) -> bytes:
    return sha256(CONTEXT + b"com" + message).digest()
