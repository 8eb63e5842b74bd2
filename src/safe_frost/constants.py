"""
These constants define the elliptic curve secp256k1 and the FROST ciphersuite
built on top of it. The curve operates over a finite field of prime order P,
with a base point G of order Q, specified by its coordinates G_x and G_y.
"""

# secp256k1 constants for elliptic curve cryptography

# The prime modulus of the field
P: int = 2**256 - 2**32 - 977

# The order of the curve
Q: int = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# X-coordinate of the generator point G
G_x: int = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798

# Y-coordinate of the generator point G
G_y: int = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8

# FROST(secp256k1, SHA-256) context string
CONTEXT: bytes = b"FROST-secp256k1-SHA256-v1"

# Byte lengths of serialized scalars and SEC 1 compressed points
SCALAR_LENGTH: int = 32
POINT_LENGTH: int = 33
