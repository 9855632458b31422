"""Password hashing for site-scoped identities.

Hashes are stored as ``scrypt$<n>$<r>$<p>$<salt hex>$<key hex>``.
"""

import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

_N = 2**14
_R = 8
_P = 1
_LENGTH = 32


def hash_password(password: str) -> str:
    """Derive a storable hash for a password."""
    salt = os.urandom(16)
    key = Scrypt(salt=salt, length=_LENGTH, n=_N, r=_R, p=_P).derive(password.encode())
    return f"scrypt${_N}${_R}${_P}${salt.hex()}${key.hex()}"


def check_password(password: str, password_hash: str) -> bool:
    """Verify a password against a stored hash.

    Unknown or corrupt hash formats never verify.
    """
    try:
        scheme, n, r, p, salt_hex, key_hex = password_hash.split("$")
        if scheme != "scrypt":
            return False
        kdf = Scrypt(
            salt=bytes.fromhex(salt_hex),
            length=len(key_hex) // 2,
            n=int(n),
            r=int(r),
            p=int(p),
        )
        kdf.verify(password.encode(), bytes.fromhex(key_hex))
        return True
    except (ValueError, InvalidKey):
        return False
