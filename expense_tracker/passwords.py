"""
Password Hashing

Salted scrypt digests. Each digest is self-describing so the work factor can
be raised later without invalidating stored passwords:

    scrypt$<n>$<r>$<p>$<salt hex>$<hash hex>
"""

import hashlib
import hmac
import secrets


SCHEME = "scrypt"
SALT_BYTES = 16
DIGEST_BYTES = 64


class PasswordHasher:
    """One-way adaptive hashing of plaintext passwords"""

    def __init__(self, n: int = 16384, r: int = 8, p: int = 1):
        self.n = n
        self.r = r
        self.p = p

    def _derive(self, password: str, salt: bytes, n: int, r: int, p: int) -> bytes:
        return hashlib.scrypt(
            password.encode("utf-8"),
            salt=salt,
            n=n, r=r, p=p,
            maxmem=128 * n * r * p + 1024 * 1024,
            dklen=DIGEST_BYTES,
        )

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt"""
        salt = secrets.token_bytes(SALT_BYTES)
        derived = self._derive(password, salt, self.n, self.r, self.p)
        return f"{SCHEME}${self.n}${self.r}${self.p}${salt.hex()}${derived.hex()}"

    def verify(self, password: str, digest: str) -> bool:
        """Check a password against a stored digest; malformed digests never match"""
        try:
            scheme, n, r, p, salt_hex, hash_hex = digest.split("$")
            if scheme != SCHEME:
                return False
            salt = bytes.fromhex(salt_hex)
            expected = bytes.fromhex(hash_hex)
            derived = self._derive(password, salt, int(n), int(r), int(p))
        except (AttributeError, ValueError, MemoryError):
            return False
        return hmac.compare_digest(derived, expected)
