"""Password re-verification used to open a locked folder session."""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

DEFAULT_ALGORITHM = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 390_000


class PasswordVerifier(Protocol):
    def verify(self, user_id: str, password: str) -> bool:
        ...


@dataclass(slots=True)
class PasswordHash:
    """Structured representation of a PBKDF2 hash entry."""

    algorithm: str
    iterations: int
    salt: bytes
    digest: bytes

    @classmethod
    def parse(cls, encoded: str) -> "PasswordHash":
        try:
            algorithm, iterations, salt_hex, digest_hex = encoded.split("$")
        except ValueError as exc:
            raise ValueError("invalid password hash format") from exc
        return cls(
            algorithm=algorithm,
            iterations=int(iterations),
            salt=binascii.unhexlify(salt_hex),
            digest=binascii.unhexlify(digest_hex),
        )

    def verify(self, password: str) -> bool:
        if self.algorithm != DEFAULT_ALGORITHM:
            raise ValueError(f"unsupported algorithm: {self.algorithm}")
        derived = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), self.salt, self.iterations)
        return hmac.compare_digest(derived, self.digest)


def hash_password(password: str, *, iterations: int = DEFAULT_ITERATIONS) -> str:
    """Return ``pbkdf2_sha256$<iterations>$<salt>$<digest>``."""
    if not password:
        raise ValueError("password must not be empty")
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return "$".join((DEFAULT_ALGORITHM, str(iterations), salt.hex(), digest.hex()))


@dataclass(slots=True)
class HashedPasswordVerifier:
    """Verify against PBKDF2 hashes keyed by user id."""

    hashes: dict[str, str]

    @classmethod
    def from_file(cls, path: Path) -> "HashedPasswordVerifier":
        """Load ``{"users": [{"user_id": ..., "password_hash": ...}]}``."""
        if not path.exists():
            raise FileNotFoundError(f"Locked folder credentials file not found: {path}")
        raw = json.loads(path.read_text(encoding="utf-8"))
        users = raw.get("users", [])
        if not isinstance(users, list):
            raise ValueError("Invalid credentials structure: 'users' must be an array")
        hashes: dict[str, str] = {}
        for entry in users:
            user_id = entry.get("user_id")
            password_hash = entry.get("password_hash")
            if not user_id or not password_hash:
                raise ValueError("Each entry must contain user_id and password_hash")
            hashes[user_id] = password_hash
        return cls(hashes=hashes)

    def verify(self, user_id: str, password: str) -> bool:
        encoded = self.hashes.get(user_id)
        if not encoded or not password:
            return False
        return PasswordHash.parse(encoded).verify(password)


__all__ = ["HashedPasswordVerifier", "PasswordHash", "PasswordVerifier", "hash_password"]
