import hashlib
import math
import secrets


def hash_token(token: str) -> str:
    """
    SHA-256 digest of a token, as 64 hex characters.

    Used to store and look up access/refresh tokens without keeping them in cleartext.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_random_token(length: int = 80) -> str:
    """Cryptographically random hex string of exactly `length` characters"""
    return secrets.token_hex(math.ceil(length / 2))[:length]
