"""
Secure random material: TOTP secrets, numeric OTPs and opaque tokens.

Everything draws from the `secrets` module (the OS CSPRNG). If that source is
unavailable we raise EntropyUnavailable instead of degrading to `random`.
"""

import secrets

from shadowmesh.domain.exceptions import EntropyUnavailable

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"


def generate_base32_secret(length: int = 32) -> str:
    """Uniform random string over the RFC 4648 base32 alphabet, no padding"""
    try:
        return "".join(secrets.choice(BASE32_ALPHABET) for _ in range(length))
    except (NotImplementedError, OSError) as exc:
        raise EntropyUnavailable("Secure random source unavailable") from exc


def generate_numeric_code(digits: int = 6) -> str:
    """Uniform random integer in [0, 10**digits), zero-padded"""
    try:
        value = secrets.randbelow(10**digits)
    except (NotImplementedError, OSError) as exc:
        raise EntropyUnavailable("Secure random source unavailable") from exc
    return str(value).zfill(digits)


def generate_opaque_token(nbytes: int = 32) -> str:
    """URL-safe token with nbytes of entropy (256 bits by default)"""
    try:
        return secrets.token_urlsafe(nbytes)
    except (NotImplementedError, OSError) as exc:
        raise EntropyUnavailable("Secure random source unavailable") from exc
