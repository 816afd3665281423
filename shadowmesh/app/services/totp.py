"""
TOTP (Time-based One-Time Password) engine.

Implements RFC 6238 with the parameters every mainstream authenticator app
uses: HMAC-SHA1, 6 digits, 30 second steps.

Features:
- Code generation and verification with clock-skew tolerance
- Replay rejection via a last-accepted counter
- otpauth:// provisioning URIs for QR enrollment
"""

import base64
import binascii
import hashlib
import hmac
import struct
import time
from typing import Iterator, Optional
from urllib.parse import quote, urlencode

from shadowmesh.domain.exceptions import InvalidSecret
from .secret_generator import BASE32_ALPHABET

TOTP_DIGITS = 6
TOTP_STEP_SECONDS = 30
TOTP_TOLERANCE_STEPS = 1


def decode_secret(secret_base32: str) -> bytes:
    """
    Decode a base32 shared secret to raw key bytes.

    Case-insensitive; whitespace and trailing padding are ignored.

    Raises:
        InvalidSecret: character outside the base32 alphabet, or a length
            that cannot encode whole bytes
    """
    cleaned = "".join(secret_base32.split()).upper().rstrip("=")
    if not cleaned:
        raise InvalidSecret("Secret is empty")
    for char in cleaned:
        if char not in BASE32_ALPHABET:
            raise InvalidSecret("Secret contains a non-base32 character")

    padding = -len(cleaned) % 8
    try:
        return base64.b32decode(cleaned + "=" * padding)
    except binascii.Error as exc:
        raise InvalidSecret("Secret has an invalid base32 length") from exc


def time_counter(timestamp: Optional[float] = None, step_seconds: int = TOTP_STEP_SECONDS) -> int:
    """T = floor(unix_time / step)"""
    if timestamp is None:
        timestamp = time.time()
    return int(timestamp // step_seconds)


def hotp(key: bytes, counter: int, digits: int = TOTP_DIGITS) -> str:
    """RFC 4226 HOTP value for a raw key and counter"""
    digest = hmac.new(key, struct.pack(">Q", counter), hashlib.sha1).digest()

    # Dynamic truncation
    offset = digest[-1] & 0x0F
    truncated = struct.unpack(">I", digest[offset:offset + 4])[0] & 0x7FFFFFFF

    return str(truncated % (10**digits)).zfill(digits)


def generate_totp(
    secret_base32: str,
    timestamp: Optional[float] = None,
    step_seconds: int = TOTP_STEP_SECONDS,
) -> str:
    """Current (or timestamp's) code for a base32 secret"""
    key = decode_secret(secret_base32)
    return hotp(key, time_counter(timestamp, step_seconds))


def _offsets(tolerance_steps: int) -> Iterator[int]:
    # Current step first; it is by far the common case
    yield 0
    for step in range(1, tolerance_steps + 1):
        yield -step
        yield step


def is_six_digit_code(code: str) -> bool:
    return isinstance(code, str) and len(code) == TOTP_DIGITS and code.isascii() and code.isdigit()


def find_matching_counter(
    secret_base32: str,
    candidate_code: str,
    timestamp: Optional[float] = None,
    tolerance_steps: int = TOTP_TOLERANCE_STEPS,
    step_seconds: int = TOTP_STEP_SECONDS,
    last_accepted_counter: Optional[int] = None,
) -> Optional[int]:
    """
    Find the time-step counter whose code equals candidate_code.

    Counters at or below last_accepted_counter are skipped, so a code that was
    already accepted cannot be replayed inside its tolerance window.

    Returns:
        The matching counter, or None

    Raises:
        InvalidSecret: secret_base32 is not valid base32
    """
    if not is_six_digit_code(candidate_code):
        return None

    key = decode_secret(secret_base32)
    current = time_counter(timestamp, step_seconds)

    for offset in _offsets(tolerance_steps):
        counter = current + offset
        if counter < 0:
            continue
        if last_accepted_counter is not None and counter <= last_accepted_counter:
            continue
        if hmac.compare_digest(hotp(key, counter), candidate_code):
            return counter
    return None


def verify_totp(
    secret_base32: str,
    candidate_code: str,
    tolerance_steps: int = TOTP_TOLERANCE_STEPS,
    step_seconds: int = TOTP_STEP_SECONDS,
    timestamp: Optional[float] = None,
) -> bool:
    """
    Verify a code against the current step and +/- tolerance_steps.

    Returns:
        True if any step in the window produces candidate_code

    Raises:
        InvalidSecret: secret_base32 is not valid base32
    """
    return (
        find_matching_counter(
            secret_base32,
            candidate_code,
            timestamp=timestamp,
            tolerance_steps=tolerance_steps,
            step_seconds=step_seconds,
        )
        is not None
    )


def provisioning_uri(secret_base32: str, account_label: str, issuer: str) -> str:
    """otpauth://totp/Issuer:account?secret=...&issuer=...&algorithm=SHA1&digits=6&period=30"""
    label = f"{quote(issuer, safe='')}:{quote(account_label, safe='')}"
    params = urlencode(
        {
            "secret": secret_base32,
            "issuer": issuer,
            "algorithm": "SHA1",
            "digits": TOTP_DIGITS,
            "period": TOTP_STEP_SECONDS,
        },
        quote_via=quote,
    )
    return f"otpauth://totp/{label}?{params}"
