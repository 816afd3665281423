"""
Password credential schemes.

Two families coexist, chosen per principal class at the call site:

- AdaptiveHashScheme: bcrypt, salt and cost embedded in the hash string.
  Used for admins.
- DeterministicDerivationScheme: PBKDF2-HMAC-SHA256 over a salt rebuilt from
  the principal's identity plus a fixed application salt, stored as hex.
  Used for members, and to read legacy admin hashes.
"""

import hashlib
import hmac
import re
from abc import ABC, abstractmethod

import bcrypt

from config import ApplicationConfig

# bcrypt only consumes the first 72 bytes of input
BCRYPT_MAX_BYTES = 72

_HEX_DIGEST = re.compile(r"^[0-9a-f]{64}$")


class CredentialScheme(ABC):
    """Hash and verify passwords for one principal class"""

    name: str

    @abstractmethod
    def hash(self, password: str, principal_id: str) -> str:
        pass

    @abstractmethod
    def verify(self, password: str, stored_hash: str, principal_id: str) -> bool:
        pass

    @abstractmethod
    def identifies(self, stored_hash: str) -> bool:
        """True if stored_hash was produced by this scheme"""
        pass

    @abstractmethod
    def dummy_verify(self) -> None:
        """Spend the cost of one verification without a real credential"""
        pass


class AdaptiveHashScheme(CredentialScheme):
    name = "bcrypt"

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode()[:BCRYPT_MAX_BYTES]

    def hash(self, password: str, principal_id: str = "") -> str:
        return bcrypt.hashpw(self._encode(password), bcrypt.gensalt(self.rounds)).decode()

    def verify(self, password: str, stored_hash: str, principal_id: str = "") -> bool:
        try:
            return bcrypt.checkpw(self._encode(password), stored_hash.encode())
        except ValueError:
            # Malformed stored hash
            return False

    def identifies(self, stored_hash: str) -> bool:
        return stored_hash.startswith(("$2a$", "$2b$", "$2y$"))

    def dummy_verify(self) -> None:
        bcrypt.checkpw(b"dummy_password", bcrypt.gensalt(self.rounds))


class DeterministicDerivationScheme(CredentialScheme):
    name = "pbkdf2_sha256"

    def __init__(self, application_salt: str, iterations: int = 100_000):
        self.application_salt = application_salt
        self.iterations = iterations

    def derive(self, password: str, principal_id: str) -> str:
        salt = (principal_id + self.application_salt).encode()
        return hashlib.pbkdf2_hmac(
            "sha256", password.encode(), salt, self.iterations, dklen=32
        ).hex()

    def hash(self, password: str, principal_id: str) -> str:
        return self.derive(password, principal_id)

    def verify(self, password: str, stored_hash: str, principal_id: str) -> bool:
        computed = self.derive(password, principal_id)
        return hmac.compare_digest(computed, stored_hash.lower())

    def identifies(self, stored_hash: str) -> bool:
        return bool(_HEX_DIGEST.match(stored_hash.lower()))

    def dummy_verify(self) -> None:
        self.derive("dummy_password", "dummy_principal")


def admin_credential_scheme() -> AdaptiveHashScheme:
    return AdaptiveHashScheme(rounds=ApplicationConfig.BCRYPT_ROUNDS)


def legacy_admin_credential_scheme() -> DeterministicDerivationScheme:
    """Admin hashes provisioned before bcrypt; salt is email + admin salt"""
    return DeterministicDerivationScheme(
        application_salt=ApplicationConfig.ADMIN_LEGACY_PASSWORD_SALT,
        iterations=ApplicationConfig.PBKDF2_ITERATIONS,
    )


def member_credential_scheme() -> DeterministicDerivationScheme:
    return DeterministicDerivationScheme(
        application_salt=ApplicationConfig.MEMBER_PASSWORD_SALT,
        iterations=ApplicationConfig.PBKDF2_ITERATIONS,
    )
