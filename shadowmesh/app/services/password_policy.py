import re
from dataclasses import dataclass

from shadowmesh.libs.result import Error, Result, Return

SPECIAL_CHARACTERS = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")


@dataclass(frozen=True)
class PasswordPolicy:
    """Minimum length plus one of each: upper, lower, digit, special"""

    min_length: int

    def validate(self, password: str) -> Result[None]:
        if len(password) < self.min_length:
            return _weak(f"Password must be at least {self.min_length} characters long.")
        if not re.search(r"[A-Z]", password):
            return _weak("Password must contain at least one uppercase letter.")
        if not re.search(r"[a-z]", password):
            return _weak("Password must contain at least one lowercase letter.")
        if not re.search(r"[0-9]", password):
            return _weak("Password must contain at least one number.")
        if not SPECIAL_CHARACTERS.search(password):
            return _weak("Password must contain at least one special character.")
        return Return.ok(None)


def _weak(message: str) -> Result[None]:
    return Return.err(Error("WEAK_PASSWORD", message))


ADMIN_PASSWORD_POLICY = PasswordPolicy(min_length=12)
MEMBER_PASSWORD_POLICY = PasswordPolicy(min_length=8)
