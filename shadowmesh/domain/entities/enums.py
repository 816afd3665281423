"""
ShadowMesh Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class PrincipalType(str, Enum):
    """Class of principal owning a credential record"""

    admin = "admin"
    member = "member"


class TokenStage(str, Enum):
    """How far an admin has progressed through login"""

    password = "password"  # password verified, 2FA still pending
    full = "full"
