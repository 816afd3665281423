"""
ShadowMesh Domain Entities

Credential records and the audit log.
Each entity in its own file for better maintainability.
"""

from .enums import PrincipalType, TokenStage
from .admin_account import AdminAccount
from .member import Member
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "PrincipalType",
    "TokenStage",
    # Entities
    "AdminAccount",
    "Member",
    "AuditEvent",
]
