"""
User and workspace (organization) models.
"""

from datetime import datetime, timezone
from typing import Optional

from .base import ApiDateTime, LuidModel, compact_count, initials_of

LOW_CREDITS_THRESHOLD = 10


class Organization(LuidModel):
    """A workspace. The backend calls these organizations."""

    id: str
    name: str
    description: Optional[str] = None
    logo: Optional[str] = None
    credits: Optional[int] = None
    owner_id: str
    member_count: Optional[int] = None
    credits_used: Optional[int] = None
    generations_count: Optional[int] = None
    role: Optional[str] = None
    created_at: ApiDateTime
    updated_at: ApiDateTime

    @property
    def initials(self) -> str:
        return initials_of(self.name)

    @property
    def credits_display(self) -> str:
        return compact_count(self.credits or 0)


class User(LuidModel):
    """Signed-in account with its credit balance."""

    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = None
    credits: int = 0
    organization_id: Optional[str] = None
    cognito_id: Optional[str] = None
    email_verified: bool = False
    created_at: ApiDateTime
    updated_at: ApiDateTime
    organization: Optional[Organization] = None

    @property
    def full_name(self) -> str:
        """Display name: explicit name, then first/last, then the email's local part."""
        if self.name:
            return self.name
        combined = f"{self.first_name or ''} {self.last_name or ''}".strip()
        if combined:
            return combined
        return self.email.split("@")[0] or "User"

    @property
    def initials(self) -> str:
        return initials_of(self.full_name)

    @property
    def has_low_credits(self) -> bool:
        return self.credits < LOW_CREDITS_THRESHOLD

    @property
    def credits_display(self) -> str:
        return compact_count(self.credits)


class MemberUser(LuidModel):
    """User fields joined onto a membership record."""

    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def full_name(self) -> str:
        if self.first_name is not None and self.last_name is not None:
            return f"{self.first_name} {self.last_name}"
        return self.first_name or self.last_name or self.email

    @property
    def initials(self) -> str:
        if self.first_name and self.last_name:
            return (self.first_name[:1] + self.last_name[:1]).upper()
        return self.email[:2].upper()


MANAGER_ROLES = ("owner", "admin")


class OrganizationMember(LuidModel):
    id: str
    organization_id: str
    user_id: str
    role: str
    joined_at: ApiDateTime
    user: Optional[MemberUser] = None

    @property
    def role_display_name(self) -> str:
        return self.role.capitalize()

    @property
    def can_manage_members(self) -> bool:
        return self.role in MANAGER_ROLES

    @property
    def can_manage_credits(self) -> bool:
        return self.role in MANAGER_ROLES


class OrganizationInvitation(LuidModel):
    """Pending, accepted or revoked invitation to join a workspace."""

    id: str
    organization_id: str
    email: str
    role: str
    token: str
    status: str
    expires_at: ApiDateTime
    invited_by: str
    created_at: ApiDateTime
    organization: Optional[Organization] = None

    @property
    def is_expired(self) -> bool:
        return datetime.now(timezone.utc) > self.expires_at

    @property
    def is_pending(self) -> bool:
        return self.status == "pending" and not self.is_expired
