"""Role capabilities.

All role checks go through these helpers instead of comparing role strings
in handlers.
"""

from typing import Optional

from gymnasaas.db.models import UserRole

# Higher rank = more privilege. Athletes and parents share the lowest rank.
ROLE_RANK: dict[UserRole, int] = {
    UserRole.SUPER_ADMIN: 50,
    UserRole.ADMIN: 40,
    UserRole.OWNER: 30,
    UserRole.COACH: 20,
    UserRole.ATHLETE: 10,
    UserRole.PARENT: 10,
}


def parse_role(value: "str | UserRole | None") -> Optional[UserRole]:
    if isinstance(value, UserRole):
        return value
    try:
        return UserRole((value or "").strip().lower())
    except ValueError:
        return None


def satisfies(role: "str | UserRole | None", required: "str | UserRole | None") -> bool:
    """Return True if ``role`` is at least as privileged as ``required``.

    A missing requirement is always satisfied; an unknown role never
    satisfies a requirement.
    """
    required_role = parse_role(required)
    if required_role is None:
        return True
    actual = parse_role(role)
    if actual is None:
        return False
    return ROLE_RANK[actual] >= ROLE_RANK[required_role]


def is_super_admin(role: "str | UserRole | None") -> bool:
    return parse_role(role) == UserRole.SUPER_ADMIN


def is_admin_capable(role: "str | UserRole | None") -> bool:
    """Admins and super admins may act across tenants."""
    return parse_role(role) in (UserRole.ADMIN, UserRole.SUPER_ADMIN)
