"""
Role privilege ordering.

Higher level means more privilege. A user may see and assign only roles at
or below their own level.
"""

from typing import List

from dispatch_engine.app.models.enums import UserRole
from dispatch_engine.app.services.dispatch_lifecycle import as_role


ROLE_HIERARCHY = {
    UserRole.ROOT: 9,
    UserRole.ADMINISTRATOR: 8,
    UserRole.FORWARDER_ADMIN: 7,
    UserRole.CARRIER_ADMIN: 6,
    UserRole.FORWARDER_RESELLER: 5,
    UserRole.AGENCY_SUPERVISOR: 4,
    UserRole.AGENCY_ADMIN: 3,
    UserRole.AGENCY_SALES: 2,
    UserRole.MESSENGER: 1,
    UserRole.USER: 0,
}

# Unknown roles rank below USER: they manage nothing
UNKNOWN_ROLE_LEVEL = -1


def get_role_level(role: UserRole) -> int:
    """Numeric privilege level of a role (UNKNOWN_ROLE_LEVEL for unrecognized values)."""
    role = as_role(role)
    if role is None:
        return UNKNOWN_ROLE_LEVEL
    return ROLE_HIERARCHY[role]


def can_manage_role(user_role: UserRole, target_role: UserRole) -> bool:
    """Check if a user with user_role may assign or manage target_role."""
    user_level = get_role_level(user_role)
    if user_level == UNKNOWN_ROLE_LEVEL:
        return False
    return user_level >= get_role_level(target_role)


def get_roles_equal_or_below(user_role: UserRole) -> List[UserRole]:
    """
    Roles a user can see or assign.
    
    Args:
        user_role: The current user's role
    
    Returns:
        Roles at or below user_role, most privileged first
    """
    user_level = get_role_level(user_role)
    
    roles = [role for role, level in ROLE_HIERARCHY.items() if level <= user_level]
    return sorted(roles, key=lambda role: ROLE_HIERARCHY[role], reverse=True)
