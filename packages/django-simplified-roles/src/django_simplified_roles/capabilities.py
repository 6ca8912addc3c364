"""
User capability lookup.

A user's capabilities are the capabilities of their assigned role plus the
role identity itself, so a user with the 'administrator' role holds the
'administrator' capability. Active superusers hold every capability.
Anonymous and inactive users hold none.

All lookups are read-only.
"""

import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError

from django_simplified_roles.defaults import ADMINISTRATOR_CAPABILITY, DEFAULT_CAPABILITIES

logger = logging.getLogger(__name__)

ALL_CAPABILITIES = frozenset().union(*DEFAULT_CAPABILITIES.values()) | {ADMINISTRATOR_CAPABILITY}


def _catalog(catalog):
    if catalog is not None:
        return catalog
    from django_simplified_roles.catalog import RoleCatalog

    return RoleCatalog()


def get_user_role(user) -> Optional[str]:
    """Return the role identity assigned to user, or None."""
    from django_simplified_roles.models import UserRole

    if user is None or user.pk is None:
        return None
    return UserRole.objects.filter(user_id=user.pk).values_list('role', flat=True).first()


def get_user_capabilities(user, catalog=None) -> frozenset:
    """Get the capability set of a user.

    Args:
        user: A user instance, AnonymousUser or None
        catalog: RoleCatalog to resolve roles with (database by default)

    Returns:
        frozenset[str]: Capability tokens held by the user

    Examples:
        >>> get_user_capabilities(staff_member)
        frozenset({'editor', 'read', 'edit_users', ...})

        >>> get_user_capabilities(AnonymousUser())
        frozenset()
    """
    if user is None or not getattr(user, 'is_authenticated', False):
        return frozenset()
    if not getattr(user, 'is_active', True):
        return frozenset()
    if getattr(user, 'is_superuser', False):
        return ALL_CAPABILITIES

    identity = get_user_role(user)
    if identity is None:
        return frozenset()

    role = _catalog(catalog).get_role(identity)
    if role is None:
        # Assigned to a role that is not in the active set
        return frozenset({identity})
    return role.capabilities | {identity}


def user_has_capability(user, capability: str, catalog=None) -> bool:
    """Check whether user holds the named capability."""
    return capability in get_user_capabilities(user, catalog=catalog)


def get_capabilities_for_user_id(user_id, catalog=None) -> frozenset:
    """Get the capability set of the user with the given id.

    Unknown or malformed ids resolve to an empty capability set.
    """
    User = get_user_model()
    try:
        user = User.objects.filter(pk=user_id).first()
    except (TypeError, ValueError, ValidationError):
        logger.debug(f"Malformed user id {user_id!r}")
        return frozenset()
    if user is None:
        return frozenset()
    return get_user_capabilities(user, catalog=catalog)
