"""Configuration for django-simplified-roles."""

from django.conf import settings

from django_simplified_roles.defaults import (
    DEFAULT_GRANT_MARKER,
    REDUCED_DISPLAY_NAMES,
    RoleIdentity,
)
from django_simplified_roles.exceptions import SimplifiedRolesConfigError


def get_auto_install() -> bool:
    """Whether roles are installed automatically after `migrate`.

    Reads SIMPLIFIED_ROLES_AUTO_INSTALL from Django settings (default True).
    """
    return bool(getattr(settings, "SIMPLIFIED_ROLES_AUTO_INSTALL", True))


def get_grant_marker() -> str:
    """Get the marker name gating the one-time editor grant.

    Raises:
        SimplifiedRolesConfigError: If SIMPLIFIED_ROLES_GRANT_MARKER is blank
    """
    marker = getattr(settings, "SIMPLIFIED_ROLES_GRANT_MARKER", DEFAULT_GRANT_MARKER)
    if not marker:
        raise SimplifiedRolesConfigError(
            "SIMPLIFIED_ROLES_GRANT_MARKER must be a non-empty string."
        )
    return marker


def get_reduced_display_names() -> dict:
    """Get the display names applied by the reduced role set.

    SIMPLIFIED_ROLES_DISPLAY_NAMES overrides individual entries, e.g.
    {'editor': 'Team'}. Only the roles that survive the reduction
    can be renamed.

    Raises:
        SimplifiedRolesConfigError: If an override names an unknown or removed role
    """
    names = dict(REDUCED_DISPLAY_NAMES)
    overrides = getattr(settings, "SIMPLIFIED_ROLES_DISPLAY_NAMES", None) or {}
    for identity, name in overrides.items():
        if identity not in names:
            raise SimplifiedRolesConfigError(
                f"SIMPLIFIED_ROLES_DISPLAY_NAMES has unknown role '{identity}'. "
                f"Expected one of: {', '.join(sorted(str(i) for i in names))}"
            )
        names[RoleIdentity(identity)] = name
    return names
