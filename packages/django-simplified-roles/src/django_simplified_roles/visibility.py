"""
Visibility filter - hides administrator accounts from non-administrators.

Both helpers leave the input untouched for actors holding
'manage_options'. Everyone else never sees administrator counts,
the administrator listing entry or administrator accounts.

Usage:
    views = adjust_user_views(
        {'all': 'All (10)', 'administrator': 'Administrators (3)', 'editor': 'Staff (7)'},
        request.user,
    )
    # {'all': 'All (7)', 'editor': 'Staff (7)'}

    users = filter_user_queryset(User.objects.filter(is_active=True), request.user)
"""

import re
from typing import Mapping

from django.db.models import Q

from django_simplified_roles.capabilities import user_has_capability
from django_simplified_roles.defaults import (
    ADMINISTRATOR_CAPABILITY,
    ALL_USERS_VIEW,
    MANAGE_OPTIONS_CAPABILITY,
    RoleIdentity,
)

COUNT_RE = re.compile(r'\(([0-9]+)\)')


def parse_count(label) -> int:
    """Extract the parenthesized count from a listing label.

    Labels without a parseable count yield 0.

    Examples:
        >>> parse_count('Administrators <span class="count">(3)</span>')
        3
        >>> parse_count('Administrators')
        0
    """
    if not label:
        return 0
    match = COUNT_RE.search(str(label))
    return int(match.group(1)) if match else 0


def hide_administrator_count(views: Mapping[str, str]) -> dict:
    """Remove the administrator entry and subtract its count from 'all'.

    A missing administrator entry counts as zero administrators.
    The adjusted total never goes below zero.
    """
    views = dict(views)
    admin_label = views.pop(ADMINISTRATOR_CAPABILITY, None)

    if ALL_USERS_VIEW in views:
        total = parse_count(views[ALL_USERS_VIEW])
        adjusted = max(total - parse_count(admin_label), 0)
        views[ALL_USERS_VIEW] = COUNT_RE.sub(f'({adjusted})', str(views[ALL_USERS_VIEW]))

    return views


def adjust_user_views(views: Mapping[str, str], actor, catalog=None) -> dict:
    """Adjust user listing labels for the given actor.

    Args:
        views: Mapping of role identity (plus 'all') -> label with embedded count
        actor: The user viewing the listing
        catalog: RoleCatalog to resolve roles with

    Returns:
        dict: The labels to display
    """
    if user_has_capability(actor, MANAGE_OPTIONS_CAPABILITY, catalog=catalog):
        return dict(views)
    return hide_administrator_count(views)


def filter_user_queryset(queryset, actor, catalog=None):
    """Exclude administrators from a user queryset unless actor holds 'manage_options'.

    Existing filters on the queryset are kept.
    """
    if user_has_capability(actor, MANAGE_OPTIONS_CAPABILITY, catalog=catalog):
        return queryset

    condition = Q(simplified_role__role=RoleIdentity.ADMINISTRATOR)
    field_names = {f.name for f in queryset.model._meta.get_fields()}
    if 'is_superuser' in field_names:
        condition |= Q(is_superuser=True)
    return queryset.exclude(condition)
