"""
Authorization backend answering management actions and capability tokens.

Add it to AUTHENTICATION_BACKENDS next to ModelBackend:

    AUTHENTICATION_BACKENDS = [
        'django_simplified_roles.backends.SimplifiedRolesBackend',
        'django.contrib.auth.backends.ModelBackend',
    ]

Then:
    request.user.has_perm('edit_user', target_user)
    request.user.has_perm('edit_user', target_user.pk)
    request.user.has_perm('list_users')

A denied management action raises PermissionDenied, which stops Django
from asking any later backend, so other backends cannot widen it.
"""

from django.contrib.auth.backends import BaseBackend
from django.core.exceptions import PermissionDenied

from django_simplified_roles.capabilities import get_user_capabilities
from django_simplified_roles.defaults import DO_NOT_ALLOW, ManagementAction
from django_simplified_roles.resolver import resolve_required_capabilities


def _target_id(obj):
    if obj is None:
        return None
    return getattr(obj, 'pk', obj)


class SimplifiedRolesBackend(BaseBackend):
    """Permission-only backend; never authenticates anyone."""

    def authenticate(self, request, **kwargs):
        return None

    def has_perm(self, user_obj, perm, obj=None):
        if not getattr(user_obj, 'is_active', False):
            return False

        if perm in ManagementAction.values:
            required = resolve_required_capabilities(user_obj, perm, _target_id(obj))
            if DO_NOT_ALLOW in required:
                raise PermissionDenied(f'Permission denied: {perm}')
            held = get_user_capabilities(user_obj)
            return all(cap in held for cap in required)

        # App-qualified permissions belong to ModelBackend
        if '.' in perm:
            return False

        return perm in get_user_capabilities(user_obj)
