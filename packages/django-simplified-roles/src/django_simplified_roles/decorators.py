"""
Decorators for function-based views.

Usage:
    @require_management_action('edit_user', target_kwarg='user_id')
    def user_edit(request, user_id):
        ...

    @require_capability('list_users')
    def user_list(request):
        ...
"""

from functools import wraps

from django.core.exceptions import PermissionDenied

from django_simplified_roles.capabilities import user_has_capability
from django_simplified_roles.resolver import is_action_allowed


def require_management_action(action: str, target_kwarg: str = 'user_id'):
    """Decorator to require a user-management action on the target user.

    The target user id is read from the view kwarg named target_kwarg.
    A missing kwarg means "no target", which denies edit_user, remove_user
    and promote_user.

    Args:
        action: The management action (e.g., 'edit_user', 'delete_user')
        target_kwarg: Name of the URL kwarg carrying the target user id

    Raises:
        PermissionDenied: If the action is not allowed.

    Examples:
        @require_management_action('delete_user')
        def user_delete(request, user_id):
            # Staff can never delete a Developer account
            ...
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                raise PermissionDenied('Authentication required')

            target_id = kwargs.get(target_kwarg)
            if not is_action_allowed(request.user, action, target_id):
                raise PermissionDenied(f'Permission denied: {action}')

            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator


def require_capability(capability: str):
    """Decorator to require a capability token (e.g., 'list_users').

    Raises:
        PermissionDenied: If the user lacks the capability.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                raise PermissionDenied('Authentication required')

            if not user_has_capability(request.user, capability):
                raise PermissionDenied(f'Permission denied: {capability}')

            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator
