"""
Capability resolver - authorization decisions for user-management actions.

The decision core is map_management_capabilities(), a pure function over
the capability sets of the actor and the target. It only ever appends
DO_NOT_ALLOW to the capabilities an action requires; it never removes or
widens anything.

Rules:
- edit_user, remove_user, promote_user:
    target is the actor          -> unchanged
    no target                    -> deny
    target is an administrator   -> deny unless the actor is one too
- delete_user, delete_users:
    no target                    -> unchanged
    target is an administrator   -> deny unless the actor is one too
  (deleting oneself is not special-cased)
- any other action               -> unchanged
"""

from typing import Collection, Iterable, List, Mapping, Optional

from django_simplified_roles.capabilities import (
    get_capabilities_for_user_id,
    get_user_capabilities,
)
from django_simplified_roles.defaults import (
    ACTION_CAPABILITIES,
    ADMINISTRATOR_CAPABILITY,
    DO_NOT_ALLOW,
    SELF_EDIT_CAPABILITIES,
    ManagementAction,
)

SELF_EXEMPT_ACTIONS = frozenset({
    ManagementAction.EDIT_USER,
    ManagementAction.REMOVE_USER,
    ManagementAction.PROMOTE_USER,
})

DELETE_ACTIONS = frozenset({
    ManagementAction.DELETE_USER,
    ManagementAction.DELETE_USERS,
})


def _same_user(a, b) -> bool:
    return str(a) == str(b)


def map_management_capabilities(
    caps: Iterable[str],
    action: str,
    actor_id,
    target_id,
    *,
    actor_capabilities: Collection[str],
    target_capabilities: Optional[Collection[str]] = None,
) -> List[str]:
    """Narrow the capabilities required for a management action.

    Args:
        caps: Capabilities the platform already requires for the action
        action: The action being checked (e.g. 'edit_user')
        actor_id: Id of the acting user
        target_id: Id of the user acted upon, or None
        actor_capabilities: Capabilities held by the actor
        target_capabilities: Capabilities held by the target (None = none)

    Returns:
        list[str]: caps, with DO_NOT_ALLOW appended when the action is denied

    Examples:
        >>> map_management_capabilities(
        ...     ['edit_users'], 'edit_user', 2, 1,
        ...     actor_capabilities={'editor', 'edit_users'},
        ...     target_capabilities={'administrator'},
        ... )
        ['edit_users', 'do_not_allow']
    """
    caps = list(caps)
    target_capabilities = target_capabilities or ()

    if action in SELF_EXEMPT_ACTIONS:
        if target_id is not None and _same_user(target_id, actor_id):
            return caps
        if target_id is None:
            caps.append(DO_NOT_ALLOW)
            return caps
    elif action in DELETE_ACTIONS:
        if target_id is None:
            return caps
    else:
        return caps

    if ADMINISTRATOR_CAPABILITY in target_capabilities and ADMINISTRATOR_CAPABILITY not in actor_capabilities:
        caps.append(DO_NOT_ALLOW)
    return caps


def filter_editable_roles(roles: Mapping, actor_capabilities: Collection[str]) -> dict:
    """Remove 'administrator' from assignable roles unless the actor is an administrator.

    Args:
        roles: Mapping of role identity -> role (any value)
        actor_capabilities: Capabilities held by the actor

    Returns:
        dict: A new mapping; the input is not modified
    """
    editable = dict(roles)
    if ADMINISTRATOR_CAPABILITY not in actor_capabilities:
        editable.pop(ADMINISTRATOR_CAPABILITY, None)
    return editable


def base_capabilities(action: str, actor_id=None, target_id=None) -> List[str]:
    """Primitive capabilities an action requires before narrowing."""
    if action == ManagementAction.EDIT_USER and target_id is not None and _same_user(target_id, actor_id):
        return list(SELF_EDIT_CAPABILITIES)
    return list(ACTION_CAPABILITIES.get(action, (action,)))


def resolve_required_capabilities(actor, action: str, target_id=None, caps=None, catalog=None) -> List[str]:
    """Load actor and target capabilities and narrow the required capabilities.

    Args:
        actor: The acting user
        action: Management action
        target_id: Id of the user acted upon, or None
        caps: Required capabilities to narrow (defaults to base_capabilities())
        catalog: RoleCatalog to resolve roles with

    Returns:
        list[str]: Required capabilities, possibly including DO_NOT_ALLOW
    """
    actor_id = getattr(actor, 'pk', None)
    if caps is None:
        caps = base_capabilities(action, actor_id, target_id)

    target_capabilities = None
    if target_id is not None and action in (SELF_EXEMPT_ACTIONS | DELETE_ACTIONS):
        target_capabilities = get_capabilities_for_user_id(target_id, catalog=catalog)

    return map_management_capabilities(
        caps,
        action,
        actor_id,
        target_id,
        actor_capabilities=get_user_capabilities(actor, catalog=catalog),
        target_capabilities=target_capabilities,
    )


def is_action_allowed(actor, action: str, target_id=None, catalog=None) -> bool:
    """Decide whether actor may perform a management action on target_id.

    Denied if the narrowed capabilities contain DO_NOT_ALLOW, otherwise the
    actor must hold every remaining capability.

    Examples:
        >>> is_action_allowed(staff_member, 'delete_user', developer.pk)
        False

        >>> is_action_allowed(developer, 'delete_user', staff_member.pk)
        True
    """
    required = resolve_required_capabilities(actor, action, target_id, catalog=catalog)
    if DO_NOT_ALLOW in required:
        return False
    held = get_user_capabilities(actor, catalog=catalog)
    return all(cap in held for cap in required)


def get_editable_roles(actor, catalog=None) -> dict:
    """Get the active roles actor may assign to others.

    Returns:
        dict: identity -> RoleRecord
    """
    if catalog is None:
        from django_simplified_roles.catalog import RoleCatalog

        catalog = RoleCatalog()
    return filter_editable_roles(
        catalog.active_roles(),
        get_user_capabilities(actor, catalog=catalog),
    )
