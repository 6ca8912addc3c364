"""Migration markers: named boolean records gating one-shot upgrades.

Usage:
    from django_simplified_roles.markers import run_once

    def grant_reports_access():
        ...

    run_once('myproject_reports_access_once', grant_reports_access)

The marker is written only after the operation returns. If the operation
raises, or the marker cannot be persisted, the marker stays unset and the
operation runs again on the next call, so operations must be idempotent.
"""

import logging
from typing import Callable, Optional

from django_simplified_roles.exceptions import RoleStoreUnavailable
from django_simplified_roles.stores import DatabaseRoleStore, RoleStore

logger = logging.getLogger(__name__)


def _store(store: Optional[RoleStore]) -> RoleStore:
    return store if store is not None else DatabaseRoleStore()


def is_applied(name: str, store: Optional[RoleStore] = None) -> bool:
    """Check whether the named marker has been applied."""
    return _store(store).get_flag(name)


def mark_applied(name: str, store: Optional[RoleStore] = None) -> None:
    _store(store).set_flag(name)


def clear(name: str, store: Optional[RoleStore] = None) -> bool:
    """Remove the marker so the guarded operation runs again.

    Returns:
        bool: True if a marker was removed
    """
    return _store(store).delete_flag(name)


def run_once(name: str, operation: Callable[[], object], store: Optional[RoleStore] = None) -> bool:
    """Run operation unless the named marker is applied, then apply it.

    Args:
        name: Marker key
        operation: Idempotent callable; returning False means "not done yet"
            and leaves the marker unset
        store: Store holding the marker (database by default)

    Returns:
        bool: True if the operation ran and the marker was persisted

    Raises:
        RoleStoreUnavailable: If the marker cannot be read
    """
    store = _store(store)
    if store.get_flag(name):
        logger.debug(f"Marker '{name}' already applied, skipping")
        return False

    if operation() is False:
        return False

    try:
        store.set_flag(name)
    except RoleStoreUnavailable:
        logger.exception(f"Could not persist marker '{name}'; operation will be re-applied on next run")
        return False

    logger.info(f"Marker '{name}' applied")
    return True
