"""
Role catalog - installs and restores the role set.

Two canonical states exist:
- Reduced: administrator ("Developer"), editor ("Staff"), subscriber ("Basic User")
- Default: the five factory roles with their factory names and capabilities

Lifecycle:
    catalog = RoleCatalog()
    catalog.install()                    # system start (after migrate)
    catalog.restore_default_role_set()   # deactivation / uninstall

Restoring sets a deactivation marker that keeps the post_migrate install
from reducing the roles again. An explicit install clears it.

Every operation is idempotent and safe to run again after a failure.
"""

import logging
from typing import Dict, Optional

from django_simplified_roles import markers
from django_simplified_roles.conf import get_grant_marker, get_reduced_display_names
from django_simplified_roles.defaults import (
    DEACTIVATED_MARKER,
    DEFAULT_CAPABILITIES,
    DEFAULT_DISPLAY_NAMES,
    EDITOR_MANAGEMENT_CAPABILITIES,
    REMOVED_ROLES,
    ROLE_ORDER,
    RoleIdentity,
)
from django_simplified_roles.exceptions import RoleRestoreError, RoleStoreUnavailable
from django_simplified_roles.stores import DatabaseRoleStore, RoleRecord, RoleStore

logger = logging.getLogger(__name__)


def default_role(identity: str) -> RoleRecord:
    """Build the factory definition of a role."""
    identity = RoleIdentity(identity)
    return RoleRecord(
        identity=identity,
        name=DEFAULT_DISPLAY_NAMES[identity],
        capabilities=DEFAULT_CAPABILITIES[identity],
    )


class RoleCatalog:
    """Explicit service over the active role set.

    Args:
        store: RoleStore to read and write (DatabaseRoleStore by default)
        grant_marker: Marker name gating the editor grant
            (SIMPLIFIED_ROLES_GRANT_MARKER by default)
    """

    def __init__(self, store: Optional[RoleStore] = None, grant_marker: Optional[str] = None):
        self.store = store if store is not None else DatabaseRoleStore()
        self.grant_marker = grant_marker or get_grant_marker()

    def get_role(self, identity: str) -> Optional[RoleRecord]:
        return self.store.get_role(identity)

    def active_roles(self) -> Dict[str, RoleRecord]:
        """Return the active role set as identity -> RoleRecord."""
        return {role.identity: role for role in self.store.list_roles()}

    def is_reduced(self) -> bool:
        """True if no removed role is present in the active set."""
        roles = self.active_roles()
        return bool(roles) and not any(identity in roles for identity in REMOVED_ROLES)

    def seed_default_roles(self) -> bool:
        """Install the factory role set into an empty store.

        Does nothing if any role is already defined.

        Returns:
            bool: True if the roles were seeded
        """
        if self.store.list_roles():
            return False

        with self.store.atomic():
            for identity in ROLE_ORDER:
                self.store.save_role(default_role(identity))
        logger.info("Seeded default role set")
        return True

    def apply_reduced_role_set(self) -> None:
        """Remove author and contributor, rename the remaining roles.

        Renaming only changes display names. Roles that are absent are
        neither removed nor created, so this can run on every start.
        """
        for identity in REMOVED_ROLES:
            if self.store.delete_role(identity):
                logger.info(f"Removed role '{identity}'")

        for identity, name in get_reduced_display_names().items():
            role = self.store.get_role(identity)
            if role is None:
                logger.debug(f"Role '{identity}' is not defined, not renaming")
                continue
            renamed = role.renamed(name)
            if renamed != role:
                self.store.save_role(renamed)
                logger.info(f"Renamed role '{identity}' to '{renamed.name}'")

    def grant_editor_management_capabilities(self) -> bool:
        """Give the editor role user-management capabilities, once.

        The grant marker is the only gate. If the marker cannot be
        persisted the grant runs again on the next call.

        Returns:
            bool: True if the grant was applied by this call

        Raises:
            RoleStoreUnavailable: If the marker or the editor role cannot be read
        """
        return markers.run_once(self.grant_marker, self._add_editor_capabilities, store=self.store)

    def _add_editor_capabilities(self) -> bool:
        editor = self.store.get_role(RoleIdentity.EDITOR)
        if editor is None:
            logger.warning("Editor role is not defined; management capabilities not granted")
            return False

        missing = EDITOR_MANAGEMENT_CAPABILITIES - editor.capabilities
        if missing:
            self.store.save_role(editor.with_capabilities(missing))
        logger.info(f"Granted editor capabilities: {', '.join(sorted(missing)) or 'none missing'}")
        return True

    def restore_default_role_set(self) -> None:
        """Rewrite all five roles to their factory definitions and deactivate.

        Clears the grant marker and sets the deactivation marker, so the
        next post_migrate install leaves the default set in place.

        Raises:
            RoleRestoreError: If a rewrite fails; retrying repeats all five rewrites
            RoleStoreUnavailable: If a marker cannot be written
        """
        completed = []
        with self.store.atomic():
            for identity in ROLE_ORDER:
                try:
                    self.store.delete_role(identity)
                    self.store.save_role(default_role(identity))
                except RoleStoreUnavailable as e:
                    logger.exception(f"Restoring role '{identity}' failed")
                    # A transactional store rolls back the earlier rewrites
                    kept = () if self.store.transactional else completed
                    raise RoleRestoreError(str(identity), kept) from e
                completed.append(str(identity))

            markers.clear(self.grant_marker, store=self.store)
            markers.mark_applied(DEACTIVATED_MARKER, store=self.store)
        logger.info("Restored default role set")

    def is_deactivated(self) -> bool:
        """True if the default set was restored and no install has run since."""
        return markers.is_applied(DEACTIVATED_MARKER, store=self.store)

    def install(self) -> bool:
        """Seed (if empty), reduce and grant.

        Clears the deactivation marker left by restore_default_role_set().

        Returns:
            bool: True if the editor grant was applied by this call
        """
        if markers.clear(DEACTIVATED_MARKER, store=self.store):
            logger.info("Reactivating simplified role set")
        self.seed_default_roles()
        self.apply_reduced_role_set()
        return self.grant_editor_management_capabilities()
