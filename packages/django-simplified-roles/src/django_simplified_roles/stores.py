"""Role/capability stores backing the role catalog.

A store offers single-key reads and writes of role definitions and of
named boolean markers. Writes are durable before the call returns.

- DatabaseRoleStore: Django ORM (RoleDefinition, MigrationMarker)
- MemoryRoleStore: dict-backed, for pure unit use and tooling
"""

import contextlib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional

from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction
from django.utils import translation
from django.utils.translation import gettext

from django_simplified_roles.exceptions import RoleStoreUnavailable


@dataclass(frozen=True)
class RoleRecord:
    """A role identity with its display name and capability set.

    Lazy names are kept as their untranslated text; display_name
    translates on read.
    """

    identity: str
    name: str
    capabilities: frozenset = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, 'identity', str(self.identity))
        with translation.override(None):
            object.__setattr__(self, 'name', str(self.name))
        object.__setattr__(self, 'capabilities', frozenset(self.capabilities))

    @property
    def display_name(self) -> str:
        """The name translated into the active language."""
        return gettext(self.name)

    def renamed(self, name: str) -> 'RoleRecord':
        return replace(self, name=name)

    def with_capabilities(self, capabilities: Iterable[str]) -> 'RoleRecord':
        return replace(self, capabilities=self.capabilities | frozenset(capabilities))


class RoleStore(ABC):
    """Abstract base class for role/capability stores."""

    # True if atomic() rolls back every write of a failed block
    transactional = False

    @abstractmethod
    def get_role(self, identity: str) -> Optional[RoleRecord]:
        """Return the stored role, or None if it is not defined."""
        raise NotImplementedError

    @abstractmethod
    def list_roles(self) -> List[RoleRecord]:
        raise NotImplementedError

    @abstractmethod
    def save_role(self, role: RoleRecord) -> None:
        """Create or replace the definition of role.identity."""
        raise NotImplementedError

    @abstractmethod
    def delete_role(self, identity: str) -> bool:
        """Delete a role definition. Returns False if it did not exist."""
        raise NotImplementedError

    @abstractmethod
    def get_flag(self, name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def set_flag(self, name: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_flag(self, name: str) -> bool:
        raise NotImplementedError

    def atomic(self):
        """Context manager grouping several writes.

        Stores without transactions still run the writes in sequence.
        """
        return contextlib.nullcontext()


class MemoryRoleStore(RoleStore):
    """Dict-backed store.

    Usage:
        store = MemoryRoleStore()
        catalog = RoleCatalog(store=store)
        catalog.install()
    """

    def __init__(self, roles: Iterable[RoleRecord] = (), flags: Iterable[str] = ()):
        self.roles: Dict[str, RoleRecord] = {role.identity: role for role in roles}
        self.flags = set(flags)

    def get_role(self, identity):
        return self.roles.get(str(identity))

    def list_roles(self):
        return [self.roles[identity] for identity in sorted(self.roles)]

    def save_role(self, role):
        self.roles[role.identity] = role

    def delete_role(self, identity):
        return self.roles.pop(str(identity), None) is not None

    def get_flag(self, name):
        return name in self.flags

    def set_flag(self, name):
        self.flags.add(name)

    def delete_flag(self, name):
        if name in self.flags:
            self.flags.discard(name)
            return True
        return False


class DatabaseRoleStore(RoleStore):
    """Store backed by the RoleDefinition and MigrationMarker models.

    Database errors are raised as RoleStoreUnavailable.
    """

    transactional = True

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def get_role(self, identity):
        from django_simplified_roles.models import RoleDefinition

        try:
            row = RoleDefinition.objects.using(self.using).filter(identity=str(identity)).first()
        except DatabaseError as e:
            raise RoleStoreUnavailable('read', str(identity)) from e
        return self._to_record(row) if row else None

    def list_roles(self):
        from django_simplified_roles.models import RoleDefinition

        try:
            return [self._to_record(row) for row in RoleDefinition.objects.using(self.using).order_by('identity')]
        except DatabaseError as e:
            raise RoleStoreUnavailable('list') from e

    def save_role(self, role):
        from django_simplified_roles.models import RoleDefinition

        try:
            RoleDefinition.objects.using(self.using).update_or_create(
                identity=role.identity,
                defaults={
                    'name': role.name,
                    'capabilities': sorted(role.capabilities),
                },
            )
        except DatabaseError as e:
            raise RoleStoreUnavailable('write', role.identity) from e

    def delete_role(self, identity):
        from django_simplified_roles.models import RoleDefinition

        try:
            deleted, _ = RoleDefinition.objects.using(self.using).filter(identity=str(identity)).delete()
        except DatabaseError as e:
            raise RoleStoreUnavailable('delete', str(identity)) from e
        return deleted > 0

    def get_flag(self, name):
        from django_simplified_roles.models import MigrationMarker

        try:
            return MigrationMarker.objects.using(self.using).filter(name=name).exists()
        except DatabaseError as e:
            raise RoleStoreUnavailable('read', name) from e

    def set_flag(self, name):
        from django_simplified_roles.models import MigrationMarker

        try:
            MigrationMarker.objects.using(self.using).get_or_create(name=name)
        except DatabaseError as e:
            raise RoleStoreUnavailable('write', name) from e

    def delete_flag(self, name):
        from django_simplified_roles.models import MigrationMarker

        try:
            deleted, _ = MigrationMarker.objects.using(self.using).filter(name=name).delete()
        except DatabaseError as e:
            raise RoleStoreUnavailable('delete', name) from e
        return deleted > 0

    def atomic(self):
        return transaction.atomic(using=self.using)

    @staticmethod
    def _to_record(row) -> RoleRecord:
        return RoleRecord(
            identity=row.identity,
            name=row.name,
            capabilities=row.capabilities or (),
        )
