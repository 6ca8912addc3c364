"""Tests for the role catalog (reduce, grant, restore)."""

import pytest
from django.test import override_settings
from django.utils import translation
from django.utils.functional import lazy

from django_simplified_roles.catalog import RoleCatalog, default_role
from django_simplified_roles.defaults import (
    DEACTIVATED_MARKER,
    DEFAULT_CAPABILITIES,
    DEFAULT_GRANT_MARKER,
    EDITOR_MANAGEMENT_CAPABILITIES,
    ROLE_ORDER,
)
from django_simplified_roles.exceptions import RoleRestoreError, RoleStoreUnavailable
from django_simplified_roles.models import MigrationMarker, RoleDefinition
from django_simplified_roles.stores import MemoryRoleStore, RoleRecord


class CountingStore(MemoryRoleStore):
    """Memory store that counts marker writes."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.flag_writes = 0

    def set_flag(self, name):
        self.flag_writes += 1
        super().set_flag(name)


class FlakyFlagStore(MemoryRoleStore):
    """Memory store whose marker writes fail until healed."""

    healthy = False

    def set_flag(self, name):
        if not self.healthy:
            raise RoleStoreUnavailable('write', name)
        super().set_flag(name)


class FailingRoleStore(MemoryRoleStore):
    """Memory store that fails when saving one role."""

    fail_on = None

    def save_role(self, role):
        if role.identity == self.fail_on:
            raise RoleStoreUnavailable('write', role.identity)
        super().save_role(role)


def _snapshot(catalog):
    return {
        identity: (role.name, role.capabilities)
        for identity, role in catalog.active_roles().items()
    }


def _default_snapshot():
    return {
        str(identity): (default_role(identity).name, DEFAULT_CAPABILITIES[identity])
        for identity in ROLE_ORDER
    }


class TestDefaultTables:
    """Tests for the frozen factory tables."""

    def test_administrator_has_62_capabilities(self):
        assert len(DEFAULT_CAPABILITIES['administrator']) == 62

    def test_editor_has_34_capabilities(self):
        assert len(DEFAULT_CAPABILITIES['editor']) == 34

    def test_small_roles(self):
        assert len(DEFAULT_CAPABILITIES['author']) == 10
        assert len(DEFAULT_CAPABILITIES['contributor']) == 5
        assert DEFAULT_CAPABILITIES['subscriber'] == frozenset({'read', 'level_0'})

    def test_editor_lacks_user_management_by_default(self):
        assert not (EDITOR_MANAGEMENT_CAPABILITIES & DEFAULT_CAPABILITIES['editor'])

    def test_administrator_holds_manage_options(self):
        assert 'manage_options' in DEFAULT_CAPABILITIES['administrator']

    def test_default_role_names(self):
        assert default_role('administrator').name == 'Administrator'
        assert default_role('subscriber').name == 'Subscriber'


class TestSeedDefaultRoles:
    """Tests for RoleCatalog.seed_default_roles()."""

    def test_seeds_empty_store(self, memory_store):
        catalog = RoleCatalog(store=memory_store)

        assert catalog.seed_default_roles() is True
        assert _snapshot(catalog) == _default_snapshot()

    def test_does_not_touch_existing_roles(self):
        store = MemoryRoleStore(roles=[RoleRecord('subscriber', 'Member', {'read'})])
        catalog = RoleCatalog(store=store)

        assert catalog.seed_default_roles() is False
        assert list(catalog.active_roles()) == ['subscriber']
        assert catalog.get_role('subscriber').name == 'Member'


class TestApplyReducedRoleSet:
    """Tests for RoleCatalog.apply_reduced_role_set()."""

    def test_removes_author_and_contributor(self, memory_catalog):
        memory_catalog.apply_reduced_role_set()

        roles = memory_catalog.active_roles()
        assert set(roles) == {'administrator', 'editor', 'subscriber'}

    def test_renames_remaining_roles(self, memory_catalog):
        memory_catalog.apply_reduced_role_set()

        assert memory_catalog.get_role('subscriber').name == 'Basic User'
        assert memory_catalog.get_role('editor').name == 'Staff'
        assert memory_catalog.get_role('administrator').name == 'Developer'

    def test_renaming_keeps_capabilities(self, memory_catalog):
        memory_catalog.apply_reduced_role_set()

        for identity in ('administrator', 'editor', 'subscriber'):
            assert memory_catalog.get_role(identity).capabilities == DEFAULT_CAPABILITIES[identity]

    def test_twice_equals_once(self, memory_catalog):
        memory_catalog.apply_reduced_role_set()
        once = _snapshot(memory_catalog)

        memory_catalog.apply_reduced_role_set()
        assert _snapshot(memory_catalog) == once

    def test_absent_roles_are_not_created(self, memory_store):
        memory_store.save_role(default_role('subscriber'))
        catalog = RoleCatalog(store=memory_store)

        catalog.apply_reduced_role_set()

        assert list(catalog.active_roles()) == ['subscriber']
        assert catalog.is_reduced() is True

    def test_is_reduced(self, memory_catalog):
        assert memory_catalog.is_reduced() is False
        memory_catalog.apply_reduced_role_set()
        assert memory_catalog.is_reduced() is True

    @override_settings(SIMPLIFIED_ROLES_DISPLAY_NAMES={'editor': 'Toimittaja'})
    def test_display_name_override(self, memory_catalog):
        memory_catalog.apply_reduced_role_set()

        assert memory_catalog.get_role('editor').name == 'Toimittaja'
        assert memory_catalog.get_role('subscriber').name == 'Basic User'


class TestTranslatedNames:
    """Role names are stored untranslated and translated on read."""

    def test_lazy_name_stored_untranslated(self):
        name = lazy(lambda: translation.get_language() or 'untranslated', str)()

        with translation.override('de'):
            role = RoleRecord('editor', name)

        assert role.name == 'untranslated'

    def test_install_language_does_not_leak_into_store(self, memory_catalog):
        with translation.override('de'):
            memory_catalog.apply_reduced_role_set()

        assert memory_catalog.get_role('editor').name == 'Staff'

    def test_reapplying_in_another_language_does_not_rewrite(self, memory_catalog):
        memory_catalog.apply_reduced_role_set()
        first = memory_catalog.get_role('editor')

        with translation.override('fr'):
            memory_catalog.apply_reduced_role_set()

        assert memory_catalog.get_role('editor') is first

    def test_display_name_translates_on_read(self, monkeypatch):
        monkeypatch.setattr('django_simplified_roles.stores.gettext', lambda text: f'<{text}>')

        assert RoleRecord('editor', 'Staff').display_name == '<Staff>'


class TestGrantEditorManagementCapabilities:
    """Tests for RoleCatalog.grant_editor_management_capabilities()."""

    def test_adds_six_capabilities(self, memory_catalog):
        assert memory_catalog.grant_editor_management_capabilities() is True

        editor = memory_catalog.get_role('editor')
        assert EDITOR_MANAGEMENT_CAPABILITIES <= editor.capabilities
        assert editor.capabilities == DEFAULT_CAPABILITIES['editor'] | EDITOR_MANAGEMENT_CAPABILITIES

    def test_sets_marker(self, memory_catalog, memory_store):
        memory_catalog.grant_editor_management_capabilities()

        assert memory_store.get_flag(DEFAULT_GRANT_MARKER) is True

    def test_second_run_is_noop(self):
        store = CountingStore()
        catalog = RoleCatalog(store=store)
        catalog.seed_default_roles()

        assert catalog.grant_editor_management_capabilities() is True
        after_first = catalog.get_role('editor')

        assert catalog.grant_editor_management_capabilities() is False
        assert catalog.get_role('editor') == after_first
        assert store.flag_writes == 1

    def test_marker_is_the_only_gate(self, memory_catalog, memory_store):
        """An applied marker skips the grant even if capabilities are missing."""
        memory_store.set_flag(DEFAULT_GRANT_MARKER)

        assert memory_catalog.grant_editor_management_capabilities() is False
        assert not (EDITOR_MANAGEMENT_CAPABILITIES & memory_catalog.get_role('editor').capabilities)

    def test_missing_editor_leaves_marker_unset(self, memory_store):
        memory_store.save_role(default_role('subscriber'))
        catalog = RoleCatalog(store=memory_store)

        assert catalog.grant_editor_management_capabilities() is False
        assert memory_store.get_flag(DEFAULT_GRANT_MARKER) is False

    def test_failed_marker_write_retries_next_time(self):
        store = FlakyFlagStore()
        catalog = RoleCatalog(store=store)
        catalog.seed_default_roles()

        assert catalog.grant_editor_management_capabilities() is False
        assert store.get_flag(DEFAULT_GRANT_MARKER) is False
        granted_caps = catalog.get_role('editor').capabilities

        store.healthy = True
        assert catalog.grant_editor_management_capabilities() is True
        assert catalog.get_role('editor').capabilities == granted_caps
        assert store.get_flag(DEFAULT_GRANT_MARKER) is True

    def test_custom_marker_name(self, memory_store):
        catalog = RoleCatalog(store=memory_store, grant_marker='custom_once')
        catalog.seed_default_roles()
        catalog.grant_editor_management_capabilities()

        assert memory_store.get_flag('custom_once') is True
        assert memory_store.get_flag(DEFAULT_GRANT_MARKER) is False


class TestRestoreDefaultRoleSet:
    """Tests for RoleCatalog.restore_default_role_set()."""

    def test_restores_default_state(self, memory_catalog, memory_store):
        memory_catalog.install()

        memory_catalog.restore_default_role_set()

        assert _snapshot(memory_catalog) == _default_snapshot()
        assert memory_store.get_flag(DEFAULT_GRANT_MARKER) is False

    def test_restores_from_any_state(self):
        store = MemoryRoleStore(
            roles=[
                RoleRecord('editor', 'Custom', {'read', 'edit_users', 'something_else'}),
                RoleRecord('administrator', 'Root', set()),
            ],
            flags=[DEFAULT_GRANT_MARKER],
        )
        catalog = RoleCatalog(store=store)

        catalog.restore_default_role_set()

        assert _snapshot(catalog) == _default_snapshot()
        assert store.get_flag(DEFAULT_GRANT_MARKER) is False

    def test_reinstall_grants_again(self, memory_catalog):
        memory_catalog.install()
        memory_catalog.restore_default_role_set()

        assert memory_catalog.install() is True
        assert EDITOR_MANAGEMENT_CAPABILITIES <= memory_catalog.get_role('editor').capabilities

    def test_restore_deactivates(self, memory_catalog):
        memory_catalog.install()

        memory_catalog.restore_default_role_set()

        assert memory_catalog.is_deactivated() is True

    def test_install_reactivates(self, memory_catalog):
        memory_catalog.install()
        memory_catalog.restore_default_role_set()

        memory_catalog.install()

        assert memory_catalog.is_deactivated() is False
        assert memory_catalog.is_reduced() is True

    def test_partial_failure_is_reported_and_resumable(self):
        store = FailingRoleStore()
        catalog = RoleCatalog(store=store)
        catalog.seed_default_roles()
        catalog.install()
        store.fail_on = 'author'

        with pytest.raises(RoleRestoreError) as exc_info:
            catalog.restore_default_role_set()

        assert exc_info.value.failed_role == 'author'
        assert exc_info.value.completed_roles == ('administrator', 'editor')
        assert isinstance(exc_info.value.__cause__, RoleStoreUnavailable)
        assert store.get_flag(DEFAULT_GRANT_MARKER) is True
        assert store.get_flag(DEACTIVATED_MARKER) is False

        store.fail_on = None
        catalog.restore_default_role_set()

        assert _snapshot(catalog) == _default_snapshot()
        assert store.get_flag(DEFAULT_GRANT_MARKER) is False
        assert store.get_flag(DEACTIVATED_MARKER) is True


class TestInstall:
    """Tests for RoleCatalog.install()."""

    def test_install_on_empty_store(self, memory_store):
        catalog = RoleCatalog(store=memory_store)

        assert catalog.install() is True

        roles = catalog.active_roles()
        assert set(roles) == {'administrator', 'editor', 'subscriber'}
        assert roles['editor'].name == 'Staff'
        assert EDITOR_MANAGEMENT_CAPABILITIES <= roles['editor'].capabilities

    def test_install_twice(self, memory_store):
        catalog = RoleCatalog(store=memory_store)
        catalog.install()
        first = _snapshot(catalog)

        assert catalog.install() is False
        assert _snapshot(catalog) == first


@pytest.mark.django_db
class TestDatabaseCatalog:
    """The catalog against the database store."""

    def test_install_persists_rows(self):
        RoleCatalog().install()

        identities = set(RoleDefinition.objects.values_list('identity', flat=True))
        assert identities == {'administrator', 'editor', 'subscriber'}
        assert RoleDefinition.objects.get(identity='editor').name == 'Staff'
        assert MigrationMarker.objects.filter(name=DEFAULT_GRANT_MARKER).exists()

    def test_capabilities_stored_sorted(self):
        RoleCatalog().install()

        stored = RoleDefinition.objects.get(identity='subscriber').capabilities
        assert stored == ['level_0', 'read']

    def test_restore_round_trip(self):
        catalog = RoleCatalog()
        catalog.install()

        catalog.restore_default_role_set()

        assert RoleDefinition.objects.count() == 5
        assert _snapshot(catalog) == _default_snapshot()
        assert not MigrationMarker.objects.filter(name=DEFAULT_GRANT_MARKER).exists()
        assert MigrationMarker.objects.filter(name=DEACTIVATED_MARKER).exists()

    def test_restore_rolls_back_on_failure(self, monkeypatch):
        from django_simplified_roles.stores import DatabaseRoleStore

        catalog = RoleCatalog()
        catalog.install()
        before = _snapshot(catalog)

        original_save = DatabaseRoleStore.save_role

        def failing_save(self, role):
            if role.identity == 'contributor':
                raise RoleStoreUnavailable('write', role.identity)
            return original_save(self, role)

        monkeypatch.setattr(DatabaseRoleStore, 'save_role', failing_save)

        with pytest.raises(RoleRestoreError) as exc_info:
            catalog.restore_default_role_set()

        assert _snapshot(catalog) == before
        assert MigrationMarker.objects.filter(name=DEFAULT_GRANT_MARKER).exists()
        assert not MigrationMarker.objects.filter(name=DEACTIVATED_MARKER).exists()
        assert exc_info.value.failed_role == 'contributor'
        assert exc_info.value.completed_roles == ()
        assert 'rewrites kept: none' in str(exc_info.value)
