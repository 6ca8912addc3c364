"""Management command to install, restore or inspect the simplified role set."""

from django.core.management.base import BaseCommand, CommandError

from django_simplified_roles.catalog import RoleCatalog
from django_simplified_roles.exceptions import SimplifiedRolesError


class Command(BaseCommand):
    help = 'Install the simplified role set, restore the default roles, or show the active roles'

    def add_arguments(self, parser):
        parser.add_argument(
            'action',
            choices=['install', 'restore', 'status'],
            help='install: seed, reduce and grant; restore: put back the default roles; status: list roles',
        )

    def handle(self, *args, **options):
        action = options['action']
        catalog = RoleCatalog()

        try:
            if action == 'install':
                granted = catalog.install()
                self.stdout.write(self.style.SUCCESS('Installed simplified role set'))
                if granted:
                    self.stdout.write('  - granted editor management capabilities')
            elif action == 'restore':
                catalog.restore_default_role_set()
                self.stdout.write(self.style.SUCCESS('Restored default role set'))
                self.stdout.write('  - auto install paused until `simplified_roles install`')
            else:
                self._status(catalog)
        except SimplifiedRolesError as e:
            raise CommandError(str(e)) from e

    def _status(self, catalog):
        roles = catalog.active_roles()
        if not roles:
            self.stdout.write('No roles defined')
            return

        state = 'reduced' if catalog.is_reduced() else 'default'
        self.stdout.write(f'Role set: {state}')
        for identity, role in roles.items():
            self.stdout.write(f'  - {identity}: {role.display_name} ({len(role.capabilities)} capabilities)')

        granted = catalog.store.get_flag(catalog.grant_marker)
        self.stdout.write(f'Editor grant: {"applied" if granted else "not applied"}')
        if catalog.is_deactivated():
            self.stdout.write('Auto install: paused until `simplified_roles install`')
