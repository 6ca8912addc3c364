"""Django app configuration for django-simplified-roles."""

import logging

from django.apps import AppConfig
from django.apps import apps as global_apps
from django.db import DEFAULT_DB_ALIAS, router
from django.db.models.signals import post_migrate

logger = logging.getLogger(__name__)


def install_roles(sender, using=DEFAULT_DB_ALIAS, apps=global_apps, **kwargs):
    """post_migrate receiver: seed, reduce and grant the role set.

    Skipped when SIMPLIFIED_ROLES_AUTO_INSTALL = False, when this app's
    tables are not in the migrated state (e.g. after `migrate ... zero`),
    when the router keeps the app off `using`, and after the default set
    was restored with `simplified_roles restore`.
    """
    from django_simplified_roles.catalog import RoleCatalog
    from django_simplified_roles.conf import get_auto_install
    from django_simplified_roles.exceptions import SimplifiedRolesError
    from django_simplified_roles.stores import DatabaseRoleStore

    if not get_auto_install():
        return

    try:
        RoleDefinition = apps.get_model('django_simplified_roles', 'RoleDefinition')
    except LookupError:
        return

    if not router.allow_migrate_model(using, RoleDefinition):
        return

    catalog = RoleCatalog(store=DatabaseRoleStore(using=using))
    try:
        if catalog.is_deactivated():
            logger.info("Default role set was restored; not installing simplified role set")
            return

        logger.info(f"Installing simplified role set on '{using}'")
        catalog.install()
    except SimplifiedRolesError:
        logger.exception("Installing simplified role set failed; run `simplified_roles install` to retry")


class DjangoSimplifiedRolesConfig(AppConfig):
    """App configuration for django-simplified-roles."""

    name = 'django_simplified_roles'
    verbose_name = 'Simplified User Roles'
    default_auto_field = 'django.db.models.BigAutoField'

    def ready(self):
        post_migrate.connect(install_roles, sender=self)
