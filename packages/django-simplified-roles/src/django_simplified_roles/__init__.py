"""Django Simplified Roles - reduced role set with administrators hidden from non-administrators."""

__version__ = '1.0.1'

# Lazy imports to avoid AppRegistryNotReady errors
def __getattr__(name):
    if name == 'RoleCatalog':
        from django_simplified_roles.catalog import RoleCatalog
        return RoleCatalog
    if name in ('RoleRecord', 'RoleStore', 'DatabaseRoleStore', 'MemoryRoleStore'):
        from django_simplified_roles import stores
        return getattr(stores, name)
    if name in ('RoleDefinition', 'UserRole', 'MigrationMarker'):
        from django_simplified_roles import models
        return getattr(models, name)
    if name in ('RoleIdentity', 'ManagementAction'):
        from django_simplified_roles import defaults
        return getattr(defaults, name)
    if name in ('map_management_capabilities', 'filter_editable_roles', 'is_action_allowed', 'get_editable_roles'):
        from django_simplified_roles import resolver
        return getattr(resolver, name)
    if name in ('adjust_user_views', 'filter_user_queryset'):
        from django_simplified_roles import visibility
        return getattr(visibility, name)
    if name == 'SimplifiedRolesUserMixin':
        from django_simplified_roles.mixins import SimplifiedRolesUserMixin
        return SimplifiedRolesUserMixin
    if name in ('require_management_action', 'require_capability'):
        from django_simplified_roles import decorators
        return getattr(decorators, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    'RoleCatalog',
    'RoleRecord',
    'RoleStore',
    'DatabaseRoleStore',
    'MemoryRoleStore',
    'RoleDefinition',
    'UserRole',
    'MigrationMarker',
    'RoleIdentity',
    'ManagementAction',
    'map_management_capabilities',
    'filter_editable_roles',
    'is_action_allowed',
    'get_editable_roles',
    'adjust_user_views',
    'filter_user_queryset',
    'SimplifiedRolesUserMixin',
    'require_management_action',
    'require_capability',
]
