"""
Factory role tables and fixed identifiers.

The capability tables below are the role grants the host platform ships
with. They are a frozen constant and must not be recomputed: restoring the
default role set writes exactly these values back.

| Identity      | Default name  | Reduced name |
|---------------|---------------|--------------|
| administrator | Administrator | Developer    |
| editor        | Editor        | Staff        |
| author        | Author        | (removed)    |
| contributor   | Contributor   | (removed)    |
| subscriber    | Subscriber    | Basic User   |
"""

from types import MappingProxyType

from django.db import models
from django.utils.translation import gettext_lazy as _


class RoleIdentity(models.TextChoices):
    ADMINISTRATOR = 'administrator', 'Administrator'
    EDITOR = 'editor', 'Editor'
    AUTHOR = 'author', 'Author'
    CONTRIBUTOR = 'contributor', 'Contributor'
    SUBSCRIBER = 'subscriber', 'Subscriber'


class ManagementAction(models.TextChoices):
    """User-management actions narrowed by the capability resolver."""

    EDIT_USER = 'edit_user', 'Edit user'
    REMOVE_USER = 'remove_user', 'Remove user'
    PROMOTE_USER = 'promote_user', 'Promote user'
    DELETE_USER = 'delete_user', 'Delete user'
    DELETE_USERS = 'delete_users', 'Delete users'


# Capability tokens with special meaning to this layer
ADMINISTRATOR_CAPABILITY = 'administrator'
MANAGE_OPTIONS_CAPABILITY = 'manage_options'
DO_NOT_ALLOW = 'do_not_allow'

# Synthetic key of the "all users" entry in listing labels
ALL_USERS_VIEW = 'all'

DEFAULT_GRANT_MARKER = 'simplified_roles_add_cap_editor_once'

# Set by restoring the default role set; pauses the post_migrate install
DEACTIVATED_MARKER = 'simplified_roles_deactivated'

REMOVED_ROLES = (RoleIdentity.AUTHOR, RoleIdentity.CONTRIBUTOR)

# Rewrite order used when restoring the default role set
ROLE_ORDER = (
    RoleIdentity.ADMINISTRATOR,
    RoleIdentity.EDITOR,
    RoleIdentity.AUTHOR,
    RoleIdentity.CONTRIBUTOR,
    RoleIdentity.SUBSCRIBER,
)

EDITOR_MANAGEMENT_CAPABILITIES = frozenset({
    'edit_users',
    'list_users',
    'promote_users',
    'create_users',
    'add_users',
    'delete_users',
})

DEFAULT_DISPLAY_NAMES = MappingProxyType({
    RoleIdentity.ADMINISTRATOR: 'Administrator',
    RoleIdentity.EDITOR: 'Editor',
    RoleIdentity.AUTHOR: 'Author',
    RoleIdentity.CONTRIBUTOR: 'Contributor',
    RoleIdentity.SUBSCRIBER: 'Subscriber',
})

REDUCED_DISPLAY_NAMES = MappingProxyType({
    RoleIdentity.SUBSCRIBER: _('Basic User'),
    RoleIdentity.EDITOR: _('Staff'),
    RoleIdentity.ADMINISTRATOR: _('Developer'),
})

# Primitive capability each management action requires before narrowing
ACTION_CAPABILITIES = MappingProxyType({
    ManagementAction.EDIT_USER: ('edit_users',),
    ManagementAction.REMOVE_USER: ('remove_users',),
    ManagementAction.PROMOTE_USER: ('promote_users',),
    ManagementAction.DELETE_USER: ('delete_users',),
    ManagementAction.DELETE_USERS: ('delete_users',),
})

# Editing one's own profile only needs 'read'
SELF_EDIT_CAPABILITIES = ('read',)

_EDITOR_CAPABILITIES = frozenset({
    'moderate_comments',
    'manage_categories',
    'manage_links',
    'upload_files',
    'unfiltered_html',
    'edit_posts',
    'edit_others_posts',
    'edit_published_posts',
    'publish_posts',
    'edit_pages',
    'read',
    'level_7',
    'level_6',
    'level_5',
    'level_4',
    'level_3',
    'level_2',
    'level_1',
    'level_0',
    'edit_others_pages',
    'edit_published_pages',
    'publish_pages',
    'delete_pages',
    'delete_others_pages',
    'delete_published_pages',
    'delete_posts',
    'delete_others_posts',
    'delete_published_posts',
    'delete_private_posts',
    'edit_private_posts',
    'read_private_posts',
    'delete_private_pages',
    'edit_private_pages',
    'read_private_pages',
})

_ADMINISTRATOR_CAPABILITIES = frozenset({
    'switch_themes',
    'edit_themes',
    'activate_plugins',
    'edit_plugins',
    'edit_users',
    'edit_files',
    'manage_options',
    'moderate_comments',
    'manage_categories',
    'manage_links',
    'upload_files',
    'import',
    'unfiltered_html',
    'edit_posts',
    'edit_others_posts',
    'edit_published_posts',
    'publish_posts',
    'edit_pages',
    'read',
    'level_10',
    'level_9',
    'level_8',
    'level_7',
    'level_6',
    'level_5',
    'level_4',
    'level_3',
    'level_2',
    'level_1',
    'level_0',
    'edit_others_pages',
    'edit_published_pages',
    'publish_pages',
    'delete_pages',
    'delete_others_pages',
    'delete_published_pages',
    'delete_posts',
    'delete_others_posts',
    'delete_published_posts',
    'delete_private_posts',
    'edit_private_posts',
    'read_private_posts',
    'delete_private_pages',
    'edit_private_pages',
    'read_private_pages',
    'delete_users',
    'create_users',
    'unfiltered_upload',
    'edit_dashboard',
    'update_plugins',
    'delete_plugins',
    'install_plugins',
    'update_themes',
    'install_themes',
    'update_core',
    'list_users',
    'remove_users',
    'add_users',
    'promote_users',
    'edit_theme_options',
    'delete_themes',
    'export',
})

DEFAULT_CAPABILITIES = MappingProxyType({
    RoleIdentity.ADMINISTRATOR: _ADMINISTRATOR_CAPABILITIES,
    RoleIdentity.EDITOR: _EDITOR_CAPABILITIES,
    RoleIdentity.AUTHOR: frozenset({
        'upload_files',
        'edit_posts',
        'edit_published_posts',
        'publish_posts',
        'read',
        'level_2',
        'level_1',
        'level_0',
        'delete_posts',
        'delete_published_posts',
    }),
    RoleIdentity.CONTRIBUTOR: frozenset({
        'edit_posts',
        'read',
        'level_1',
        'level_0',
        'delete_posts',
    }),
    RoleIdentity.SUBSCRIBER: frozenset({
        'read',
        'level_0',
    }),
})
