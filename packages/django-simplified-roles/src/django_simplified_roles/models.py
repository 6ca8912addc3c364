"""
Django models for simplified user roles.

This module provides:
- RoleDefinition: The persisted role catalog (identity, display name, capabilities)
- UserRole: Assigns a role identity to a user
- MigrationMarker: Named boolean record gating one-shot upgrades

UserRole stores the role identity as a string rather than a foreign key.
Removing a role definition (e.g. 'author' in the reduced set) therefore
never deletes or orphans the assignment; restoring the default role set
makes the role resolvable again.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from django_simplified_roles.defaults import RoleIdentity


class RoleDefinition(models.Model):
    """One entry of the active role set.

    Examples:
        RoleDefinition.objects.create(
            identity='subscriber',
            name='Subscriber',
            capabilities=['read', 'level_0'],
        )
    """

    identity = models.CharField(
        _('identity'),
        max_length=32,
        unique=True,
        choices=RoleIdentity.choices,
    )
    name = models.CharField(_('name'), max_length=100)
    capabilities = models.JSONField(
        _('capabilities'),
        default=list,
        blank=True,
        help_text=_('Sorted list of capability tokens granted by this role'),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('role definition')
        verbose_name_plural = _('role definitions')
        ordering = ['identity']

    def __str__(self):
        return f'{self.name} ({self.identity})'


class UserRole(models.Model):
    """Links a user to exactly one role identity."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='simplified_role',
        verbose_name=_('user'),
    )
    role = models.CharField(
        _('role'),
        max_length=32,
        choices=RoleIdentity.choices,
        db_index=True,
    )
    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('user role')
        verbose_name_plural = _('user roles')

    def __str__(self):
        return f'{self.user} - {self.role}'


class MigrationMarker(models.Model):
    """Named boolean record for one-shot upgrade operations.

    A marker that exists is "applied". Deleting it makes the guarded
    operation run again on the next check.
    """

    name = models.CharField(
        _('name'),
        max_length=191,
        unique=True,
        help_text=_("Marker key, e.g. 'simplified_roles_add_cap_editor_once'"),
    )
    applied_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('migration marker')
        verbose_name_plural = _('migration markers')

    def __str__(self):
        return self.name
