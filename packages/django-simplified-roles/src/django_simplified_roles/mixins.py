"""
User model mixin - role and capability helpers on the user.

    from django.contrib.auth.models import AbstractUser
    from django_simplified_roles.mixins import SimplifiedRolesUserMixin

    class User(SimplifiedRolesUserMixin, AbstractUser):
        pass

The mixin provides:
- role property (assigned role identity or None)
- capabilities property (frozenset of capability tokens)
- has_capability(capability)
- is_administrator property
- can_manage_user(action, other_user)
- get_editable_roles()
- assign_role(identity)
"""


class SimplifiedRolesUserMixin:
    """Mixin that adds role helpers to a User model."""

    @property
    def role(self):
        from django_simplified_roles.capabilities import get_user_role

        return get_user_role(self)

    @property
    def capabilities(self) -> frozenset:
        """Capability tokens held by this user.

        Examples:
            >>> staff_member.capabilities
            frozenset({'editor', 'read', 'edit_users', ...})
        """
        from django_simplified_roles.capabilities import get_user_capabilities

        return get_user_capabilities(self)

    def has_capability(self, capability: str) -> bool:
        return capability in self.capabilities

    @property
    def is_administrator(self) -> bool:
        from django_simplified_roles.defaults import ADMINISTRATOR_CAPABILITY

        return self.has_capability(ADMINISTRATOR_CAPABILITY)

    def can_manage_user(self, action: str, other_user=None) -> bool:
        """Check whether this user may perform a management action on other_user.

        Examples:
            >>> staff_member.can_manage_user('edit_user', developer)
            False

            >>> staff_member.can_manage_user('edit_user', staff_member)
            True
        """
        from django_simplified_roles.resolver import is_action_allowed

        target_id = other_user.pk if other_user is not None else None
        return is_action_allowed(self, action, target_id)

    def get_editable_roles(self) -> dict:
        """Roles this user may assign to others (identity -> RoleRecord)."""
        from django_simplified_roles.resolver import get_editable_roles

        return get_editable_roles(self)

    def assign_role(self, identity: str):
        """Assign (or replace) this user's role.

        Returns:
            UserRole: The assignment
        """
        from django_simplified_roles.defaults import RoleIdentity
        from django_simplified_roles.models import UserRole

        assignment, _ = UserRole.objects.update_or_create(
            user=self,
            defaults={'role': RoleIdentity(identity)},
        )
        return assignment
