"""
View mixins for class-based views.

Usage:
    class UserListView(HideAdministratorsMixin, ListView):
        model = User

    class UserDeleteView(ManagementActionPermissionMixin, DeleteView):
        model = User
        management_action = 'delete_user'
"""

from django.contrib.auth.mixins import LoginRequiredMixin, UserPassesTestMixin

from django_simplified_roles.resolver import get_editable_roles, is_action_allowed
from django_simplified_roles.visibility import adjust_user_views, filter_user_queryset


class ManagementActionPermissionMixin(LoginRequiredMixin, UserPassesTestMixin):
    """Mixin to check a management action against the target user.

    The target id defaults to the view's 'pk' kwarg. Override
    get_target_user_id() for other URL layouts.

    Attributes:
        management_action: The action to check (e.g., 'edit_user')
        target_kwarg: URL kwarg holding the target user id. Defaults to 'pk'.
    """

    management_action = None
    target_kwarg = 'pk'

    def get_target_user_id(self):
        return self.kwargs.get(self.target_kwarg)

    def test_func(self):
        if not self.management_action:
            return True

        return is_action_allowed(
            self.request.user,
            self.management_action,
            self.get_target_user_id(),
        )


class HideAdministratorsMixin:
    """Mixin for user listing views that hides administrators from non-administrators.

    Filters get_queryset() and, when the view provides get_user_views(),
    adds the adjusted labels to the context as 'user_views'. The roles the
    current user may assign are added as 'editable_roles'.
    """

    def get_queryset(self):
        return filter_user_queryset(super().get_queryset(), self.request.user)

    def get_user_views(self):
        """Override to return role identity -> label mapping for the listing."""
        return {}

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['user_views'] = adjust_user_views(self.get_user_views(), self.request.user)
        context['editable_roles'] = get_editable_roles(self.request.user)
        return context
