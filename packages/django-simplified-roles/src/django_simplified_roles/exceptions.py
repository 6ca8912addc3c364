"""Exceptions for django-simplified-roles."""


class SimplifiedRolesError(Exception):
    """Base exception for simplified roles errors."""

    pass


class RoleStoreUnavailable(SimplifiedRolesError):
    """Raised when the role/capability store cannot be read or written."""

    def __init__(self, operation: str, key: str = None):
        self.operation = operation
        self.key = key
        if key:
            message = f"Role store unavailable during {operation} of '{key}'"
        else:
            message = f"Role store unavailable during {operation}"
        super().__init__(message)


class RoleRestoreError(SimplifiedRolesError):
    """Raised when restoring the default role set stops part way.

    Every rewrite is idempotent, so the whole restore can be retried.

    completed_roles lists the roles rewritten before the failure that are
    still rewritten. It is empty when the store rolled the restore back.
    """

    def __init__(self, failed_role: str, completed_roles=()):
        self.failed_role = failed_role
        self.completed_roles = tuple(completed_roles)
        done = ", ".join(self.completed_roles) or "none"
        super().__init__(
            f"Restoring default roles failed at '{failed_role}' "
            f"(rewrites kept: {done}). Retry the restore."
        )


class SimplifiedRolesConfigError(SimplifiedRolesError):
    """Raised when simplified roles configuration is invalid."""

    pass
