from rest_framework.permissions import BasePermission


class HasRole(BasePermission):
    """
    Allow access only to authenticated users whose role is in ``allowed_roles``.
    Superusers automatically pass.
    """

    allowed_roles: frozenset[str] = frozenset()
    message = "You do not have permission to perform this action"

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.user.is_superuser:
            return True
        return request.user.role in self.allowed_roles


def restrict_to(*roles: str) -> type[HasRole]:
    return type("RestrictTo", (HasRole,), {"allowed_roles": frozenset(roles)})
