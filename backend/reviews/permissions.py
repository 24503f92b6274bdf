from rest_framework.permissions import BasePermission

from accounts.models import User


class IsReviewAuthorOrAdmin(BasePermission):
    message = "You do not have permission to perform this action"

    def has_object_permission(self, request, view, obj):
        user = request.user
        return user.is_superuser or user.role == User.ADMIN or obj.user_id == user.pk
