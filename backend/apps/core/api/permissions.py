from rest_framework.permissions import BasePermission

from apps.accounts.models import User


class HasValidApiKey(BasePermission):
    message = "A valid X-API-Key header is required."

    def has_permission(self, request, view):
        if request.method == "OPTIONS":
            return True
        return bool(request.auth)


class IsAdminActor(BasePermission):
    message = "Admin access required."

    def has_permission(self, request, view):
        return isinstance(request.user, User) and request.user.is_admin
