from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import authentication, exceptions

from apps.accounts.models import User


class ApiKeyAuthentication(authentication.BaseAuthentication):
    header_name = "HTTP_X_API_KEY"
    actor_header_name = "HTTP_X_USER_ID"

    def authenticate(self, request):
        api_key = request.META.get(self.header_name)
        if not api_key:
            return None

        valid_keys = set(getattr(settings, "ORDERDESK_API_KEYS", []))
        if api_key not in valid_keys:
            raise exceptions.AuthenticationFailed("Invalid API key.")

        return (self.resolve_actor(request), api_key)

    def resolve_actor(self, request):
        user_id = (request.META.get(self.actor_header_name) or "").strip()
        if not user_id:
            return AnonymousUser()
        try:
            return User.objects.get(pk=user_id, is_active=True)
        except (User.DoesNotExist, ValueError, DjangoValidationError) as exc:
            raise exceptions.AuthenticationFailed("Unknown or inactive user.") from exc

    def authenticate_header(self, request):
        return "X-API-Key"


def get_actor(request) -> User:
    actor = getattr(request, "user", None)
    if not isinstance(actor, User):
        raise exceptions.NotAuthenticated("User not authenticated.")
    return actor
