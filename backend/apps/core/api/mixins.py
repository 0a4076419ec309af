from django.db.models import ProtectedError

from apps.core.api.exceptions import InvariantViolation


class ProtectedDestroyMixin:
    protected_message = "This record is still referenced and cannot be deleted."

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError as exc:
            raise InvariantViolation(self.protected_message) from exc
