import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from apps.accounts.api.v1.serializers import ReassignSerializer, ReferenceCheckSerializer, UserSerializer
from apps.accounts.models import User
from apps.accounts.services import user_deletion
from apps.core.api.authentication import get_actor
from apps.core.api.exceptions import InvariantViolation
from apps.core.api.permissions import HasValidApiKey, IsAdminActor

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "True"}
READ_ACTIONS = {"list", "retrieve", "references"}


class UserViewSet(viewsets.ModelViewSet):
    serializer_class = UserSerializer

    def get_permissions(self):
        if self.action in READ_ACTIONS:
            return [HasValidApiKey()]
        return [HasValidApiKey(), IsAdminActor()]

    def get_queryset(self):
        queryset = User.objects.order_by("name")
        params = self.request.query_params
        if params.get("active") in TRUTHY:
            queryset = queryset.filter(is_active=True)
        role = (params.get("role") or "").strip()
        if role:
            queryset = queryset.filter(role=role)
        query = (params.get("q") or "").strip()
        if query:
            queryset = queryset.filter(name__icontains=query)
        return queryset

    def _refuse_self(self, user: User, message: str) -> None:
        if get_actor(self.request).pk == user.pk:
            raise ValidationError({"id": message})

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        self._refuse_self(user, "You cannot delete your own account.")

        deletion = user_deletion.UserDeletion(user)
        deletion.check()
        if deletion.step != user_deletion.DeletionStep.CONFIRM:
            raise InvariantViolation(
                "The user is still referenced and cannot be deleted.",
                field_errors=deletion.references,
            )
        deletion.confirm_delete()
        logger.info("User %s deleted by %s", kwargs.get("pk"), request.user.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["patch"], url_path="toggle-active")
    def toggle_active(self, request, pk=None):
        user = self.get_object()
        self._refuse_self(user, "You cannot deactivate your own account.")
        user.is_active = not user.is_active
        user.save(update_fields=["is_active", "updated_at"])
        return Response(self.get_serializer(user).data)

    @action(detail=True, methods=["get"])
    def references(self, request, pk=None):
        result = user_deletion.check_references(self.get_object())
        return Response(ReferenceCheckSerializer(result).data)

    @action(detail=True, methods=["post"])
    def reassign(self, request, pk=None):
        user = self.get_object()
        serializer = ReassignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        deletion = user_deletion.UserDeletion(user)
        result = deletion.check()
        if deletion.step == user_deletion.DeletionStep.WARNING:
            deletion.begin_reassign()
            result = deletion.reassign(serializer.validated_data["to_user"])
        return Response(ReferenceCheckSerializer(result).data)
