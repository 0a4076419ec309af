from rest_framework import serializers

from apps.accounts.models import User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = (
            "id",
            "email",
            "name",
            "phone_number",
            "role",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("name is required.")
        return value


class ReassignSerializer(serializers.Serializer):
    to_user = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(is_active=True))


class ProjectReferenceSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    type = serializers.CharField()


class OrderReferenceSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    order_number = serializers.CharField()


class UserReferencesSerializer(serializers.Serializer):
    projects = ProjectReferenceSerializer(many=True)
    orders = OrderReferenceSerializer(many=True)


class ReferenceCheckSerializer(serializers.Serializer):
    can_delete = serializers.BooleanField()
    references = UserReferencesSerializer()
