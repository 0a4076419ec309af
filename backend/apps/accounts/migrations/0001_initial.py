import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("email", models.EmailField(blank=True, max_length=255, null=True, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("phone_number", models.CharField(blank=True, default="", max_length=50)),
                (
                    "role",
                    models.CharField(
                        choices=[("user", "user"), ("admin", "admin"), ("order_manager", "order_manager")],
                        default="user",
                        max_length=16,
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "accounts_user",
                "ordering": ["name"],
            },
        ),
        migrations.AddIndex(
            model_name="user",
            index=models.Index(fields=["role"], name="idx_accounts_user_role"),
        ),
    ]
