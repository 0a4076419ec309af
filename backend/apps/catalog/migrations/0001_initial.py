import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Vendor",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("business_number", models.CharField(blank=True, max_length=50, null=True)),
                ("industry", models.CharField(blank=True, max_length=100, null=True)),
                ("representative", models.CharField(blank=True, max_length=100, null=True)),
                ("contact", models.CharField(max_length=100)),
                ("contact_person", models.CharField(max_length=100)),
                ("email", models.EmailField(max_length=255, unique=True)),
                ("phone", models.CharField(blank=True, max_length=50, null=True)),
                ("address", models.TextField(blank=True, null=True)),
                ("memo", models.TextField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "catalog_vendor",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Item",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("category", models.CharField(blank=True, max_length=100, null=True)),
                ("specification", models.TextField(blank=True, null=True)),
                ("unit", models.CharField(max_length=50)),
                ("standard_price", models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ("description", models.TextField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "catalog_item",
                "ordering": ["name"],
            },
        ),
        migrations.AddIndex(
            model_name="vendor",
            index=models.Index(fields=["name"], name="idx_catalog_vendor_name"),
        ),
        migrations.AddIndex(
            model_name="vendor",
            index=models.Index(fields=["business_number"], name="idx_catalog_vendor_bizno"),
        ),
        migrations.AddIndex(
            model_name="item",
            index=models.Index(fields=["name"], name="idx_catalog_item_name"),
        ),
        migrations.AddIndex(
            model_name="item",
            index=models.Index(fields=["category"], name="idx_catalog_item_category"),
        ),
    ]
