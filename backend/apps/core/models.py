import uuid

from django.db import models


class IdempotentRequest(models.Model):
    class Status(models.TextChoices):
        STARTED = "started", "started"
        COMPLETED = "completed", "completed"
        FAILED = "failed", "failed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    operation = models.CharField(max_length=64)
    idempotency_key = models.CharField(max_length=255)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.STARTED)
    payload = models.JSONField(default=dict, blank=True)
    result = models.JSONField(default=dict, blank=True)
    started_at = models.DateTimeField(auto_now_add=True)
    finished_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "core_idempotent_request"
        ordering = ["-started_at"]
        indexes = [
            models.Index(fields=["operation", "idempotency_key"], name="idx_core_idem_op_key"),
        ]
        constraints = [
            models.UniqueConstraint(fields=["operation", "idempotency_key"], name="uq_core_idem_op_key"),
        ]

    def __str__(self) -> str:
        return f"{self.operation}:{self.idempotency_key}:{self.status}"
