from django.contrib import admin

from apps.core.models import IdempotentRequest


@admin.register(IdempotentRequest)
class IdempotentRequestAdmin(admin.ModelAdmin):
    list_display = ("operation", "idempotency_key", "status", "started_at", "finished_at")
    list_filter = ("operation", "status")
    search_fields = ("idempotency_key",)
    readonly_fields = ("payload", "result", "started_at", "finished_at")
