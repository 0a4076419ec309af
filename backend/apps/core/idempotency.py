import json
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response

from apps.core.api.exceptions import InvariantViolation
from apps.core.models import IdempotentRequest

logger = logging.getLogger(__name__)

IDEMPOTENCY_HEADER = "Idempotency-Key"


def normalize_payload(data):
    return json.loads(json.dumps(data, default=str))


def find_request(operation: str, idempotency_key: str | None):
    if not idempotency_key:
        return None
    return IdempotentRequest.objects.filter(operation=operation, idempotency_key=idempotency_key).first()


def start_request(operation: str, idempotency_key: str, payload):
    try:
        with transaction.atomic():
            return IdempotentRequest.objects.create(
                operation=operation,
                idempotency_key=idempotency_key,
                status=IdempotentRequest.Status.STARTED,
                payload=normalize_payload(payload),
            )
    except IntegrityError:
        raise_in_progress(operation, idempotency_key)


def restart_request(record: IdempotentRequest, payload):
    record.status = IdempotentRequest.Status.STARTED
    record.payload = normalize_payload(payload)
    record.result = {}
    record.finished_at = None
    record.save(update_fields=["status", "payload", "result", "finished_at", "updated_at"])
    return record


def complete_request(record: IdempotentRequest, status_code: int, data):
    record.status = IdempotentRequest.Status.COMPLETED
    record.finished_at = timezone.now()
    record.result = {
        "status_code": status_code,
        "data": normalize_payload(data),
    }
    record.save(update_fields=["status", "finished_at", "result", "updated_at"])


def fail_request(record: IdempotentRequest, status_code: int, errors):
    record.status = IdempotentRequest.Status.FAILED
    record.finished_at = timezone.now()
    record.result = {
        "status_code": status_code,
        "errors": normalize_payload(errors),
    }
    record.save(update_fields=["status", "finished_at", "result", "updated_at"])


def raise_in_progress(operation: str, idempotency_key: str):
    logger.warning("Concurrent %s request for idempotency key %s", operation, idempotency_key)
    raise InvariantViolation(
        "A request with this Idempotency-Key is still in progress.",
        field_errors={IDEMPOTENCY_HEADER: "Retry once the first request has finished."},
    )


def run_idempotent(request, operation: str, handler, payload=None) -> Response:
    """Run ``handler`` once per ``Idempotency-Key`` value.

    Without the header the handler simply runs. With it, a completed earlier
    request for the same operation and body is replayed with its stored status
    and body; the same key with a different body is refused with a 409. A failed
    request may be retried under its key with any body.
    ``handler`` returns a ``(status_code, data)`` pair.
    """
    idempotency_key = request.headers.get(IDEMPOTENCY_HEADER)
    if not idempotency_key:
        status_code, data = handler()
        return Response(data, status=status_code)

    payload = payload if payload is not None else {}
    existing = find_request(operation, idempotency_key)
    if existing is None:
        record = start_request(operation, idempotency_key, payload)
    elif existing.status == IdempotentRequest.Status.COMPLETED:
        if existing.payload != normalize_payload(payload):
            logger.warning("Idempotency key %s reused for %s with another body", idempotency_key, operation)
            raise InvariantViolation(
                "Idempotency-Key was already used with a different request body.",
                field_errors={IDEMPOTENCY_HEADER: "Use a new key for a different request."},
            )
        logger.info("Replaying %s for idempotency key %s", operation, idempotency_key)
        result = existing.result or {}
        return Response(result.get("data", {}), status=result.get("status_code", status.HTTP_200_OK))
    elif existing.status == IdempotentRequest.Status.STARTED:
        raise_in_progress(operation, idempotency_key)
    else:
        record = restart_request(existing, payload)

    try:
        status_code, data = handler()
    except Exception as exc:
        fail_request(record, getattr(exc, "status_code", status.HTTP_500_INTERNAL_SERVER_ERROR), {"detail": str(exc)})
        raise
    complete_request(record, status_code, data)
    return Response(data, status=status_code)
