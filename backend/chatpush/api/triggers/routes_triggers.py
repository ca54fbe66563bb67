"""Trigger routes: one endpoint per watched document change."""
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from chatpush.api.deps import get_pipeline
from chatpush.api.triggers.documents import (
    DocumentCreatedRequest,
    DocumentUpdatedRequest,
    event_created_from_document,
    message_created_from_document,
    message_status_changed_from_documents,
)
from chatpush.domain.notify.models import DeliveryReport
from chatpush.services.notification_service import NotificationPipeline

router = APIRouter()


class TriggerResponse(BaseModel):
    """Trigger acknowledgement. Always 200 once the event was parsed."""
    status: str  # skipped | delivered
    report: Optional[dict[str, Any]] = None


def _response(report: Optional[DeliveryReport]) -> TriggerResponse:
    if report is None:
        return TriggerResponse(status="skipped")
    return TriggerResponse(status="delivered", report=report.to_dict())


@router.post("/event-created", response_model=TriggerResponse)
async def on_event_created(
    request: DocumentCreatedRequest,
    pipeline: NotificationPipeline = Depends(get_pipeline),
):
    """events/{eventId} created: broadcast to every registered device unless private."""
    event = event_created_from_document(request)
    return _response(await pipeline.handle(event))


@router.post("/message-created", response_model=TriggerResponse)
async def on_message_created(
    request: DocumentCreatedRequest,
    pipeline: NotificationPipeline = Depends(get_pipeline),
):
    """conversations/{dialogId}/messagesList/{messageId} created: notify the receiver."""
    event = message_created_from_document(request)
    return _response(await pipeline.handle(event))


@router.post("/message-status-changed", response_model=TriggerResponse)
async def on_message_status_changed(
    request: DocumentUpdatedRequest,
    pipeline: NotificationPipeline = Depends(get_pipeline),
):
    """conversations/{dialogId}/messagesList/{messageId} updated: tell the sender about a new status."""
    event = message_status_changed_from_documents(request)
    return _response(await pipeline.handle(event))
