"""Trigger adapter API: document-change notifications in, pipeline invocations out."""
from fastapi import APIRouter

from chatpush.api.triggers import routes_triggers

router = APIRouter()

router.include_router(routes_triggers.router, prefix="/triggers", tags=["triggers"])
