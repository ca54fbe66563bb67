"""API dependencies."""
from functools import lru_cache

from chatpush.services.notification_service import NotificationPipeline, build_default_pipeline


@lru_cache(maxsize=1)
def get_pipeline() -> NotificationPipeline:
    """Process-wide pipeline. Stateless across invocations, so one instance serves every request."""
    return build_default_pipeline()
