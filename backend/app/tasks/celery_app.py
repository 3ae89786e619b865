from celery import Celery
from ..platform.config import settings

celery_app = Celery(
    "simple",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["app.components.notifications.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    # Results are fire-and-forget emails; nothing reads them back.
    task_ignore_result=True,
)
