"""Event sink for change notifications."""

from user_service.events.publisher import (
    EventSink,
    DaprEventPublisher,
    NullEventSink,
    publish_user_created,
    publish_user_updated,
    publish_user_deleted,
    publish_collection_changed,
    TOPIC_USER_CREATED,
    TOPIC_USER_UPDATED,
    TOPIC_USER_DELETED,
)

__all__ = [
    "EventSink",
    "DaprEventPublisher",
    "NullEventSink",
    "publish_user_created",
    "publish_user_updated",
    "publish_user_deleted",
    "publish_collection_changed",
    "TOPIC_USER_CREATED",
    "TOPIC_USER_UPDATED",
    "TOPIC_USER_DELETED",
]
