"""Best-effort event publishing to the Dapr pub/sub HTTP API.

Publishing never raises: a failed publish is logged and the mutation that
triggered it stands.
"""

import logging
import uuid
from typing import Any, Optional, Protocol

import httpx

from user_service.config.settings import Settings
from user_service.core.timezone import now_utc
from user_service.domain.models import Account, ChangeAction, Collection

logger = logging.getLogger(__name__)

EVENT_SOURCE = "user-service"
EVENT_TYPE_PREFIX = "com.aioutlet"

TOPIC_USER_CREATED = "user.created"
TOPIC_USER_UPDATED = "user.updated"
TOPIC_USER_DELETED = "user.deleted"


class EventSink(Protocol):
    """Fire-and-forget notification target."""

    def publish(self, topic: str, data: dict[str, Any], correlation_id: Optional[str] = None) -> bool:
        """Publish an event; returns False instead of raising on failure."""
        ...


def account_summary(account: Account) -> dict[str, Any]:
    return {
        "userId": account.account_id,
        "email": account.email,
        "firstName": account.first_name,
        "lastName": account.last_name,
        "displayName": account.display_name,
        "isEmailVerified": account.is_email_verified,
        "isActive": account.is_active,
        "roles": list(account.roles),
        "tier": account.tier.value,
    }


class DaprEventPublisher:
    """Publishes CloudEvents-style envelopes through the Dapr sidecar."""

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None):
        self._settings = settings
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._settings.events_enabled

    def build_envelope(
        self,
        topic: str,
        data: dict[str, Any],
        correlation_id: Optional[str] = None,
    ) -> dict[str, Any]:
        return {
            "specversion": "1.0",
            "type": f"{EVENT_TYPE_PREFIX}.{topic}",
            "source": EVENT_SOURCE,
            "id": str(uuid.uuid4()),
            "time": now_utc().isoformat(),
            "datacontenttype": "application/json",
            "data": data,
            "metadata": {
                "correlationId": correlation_id,
                "environment": self._settings.environment,
            },
        }

    def publish(self, topic: str, data: dict[str, Any], correlation_id: Optional[str] = None) -> bool:
        if not self.enabled:
            logger.debug("Events disabled, skipping publish of %s", topic)
            return False

        envelope = self.build_envelope(topic, data, correlation_id)
        url = self._settings.get_pubsub_url(topic)
        try:
            if self._client is not None:
                response = self._client.post(url, json=envelope)
            else:
                with httpx.Client(timeout=self._settings.event_timeout_seconds) as client:
                    response = client.post(url, json=envelope)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(
                "Failed to publish %s event (correlation_id=%s): %s", topic, correlation_id, exc
            )
            return False

        logger.info("Published %s event (correlation_id=%s)", topic, correlation_id)
        return True


class NullEventSink:
    """Sink that drops every event."""

    def publish(self, topic: str, data: dict[str, Any], correlation_id: Optional[str] = None) -> bool:
        return False


def publish_user_created(sink: EventSink, account: Account, correlation_id: Optional[str] = None) -> None:
    sink.publish(TOPIC_USER_CREATED, account_summary(account), correlation_id)


def publish_user_updated(
    sink: EventSink,
    account: Account,
    correlation_id: Optional[str] = None,
    updated_by: Optional[str] = None,
) -> None:
    data = account_summary(account)
    data["updatedBy"] = updated_by
    sink.publish(TOPIC_USER_UPDATED, data, correlation_id)


def publish_user_deleted(sink: EventSink, account_id: str, correlation_id: Optional[str] = None) -> None:
    sink.publish(
        TOPIC_USER_DELETED,
        {"userId": account_id, "timestamp": now_utc().isoformat()},
        correlation_id,
    )


def publish_collection_changed(
    sink: EventSink,
    account_id: str,
    collection: Collection,
    action: ChangeAction,
    entry_id: str,
    correlation_id: Optional[str] = None,
) -> None:
    """Report an add/update/remove on one owned collection."""
    sink.publish(
        TOPIC_USER_UPDATED,
        {
            "userId": account_id,
            "change": {
                "collection": collection.value,
                "action": action.value,
                "entryId": entry_id,
            },
        },
        correlation_id,
    )
