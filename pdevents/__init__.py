"""pdevents - PagerDuty Events API v2 client."""
__version__ = "1.0.0"

from pdevents.connection import Connection, send_event
from pdevents.exceptions import (
    ConfigurationError,
    InvalidArgument,
    PagerDutyError,
    ServiceRejected,
    TransportFailure,
)
from pdevents.models.event import (
    AcknowledgeEvent,
    Event,
    ResolveEvent,
    Severity,
    TriggerEvent,
    parse_event,
    serialize_event,
)

__all__ = [
    "AcknowledgeEvent",
    "ConfigurationError",
    "Connection",
    "Event",
    "InvalidArgument",
    "PagerDutyError",
    "ResolveEvent",
    "ServiceRejected",
    "Severity",
    "TransportFailure",
    "TriggerEvent",
    "__version__",
    "parse_event",
    "send_event",
    "serialize_event",
]
