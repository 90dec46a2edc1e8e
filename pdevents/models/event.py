"""PagerDuty Events API v2 event models.

An event is a typed pydantic model covering the known Events API v2 schema
(``routing_key``, ``event_action``, ``dedup_key`` and, for triggers, the nested
``payload``, ``links`` and ``images``). Keys outside that schema are kept as
pydantic extra fields and merged into the serialized output, so callers can
send fields this package does not model yet.
"""

import hashlib
import json
import logging
from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from pdevents.exceptions import InvalidArgument

logger = logging.getLogger(__name__)

DEDUP_KEY_MAX_LENGTH = 255


class Severity:
    """Severity values understood by the Events API.

    These are conveniences: ``TriggerEvent`` accepts any string.
    """

    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Event(BaseModel):
    """Base class for the three event variants.

    ``routing_key`` and ``event_action`` are fixed at construction. Besides the
    typed attributes, an event behaves like a small mapping over its flat
    serialized form: ``get``/``set``/``unset``/``has`` and the matching
    ``event[key]`` operators.
    """

    model_config = ConfigDict(extra="allow", validate_assignment=True, populate_by_name=True)

    routing_key: str = Field(frozen=True, description="Integration key of the target service")
    event_action: Literal["trigger", "acknowledge", "resolve"] = Field(
        frozen=True, description="Lifecycle verb of the event"
    )
    dedup_key: str | None = Field(default=None, description="Identifies the alert across events")

    def __init__(self, **data: Any):
        if type(self) is Event:
            raise TypeError("Event is abstract; use TriggerEvent, AcknowledgeEvent or ResolveEvent")
        super().__init__(**data)

    @field_validator("dedup_key")
    @classmethod
    def _truncate_dedup_key(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value[:DEDUP_KEY_MAX_LENGTH]

    def set_dedup_key(self, key: str) -> "Event":
        """Set the dedup key, truncated to 255 characters."""
        self.dedup_key = key
        return self

    def finalize(self) -> "Event":
        """Bring derived fields up to date right before the event is encoded."""
        return self

    def to_dict(self) -> dict[str, Any]:
        """Return the event as a JSON-compatible dict, without finalizing it."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude=set(self._omitted_fields()),
        )

    def to_json(self) -> str:
        """Finalize the event and return the request body."""
        return json.dumps(serialize_event(self))

    def _omitted_fields(self) -> frozenset[str]:
        return frozenset()

    def _writable_field(self, key: Any) -> FieldInfo | None:
        if not isinstance(key, str) or not key:
            raise InvalidArgument(f"Key must be a non-empty string. It is `{key!r}`")
        field = type(self).model_fields.get(key)
        if field is not None and field.frozen:
            raise InvalidArgument(f"`{key}` is fixed at construction")
        return field

    def _assign(self, key: str, value: Any) -> None:
        try:
            setattr(self, key, value)
        except ValidationError as e:
            raise InvalidArgument(f"Invalid value for `{key}`: {e}") from e

    # Generic key access

    def get(self, key: str) -> Any:
        """Return the serialized value stored under ``key``, or None."""
        return self.to_dict().get(key)

    def has(self, key: str) -> bool:
        return key in self.to_dict()

    def set(self, key: str, value: Any) -> "Event":
        """Store ``value`` under ``key``.

        Known keys go through the typed attribute (and its validation); any
        other key is kept as an extra field.
        """
        field = self._writable_field(key)
        if field is None:
            self.__pydantic_extra__[key] = value
        else:
            self._assign(key, value)
        return self

    def unset(self, key: str) -> "Event":
        field = self._writable_field(key)
        if field is None:
            self.__pydantic_extra__.pop(key, None)
            return self

        default = field.get_default(call_default_factory=True)
        if default is PydanticUndefined:
            raise InvalidArgument(f"`{key}` is required and cannot be unset")
        self._assign(key, default)
        return self

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        self.unset(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)


class TriggerPayload(BaseModel):
    """The ``payload`` object of a trigger event."""

    model_config = ConfigDict(extra="allow", validate_assignment=True, populate_by_name=True)

    summary: str = Field(description="Human readable description, read out over the phone")
    source: str = Field(description="Affected system, preferably a hostname or FQDN")
    severity: str = Field(description="One of critical, error, warning or info")
    timestamp: str | None = Field(default=None, description="When the problem was detected")
    component: str | None = Field(default=None, description="Responsible component, e.g. mysql")
    group: str | None = Field(default=None, description="Logical grouping, e.g. app-stack")
    class_: str | None = Field(default=None, alias="class", description="Event class, e.g. cpu load")
    custom_details: dict[str, Any] | None = Field(default=None, description="Free-form details")

    @field_validator("timestamp", mode="before")
    @classmethod
    def _format_timestamp(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        return value


class Link(BaseModel):
    """A link attached to the alert."""

    href: str
    text: str | None = None


class Image(BaseModel):
    """An image attached to the alert; ``src`` must be served over HTTPS."""

    src: str
    href: str | None = None
    alt: str | None = None


class TriggerEvent(Event):
    """Opens a new alert or adds to an open one with the same dedup key.

    With ``auto_dedup_key`` enabled, ``finalize()`` sets the dedup key to
    ``md5-<md5 of summary>``. The key follows the summary: finalizing again
    after ``set_summary`` yields a different key.
    """

    event_action: Literal["trigger"] = Field(default="trigger", frozen=True)
    payload: TriggerPayload
    links: list[Link] = Field(default_factory=list)
    images: list[Image] = Field(default_factory=list)
    auto_dedup_key: bool = Field(default=False, exclude=True)

    def __init__(
        self,
        routing_key: str,
        summary: str,
        source: str,
        severity: str,
        auto_dedup_key: bool = False,
        **data: Any,
    ):
        super().__init__(
            routing_key=routing_key,
            payload=TriggerPayload(summary=summary, source=source, severity=severity),
            auto_dedup_key=auto_dedup_key,
            **data,
        )

    def set_summary(self, summary: str) -> "TriggerEvent":
        self.payload.summary = summary
        return self

    def set_source(self, source: str) -> "TriggerEvent":
        self.payload.source = source
        return self

    def set_severity(self, severity: str) -> "TriggerEvent":
        self.payload.severity = severity
        return self

    def set_timestamp(self, timestamp: str | datetime) -> "TriggerEvent":
        """Set when the problem happened; datetimes are sent as ISO 8601."""
        self.payload.timestamp = timestamp
        return self

    def set_component(self, component: str) -> "TriggerEvent":
        self.payload.component = component
        return self

    def set_group(self, group: str) -> "TriggerEvent":
        self.payload.group = group
        return self

    def set_class(self, class_: str) -> "TriggerEvent":
        self.payload.class_ = class_
        return self

    def set_custom_details(self, details: dict[str, Any]) -> "TriggerEvent":
        self.payload.custom_details = dict(details)
        return self

    def add_link(self, href: str, text: str | None = None) -> "TriggerEvent":
        self.links.append(Link(href=href, text=text or None))
        return self

    def add_image(self, src: str, href: str | None = None, alt: str | None = None) -> "TriggerEvent":
        self.images.append(Image(src=src, href=href or None, alt=alt or None))
        return self

    def finalize(self) -> "TriggerEvent":
        if self.auto_dedup_key:
            digest = hashlib.md5(self.payload.summary.encode("utf-8"), usedforsecurity=False)
            self.set_dedup_key(f"md5-{digest.hexdigest()}")
            logger.debug(f"Derived dedup key {self.dedup_key} from summary")
        return self

    def _omitted_fields(self) -> frozenset[str]:
        return frozenset(name for name in ("links", "images") if not getattr(self, name))


class AcknowledgeEvent(Event):
    """Acknowledges the open alert identified by ``dedup_key``."""

    event_action: Literal["acknowledge"] = Field(default="acknowledge", frozen=True)
    dedup_key: str

    def __init__(self, routing_key: str, dedup_key: str, **data: Any):
        super().__init__(routing_key=routing_key, dedup_key=dedup_key, **data)


class ResolveEvent(Event):
    """Resolves the open alert identified by ``dedup_key``."""

    event_action: Literal["resolve"] = Field(default="resolve", frozen=True)
    dedup_key: str

    def __init__(self, routing_key: str, dedup_key: str, **data: Any):
        super().__init__(routing_key=routing_key, dedup_key=dedup_key, **data)


AnyEvent = Annotated[
    Union[TriggerEvent, AcknowledgeEvent, ResolveEvent],
    Field(discriminator="event_action"),
]

_event_adapter = TypeAdapter(AnyEvent)


def serialize_event(event: Event) -> dict[str, Any]:
    """Finalize ``event`` and return its request body as a dict.

    Finalizing mutates the event (see ``TriggerEvent``), so two calls with a
    change to the summary in between return different dedup keys.
    """
    return event.finalize().to_dict()


def parse_event(data: dict[str, Any]) -> Event:
    """Build the matching event variant from a decoded request body."""
    return _event_adapter.validate_python(data)
