"""Payload types exchanged with the SmartObjects platform.

Events, objects and owners depend on each tenant's data model and are passed
as plain JSON-compatible values. The data model itself, search results and a
few ingestion reports have fixed shapes and are modelled here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import SerializationError


def _str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _str_list(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key)
    return [str(v) for v in value] if isinstance(value, list) else []


def _dicts(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = data.get(key)
    return [v for v in value if isinstance(v, dict)] if isinstance(value, list) else []


# --- ingestion ---

@dataclass
class SendEventsReport:
    id: str
    result: str
    object_exists: bool = False
    message: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SendEventsReport:
        return cls(
            id=_str(data, "id"),
            result=_str(data, "result"),
            object_exists=bool(data.get("objectExists")),
            message=_str(data, "message"),
        )


@dataclass
class ObjectOwnerPair:
    x_device_id: str
    username: str

    def to_dict(self) -> dict[str, Any]:
        return {"x_device_id": self.x_device_id, "username": self.username}


@dataclass
class ClaimResult:
    id: str
    result: str
    message: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClaimResult:
        return cls(id=_str(data, "id"), result=_str(data, "result"), message=_str(data, "message"))


# --- data model ---

@dataclass
class ChallengeCode:
    code: str

    @classmethod
    def from_dict(cls, data: Any) -> ChallengeCode:
        code = _str(data, "code") if isinstance(data, dict) else str(data or "")
        if not code.strip():
            raise SerializationError("platform answered without a challenge code")
        return cls(code=code.strip())


@dataclass
class AttributeType:
    high_level_type: str
    container_type: str = "none"

    def to_dict(self) -> dict[str, Any]:
        return {"highLevelType": self.high_level_type, "containerType": self.container_type}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AttributeType:
        return cls(high_level_type=_str(data, "highLevelType"), container_type=_str(data, "containerType"))


@dataclass
class Timeseries:
    key: str
    display_name: str = ""
    description: str = ""
    high_level_type: str = ""
    event_type_keys: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"displayName": self.display_name, "description": self.description}
        if self.key:
            body["key"] = self.key
        if self.event_type_keys:
            body["eventTypeKeys"] = list(self.event_type_keys)
        if self.high_level_type:
            body["type"] = {"highLevelType": self.high_level_type}
        return body

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Timeseries:
        type_ = data.get("type") if isinstance(data.get("type"), dict) else {}
        return cls(
            key=_str(data, "key"),
            display_name=_str(data, "displayName"),
            description=_str(data, "description"),
            high_level_type=_str(type_, "highLevelType"),
            event_type_keys=_str_list(data, "eventTypeKeys"),
        )


@dataclass
class EventType:
    key: str
    origin: str
    display_name: str = ""
    description: str = ""
    timeseries_keys: list[str] = field(default_factory=list)
    timeseries: list[Timeseries] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "key": self.key,
            "displayName": self.display_name,
            "description": self.description,
            "origin": self.origin,
        }
        if self.timeseries_keys:
            body["timeseriesKeys"] = list(self.timeseries_keys)
        if self.timeseries:
            body["timeseries"] = [ts.to_dict() for ts in self.timeseries]
        return body

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EventType:
        return cls(
            key=_str(data, "key"),
            origin=_str(data, "origin"),
            display_name=_str(data, "displayName"),
            description=_str(data, "description"),
            timeseries_keys=_str_list(data, "timeseriesKeys"),
            timeseries=[Timeseries.from_dict(ts) for ts in _dicts(data, "timeseries")],
        )


@dataclass
class ObjectAttribute:
    key: str
    type: AttributeType | None = None
    display_name: str = ""
    description: str = ""
    object_type_keys: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"key": self.key, "displayName": self.display_name, "description": self.description}
        if self.type is not None:
            body["type"] = self.type.to_dict()
        if self.object_type_keys:
            body["objectTypeKeys"] = list(self.object_type_keys)
        return body

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ObjectAttribute:
        type_ = data.get("type")
        return cls(
            key=_str(data, "key"),
            type=AttributeType.from_dict(type_) if isinstance(type_, dict) else None,
            display_name=_str(data, "displayName"),
            description=_str(data, "description"),
            object_type_keys=_str_list(data, "objectTypeKeys"),
        )


@dataclass
class OwnerAttribute:
    key: str
    type: AttributeType
    display_name: str = ""
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "displayName": self.display_name,
            "description": self.description,
            "type": self.type.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OwnerAttribute:
        type_ = data.get("type")
        return cls(
            key=_str(data, "key"),
            type=AttributeType.from_dict(type_ if isinstance(type_, dict) else {}),
            display_name=_str(data, "displayName"),
            description=_str(data, "description"),
        )


@dataclass
class ObjectType:
    key: str
    display_name: str = ""
    description: str = ""
    object_attributes_keys: list[str] = field(default_factory=list)
    object_attributes: list[ObjectAttribute] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"key": self.key, "displayName": self.display_name, "description": self.description}
        if self.object_attributes_keys:
            body["objectAttributesKeys"] = list(self.object_attributes_keys)
        if self.object_attributes:
            body["objectAttributes"] = [oa.to_dict() for oa in self.object_attributes]
        return body

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ObjectType:
        return cls(
            key=_str(data, "key"),
            display_name=_str(data, "displayName"),
            description=_str(data, "description"),
            object_attributes_keys=_str_list(data, "objectAttributesKeys"),
            object_attributes=[ObjectAttribute.from_dict(oa) for oa in _dicts(data, "objectAttributes")],
        )


@dataclass
class Sessionizer:
    key: str
    start_event_type_key: str
    end_event_type_key: str
    display_name: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Sessionizer:
        return cls(
            key=_str(data, "key"),
            start_event_type_key=_str(data, "startEventTypeKey"),
            end_event_type_key=_str(data, "endEventTypeKey"),
            display_name=_str(data, "displayName"),
            description=_str(data, "description"),
        )


@dataclass
class DataModel:
    object_types: list[ObjectType] = field(default_factory=list)
    event_types: list[EventType] = field(default_factory=list)
    owner_attributes: list[OwnerAttribute] = field(default_factory=list)
    sessionizers: list[Sessionizer] = field(default_factory=list)
    orphan_timeseries: list[Timeseries] = field(default_factory=list)
    enrichers: dict[str, list[str]] = field(default_factory=dict)
    reserved_enrichers_fields: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DataModel:
        orphans = data.get("orphans") if isinstance(data.get("orphans"), dict) else {}
        enrichers = data.get("enrichers") if isinstance(data.get("enrichers"), dict) else {}
        return cls(
            object_types=[ObjectType.from_dict(v) for v in _dicts(data, "objectTypes")],
            event_types=[EventType.from_dict(v) for v in _dicts(data, "eventTypes")],
            owner_attributes=[OwnerAttribute.from_dict(v) for v in _dicts(data, "ownerAttributes")],
            sessionizers=[Sessionizer.from_dict(v) for v in _dicts(data, "sessionizers")],
            orphan_timeseries=[Timeseries.from_dict(v) for v in _dicts(orphans, "timeseries")],
            enrichers={str(k): _str_list(enrichers, k) for k in enrichers},
            reserved_enrichers_fields=_str_list(data, "reservedEnrichersFields"),
        )


# --- search ---

@dataclass
class DatasetField:
    key: str
    high_level_type: str = ""
    display_name: str = ""
    description: str = ""
    container_type: str = ""
    primary_key: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DatasetField:
        return cls(
            key=_str(data, "key"),
            high_level_type=_str(data, "highLevelType"),
            display_name=_str(data, "displayName"),
            description=_str(data, "description"),
            container_type=_str(data, "containerType"),
            primary_key=bool(data.get("primaryKey")),
        )


@dataclass
class Dataset:
    key: str
    display_name: str = ""
    description: Any = None
    fields: list[DatasetField] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Dataset:
        return cls(
            key=_str(data, "key"),
            display_name=_str(data, "displayName"),
            description=data.get("description"),
            fields=[DatasetField.from_dict(f) for f in _dicts(data, "fields")],
        )


@dataclass
class QueryValidation:
    is_valid: bool
    validation_errors: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QueryValidation:
        return cls(is_valid=bool(data.get("isValid")), validation_errors=_str_list(data, "validationErrors"))


@dataclass
class SearchResultsColumn:
    label: str
    type: str


@dataclass
class SearchResults:
    columns: list[SearchResultsColumn] = field(default_factory=list)
    rows: list[list[Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SearchResults:
        rows = data.get("rows")
        return cls(
            columns=[SearchResultsColumn(label=_str(c, "label"), type=_str(c, "type")) for c in _dicts(data, "columns")],
            rows=[list(r) for r in rows if isinstance(r, list)] if isinstance(rows, list) else [],
        )
