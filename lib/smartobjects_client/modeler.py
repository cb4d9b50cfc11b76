from __future__ import annotations

from typing import Any, Iterable

from .ingestion import Resource, path_segment
from .types import ChallengeCode, DataModel, EventType, ObjectAttribute, ObjectType, OwnerAttribute, Timeseries

MODEL_PATH = "/api/v3/model"


def _entities(items: Iterable[Any]) -> list[Any]:
    return [i.to_dict() if hasattr(i, "to_dict") else i for i in items]


def _entity(item: Any) -> Any:
    return item.to_dict() if hasattr(item, "to_dict") else item


def _code(code: ChallengeCode | str) -> str:
    return path_segment(code.code if isinstance(code, ChallengeCode) else code)


class Model(Resource):
    """Data model management (sandbox changes and their deployment to production)."""

    def export(self) -> DataModel:
        data = self._call("GET", f"{MODEL_PATH}/export")
        return DataModel.from_dict(data if isinstance(data, dict) else {})

    # --- deployable entities: timeseries, object attributes, owner attributes ---

    def _list(self, kind: str) -> list[dict[str, Any]]:
        data = self._call("GET", f"{MODEL_PATH}/{kind}")
        return [d for d in data if isinstance(d, dict)] if isinstance(data, list) else []

    def _create(self, kind: str, items: Iterable[Any]) -> None:
        self._call("POST", f"{MODEL_PATH}/{kind}", _entities(items))

    def _update(self, kind: str, key: str, item: Any) -> None:
        self._call("PUT", f"{MODEL_PATH}/{kind}/{path_segment(key)}", _entity(item))

    def _delete(self, kind: str, key: str) -> None:
        self._call("DELETE", f"{MODEL_PATH}/{kind}/{path_segment(key)}")

    def _generate_deploy_code(self, kind: str, key: str) -> ChallengeCode:
        return ChallengeCode.from_dict(self._call("POST", f"{MODEL_PATH}/{kind}/{path_segment(key)}/deploy"))

    def _apply_deploy_code(self, kind: str, key: str, code: ChallengeCode | str) -> None:
        self._call("POST", f"{MODEL_PATH}/{kind}/{path_segment(key)}/deploy/{_code(code)}")

    def _deploy(self, kind: str, key: str) -> None:
        self._apply_deploy_code(kind, key, self._generate_deploy_code(kind, key))

    def get_timeseries(self) -> list[Timeseries]:
        return [Timeseries.from_dict(d) for d in self._list("timeseries")]

    def create_timeseries(self, timeseries: Iterable[Timeseries | dict[str, Any]]) -> None:
        self._create("timeseries", timeseries)

    def update_timeseries(self, key: str, timeseries: Timeseries | dict[str, Any]) -> None:
        """Only the display name and description can change."""
        self._update("timeseries", key, timeseries)

    def generate_timeseries_deploy_code(self, key: str) -> ChallengeCode:
        return self._generate_deploy_code("timeseries", key)

    def apply_timeseries_deploy_code(self, key: str, code: ChallengeCode | str) -> None:
        self._apply_deploy_code("timeseries", key, code)

    def deploy_timeseries_to_production(self, key: str) -> None:
        self._deploy("timeseries", key)

    def get_object_attributes(self) -> list[ObjectAttribute]:
        return [ObjectAttribute.from_dict(d) for d in self._list("objectAttributes")]

    def create_object_attributes(self, attributes: Iterable[ObjectAttribute | dict[str, Any]]) -> None:
        self._create("objectAttributes", attributes)

    def update_object_attribute(self, key: str, attribute: ObjectAttribute | dict[str, Any]) -> None:
        self._update("objectAttributes", key, attribute)

    def generate_object_attribute_deploy_code(self, key: str) -> ChallengeCode:
        return self._generate_deploy_code("objectAttributes", key)

    def apply_object_attribute_deploy_code(self, key: str, code: ChallengeCode | str) -> None:
        self._apply_deploy_code("objectAttributes", key, code)

    def deploy_object_attribute_to_production(self, key: str) -> None:
        self._deploy("objectAttributes", key)

    def get_owner_attributes(self) -> list[OwnerAttribute]:
        return [OwnerAttribute.from_dict(d) for d in self._list("ownerAttributes")]

    def create_owner_attributes(self, attributes: Iterable[OwnerAttribute | dict[str, Any]]) -> None:
        self._create("ownerAttributes", attributes)

    def update_owner_attribute(self, key: str, attribute: OwnerAttribute | dict[str, Any]) -> None:
        self._update("ownerAttributes", key, attribute)

    def generate_owner_attribute_deploy_code(self, key: str) -> ChallengeCode:
        return self._generate_deploy_code("ownerAttributes", key)

    def apply_owner_attribute_deploy_code(self, key: str, code: ChallengeCode | str) -> None:
        self._apply_deploy_code("ownerAttributes", key, code)

    def deploy_owner_attribute_to_production(self, key: str) -> None:
        self._deploy("ownerAttributes", key)

    # --- event types ---

    def get_event_types(self) -> list[EventType]:
        return [EventType.from_dict(d) for d in self._list("eventTypes")]

    def create_event_types(self, event_types: Iterable[EventType | dict[str, Any]]) -> None:
        self._create("eventTypes", event_types)

    def update_event_type(self, key: str, event_type: EventType | dict[str, Any]) -> None:
        self._update("eventTypes", key, event_type)

    def delete_event_type(self, key: str) -> None:
        self._delete("eventTypes", key)

    def add_event_type_relation(self, event_type_key: str, timeseries_key: str) -> None:
        self._call("POST", f"{MODEL_PATH}/eventTypes/{path_segment(event_type_key)}/timeseries/{path_segment(timeseries_key)}")

    def remove_event_type_relation(self, event_type_key: str, timeseries_key: str) -> None:
        self._call("DELETE", f"{MODEL_PATH}/eventTypes/{path_segment(event_type_key)}/timeseries/{path_segment(timeseries_key)}")

    # --- object types ---

    def get_object_types(self) -> list[ObjectType]:
        return [ObjectType.from_dict(d) for d in self._list("objectTypes")]

    def create_object_types(self, object_types: Iterable[ObjectType | dict[str, Any]]) -> None:
        self._create("objectTypes", object_types)

    def update_object_type(self, key: str, object_type: ObjectType | dict[str, Any]) -> None:
        self._update("objectTypes", key, object_type)

    def delete_object_type(self, key: str) -> None:
        self._delete("objectTypes", key)

    def add_object_type_relation(self, object_type_key: str, attribute_key: str) -> None:
        path = f"{MODEL_PATH}/objectTypes/{path_segment(object_type_key)}/objectAttributes/{path_segment(attribute_key)}"
        self._call("POST", path)

    def remove_object_type_relation(self, object_type_key: str, attribute_key: str) -> None:
        path = f"{MODEL_PATH}/objectTypes/{path_segment(object_type_key)}/objectAttributes/{path_segment(attribute_key)}"
        self._call("DELETE", path)

    # --- sandbox reset ---

    def generate_reset_code(self) -> ChallengeCode:
        return ChallengeCode.from_dict(self._call("POST", f"{MODEL_PATH}/reset"))

    def apply_reset_code(self, code: ChallengeCode | str) -> None:
        self._call("POST", f"{MODEL_PATH}/reset/{_code(code)}")

    def reset_data_model(self) -> None:
        self.apply_reset_code(self.generate_reset_code())
