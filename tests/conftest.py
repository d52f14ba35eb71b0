import os
import sys

# Add project root to the Python path to resolve module imports during tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

"""
Shared fixtures for the metadata registry tests.

FakeMetadataRegistry plays the server side of the ApiCaller boundary so the
service can be exercised end to end without a network. It applies the same
merge rules as the real registry and records every call it receives.
"""
import copy
import itertools
import uuid
from urllib.parse import parse_qs, urlsplit
from typing import Any, Dict, List, Optional, Tuple

import pytest

from metadata_registry.core.metadata import MetadataFieldsService
from metadata_registry.models import (
    BadRequestError,
    ConflictError,
    DataSource,
    DataSourceParams,
    NotFoundError,
)

BASE_URL = "https://api.test.local/v1_1/demo"


def _server_order(rule: Dict[str, Any]) -> Dict[str, Any]:
    """The registry does not keep submission order inside 'and' rules"""
    if rule.get("type") != "and":
        return rule
    return {**rule, "rules": [_server_order(child) for child in reversed(rule["rules"])]}


class FakeMetadataRegistry:
    """In-memory ApiCaller with registry semantics"""

    def __init__(self):
        self.fields: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Tuple[str, str, Optional[Dict[str, Any]], Optional[Dict[str, str]]]] = []
        self._entry_ids = itertools.count(1)

    def _next_entry_id(self) -> str:
        return f"srv_{next(self._entry_ids)}"

    def _not_found(self, external_id: str) -> NotFoundError:
        message = f"Metadata field {external_id} not found"
        return NotFoundError(404, message, payload={"error": {"message": message}})

    def _field(self, external_id: str) -> Dict[str, Any]:
        if external_id not in self.fields:
            raise self._not_found(external_id)
        return self.fields[external_id]

    def _datasource(self, external_id: str) -> DataSource:
        stored = self._field(external_id)
        if "datasource" not in stored:
            message = f"Metadata field {external_id} has no datasource"
            raise BadRequestError(400, message, payload={"error": {"message": message}})
        return DataSource.model_validate(stored["datasource"])

    async def call(
        self,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        self.calls.append((method, url, copy.deepcopy(payload), extra_headers))
        assert url.startswith(BASE_URL), url
        parts = urlsplit(url)
        query = parse_qs(parts.query)
        path = parts.path[len(urlsplit(BASE_URL).path):].strip("/").split("/")
        assert path[0] == "metadata_fields", url
        external_id = path[1] if len(path) > 1 else None
        on_datasource = len(path) > 2 and path[2] == "datasource"

        if external_id is None:
            if method == "GET":
                return {"metadata_fields": copy.deepcopy(list(self.fields.values()))}
            return self._create(payload)

        if on_datasource:
            if method == "PUT":
                merged = self._datasource(external_id).upsert(
                    DataSourceParams.model_validate(payload).values, self._next_entry_id
                )
                self.fields[external_id]["datasource"] = merged.model_dump(mode="json")
                return {"values": merged.model_dump(mode="json")["values"]}
            if method == "DELETE":
                assert payload is None, "entry ids travel in the query string"
                updated, affected = self._datasource(external_id).deactivate(query["external_ids[]"])
                self.fields[external_id]["datasource"] = updated.model_dump(mode="json")
                return {"values": [item.model_dump(mode="json") for item in affected]}

        if method == "GET":
            return copy.deepcopy(self._field(external_id))
        if method == "PUT":
            stored = self._field(external_id)
            for key, value in payload.items():
                if key in ("external_id", "type"):
                    continue
                stored[key] = _server_order(value) if key == "validation" and value else value
            return copy.deepcopy(stored)
        if method == "DELETE":
            if external_id not in self.fields:
                raise self._not_found(external_id)
            del self.fields[external_id]
            return {"message": "ok"}

        raise AssertionError(f"unexpected call {method} {url}")

    def _create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        external_id = payload["external_id"]
        if external_id in self.fields:
            message = f"External id {external_id} already exists"
            raise ConflictError(409, message, payload={"error": {"message": message}})
        stored = {
            "external_id": external_id,
            "type": payload["type"],
            "label": payload["label"],
            "mandatory": payload.get("mandatory", False),
            "default_value": payload.get("default_value"),
            "validation": _server_order(payload["validation"]) if payload.get("validation") else None,
        }
        if "datasource" in payload:
            source = DataSource().upsert(
                DataSourceParams.model_validate(payload["datasource"]).values, self._next_entry_id
            )
            stored["datasource"] = source.model_dump(mode="json")
        self.fields[external_id] = stored
        return copy.deepcopy(stored)


class MetadataTestContext:
    """Per-test bookkeeping: unique names and the fields to clean up"""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.created: List[str] = []
        self._counter = itertools.count(1)

    def unique_external_id(self, suffix: str = "") -> str:
        external_id = f"{self.prefix}_meta_data_field_{next(self._counter)}"
        if suffix:
            external_id = f"{external_id}_{suffix}"
        self.created.append(external_id)
        return external_id

    def unique_label(self, suffix: str = "") -> str:
        label = f"{self.prefix}_meta_data_label_{next(self._counter)}"
        if suffix:
            label = f"{label}_{suffix}"
        return label

    async def cleanup(self, service: MetadataFieldsService) -> None:
        for external_id in self.created:
            try:
                await service.delete_metadata_field(external_id)
            except NotFoundError:
                pass
        self.created.clear()


@pytest.fixture
def fake_registry() -> FakeMetadataRegistry:
    return FakeMetadataRegistry()


@pytest.fixture
def metadata_service(fake_registry: FakeMetadataRegistry) -> MetadataFieldsService:
    return MetadataFieldsService(fake_registry, BASE_URL)


@pytest.fixture
def metadata_context() -> MetadataTestContext:
    return MetadataTestContext(f"test_{uuid.uuid4().hex[:8]}")
