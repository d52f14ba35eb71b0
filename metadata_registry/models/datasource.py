"""
Datasource model - the controlled vocabulary behind enum and set fields

Entries are identified by ``external_id`` and move one way through their
lifecycle: active -> inactive. There is no hard delete and no reactivation;
entries stay on the server so assets already tagged with them remain
consistent.
"""
import uuid
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class EntryState(str, Enum):
    """Datasource entry lifecycle state"""
    ACTIVE = "active"
    INACTIVE = "inactive"


class DataSourceEntryParams(BaseModel):
    """Entry as submitted on create or upsert

    State is not part of the request shape: new entries start active and
    upserts never touch the state of an existing entry.
    """
    model_config = ConfigDict(extra="forbid")

    value: str = Field(..., min_length=1)
    external_id: Optional[str] = None

    @field_validator("external_id")
    @classmethod
    def validate_external_id(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("external_id must not be blank when provided")
        return v

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class DataSourceEntry(BaseModel):
    """Entry as reported by the server"""
    model_config = ConfigDict(extra="ignore")

    external_id: Optional[str] = None
    value: str
    state: EntryState = EntryState.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state == EntryState.ACTIVE


def entry(value: str, external_id: Optional[str] = None) -> DataSourceEntryParams:
    """Shorthand for building a request entry"""
    return DataSourceEntryParams(value=value, external_id=external_id)


class DataSourceParams(BaseModel):
    """Datasource payload for field creation and entry upserts"""
    model_config = ConfigDict(extra="forbid")

    values: List[DataSourceEntryParams] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _unique_external_ids(self) -> "DataSourceParams":
        seen = set()
        for item in self.values:
            if item.external_id is None:
                continue
            if item.external_id in seen:
                raise ValueError(f"duplicate datasource entry external_id: {item.external_id!r}")
            seen.add(item.external_id)
        return self

    @classmethod
    def of(cls, *entries: DataSourceEntryParams) -> "DataSourceParams":
        return cls(values=list(entries))

    def to_wire(self) -> Dict[str, Any]:
        return {"values": [item.to_wire() for item in self.values]}


def _new_entry_id() -> str:
    return uuid.uuid4().hex


class DataSource(BaseModel):
    """Datasource of a field as reported by the server

    ``upsert`` and ``deactivate`` apply the registry's merge rules locally and
    return new objects; they never mutate ``self``.
    """
    model_config = ConfigDict(extra="ignore")

    values: List[DataSourceEntry] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.values)

    def get(self, external_id: str) -> Optional[DataSourceEntry]:
        for item in self.values:
            if item.external_id == external_id:
                return item
        return None

    def external_ids(self) -> List[str]:
        return [item.external_id for item in self.values if item.external_id is not None]

    def active_entries(self) -> List[DataSourceEntry]:
        return [item for item in self.values if item.is_active]

    def upsert(
        self,
        entries: Sequence[DataSourceEntryParams],
        id_factory: Callable[[], str] = _new_entry_id,
    ) -> "DataSource":
        """Merge ``entries`` by external id

        A matching entry gets the new value and keeps its state. Anything else
        is appended as a new active entry.
        """
        merged = [item.model_copy() for item in self.values]
        index = {item.external_id: pos for pos, item in enumerate(merged) if item.external_id}

        for submitted in entries:
            pos = index.get(submitted.external_id) if submitted.external_id else None
            if pos is not None:
                merged[pos] = merged[pos].model_copy(update={"value": submitted.value})
                continue
            new_id = submitted.external_id or id_factory()
            merged.append(DataSourceEntry(external_id=new_id, value=submitted.value))
            index[new_id] = len(merged) - 1

        return DataSource(values=merged)

    def deactivate(self, external_ids: Iterable[str]) -> Tuple["DataSource", List[DataSourceEntry]]:
        """Soft-delete the named entries

        Returns the updated datasource and the targeted entries in their new
        state. Already inactive entries are left as they are.
        """
        targets = set(external_ids)
        updated: List[DataSourceEntry] = []
        affected: List[DataSourceEntry] = []
        for item in self.values:
            if item.external_id in targets:
                item = item.model_copy(update={"state": EntryState.INACTIVE})
                affected.append(item)
            else:
                item = item.model_copy()
            updated.append(item)
        return DataSource(values=updated), affected
