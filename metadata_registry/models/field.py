"""
Metadata field definition models

Request models (create / update) check values against the field type before
anything is sent. Result models mirror what the registry returns and never
reject server data beyond its basic shape.
"""
from datetime import date
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .datasource import DataSource, DataSourceEntry, DataSourceParams
from .exceptions import FieldTypeMismatchError
from .field_types import FieldValueType, coerce_value, parse_date, parse_wire, to_wire
from .validation import ValidationRule


class MetadataFieldCreate(BaseModel):
    """Full definition of a new metadata field"""
    model_config = ConfigDict(extra="forbid")

    external_id: str = Field(..., min_length=1)
    type: FieldValueType
    label: str = Field(..., min_length=1)
    mandatory: bool = False
    default_value: Optional[Any] = None
    validation: Optional[ValidationRule] = None
    datasource: Optional[DataSourceParams] = None

    @field_validator("external_id", "label")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @model_validator(mode="after")
    def _check_against_type(self) -> "MetadataFieldCreate":
        # Raises FieldTypeMismatchError, which pydantic lets through untouched
        self.default_value = coerce_value(self.type, self.default_value)
        if self.datasource is not None and not self.type.has_datasource:
            raise FieldTypeMismatchError(
                self.type, self.datasource,
                f"a '{self.type.value}' field cannot own a datasource"
            )
        if self.validation is not None:
            self.validation.check_bounds(self.type)
        return self

    def to_wire(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "external_id": self.external_id,
            "type": self.type.value,
            "label": self.label,
            "mandatory": self.mandatory,
        }
        if self.default_value is not None:
            payload["default_value"] = to_wire(self.type, self.default_value)
        if self.validation is not None:
            payload["validation"] = self.validation.to_wire()
        if self.datasource is not None:
            payload["datasource"] = self.datasource.to_wire()
        return payload


class MetadataFieldUpdate(BaseModel):
    """Partial update of an existing field

    Only the attributes passed to the constructor are transmitted; passing
    ``default_value=None`` explicitly clears the default, leaving it out keeps
    it. ``type`` and ``external_id`` are immutable and rejected here.
    ``value_type`` is a local hint used to check ``default_value`` and is never
    sent.
    """
    model_config = ConfigDict(extra="forbid")

    value_type: Optional[FieldValueType] = Field(default=None, exclude=True)
    label: Optional[str] = None
    mandatory: Optional[bool] = None
    default_value: Optional[Any] = None
    validation: Optional[ValidationRule] = None

    @field_validator("label")
    @classmethod
    def validate_label(cls, v: Optional[str]) -> str:
        if v is None or not v.strip():
            raise ValueError("label cannot be cleared")
        return v

    @field_validator("mandatory")
    @classmethod
    def validate_mandatory(cls, v: Optional[bool]) -> bool:
        if v is None:
            raise ValueError("mandatory cannot be cleared")
        return v

    @model_validator(mode="after")
    def _check_against_type(self) -> "MetadataFieldUpdate":
        if self.value_type is None:
            return self
        if "default_value" in self.model_fields_set:
            self.default_value = coerce_value(self.value_type, self.default_value)
        if self.validation is not None:
            self.validation.check_bounds(self.value_type)
        return self

    def _default_value_wire(self) -> Any:
        if self.value_type is not None:
            return to_wire(self.value_type, self.default_value)
        if isinstance(self.default_value, date):
            return parse_date(self.default_value).isoformat()
        return self.default_value

    def to_wire(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        provided = self.model_fields_set
        if "label" in provided:
            payload["label"] = self.label
        if "mandatory" in provided:
            payload["mandatory"] = self.mandatory
        if "default_value" in provided:
            payload["default_value"] = self._default_value_wire()
        if "validation" in provided:
            payload["validation"] = self.validation.to_wire() if self.validation else None
        return payload


class MetadataFieldResult(BaseModel):
    """Field definition as held by the registry"""
    model_config = ConfigDict(extra="ignore")

    external_id: str
    type: FieldValueType
    label: str
    mandatory: bool = False
    default_value: Optional[Any] = None
    validation: Optional[ValidationRule] = None
    datasource: Optional[DataSource] = None

    @model_validator(mode="after")
    def _parse_default_value(self) -> "MetadataFieldResult":
        self.default_value = parse_wire(self.type, self.default_value)
        return self

    @property
    def default_value_wire(self) -> Any:
        """Default value in its wire form (dates as YYYY-MM-DD)"""
        if isinstance(self.default_value, date):
            return self.default_value.isoformat()
        return self.default_value


class MetadataFieldListResult(BaseModel):
    """All non-deleted field definitions, in no guaranteed order"""
    model_config = ConfigDict(extra="ignore")

    metadata_fields: List[MetadataFieldResult] = Field(default_factory=list)

    def __iter__(self) -> Iterator[MetadataFieldResult]:
        return iter(self.metadata_fields)

    def __len__(self) -> int:
        return len(self.metadata_fields)

    def external_ids(self) -> List[str]:
        return [field.external_id for field in self.metadata_fields]

    def find(self, external_id: str) -> Optional[MetadataFieldResult]:
        for field in self.metadata_fields:
            if field.external_id == external_id:
                return field
        return None

    def sorted_by_external_id(self) -> List[MetadataFieldResult]:
        return sorted(self.metadata_fields, key=lambda field: field.external_id)


class MetadataDataSourceResult(BaseModel):
    """Entries returned by a datasource upsert or soft delete"""
    model_config = ConfigDict(extra="ignore")

    values: List[DataSourceEntry] = Field(default_factory=list)

    def get(self, external_id: str) -> Optional[DataSourceEntry]:
        for item in self.values:
            if item.external_id == external_id:
                return item
        return None


class DeleteMetadataFieldResult(BaseModel):
    """Acknowledgement of a field deletion"""
    model_config = ConfigDict(extra="ignore")

    message: str

    @property
    def ok(self) -> bool:
        return self.message == "ok"
