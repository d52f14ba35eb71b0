"""
Field value types and their wire representation

Each metadata field holds exactly one kind of value. Dates travel as
calendar-date strings (``YYYY-MM-DD``), set values as ordered lists of
datasource entry external ids.
"""
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from .exceptions import FieldTypeMismatchError


class FieldValueType(str, Enum):
    """Metadata field value types"""
    INTEGER = "integer"
    STRING = "string"
    DATE = "date"
    ENUM = "enum"
    SET = "set"

    @property
    def has_datasource(self) -> bool:
        """Enum and set fields are backed by a datasource"""
        return self in (FieldValueType.ENUM, FieldValueType.SET)

    @property
    def is_comparable(self) -> bool:
        """Integer and date fields accept less_than / greater_than rules"""
        return self in (FieldValueType.INTEGER, FieldValueType.DATE)


def parse_date(value: Any) -> Optional[date]:
    """Reduce a date, datetime or ISO string to a calendar date

    Time of day is dropped. Returns None when the value is not date-like.
    """
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


def _coerce_identifier_list(field_type: FieldValueType, value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        raise FieldTypeMismatchError(field_type, value)
    for item in value:
        if not isinstance(item, str):
            raise FieldTypeMismatchError(
                field_type, value,
                f"set values must be datasource entry ids (str), got {item!r}"
            )
    # duplicates are left for the server to judge
    return list(value)


def coerce_value(field_type: FieldValueType, value: Any) -> Any:
    """Check ``value`` against ``field_type`` and return its typed form

    Raises:
        FieldTypeMismatchError: value shape does not fit the type
    """
    if value is None:
        return None

    field_type = FieldValueType(field_type)

    if field_type == FieldValueType.INTEGER:
        if isinstance(value, bool) or not isinstance(value, int):
            raise FieldTypeMismatchError(field_type, value)
        return value

    if field_type in (FieldValueType.STRING, FieldValueType.ENUM):
        if not isinstance(value, str):
            raise FieldTypeMismatchError(field_type, value)
        return value

    if field_type == FieldValueType.DATE:
        parsed = parse_date(value)
        if parsed is None:
            raise FieldTypeMismatchError(field_type, value)
        return parsed

    return _coerce_identifier_list(field_type, value)


def to_wire(field_type: FieldValueType, value: Any) -> Any:
    """JSON-ready representation of a field value"""
    value = coerce_value(field_type, value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def parse_wire(field_type: Optional[FieldValueType], value: Any) -> Any:
    """Typed form of a value sent by the server

    Unlike ``coerce_value`` this never raises; the server is authoritative
    and anything unexpected is returned untouched.
    """
    if value is None or field_type is None:
        return value
    try:
        return coerce_value(field_type, value)
    except FieldTypeMismatchError:
        return value
