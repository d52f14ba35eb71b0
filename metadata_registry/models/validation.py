"""
Validation rule grammar for metadata fields

A rule is a small tree: comparison and length predicates are leaves, ``and``
is the only node allowed to hold children. Every node serialises to
``{"type": <tag>, ...own params}``.
"""
import json
from datetime import date, datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .exceptions import FieldTypeMismatchError
from .field_types import FieldValueType, parse_date


Bound = Union[int, float, date]


class _RuleBase(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _leaves_have_no_children(cls, data: Any) -> Any:
        if isinstance(data, dict) and "rules" in data and cls is not AndRule:
            raise ValueError(f"'{data.get('type')}' rule cannot contain nested rules")
        return data

    def to_wire(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json", exclude_none=True)
        return {"type": data.pop("type"), **data}

    def rule_types(self) -> List[str]:
        """Tags of the leaf rules in this tree"""
        return [self.type]

    def is_satisfied_by(self, value: Any) -> bool:
        raise NotImplementedError

    def check_bounds(self, field_type: FieldValueType) -> None:
        raise NotImplementedError

    def equivalent_to(self, other: "_RuleBase") -> bool:
        """Structural equality ignoring the order of ``and`` children"""
        return self._canonical() == other._canonical()

    def _canonical(self) -> str:
        return json.dumps(self.to_wire(), sort_keys=True)


class _ComparisonRule(_RuleBase):
    value: Bound
    equals: bool = False

    @field_validator("value", mode="before")
    @classmethod
    def _normalise_bound(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("boolean is not a valid comparison bound")
        if isinstance(v, datetime):
            return v.date()
        return v

    def _operand(self, value: Any) -> Any:
        if isinstance(self.value, date):
            return parse_date(value)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return value

    def _compare(self, operand: Any) -> bool:
        raise NotImplementedError

    def is_satisfied_by(self, value: Any) -> bool:
        if value is None:
            return True
        operand = self._operand(value)
        if operand is None:
            return False
        if self.equals and operand == self.value:
            return True
        return self._compare(operand)

    def check_bounds(self, field_type: FieldValueType) -> None:
        field_type = FieldValueType(field_type)
        if not field_type.is_comparable:
            raise FieldTypeMismatchError(
                field_type, self.value,
                f"'{self.type}' rule is not valid for a '{field_type.value}' field"
            )
        is_date_bound = isinstance(self.value, date)
        if is_date_bound != (field_type == FieldValueType.DATE):
            raise FieldTypeMismatchError(
                field_type, self.value,
                f"'{self.type}' bound {self.value!r} does not match a '{field_type.value}' field"
            )


class LessThanRule(_ComparisonRule):
    """Value must be below ``value`` (or equal to it when ``equals``)"""
    type: Literal["less_than"] = "less_than"

    def _compare(self, operand: Any) -> bool:
        return operand < self.value


class GreaterThanRule(_ComparisonRule):
    """Value must be above ``value`` (or equal to it when ``equals``)"""
    type: Literal["greater_than"] = "greater_than"

    def _compare(self, operand: Any) -> bool:
        return operand > self.value


class StringLengthRule(_RuleBase):
    """String length must fall within ``min``..``max`` (inclusive)"""
    type: Literal["string_length"] = "string_length"
    min: Optional[int] = Field(default=None, ge=0)
    max: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> "StringLengthRule":
        if self.min is None and self.max is None:
            raise ValueError("string_length rule needs 'min', 'max' or both")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"string_length min ({self.min}) is greater than max ({self.max})")
        return self

    def is_satisfied_by(self, value: Any) -> bool:
        if value is None:
            return True
        if not isinstance(value, str):
            return False
        length = len(value)
        if self.min is not None and length < self.min:
            return False
        if self.max is not None and length > self.max:
            return False
        return True

    def check_bounds(self, field_type: FieldValueType) -> None:
        field_type = FieldValueType(field_type)
        if field_type != FieldValueType.STRING:
            raise FieldTypeMismatchError(
                field_type, None,
                f"'string_length' rule is not valid for a '{field_type.value}' field"
            )


class AndRule(_RuleBase):
    """All child rules must hold"""
    type: Literal["and"] = "and"
    rules: List["ValidationRule"] = Field(..., min_length=1)

    def to_wire(self) -> Dict[str, Any]:
        return {"type": self.type, "rules": [rule.to_wire() for rule in self.rules]}

    def rule_types(self) -> List[str]:
        types: List[str] = []
        for rule in self.rules:
            types.extend(rule.rule_types())
        return types

    def is_satisfied_by(self, value: Any) -> bool:
        return all(rule.is_satisfied_by(value) for rule in self.rules)

    def check_bounds(self, field_type: FieldValueType) -> None:
        for rule in self.rules:
            rule.check_bounds(field_type)

    def _canonical(self) -> str:
        children = sorted(rule._canonical() for rule in self.rules)
        return json.dumps({"type": self.type, "rules": children}, sort_keys=True)


ValidationRule = Annotated[
    Union[LessThanRule, GreaterThanRule, StringLengthRule, AndRule],
    Field(discriminator="type"),
]

AndRule.model_rebuild()


RULE_TYPES: Dict[str, Type[_RuleBase]] = {
    "less_than": LessThanRule,
    "greater_than": GreaterThanRule,
    "string_length": StringLengthRule,
    "and": AndRule,
}


def parse_rule(data: Any) -> _RuleBase:
    """Build a rule tree from its wire form, dispatching on ``type``"""
    if isinstance(data, _RuleBase):
        return data
    if not isinstance(data, dict):
        raise ValueError(f"validation rule must be an object, got {type(data).__name__}")
    tag = data.get("type")
    rule_cls = RULE_TYPES.get(tag)
    if rule_cls is None:
        raise ValueError(f"unknown validation rule type: {tag!r}")
    return rule_cls.model_validate(data)


def less_than(value: Bound, equals: bool = False) -> LessThanRule:
    return LessThanRule(value=value, equals=equals)


def greater_than(value: Bound, equals: bool = False) -> GreaterThanRule:
    return GreaterThanRule(value=value, equals=equals)


def string_length(min: Optional[int] = None, max: Optional[int] = None) -> StringLengthRule:
    return StringLengthRule(min=min, max=max)


def all_of(*rules: _RuleBase) -> AndRule:
    return AndRule(rules=list(rules))
