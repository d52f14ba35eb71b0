"""Metadata field, validation and datasource models"""

from .datasource import (
    DataSource,
    DataSourceEntry,
    DataSourceEntryParams,
    DataSourceParams,
    EntryState,
    entry,
)
from .exceptions import (
    AuthorizationError,
    BadRequestError,
    ConfigurationError,
    ConflictError,
    FieldTypeMismatchError,
    InvalidArgumentError,
    MetadataRegistryError,
    NotFoundError,
    RateLimitedError,
    RemoteApiError,
    ServerError,
    TransportError,
)
from .field import (
    DeleteMetadataFieldResult,
    MetadataDataSourceResult,
    MetadataFieldCreate,
    MetadataFieldListResult,
    MetadataFieldResult,
    MetadataFieldUpdate,
)
from .field_types import FieldValueType
from .validation import (
    AndRule,
    GreaterThanRule,
    LessThanRule,
    StringLengthRule,
    ValidationRule,
    all_of,
    greater_than,
    less_than,
    parse_rule,
    string_length,
)

__all__ = [
    "AndRule",
    "AuthorizationError",
    "BadRequestError",
    "ConfigurationError",
    "ConflictError",
    "DataSource",
    "DataSourceEntry",
    "DataSourceEntryParams",
    "DataSourceParams",
    "DeleteMetadataFieldResult",
    "EntryState",
    "FieldTypeMismatchError",
    "FieldValueType",
    "GreaterThanRule",
    "InvalidArgumentError",
    "LessThanRule",
    "MetadataDataSourceResult",
    "MetadataFieldCreate",
    "MetadataFieldListResult",
    "MetadataFieldResult",
    "MetadataFieldUpdate",
    "MetadataRegistryError",
    "NotFoundError",
    "RateLimitedError",
    "RemoteApiError",
    "ServerError",
    "StringLengthRule",
    "TransportError",
    "ValidationRule",
    "all_of",
    "entry",
    "greater_than",
    "less_than",
    "parse_rule",
    "string_length",
]
