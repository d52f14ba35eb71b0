"""
Metadata field registry service

Implements the field and datasource management operations against the
ApiCaller boundary. The service keeps no local copy of any definition:
every read goes back to the registry, and every call is exactly one request.

Argument checks happen before the request is built, so a missing identifier
never produces a partial request. Errors reported by the caller are passed
through as raised.
"""
from typing import Any, Iterable, List, Optional, Sequence, Union

from common_logging.setup import get_logger
from ...clients.http_client import JSON_HEADERS, ApiCaller, HttpApiCaller
from ...config import MetadataApiConfig, get_config
from ...models.datasource import DataSourceEntryParams, DataSourceParams
from ...models.exceptions import InvalidArgumentError
from ...models.field import (
    DeleteMetadataFieldResult,
    MetadataDataSourceResult,
    MetadataFieldCreate,
    MetadataFieldListResult,
    MetadataFieldResult,
    MetadataFieldUpdate,
)
from .urls import MetadataUrlBuilder

logger = get_logger(__name__)


def _require_id(value: Any, argument: str) -> str:
    if not isinstance(value, str) or not value.strip():
        logger.warning(f"Rejected call with missing '{argument}'")
        raise InvalidArgumentError(argument)
    return value


def _require(value: Any, argument: str) -> Any:
    if value is None:
        logger.warning(f"Rejected call with missing '{argument}'")
        raise InvalidArgumentError(argument, f"'{argument}' is required")
    return value


class MetadataFieldsService:
    """Create, read, update and delete metadata fields and their datasources"""

    def __init__(self, caller: ApiCaller, base_url: str):
        self.caller = caller
        self.urls = MetadataUrlBuilder(base_url)

    async def add_metadata_field(self, field: MetadataFieldCreate) -> MetadataFieldResult:
        """
        Create a new metadata field definition

        Returns:
            The created definition, including server-assigned datasource ids
        """
        _require(field, "field")
        logger.info(f"Creating metadata field '{field.external_id}' ({field.type.value})")
        data = await self.caller.call(
            "POST", self.urls.fields(), field.to_wire(), JSON_HEADERS
        )
        return MetadataFieldResult.model_validate(data)

    async def list_metadata_fields(self) -> MetadataFieldListResult:
        """All field definitions, in no guaranteed order"""
        logger.debug("Listing metadata fields")
        data = await self.caller.call("GET", self.urls.fields())
        return MetadataFieldListResult.model_validate(data)

    async def get_metadata_field(self, field_external_id: str) -> MetadataFieldResult:
        _require_id(field_external_id, "field_external_id")
        logger.debug(f"Fetching metadata field '{field_external_id}'")
        data = await self.caller.call("GET", self.urls.field(field_external_id))
        return MetadataFieldResult.model_validate(data)

    async def update_metadata_field(
        self,
        field_external_id: str,
        parameters: MetadataFieldUpdate,
    ) -> MetadataFieldResult:
        """
        Update a field by external id

        Only the attributes set on ``parameters`` are sent; the rest stay as
        they are on the server.

        Returns:
            The full definition after the merge
        """
        _require_id(field_external_id, "field_external_id")
        _require(parameters, "parameters")
        payload = parameters.to_wire()
        logger.info(
            f"Updating metadata field '{field_external_id}'",
            extra={'extra_fields': {'attributes': sorted(payload)}}
        )
        data = await self.caller.call(
            "PUT", self.urls.field(field_external_id), payload, JSON_HEADERS
        )
        return MetadataFieldResult.model_validate(data)

    async def update_metadata_datasource_entries(
        self,
        field_external_id: str,
        parameters: Union[DataSourceParams, Sequence[DataSourceEntryParams]],
    ) -> MetadataDataSourceResult:
        """
        Upsert datasource entries of an enum or set field

        Entries whose external id matches an existing entry overwrite its
        value (state is untouched); all others are appended.

        Returns:
            The whole datasource after the merge
        """
        _require_id(field_external_id, "field_external_id")
        _require(parameters, "parameters")
        if not isinstance(parameters, DataSourceParams):
            parameters = list(parameters)
            if not parameters:
                logger.warning("Rejected call with empty 'parameters'")
                raise InvalidArgumentError("parameters")
            parameters = DataSourceParams(values=parameters)
        logger.info(
            f"Upserting {len(parameters.values)} datasource entries on '{field_external_id}'"
        )
        data = await self.caller.call(
            "PUT", self.urls.datasource(field_external_id), parameters.to_wire(), JSON_HEADERS
        )
        return MetadataDataSourceResult.model_validate(data)

    async def delete_metadata_field(self, field_external_id: str) -> DeleteMetadataFieldResult:
        """
        Delete a field definition

        The field disappears from listings; its history may remain server-side.
        """
        _require_id(field_external_id, "field_external_id")
        logger.info(f"Deleting metadata field '{field_external_id}'")
        data = await self.caller.call("DELETE", self.urls.field(field_external_id))
        return DeleteMetadataFieldResult.model_validate(data)

    async def delete_metadata_datasource_entries(
        self,
        field_external_id: str,
        entries_external_ids: Iterable[str],
    ) -> MetadataDataSourceResult:
        """
        Soft-delete datasource entries (state becomes inactive)

        Returns:
            Only the targeted entries; fetch the field for the full datasource
        """
        _require_id(field_external_id, "field_external_id")
        _require(entries_external_ids, "entries_external_ids")
        if isinstance(entries_external_ids, str):
            entries_external_ids = [entries_external_ids]
        external_ids: List[str] = [
            _require_id(external_id, "entries_external_ids") for external_id in entries_external_ids
        ]
        if not external_ids:
            logger.warning("Rejected call with empty 'entries_external_ids'")
            raise InvalidArgumentError("entries_external_ids")
        logger.info(
            f"Deactivating {len(external_ids)} datasource entries on '{field_external_id}'"
        )
        data = await self.caller.call(
            "DELETE", self.urls.datasource(field_external_id, external_ids)
        )
        return MetadataDataSourceResult.model_validate(data)

    async def close(self):
        close = getattr(self.caller, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def create_metadata_service(config: Optional[MetadataApiConfig] = None) -> MetadataFieldsService:
    """Service wired to an HttpApiCaller built from ``config``"""
    config = config or get_config()
    return MetadataFieldsService(HttpApiCaller(config), config.base_url)
