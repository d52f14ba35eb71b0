"""
Integration tests against a live asset-management account.

Skipped unless ASSET_API_CLOUD_NAME, ASSET_API_API_KEY and ASSET_API_API_SECRET
are set. Every field created here is deleted again through MetadataTestContext.
"""
import os
from datetime import date

import pytest

from metadata_registry.config import MetadataApiConfig
from metadata_registry.core.metadata import create_metadata_service
from metadata_registry.models import (
    DataSourceParams,
    EntryState,
    FieldValueType,
    MetadataFieldCreate,
    MetadataFieldUpdate,
    all_of,
    entry,
    greater_than,
    less_than,
)

REQUIRED_ENV = ("ASSET_API_CLOUD_NAME", "ASSET_API_API_KEY", "ASSET_API_API_SECRET")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not all(os.getenv(name) for name in REQUIRED_ENV),
        reason="live account credentials are not configured",
    ),
]


@pytest.mark.asyncio
async def test_field_lifecycle(metadata_context):
    async with create_metadata_service(MetadataApiConfig()) as service:
        try:
            params = MetadataFieldCreate(
                external_id=metadata_context.unique_external_id("lifecycle"),
                type=FieldValueType.INTEGER,
                label=metadata_context.unique_label("lifecycle"),
                mandatory=True,
                default_value=100,
                validation=all_of(less_than(300), greater_than(50)),
            )
            created = await service.add_metadata_field(params)
            assert created.default_value == 100
            assert sorted(created.validation.rule_types()) == ["greater_than", "less_than"]

            updated = await service.update_metadata_field(
                params.external_id, MetadataFieldUpdate(value_type="integer", default_value=200)
            )
            assert updated.default_value == 200
            assert updated.label == params.label

            listing = await service.list_metadata_fields()
            assert listing.find(params.external_id) is not None

            deleted = await service.delete_metadata_field(params.external_id)
            assert deleted.ok
        finally:
            await metadata_context.cleanup(service)


@pytest.mark.asyncio
async def test_datasource_lifecycle(metadata_context):
    async with create_metadata_service(MetadataApiConfig()) as service:
        try:
            params = MetadataFieldCreate(
                external_id=metadata_context.unique_external_id("datasource"),
                type=FieldValueType.ENUM,
                label=metadata_context.unique_label("datasource"),
                default_value="external_id_1",
                datasource=DataSourceParams.of(entry("blue", "external_id_1"), entry("yellow", "external_id_2")),
            )
            await service.add_metadata_field(params)

            merged = await service.update_metadata_datasource_entries(
                params.external_id, [entry("green"), entry("gold", "external_id_1")]
            )
            assert len(merged.values) == 3
            assert merged.get("external_id_1").value == "gold"

            removed = await service.delete_metadata_datasource_entries(params.external_id, ["external_id_2"])
            assert len(removed.values) == 1

            field = await service.get_metadata_field(params.external_id)
            assert field.datasource.get("external_id_2").state == EntryState.INACTIVE
        finally:
            await metadata_context.cleanup(service)


@pytest.mark.asyncio
async def test_date_field(metadata_context):
    async with create_metadata_service(MetadataApiConfig()) as service:
        try:
            params = MetadataFieldCreate(
                external_id=metadata_context.unique_external_id("date"),
                type=FieldValueType.DATE,
                label=metadata_context.unique_label("date"),
                default_value=date(2019, 11, 5),
            )
            created = await service.add_metadata_field(params)
            assert created.default_value_wire == "2019-11-05"
        finally:
            await metadata_context.cleanup(service)
