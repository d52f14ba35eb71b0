from .service import MetadataFieldsService, create_metadata_service
from .urls import MetadataUrlBuilder

__all__ = ["MetadataFieldsService", "MetadataUrlBuilder", "create_metadata_service"]
