"""
Client for managing custom metadata field definitions and their
controlled-vocabulary datasources on a remote asset-management service
"""

from common_logging.setup import silence_library_logger

from .clients import ApiCaller, HttpApiCaller
from .config import MetadataApiConfig, get_config
from .core.metadata import MetadataFieldsService, create_metadata_service

__version__ = "1.0.0"

silence_library_logger(__name__)

__all__ = [
    "ApiCaller",
    "HttpApiCaller",
    "MetadataApiConfig",
    "MetadataFieldsService",
    "create_metadata_service",
    "get_config",
]
