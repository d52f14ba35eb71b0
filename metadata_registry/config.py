"""Configuration for the metadata registry client"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.exceptions import ConfigurationError


class MetadataApiConfig(BaseSettings):
    """Connection settings for the asset-management admin API"""
    api_base_url: str = Field(default="https://api.cloudinary.com")
    api_version: str = Field(default="v1_1")
    cloud_name: Optional[str] = Field(default=None)
    api_key: Optional[str] = Field(default=None)
    api_secret: Optional[str] = Field(default=None, repr=False)
    timeout: float = Field(default=60.0, gt=0, description="Request timeout in seconds")
    log_request_body: bool = Field(default=False)
    enable_metrics: bool = Field(default=True)

    model_config = SettingsConfigDict(env_prefix="ASSET_API_")

    @property
    def base_url(self) -> str:
        """``{api_base_url}/{api_version}/{cloud_name}``"""
        if not self.cloud_name:
            raise ConfigurationError("cloud_name is not configured (ASSET_API_CLOUD_NAME)")
        return f"{self.api_base_url.rstrip('/')}/{self.api_version}/{self.cloud_name}"

    @property
    def auth(self) -> Optional[tuple]:
        if self.api_key and self.api_secret:
            return (self.api_key, self.api_secret)
        return None


@lru_cache()
def get_config() -> MetadataApiConfig:
    """Process-wide settings loaded from the environment"""
    return MetadataApiConfig()
