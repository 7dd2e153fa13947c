"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings

from alertext.core.notify.models import HTTPClientConfig, TelephoneConfig

PRODUCT_NAME = "alertext"
PRODUCT_TAGLINE = "Search-index documents and voice-call notifications for alert routing."
PRODUCT_VERSION = "0.3.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Telephone (voice notify) channel
    telephone_app_key: str = ""
    telephone_app_secret: str = ""
    telephone_username: str = ""
    telephone_authorization: str = ""
    telephone_base_url: str = ""
    telephone_display_number: str = ""
    telephone_template_id: str = ""
    telephone_operators: List[str] = []
    telephone_country_code: str = "+86"
    telephone_refresh_after_hours: int = 47
    telephone_validate_delivery_response: bool = False

    # HTTP client used by outbound channels
    http_timeout_seconds: float = 10.0
    http_verify_ssl: bool = True
    http_ca_bundle: Optional[str] = None
    http_proxy_url: Optional[str] = None

    # Search-index documents
    es_required_labels: List[str] = ["value", "severity", "group"]

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    def http_config(self) -> HTTPClientConfig:
        """Build the HTTP client configuration for outbound channels."""
        return HTTPClientConfig(
            timeout_seconds=self.http_timeout_seconds,
            verify_ssl=self.http_verify_ssl,
            ca_bundle=self.http_ca_bundle,
            proxy_url=self.http_proxy_url,
        )

    def telephone_config(self) -> TelephoneConfig:
        """Build the telephone channel configuration."""
        return TelephoneConfig(
            app_key=self.telephone_app_key,
            app_secret=self.telephone_app_secret,
            username=self.telephone_username,
            authorization=self.telephone_authorization,
            base_url=self.telephone_base_url,
            display_number=self.telephone_display_number,
            template_id=self.telephone_template_id,
            operators=self.telephone_operators,
            country_code=self.telephone_country_code,
            refresh_after_hours=self.telephone_refresh_after_hours,
            validate_delivery_response=self.telephone_validate_delivery_response,
            http=self.http_config(),
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
