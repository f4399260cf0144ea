"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True
    )

    # Shopify Admin API
    shopify_api_key: str = ""
    shopify_api_secret: str = ""
    shopify_access_token: str = ""
    shopify_store_domain: str = "localhost:8001"
    shopify_api_version: str = "2024-07"
    shopify_admin_scheme: str = "https"

    # App Proxy (storefront path is /{prefix}/{subpath}/...)
    app_proxy_prefix: str = "apps"
    app_proxy_subpath: str = "bazicash"
    signature_tolerance_seconds: int = 90

    # Only used by the proxy registration tool
    backend_url: str = "https://SEU-BACKEND.com"

    # Store credit
    default_currency: str = "BRL"
    history_page_size: int = 50
    store_credit_accounts_page_size: int = 10

    # Service
    service_name: str = "bazicash-gateway"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    # HTTP Client
    http_timeout_seconds: float = 5.0

    @property
    def admin_graphql_url(self) -> str:
        return (
            f"{self.shopify_admin_scheme}://{self.shopify_store_domain}"
            f"/admin/api/{self.shopify_api_version}/graphql.json"
        )


settings = Settings()
