"""Service configuration loaded from environment variables."""

import os

from pydantic import BaseModel, Field

SANDBOX_BASE_URL = "https://connect.squareupsandbox.com"
PRODUCTION_BASE_URL = "https://connect.squareup.com"


def _env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag such as "true", "1" or "yes" from the environment."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _split_keys(raw: str) -> list[str]:
    return [key.strip() for key in raw.split(",") if key.strip()]


class ServiceConfig(BaseModel):
    """Runtime settings for the order resolution service."""

    environment: str = Field(default="development", description="Deployment environment")
    square_environment: str = Field(default="sandbox", description="'sandbox' or 'production'")
    square_access_token: str = Field(default="", description="Square API bearer token")
    square_location_id: str = Field(default="", description="Square location receiving orders")
    square_api_version: str = Field(default="2024-09-19", description="Square-Version header")
    catalog_ttl_seconds: float = Field(default=300.0, description="Snapshot time-to-live", gt=0)
    catalog_fetch_timeout_seconds: float = Field(
        default=10.0, description="Timeout applied to each catalog page request", gt=0
    )
    catalog_warm_interval_seconds: float = Field(
        default=0.0, description="Background warm-up interval, 0 disables it", ge=0
    )
    strict_order_resolution: bool = Field(
        default=False, description="Reject the whole order when any line is unresolved"
    )
    serve_stale_catalog: bool = Field(
        default=False, description="Fall back to a stale snapshot when a refresh fails"
    )
    inbound_api_keys: list[str] = Field(default_factory=list, description="Accepted inbound keys")
    synonyms_table: str | None = Field(None, description="DynamoDB table holding synonym rules")
    dynamodb_endpoint: str | None = Field(None, description="Local DynamoDB endpoint override")
    aws_region: str = Field(default="us-east-1", description="AWS region for DynamoDB")

    @property
    def square_base_url(self) -> str:
        if self.square_environment == "production":
            return PRODUCTION_BASE_URL
        return SANDBOX_BASE_URL

    @property
    def is_configured(self) -> bool:
        """Whether Square credentials needed for catalog and order calls are present."""
        return bool(self.square_access_token and self.square_location_id)

    @property
    def api_key_required(self) -> bool:
        """Inbound keys are mandatory in production and whenever any key is configured."""
        return bool(self.inbound_api_keys) or self.environment == "production"

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Build configuration from the process environment.

        Returns:
            ServiceConfig: Parsed configuration with defaults applied
        """
        square_env = os.getenv("SQUARE_ENVIRONMENT") or os.getenv("SQUARE_ENV") or "sandbox"
        inbound = os.getenv("INBOUND_API_KEY") or os.getenv("VAPI_INBOUND_KEY") or ""

        return cls(
            environment=os.getenv("ENVIRONMENT", "development"),
            square_environment=square_env.strip().lower(),
            square_access_token=os.getenv("SQUARE_ACCESS_TOKEN", ""),
            square_location_id=os.getenv("SQUARE_LOCATION_ID", ""),
            square_api_version=os.getenv("SQUARE_API_VERSION", "2024-09-19"),
            catalog_ttl_seconds=_env_float("CATALOG_TTL_SECONDS", 300.0),
            catalog_fetch_timeout_seconds=_env_float("CATALOG_FETCH_TIMEOUT_SECONDS", 10.0),
            catalog_warm_interval_seconds=_env_float("CATALOG_WARM_INTERVAL_SECONDS", 0.0),
            strict_order_resolution=_env_flag("STRICT_ORDER_RESOLUTION"),
            serve_stale_catalog=_env_flag("SERVE_STALE_CATALOG"),
            inbound_api_keys=_split_keys(inbound),
            synonyms_table=os.getenv("SYNONYMS_TABLE") or None,
            dynamodb_endpoint=os.getenv("DYNAMODB_ENDPOINT") or None,
            aws_region=os.getenv("AWS_REGION", "us-east-1"),
        )
