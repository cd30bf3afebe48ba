"""
Invoice Service configuration
"""

from pathlib import Path

from pydantic_settings import BaseSettings

ROOT_DIR = Path(__file__).parent.parent.parent.parent
# Load from invoice_service/.env
ENV_FILE = ROOT_DIR / "invoice_service" / ".env"


class InvoiceServiceSettings(BaseSettings):
    # Application
    APP_NAME: str
    APP_VERSION: str
    DEBUG: bool
    ENVIRONMENT: str

    # Service specific
    SERVICE_NAME: str

    # Database
    INVOICE_DATABASE_URL: str
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 40

    # Dapr sidecar
    DAPR_HTTP_ENDPOINT: str = "http://localhost:3500"
    DAPR_PUBSUB_NAME: str = "pubsub"
    INVOICE_CREATED_TOPIC: str = "invoice/invoice/created"
    DAPR_PUBLISH_TIMEOUT: float = 10.0

    # Logging
    LOG_LEVEL: str

    class Config:
        env_file = ENV_FILE
        case_sensitive = True
        extra = "ignore"


_settings_instance = None


def get_settings() -> InvoiceServiceSettings:
    """Get settings singleton instance"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = InvoiceServiceSettings()
    return _settings_instance
