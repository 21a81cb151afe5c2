"""
Application configuration module.

Loads environment variables (from a .env file or the system environment)
and validates them with pydantic-settings. The settings control which Azion
endpoints the tools talk to, which API token they send, and how the HTTP
front door is exposed (host, port, optional API key, log level).

Tools call `get_settings()` on every invocation instead of reading a
module-level constant, so the Azion token is resolved once per call and can
be supplied explicitly in tests.
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env
load_dotenv()

EVENTS_GRAPHQL_URL = "https://api-origin.azionapi.net/events/graphql"
NETWORK_LISTS_URL = "https://edge-api.azion.net/workspace/api/network_lists"

MISSING_TOKEN_MESSAGE = (
    "Missing AZION_API_TOKEN (or AZION_TOKEN) in environment. "
    "Please create a .env with AZION_API_TOKEN=your_token and ensure your runner loads it."
)


class Settings(BaseSettings):
    """
    Validated application settings loaded from environment variables.

    Attributes:
        AZION_API_TOKEN:          Preferred Azion personal token.
        AZION_TOKEN:              Fallback name for the same token.
        AZION_EVENTS_GRAPHQL_URL: Real-Time Events GraphQL endpoint.
        AZION_NETWORK_LISTS_URL:  Network lists REST collection endpoint.
        MCP_API_KEY:              Bearer key required by the HTTP front door.
                                  Empty disables the check.
        HOST:                     Interface uvicorn binds to.
        PORT:                     Port uvicorn listens on (default: 8000).
        LOG_LEVEL:                Root logging level.
    """
    AZION_API_TOKEN: Optional[str] = None
    AZION_TOKEN: Optional[str] = None

    AZION_EVENTS_GRAPHQL_URL: str = EVENTS_GRAPHQL_URL
    AZION_NETWORK_LISTS_URL: str = NETWORK_LISTS_URL

    MCP_API_KEY: str = ""
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(extra="ignore")

    @property
    def api_token(self) -> Optional[str]:
        """
        The Azion token to send, or None when neither variable is set.

        AZION_API_TOKEN wins over AZION_TOKEN. Blank values count as unset.
        """
        for value in (self.AZION_API_TOKEN, self.AZION_TOKEN):
            if value and value.strip():
                return value.strip()
        return None


def get_settings() -> Settings:
    """
    Build a fresh Settings instance from the current environment.

    Returns:
        Settings: Settings reflecting the environment at call time.
    """
    return Settings()
