from __future__ import annotations

from pydantic_settings import BaseSettings

DEFAULT_BASE_URL = "https://api.discogs.com"
DEFAULT_USER_AGENT = "discogs-python/0.1.0"


class ClientSettings(BaseSettings):
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    token: str | None = None
    timeout: float = 30.0
    anonymous_rate_limit: int = 25
    authenticated_rate_limit: int = 60
    rate_limit_window: float = 60.0
    log_format: str = "text"
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "DISCOGS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "frozen": True,
    }

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    @property
    def rate_limit(self) -> int:
        """Requests allowed per ``rate_limit_window`` for this credential state."""
        if self.authenticated:
            return self.authenticated_rate_limit
        return self.anonymous_rate_limit


def resolve_settings(
    settings: ClientSettings | None = None,
    token: str | None = None,
) -> ClientSettings:
    """Return *settings* (or env defaults) with *token* applied on top."""
    resolved = settings if settings is not None else ClientSettings()
    if token is not None:
        resolved = resolved.model_copy(update={"token": token})
    return resolved
