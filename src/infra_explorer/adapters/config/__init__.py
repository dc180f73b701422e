"""Configuration adapters."""

from infra_explorer.adapters.config.app_config import DEFAULT_API_URL, AppConfig

__all__ = ["DEFAULT_API_URL", "AppConfig"]
