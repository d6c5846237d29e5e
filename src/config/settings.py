"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Values are read from TWO sources (in priority order):
#
#   1. **Environment variables** - e.g., LOOKUP_BASE_URL=http://localhost:9000
#   2. **.env file** - key=value lines in the project root .env file
#
# Field name `lookup_base_url` maps to env var `LOOKUP_BASE_URL`.
# Defaults below point at the public upstream endpoints.
#
# Engine tunables (batch size, overlay window, caps) are NOT here; they
# live in config/config.yaml and are merged by src.config.loader.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Chart aggregation API settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Upstream providers ===
    # Legacy top-chart pages (MZStore viewTop) and the newer charts service
    # share a host but are configured separately so either can be stubbed.
    legacy_charts_base_url: str = "https://itunes.apple.com"
    charts_v2_base_url: str = "https://itunes.apple.com"
    lookup_base_url: str = "https://itunes.apple.com"
    overlay_base_url: str = "https://app.sensortower.com"

    # === Timeouts (seconds) ===
    http_timeout: float = 15.0
    overlay_timeout: float = 10.0

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8787
    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: str = "*"  # comma-separated

    def get_cors_origins(self) -> list[str]:
        """Return the configured CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
