import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    token: str
    # Sync slash commands to this guild only for faster propagation
    guild_id: str | None = None
    application_channel_id: str | None = None
    log_channel_id: str | None = None
    admin_role_id: str | None = None
    # Empty path keeps applications in memory only
    data_path: str = "whitelist_data.json"
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    identity_token: str = ""
    server_name: str = "Prime City RP"
    reapply_after_hours: int = 24
    log_level: str = "INFO"


def _optional(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def _int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def load_settings() -> Settings:
    token = os.getenv("DISCORD_BOT_TOKEN", "").strip() or os.getenv(
        "DISCORD_TOKEN", ""
    ).strip()
    return Settings(
        token=token,
        guild_id=_optional("DISCORD_GUILD_ID"),
        application_channel_id=_optional("DISCORD_APPLICATION_CHANNEL_ID"),
        log_channel_id=_optional("DISCORD_LOG_CHANNEL_ID"),
        admin_role_id=_optional("DISCORD_ADMIN_ROLE_ID"),
        data_path=os.getenv("WHITELIST_DATA_PATH", "whitelist_data.json").strip(),
        api_host=os.getenv("WHITELIST_API_HOST", "0.0.0.0").strip() or "0.0.0.0",
        api_port=_int("PORT", 5000),
        identity_token=os.getenv("WHITELIST_IDENTITY_TOKEN", "").strip(),
        server_name=os.getenv("WHITELIST_SERVER_NAME", "").strip() or "Prime City RP",
        reapply_after_hours=_int("WHITELIST_REAPPLY_HOURS", 24),
        log_level=os.getenv("WHITELIST_LOG_LEVEL", "").strip() or "INFO",
    )
