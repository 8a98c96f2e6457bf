import logging
import os

from intro_curator.errors import ConfigurationError

from .loader import section, setting

logger = logging.getLogger(__name__)


def _channel_id(name: str, raw) -> int:
    if raw in (None, ""):
        return 0
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a numeric channel id, got {raw!r}") from exc


class Core:
    def __init__(self, config: dict | None = None) -> None:
        discord_cfg = section(config, "discord")
        limits_cfg = section(config, "limits")

        token_env = str(discord_cfg.get("token_env", "DISCORD_API_TOKEN"))
        openai_env = str(discord_cfg.get("openai_key_env", "OPENAI_API_KEY"))

        # ``TOKEN`` is accepted for deployments migrated from the old bot
        self.DISCORD_API_TOKEN: str | None = os.getenv(token_env) or os.getenv("TOKEN")
        self.OPENAI_API_KEY: str | None = os.getenv(openai_env) or None

        self.INTRO_CHANNEL_ID: int = _channel_id(
            "INTRO_CHANNEL_ID",
            setting(discord_cfg, "intro_channel_id", "INTRO_CHANNEL_ID"),
        )
        self.PROFILE_CHANNEL_ID: int = _channel_id(
            "PROFILE_CHANNEL_ID",
            setting(discord_cfg, "profile_channel_id", "PROFILE_CHANNEL_ID"),
        )

        self.PROFILE_SCAN_LIMIT: int = int(setting(limits_cfg, "profile_scan_limit", "PROFILE_SCAN_LIMIT", 100))
        # Cards show at most three matches regardless of configuration
        self.MAX_MATCHES: int = min(3, int(setting(limits_cfg, "max_matches", "MAX_MATCHES", 3)))

        required = [
            ("DISCORD_API_TOKEN", self.DISCORD_API_TOKEN),
            ("INTRO_CHANNEL_ID", self.INTRO_CHANNEL_ID),
            ("PROFILE_CHANNEL_ID", self.PROFILE_CHANNEL_ID),
        ]
        missing = [name for name, val in required if not val]
        if missing:
            raise ConfigurationError(f"Missing environment variables: {', '.join(missing)}")

        if not self.OPENAI_API_KEY:
            logger.info("No %s configured; AI enrichment and matching disabled.", openai_env)
