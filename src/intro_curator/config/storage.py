from pathlib import Path

from .loader import section, setting

_DEFAULT_SQLITE_PATH = Path("data") / "profiles.db"


class Storage:
    def __init__(self, config: dict | None = None) -> None:
        storage_cfg = section(config, "storage")
        self.PROFILE_DB_PATH: str = str(
            setting(storage_cfg, "profile_db_path", "PROFILE_DB_PATH", str(_DEFAULT_SQLITE_PATH))
        )
