from .loader import section, setting


class AI:
    """Model selection for the refine and rank requests."""

    def __init__(self, config: dict | None = None, *, api_key: str | None = None, use_local: bool = False) -> None:
        models_cfg = section(config, "models")
        self.REFINE_MODEL_ID: str = str(setting(models_cfg, "refine_model", "REFINE_MODEL_ID", "gpt-4o-mini"))
        self.MATCH_MODEL_ID: str = str(setting(models_cfg, "match_model", "MATCH_MODEL_ID", "gpt-4o-mini"))
        self.ENABLED: bool = bool(api_key) or use_local
