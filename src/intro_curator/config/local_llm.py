from .loader import section, setting


class LocalLLM:
    """Optional Ollama backend used instead of OpenAI for refine and rank."""

    def __init__(self, config: dict | None = None) -> None:
        llm_cfg = section(config, "local_llm")
        use_local_raw = setting(llm_cfg, "use_local", "USE_LOCAL", "0")
        self.USE_LOCAL: bool = str(use_local_raw).lower() in ("1", "true", "yes")
        self.LOCAL_MODEL_ID: str = str(setting(llm_cfg, "local_model_id", "LOCAL_MODEL_ID", "llama3.1:8b"))
        self.LOCAL_SERVER_URL: str = str(
            setting(llm_cfg, "local_server_url", "LOCAL_SERVER_URL", "http://localhost:11434")
        )
