"""Application configuration"""

import logging
from dotenv import load_dotenv

from .loader import load_raw_config
from .core import Core
from .ai import AI
from .storage import Storage
from .local_llm import LocalLLM

load_dotenv()

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT, level=logging.INFO)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("discord.http").setLevel(logging.WARNING)

_RAW_CONFIG = load_raw_config()

core = Core(_RAW_CONFIG)
local_llm = LocalLLM(_RAW_CONFIG)
ai = AI(_RAW_CONFIG, api_key=core.OPENAI_API_KEY, use_local=local_llm.USE_LOCAL)
storage = Storage(_RAW_CONFIG)


__all__ = ["core", "ai", "storage", "local_llm"]
