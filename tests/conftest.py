import os, sys
import tempfile
import warnings
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add src/ to sys.path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

# Ensure required environment variables before intro_curator.config is imported
os.environ.setdefault("DISCORD_API_TOKEN", "test-token")
os.environ.setdefault("OPENAI_API_KEY", "test-openai")
os.environ.setdefault("INTRO_CHANNEL_ID", "111")
os.environ.setdefault("PROFILE_CHANNEL_ID", "222")
os.environ.setdefault(
    "PROFILE_DB_PATH", str(Path(tempfile.gettempdir()) / "intro_curator_test.db")
)

# Silence deprecation warnings surfaced from third-party dependencies during tests
warnings.filterwarnings(
    "ignore", category=DeprecationWarning, module=r"^discord\\.player$"
)
warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)


def pytest_configure(config):
    warnings.filterwarnings(
        "ignore", category=DeprecationWarning, module=r"^discord\\.player$"
    )
    warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)


FULL_INTRO = """🎓 Name: Ada Lovelace
💼 Role / Study: Mathematics, University of London
🤖 Interests: Analytical engines, poetry
🧠 Skills: Python, numerical methods
🚀 Goal: Build a hackathon project"""


class FakeProfileChannel:
    """Just enough of ``discord.TextChannel`` for the lifecycle."""

    def __init__(self, *, send_error=None, fetch_error=None):
        self.sent = []
        self.deleted = []
        self.history_messages = []
        self.fetch_calls = []
        self._next_id = 1000
        self._send_error = send_error
        self._fetch_error = fetch_error

    async def send(self, *, embed=None, content=None):
        if self._send_error is not None:
            raise self._send_error
        self._next_id += 1
        message = SimpleNamespace(id=self._next_id, embeds=[embed] if embed else [], content=content)
        self.sent.append(message)
        return message

    async def fetch_message(self, message_id):
        self.fetch_calls.append(message_id)
        if self._fetch_error is not None:
            raise self._fetch_error

        async def _delete():
            self.deleted.append(message_id)

        return SimpleNamespace(id=message_id, delete=_delete)

    async def history(self, limit=None):
        for message in self.history_messages[:limit]:
            yield message


def http_error(cls, status=404, reason="Not Found", text="Unknown Message"):
    """Build a discord.py HTTP exception without a live response object."""
    return cls(SimpleNamespace(status=status, reason=reason), text)


@pytest.fixture
def full_intro():
    return FULL_INTRO


@pytest.fixture
def profile_channel():
    return FakeProfileChannel()


@pytest.fixture
def store(tmp_path):
    from intro_curator.memory import ProfileStore

    profile_store = ProfileStore(str(tmp_path / "profiles.db"))
    yield profile_store
    profile_store.close()
