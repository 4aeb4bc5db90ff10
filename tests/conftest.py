import sys
from pathlib import Path

import pytest
from loguru import logger

# Add project root to path to allow absolute imports
sys.path.insert(0, str(Path(__file__).parent.parent))


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float):
        self.delays.append(delay)


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()
