from pathlib import Path

import pytest
from structlog.testing import capture_logs

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def bulletin_text() -> str:
    return (FIXTURES / "bulletin.json").read_text(encoding="utf-8")


@pytest.fixture(autouse=True)
def captured_logs():
    """Capture structlog events instead of printing them."""
    with capture_logs() as logs:
        yield logs
