from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure "src" is on sys.path for imports in tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from nimserver.core.config import Settings  # noqa: E402
from nimserver.features.game import GameService  # noqa: E402


@pytest.fixture
def service():
    svc = GameService(settings=Settings(seed=1234))
    try:
        yield svc
    finally:
        svc.close()
