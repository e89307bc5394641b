from pathlib import Path
import sys

# Add repository root to sys.path so tests can import local modules without installation.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from helpers import build_world, make_player


@pytest.fixture
def world():
    """Active 9-hex world with two fed, sheltered players on the hull."""
    return build_world([make_player("p1"), make_player("p2")])
