"""
pytest adapter for the script-style suite.

test_push_gate.py runs standalone (`python3 test_push_gate.py`) with a
collecting TestRunner. Under pytest each test_* function receives a strict
runner instead, which raises on the first failed assertion.
"""
import sys
from pathlib import Path

import pytest

lib_path = Path(__file__).parent / 'lib'
sys.path.insert(0, str(lib_path))


@pytest.fixture
def runner():
    from test_push_gate import TestRunner
    return TestRunner(strict=True)
