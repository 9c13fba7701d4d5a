from __future__ import annotations

import pytest

from tests.helpers.stack import Stack, build_stack


@pytest.fixture
def stack() -> Stack:
    return build_stack()
