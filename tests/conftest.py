from typing import Any

import pytest

from scene2d.config import ImporterConfig
from scene2d.controller.session import ImportSession
from scene2d.controller.source import SourceNode


@pytest.fixture
def session() -> ImportSession:
    return ImportSession()


@pytest.fixture
def make_node():
    """Build a SourceNode from a tag and keyword attributes."""
    def _make(tag: str, children: list[SourceNode] | None = None, **attributes: Any) -> SourceNode:
        return SourceNode(tag=tag, attributes=attributes, children=children or [])
    return _make


@pytest.fixture
def coarse_config() -> ImporterConfig:
    return ImporterConfig(arc_segments=4)
