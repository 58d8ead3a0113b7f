"""FeedRegistry 与内置源表测试。"""

import pytest
from pydantic import ValidationError

from newshub.modules.feeds.domain.entities import SourceConfig
from newshub.modules.feeds.domain.exceptions import (
    DuplicateSourceError,
    SourceNotFoundError,
)
from newshub.modules.feeds.domain.registry import FeedRegistry
from newshub.modules.feeds.infrastructure.registry import (
    DEFAULT_SOURCES,
    build_default_registry,
)
from tests.conftest import make_source


def test_registry_preserves_declaration_order() -> None:
    registry = FeedRegistry([make_source("b"), make_source("a"), make_source("c")])

    assert registry.ids == ["b", "a", "c"]
    assert len(registry) == 3
    assert "a" in registry
    assert registry.get("a").display_name == "A"


def test_registry_rejects_duplicate_ids() -> None:
    with pytest.raises(DuplicateSourceError):
        FeedRegistry([make_source("a"), make_source("a")])


def test_registry_unknown_id_raises() -> None:
    with pytest.raises(SourceNotFoundError, match="Source with id 'zzz' not found"):
        FeedRegistry([make_source("a")]).get("zzz")


def test_source_config_requires_http_endpoints() -> None:
    with pytest.raises(ValidationError):
        SourceConfig(id="x", display_name="X", candidate_endpoints=("ftp://x/feed",))

    with pytest.raises(ValidationError):
        SourceConfig(id="x", display_name="X", candidate_endpoints=())


def test_default_registry() -> None:
    registry = build_default_registry()

    assert len(registry) == len(DEFAULT_SOURCES) == 8
    assert registry.ids[:2] == ["bloomberg", "reuters"]
    for config in registry:
        assert config.candidate_endpoints
        assert config.display_name
