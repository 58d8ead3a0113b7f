"""Feed 抓取与解析基础设施。"""

from newshub.modules.feeds.infrastructure.parser import (
    FeedSchema,
    detect_schema,
    parse_feed,
    parse_timestamp,
)
from newshub.modules.feeds.infrastructure.registry import (
    DEFAULT_SOURCES,
    build_default_registry,
)
from newshub.modules.feeds.infrastructure.transport import (
    AccessStrategy,
    FeedTransport,
    build_access_strategies,
)

__all__ = [
    "AccessStrategy",
    "DEFAULT_SOURCES",
    "FeedSchema",
    "FeedTransport",
    "build_access_strategies",
    "build_default_registry",
    "detect_schema",
    "parse_feed",
    "parse_timestamp",
]
