"""Built-in news source table.

RSSHub 镜像排在前面，源站 feed 作为兜底。
"""

from newshub.modules.feeds.domain.entities import SourceConfig
from newshub.modules.feeds.domain.registry import FeedRegistry

DEFAULT_SOURCES: tuple[SourceConfig, ...] = (
    SourceConfig(
        id="bloomberg",
        display_name="彭博社",
        category_tag="财经热点",
        icon="📈",
        candidate_endpoints=(
            "https://rsshub.app/bloomberg",
            "https://rsshub.app/bloomberg/markets",
            "https://feeds.bloomberg.com/markets/news.rss",
        ),
    ),
    SourceConfig(
        id="reuters",
        display_name="路透社",
        category_tag="国际快讯",
        icon="📡",
        candidate_endpoints=(
            "https://rsshub.app/reuters/world",
            "https://rsshub.app/reuters/theWire",
            "https://www.reutersagency.com/feed/?taxonomy=best-topics&post_type=best",
        ),
    ),
    SourceConfig(
        id="ap",
        display_name="美联社",
        category_tag="今日焦点",
        icon="📰",
        candidate_endpoints=(
            "https://rsshub.app/apnews/topics/apf-topnews",
            "https://rsshub.app/apnews/topics/world-news",
        ),
    ),
    SourceConfig(
        id="rfi",
        display_name="法广",
        category_tag="国际视角",
        icon="📻",
        candidate_endpoints=(
            "https://rsshub.app/rfi/cn",
            "https://www.rfi.fr/cn/rss",
        ),
    ),
    SourceConfig(
        id="ft",
        display_name="金融时报",
        category_tag="深度分析",
        icon="📊",
        candidate_endpoints=(
            "https://rsshub.app/ft/chinese/hotstoryby7day",
            "https://rsshub.app/ft/chinese/news",
        ),
    ),
    SourceConfig(
        id="wsj",
        display_name="华尔街日报",
        category_tag="财经热榜",
        icon="💹",
        candidate_endpoints=(
            "https://rsshub.app/wsj/en-us/world_news",
            "https://feeds.a.dj.com/rss/RSSWorldNews.xml",
        ),
    ),
    SourceConfig(
        id="nikkei",
        display_name="日经中文网",
        category_tag="亚洲视野",
        icon="🗾",
        candidate_endpoints=(
            "https://rsshub.app/nikkei/cn/top",
            "https://rsshub.app/nikkei/cn",
        ),
    ),
    SourceConfig(
        id="zaobao",
        display_name="联合早报",
        category_tag="东南亚",
        icon="🦁",
        candidate_endpoints=(
            "https://rsshub.app/zaobao/realtime/china",
            "https://rsshub.app/zaobao/realtime/world",
        ),
    ),
)


def build_default_registry() -> FeedRegistry:
    return FeedRegistry(DEFAULT_SOURCES)
