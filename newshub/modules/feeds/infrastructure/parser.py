"""RSS 2.0 / Atom feed parser.

先探测 RSS 的 <item>，没有再探测 Atom 的 <entry>；元素按本地名匹配，忽略命名空间。
只看文档顺序上的前 max_items 个条目，标题为空的条目被丢弃且不补位。
"""

import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from enum import StrEnum

from newshub.modules.feeds.domain.entities import MAX_ITEMS_PER_SOURCE, NormalizedItem
from newshub.modules.feeds.domain.exceptions import EmptyFeedError, MalformedFeedError

_CDATA_WRAPPER = re.compile(r"^\s*<!\[CDATA\[(.*)\]\]>\s*$", re.DOTALL)


class FeedSchema(StrEnum):
    """Feed schema family."""

    RSS = "rss"
    ATOM = "atom"


@dataclass(frozen=True)
class ParseStrategy:
    """Element names used to pull fields out of one schema family."""

    schema: FeedSchema
    entry_tag: str
    title_tags: frozenset[str]
    summary_tags: frozenset[str]
    date_tags: frozenset[str]
    link_tag: str = "link"


PARSE_STRATEGIES: dict[FeedSchema, ParseStrategy] = {
    FeedSchema.RSS: ParseStrategy(
        schema=FeedSchema.RSS,
        entry_tag="item",
        title_tags=frozenset({"title"}),
        summary_tags=frozenset({"description", "summary", "content"}),
        date_tags=frozenset({"pubDate", "published", "updated", "date"}),
    ),
    FeedSchema.ATOM: ParseStrategy(
        schema=FeedSchema.ATOM,
        entry_tag="entry",
        title_tags=frozenset({"title"}),
        summary_tags=frozenset({"summary", "content", "description"}),
        date_tags=frozenset({"published", "updated", "pubDate", "date"}),
    ),
}


def parse_feed(
    raw_text: str,
    now: datetime | None = None,
    max_items: int = MAX_ITEMS_PER_SOURCE,
) -> list[NormalizedItem]:
    """Parse a feed payload into ranked, normalized items.

    Args:
        raw_text: feed body as text
        now: fallback timestamp for entries without a usable date
        max_items: size of the raw entry window

    Returns:
        Items ranked 0..n-1 in document order, n <= max_items

    Raises:
        MalformedFeedError: payload is not well-formed XML
        EmptyFeedError: no entry with a non-empty title
    """
    fetched_at = now or datetime.now(UTC)
    root = _parse_xml(raw_text)

    schema = detect_schema(root)
    if schema is None:
        raise EmptyFeedError()
    strategy = PARSE_STRATEGIES[schema]

    entries = [el for el in root.iter() if _local_name(el.tag) == strategy.entry_tag]

    items: list[NormalizedItem] = []
    for entry in entries[:max_items]:
        title = _clean_text(_first_text(entry, strategy.title_tags))
        if not title:
            continue

        published_at = parse_timestamp(_first_text(entry, strategy.date_tags))

        items.append(
            NormalizedItem(
                title=title,
                link=_extract_link(entry, strategy.link_tag),
                summary=_clean_text(_first_text(entry, strategy.summary_tags)),
                published_at=published_at or fetched_at,
                rank=len(items),
            )
        )

    if not items:
        raise EmptyFeedError()

    return items


def detect_schema(root: ET.Element) -> FeedSchema | None:
    """Pick the schema family by probing for entry containers."""
    tags = {_local_name(el.tag) for el in root.iter()}
    if PARSE_STRATEGIES[FeedSchema.RSS].entry_tag in tags:
        return FeedSchema.RSS
    if PARSE_STRATEGIES[FeedSchema.ATOM].entry_tag in tags:
        return FeedSchema.ATOM
    return None


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse RFC 2822 (RSS) or ISO 8601 (Atom) dates into aware UTC datetimes."""
    if not value or not value.strip():
        return None
    value = value.strip()

    parsed: datetime | None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError, OverflowError):
        parsed = None

    if parsed is None:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    # aware values near datetime.min/max cannot be shifted to UTC
    try:
        return parsed.astimezone(UTC)
    except (OverflowError, ValueError):
        return None


def _parse_xml(raw_text: str) -> ET.Element:
    # A BOM or leading whitespace before the XML declaration is a parse error.
    text = raw_text.lstrip("\ufeff \t\r\n")
    try:
        return ET.fromstring(text)
    except ET.ParseError as e:
        raise MalformedFeedError(f"Failed to parse feed XML: {e}") from e


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _descendants(element: ET.Element) -> Iterator[ET.Element]:
    for el in element.iter():
        if el is not element:
            yield el


def _first_element(element: ET.Element, names: frozenset[str]) -> ET.Element | None:
    return next(
        (el for el in _descendants(element) if _local_name(el.tag) in names), None
    )


def _first_text(element: ET.Element, names: frozenset[str]) -> str:
    found = _first_element(element, names)
    if found is None:
        return ""
    return "".join(found.itertext())


def _clean_text(text: str) -> str:
    text = text.strip()
    match = _CDATA_WRAPPER.match(text)
    if match:
        text = match.group(1)
    return text.strip()


def _extract_link(entry: ET.Element, link_tag: str) -> str:
    """href 属性优先于文本内容；Atom 多个 link 时优先 rel=alternate。"""
    links = [el for el in _descendants(entry) if _local_name(el.tag) == link_tag]
    if not links:
        return ""

    preferred = next(
        (el for el in links if el.get("rel") in (None, "alternate")), links[0]
    )
    return (preferred.get("href") or "".join(preferred.itertext())).strip()
