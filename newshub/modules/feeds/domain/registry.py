"""Feed registry: the fixed, ordered table of sources."""

from collections.abc import Iterable, Iterator

from newshub.modules.feeds.domain.entities import SourceConfig
from newshub.modules.feeds.domain.exceptions import (
    DuplicateSourceError,
    SourceNotFoundError,
)


class FeedRegistry:
    """Immutable source table keyed by id, iterated in declaration order."""

    def __init__(self, sources: Iterable[SourceConfig]):
        self._sources: dict[str, SourceConfig] = {}
        for source in sources:
            if source.id in self._sources:
                raise DuplicateSourceError(source.id)
            self._sources[source.id] = source

    def __iter__(self) -> Iterator[SourceConfig]:
        return iter(self._sources.values())

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._sources

    def get(self, source_id: str) -> SourceConfig:
        try:
            return self._sources[source_id]
        except KeyError:
            raise SourceNotFoundError(source_id) from None

    @property
    def ids(self) -> list[str]:
        return list(self._sources)
