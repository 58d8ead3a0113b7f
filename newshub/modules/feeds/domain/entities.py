"""Feed domain entities.

SourceConfig 描述一个新闻源；NormalizedItem 是解析后的单条标题；
SourceResult 是一次抓取周期内某个源的结果（成功或失败二选一）。
"""

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

MAX_ITEMS_PER_SOURCE = 8
FEATURED_RANK_LIMIT = 3


class SourceConfig(BaseModel):
    """A registered news outlet and its ordered feed mirrors."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="源唯一标识")
    display_name: str = Field(..., min_length=1, description="展示名称")
    category_tag: str = Field(default="", description="分类标签")
    candidate_endpoints: tuple[str, ...] = Field(
        ..., min_length=1, description="候选 feed 地址，靠前者优先"
    )
    icon: str | None = Field(default=None, description="展示图标")

    @field_validator("candidate_endpoints")
    @classmethod
    def _check_endpoints(cls, endpoints: tuple[str, ...]) -> tuple[str, ...]:
        for endpoint in endpoints:
            if not endpoint.startswith(("http://", "https://")):
                raise ValueError(f"endpoint must be an HTTP(S) URL: {endpoint}")
        return endpoints


class NormalizedItem(BaseModel):
    """One headline, normalized from either RSS 2.0 or Atom."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, description="标题")
    link: str = Field(default="", description="原文链接")
    summary: str = Field(default="", description="摘要")
    published_at: datetime = Field(..., description="发布时间")
    rank: int = Field(..., ge=0, description="源内排名，从 0 开始")

    @computed_field
    @property
    def is_featured(self) -> bool:
        return self.rank < FEATURED_RANK_LIMIT


class SourceSuccess(BaseModel):
    """抓取成功：至少一条、至多八条标题。"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    source_id: str
    items: tuple[NormalizedItem, ...] = Field(
        ..., min_length=1, max_length=MAX_ITEMS_PER_SOURCE
    )
    update_label: str
    endpoint: str = Field(..., description="产出结果的 feed 地址")
    resolved_at: datetime

    @field_validator("items")
    @classmethod
    def _check_ranks(
        cls, items: tuple[NormalizedItem, ...]
    ) -> tuple[NormalizedItem, ...]:
        if [item.rank for item in items] != list(range(len(items))):
            raise ValueError("item ranks must be contiguous and start at 0")
        return items

    @property
    def is_success(self) -> bool:
        return True


class SourceFailure(BaseModel):
    """抓取失败：所有候选地址均不可用或为空。"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    source_id: str
    reason: str
    resolved_at: datetime

    @property
    def is_success(self) -> bool:
        return False


SourceResult = Annotated[SourceSuccess | SourceFailure, Field(discriminator="kind")]


class SourceStatus(StrEnum):
    """Per-source display state."""

    IDLE = "idle"  # 尚未抓取
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


class SourceSlot(BaseModel):
    """Keyed store entry for one source.

    `sequence` is the tag of the accepted result; `pending_sequence` is the
    newest resolution that has been started for this source.
    """

    model_config = ConfigDict(frozen=True)

    source_id: str
    status: SourceStatus = SourceStatus.IDLE
    result: SourceResult | None = None
    sequence: int = 0
    pending_sequence: int = 0
    updated_at: datetime | None = None

    @property
    def is_loading(self) -> bool:
        return self.pending_sequence > self.sequence


class BoardSnapshot(BaseModel):
    """Everything the presentation layer needs to render the board."""

    model_config = ConfigDict(frozen=True)

    slots: tuple[SourceSlot, ...]
    last_updated_at: datetime | None = None
    cycles_completed: int = 0
