"""Feed API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from newshub.modules.feeds.domain.entities import SourceResult, SourceStatus


class SourceCardResponse(BaseModel):
    """One source card: static metadata plus its latest accepted result."""

    id: str = Field(..., description="源ID")
    display_name: str = Field(..., description="展示名称")
    category_tag: str = Field(..., description="分类标签")
    icon: str | None = Field(None, description="展示图标")
    status: SourceStatus = Field(..., description="当前状态")
    is_loading: bool = Field(..., description="是否有进行中的抓取")
    result: SourceResult | None = Field(None, description="最近一次被接受的结果")
    sequence: int = Field(..., description="结果序号")
    updated_at: datetime | None = Field(None, description="结果写入时间")


class BoardResponse(BaseModel):
    """All source cards in registry order."""

    sources: list[SourceCardResponse]
    last_updated_at: datetime | None = Field(None, description="最近一轮完成时间")
    cycles_completed: int = Field(..., description="已完成轮数")
