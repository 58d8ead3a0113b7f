"""Feed API routes."""

from fastapi import APIRouter, Depends

from newshub.core.interfaces.http.response import ApiResponse
from newshub.modules.feeds.application.dependencies import get_feed_scheduler
from newshub.modules.feeds.application.scheduler import FeedScheduler
from newshub.modules.feeds.domain.entities import SourceConfig, SourceSlot
from newshub.modules.feeds.interfaces.schemas import BoardResponse, SourceCardResponse

router = APIRouter(prefix="/feeds", tags=["feeds"])


def _to_card_response(config: SourceConfig, slot: SourceSlot) -> SourceCardResponse:
    return SourceCardResponse(
        id=config.id,
        display_name=config.display_name,
        category_tag=config.category_tag,
        icon=config.icon,
        status=slot.status,
        is_loading=slot.is_loading,
        result=slot.result,
        sequence=slot.sequence,
        updated_at=slot.updated_at,
    )


def _to_board_response(scheduler: FeedScheduler) -> BoardResponse:
    snapshot = scheduler.store.snapshot()
    return BoardResponse(
        sources=[
            _to_card_response(scheduler.registry.get(slot.source_id), slot)
            for slot in snapshot.slots
        ],
        last_updated_at=snapshot.last_updated_at,
        cycles_completed=snapshot.cycles_completed,
    )


@router.get(
    "",
    response_model=ApiResponse[BoardResponse],
    summary="获取全部新闻源",
    description="返回每个源最近一次被接受的结果，以及最近一轮刷新完成时间",
)
async def get_board(
    scheduler: FeedScheduler = Depends(get_feed_scheduler),
) -> ApiResponse[BoardResponse]:
    return ApiResponse.success(data=_to_board_response(scheduler))


@router.post(
    "/refresh",
    response_model=ApiResponse[BoardResponse],
    summary="刷新全部新闻源",
    description="立即发起一轮完整抓取，等待所有源结束后返回",
)
async def refresh_all(
    scheduler: FeedScheduler = Depends(get_feed_scheduler),
) -> ApiResponse[BoardResponse]:
    await scheduler.refresh_all()
    return ApiResponse.success(
        data=_to_board_response(scheduler), message="Refresh completed"
    )


@router.get(
    "/{source_id}",
    response_model=ApiResponse[SourceCardResponse],
    summary="获取单个新闻源",
)
async def get_source(
    source_id: str,
    scheduler: FeedScheduler = Depends(get_feed_scheduler),
) -> ApiResponse[SourceCardResponse]:
    config = scheduler.registry.get(source_id)
    return ApiResponse.success(
        data=_to_card_response(config, scheduler.store.get(source_id))
    )


@router.post(
    "/{source_id}/retry",
    response_model=ApiResponse[SourceCardResponse],
    summary="重试单个新闻源",
)
async def retry_source(
    source_id: str,
    scheduler: FeedScheduler = Depends(get_feed_scheduler),
) -> ApiResponse[SourceCardResponse]:
    await scheduler.retry(source_id)
    config = scheduler.registry.get(source_id)
    return ApiResponse.success(
        data=_to_card_response(config, scheduler.store.get(source_id)),
        message="Retry completed",
    )
