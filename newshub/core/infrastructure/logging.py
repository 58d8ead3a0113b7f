"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于关键业务事件的结构化日志
"""

import sys
from typing import Any

import structlog
from loguru import logger

from newshub.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """配置 structlog 处理器链。"""
    if settings.ENVIRONMENT == "local":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    """配置 loguru。"""
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/newshub_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="14 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    """将日志级别字符串转换为数字。"""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# 业务事件日志记录器
# ============================================================================


class BusinessEvents:
    """业务事件日志助手类。

    提供统一的业务事件日志记录接口，确保事件格式一致。

    Usage:
        BusinessEvents.feed_source_resolved(
            source_id="reuters", items_count=8, endpoint="https://rsshub.app/reuters/world"
        )
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def feed_source_resolved(
        cls,
        source_id: str,
        items_count: int,
        endpoint: str,
        **extra: Any,
    ) -> None:
        """记录源解析成功事件。"""
        cls._log.info(
            "feed_source_resolved",
            event_type="feed",
            source_id=source_id,
            items_count=items_count,
            endpoint=endpoint,
            **extra,
        )

    @classmethod
    def feed_source_failed(
        cls,
        source_id: str,
        reason: str,
        endpoints_tried: int,
        **extra: Any,
    ) -> None:
        """记录源解析失败事件。"""
        cls._log.warning(
            "feed_source_failed",
            event_type="feed_error",
            source_id=source_id,
            reason=reason,
            endpoints_tried=endpoints_tried,
            **extra,
        )

    @classmethod
    def feed_result_discarded(
        cls,
        source_id: str,
        sequence: int,
        current_sequence: int,
        **extra: Any,
    ) -> None:
        """记录过期结果被丢弃事件。"""
        cls._log.info(
            "feed_result_discarded",
            event_type="feed",
            source_id=source_id,
            sequence=sequence,
            current_sequence=current_sequence,
            **extra,
        )

    @classmethod
    def feed_cycle_completed(
        cls,
        cycle_id: int,
        succeeded: int,
        failed: int,
        duration_ms: int,
        **extra: Any,
    ) -> None:
        """记录一轮抓取完成事件。"""
        cls._log.info(
            "feed_cycle_completed",
            event_type="feed_cycle",
            cycle_id=cycle_id,
            succeeded=succeeded,
            failed=failed,
            duration_ms=duration_ms,
            **extra,
        )
