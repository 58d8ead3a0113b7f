#!/usr/bin/env python3
"""手动抓取脚本。

执行一轮完整抓取（或只抓取单个源），在终端打印每个源的结果。

使用方式：
    # 抓取全部源
    python scripts/run_cycle.py

    # 只抓取一个源
    python scripts/run_cycle.py --source reuters

    # JSON 输出
    python scripts/run_cycle.py --json

    # 有源失败时以退出码 1 结束（用于 CI/监控）
    python scripts/run_cycle.py --strict
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from newshub.core.infrastructure.logging import setup_logging  # noqa: E402
from newshub.modules.feeds.domain.entities import SourceResult  # noqa: E402
from newshub.modules.feeds.infrastructure.dependencies import (  # noqa: E402
    build_feed_scheduler,
)


def print_result(display_name: str, result: SourceResult) -> None:
    if not result.is_success:
        print(f"\n✗ {display_name}: {result.reason}")
        return

    print(f"\n✓ {display_name} ({result.update_label})")
    for item in result.items:
        marker = "*" if item.is_featured else " "
        print(f"  {marker} {item.rank + 1}. {item.title}")


async def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch news feeds once")
    parser.add_argument("--source", help="Only resolve this source id")
    parser.add_argument("--json", action="store_true", help="JSON output")
    parser.add_argument(
        "--strict", action="store_true", help="Exit 1 if any source failed"
    )
    args = parser.parse_args()

    setup_logging()
    scheduler = build_feed_scheduler()

    if args.source:
        results = {args.source: await scheduler.retry(args.source)}
    else:
        results = await scheduler.run_cycle()

    if args.json:
        payload = {
            source_id: result.model_dump(mode="json")
            for source_id, result in results.items()
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print("=" * 50)
        print("newsHub 抓取结果")
        print("=" * 50)
        for source_id, result in results.items():
            print_result(scheduler.registry.get(source_id).display_name, result)

    failed = [source_id for source_id, result in results.items() if not result.is_success]
    if args.strict and failed:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
