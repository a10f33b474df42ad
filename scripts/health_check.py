#!/usr/bin/env python3
"""健康检查脚本。

用于检查缓存与上游服务的可用性。
可作为运维脚本或监控探针使用。

使用方式：
    # 完整健康检查
    python scripts/health_check.py

    # 只检查特定组件
    python scripts/health_check.py --component cache
    python scripts/health_check.py --component catalog
    python scripts/health_check.py --component conversion

    # JSON 输出
    python scripts/health_check.py --json

    # 退出码检查（用于 CI/CD）
    python scripts/health_check.py --strict
"""

import argparse
import asyncio
import json
import sys
from datetime import UTC, datetime
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


async def check_cache() -> dict:
    """检查响应缓存后端。"""
    from src.core.config import settings
    from src.core.infrastructure.cache import create_response_cache

    cache = await create_response_cache(settings)
    try:
        health = await cache.check_health()
    finally:
        await cache.close()

    # no-op 缓存不影响服务，只算 warning
    status = "healthy"
    if health.get("status") == "skipped":
        status = "warning"
    elif health.get("status") != "ok":
        status = "unhealthy"
    return {**health, "status": status}


async def check_catalog() -> dict:
    """检查 YouTube 目录源（会消耗一次 API 配额）。"""
    from src.core.config import settings
    from src.core.domain.exceptions import UpstreamUnavailableError
    from src.modules.catalog.infrastructure.youtube_source import (
        YouTubeCatalogSource,
    )

    if not settings.catalog_source_configured:
        return {"status": "unhealthy", "error": "YouTube API key or channel not configured"}

    source = YouTubeCatalogSource()
    try:
        items = await source.fetch_items()
    except UpstreamUnavailableError as e:
        return {"status": "unhealthy", "error": e.message}

    return {
        "status": "healthy" if items else "warning",
        "channel_id": source.channel_id,
        "item_count": len(items),
    }


async def check_conversion() -> dict:
    """检查转换服务配置。

    不发起真实转换：每次调用都是一次计费的转换请求。
    """
    from src.core.config import settings

    if not settings.conversion_configured:
        return {"status": "unhealthy", "error": "GIFTED_API_KEY not configured"}
    return {
        "status": "healthy",
        "base_url": settings.GIFTED_API_BASE_URL,
        "timeout_sec": settings.CONVERSION_TIMEOUT_SEC,
    }


CHECKERS = {
    "cache": check_cache,
    "catalog": check_catalog,
    "conversion": check_conversion,
}


def _as_component(result: dict | BaseException) -> dict:
    if isinstance(result, BaseException):
        return {"status": "error", "error": str(result)}
    return result


async def run_full_check() -> dict:
    """运行完整健康检查。"""
    results = {
        "timestamp": datetime.now(UTC).isoformat(),
        "overall_status": "healthy",
        "components": {},
    }

    # 并行执行所有检查
    outcomes = await asyncio.gather(
        *(checker() for checker in CHECKERS.values()),
        return_exceptions=True,
    )
    for name, outcome in zip(CHECKERS, outcomes, strict=True):
        results["components"][name] = _as_component(outcome)

    # 确定整体状态
    statuses = [c.get("status", "unknown") for c in results["components"].values()]

    if any(s in ("unhealthy", "error") for s in statuses):
        results["overall_status"] = "unhealthy"
    elif any(s == "warning" for s in statuses):
        results["overall_status"] = "degraded"

    return results


async def run_component_check(component: str) -> dict:
    """运行单个组件检查。"""
    if component not in CHECKERS:
        return {"error": f"Unknown component: {component}"}

    (outcome,) = await asyncio.gather(CHECKERS[component](), return_exceptions=True)
    return {
        "timestamp": datetime.now(UTC).isoformat(),
        "component": component,
        "result": _as_component(outcome),
    }


def _emoji(status: str) -> str:
    if status == "healthy":
        return "✅"
    if status in ("warning", "degraded"):
        return "⚠️"
    return "❌"


def print_result(result: dict, json_output: bool = False):
    """打印检查结果。"""
    if json_output:
        print(json.dumps(result, indent=2))
        return

    print(f"\n{'=' * 60}")
    print(f"Health Check Report - {result.get('timestamp', 'N/A')}")
    print(f"{'=' * 60}")

    if "overall_status" in result:
        overall = result["overall_status"]
        print(f"\nOverall Status: {_emoji(overall)} {overall.upper()}")

        print(f"\n{'-' * 40}")
        for component, info in result.get("components", {}).items():
            comp_status = info.get("status", "unknown")
            print(f"{_emoji(comp_status)} {component}: {comp_status}")

            # 打印额外信息
            if comp_status != "healthy":
                for key, value in info.items():
                    if key != "status":
                        print(f"    {key}: {value}")

    elif "result" in result:
        info = result["result"]
        comp_status = info.get("status", "unknown")
        print(f"\n{result.get('component', 'Component')}: {_emoji(comp_status)} {comp_status}")

        for key, value in info.items():
            if key != "status":
                print(f"  {key}: {value}")

    print(f"\n{'=' * 60}\n")


def main():
    """主函数。"""
    parser = argparse.ArgumentParser(description="系统健康检查脚本")
    parser.add_argument(
        "--component",
        "-c",
        type=str,
        choices=list(CHECKERS),
        help="只检查特定组件",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="输出 JSON 格式",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="严格模式：任何非 healthy 状态都返回非零退出码",
    )

    args = parser.parse_args()

    if args.component:
        result = asyncio.run(run_component_check(args.component))
    else:
        result = asyncio.run(run_full_check())

    print_result(result, args.json)

    # 确定退出码
    if args.strict:
        overall = result.get("overall_status", result.get("result", {}).get("status", "unknown"))
        if overall != "healthy":
            sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
