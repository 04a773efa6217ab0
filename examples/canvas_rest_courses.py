#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio

from campus.canvas import CanvasClient, CanvasSettings, configure_logging


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="List active Canvas courses via REST")
    p.add_argument("--log-level", default=None, choices=["debug", "info", "warn", "error"])
    p.add_argument("--max-pages", type=int, default=None)
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.max_pages:
        overrides["max_pages"] = args.max_pages
    settings = CanvasSettings.load(**overrides)
    configure_logging(settings.log_level)

    async with CanvasClient.from_settings(settings) as canvas:
        courses = await canvas.list_courses()

    print("=" * 65)
    print(f"Host       : {settings.canvas_host}")
    print(f"Pages      : {courses.pagination.total_pages}")
    print(f"Courses    : {courses.pagination.total_items}")
    print(f"Duration   : {courses.pagination.duration_ms:.0f} ms")
    print("=" * 65)
    print(f"{'ID':>10} | {'Code':20} | Name")
    print("-" * 65)
    for c in courses.data:
        code = str(c.get("course_code", ""))[:20]
        print(f"{c.get('id', ''):>10} | {code:20} | {c.get('name', '')}")
    print("=" * 65)


if __name__ == "__main__":
    asyncio.run(main())
