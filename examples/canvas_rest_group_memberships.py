#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json

from campus.canvas import CanvasClient, CanvasError, CanvasSettings, configure_logging


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Show the groups and members of a Canvas course")
    p.add_argument("course_id")
    p.add_argument("--categories", action="store_true", help="only list group category names")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    settings = CanvasSettings.load()
    configure_logging(settings.log_level)

    async with CanvasClient.from_settings(settings) as canvas:
        try:
            if args.categories:
                for name in await canvas.list_course_group_categories(args.course_id):
                    print(name)
                return
            groups = await canvas.list_course_group_memberships(args.course_id)
        except CanvasError as exc:
            print(json.dumps(exc.to_dict(), indent=2, default=str))
            raise SystemExit(1) from exc

    for group in groups:
        category = (group.get("group_category") or {}).get("name", "-")
        print(f"{group.get('name')} [{category}] - {len(group['members'])} members")
        for member in group["members"]:
            print(f"    user {member.get('user_id')} ({member.get('workflow_state', '')})")


if __name__ == "__main__":
    asyncio.run(main())
