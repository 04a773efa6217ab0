"""High-level Canvas client for courses, groups and memberships.

Wraps a CanvasTransport with one method per Canvas resource the
student-groups tool needs. Collection methods return a PaginatedResult;
single-object lookups return the object itself.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Any
from urllib.parse import quote

from ..core.config import CanvasSettings
from ..core.enums import HTTPMethod
from ..models.page import MutationResult, PaginatedResult
from ..runtime.rest.transport import CanvasTransport


class CanvasClient:
    """Canvas LMS API client for the student-groups workflow."""

    def __init__(self, transport: CanvasTransport, settings: CanvasSettings | None = None) -> None:
        self._transport = transport
        self._settings = settings
        self._started = time.monotonic()

    @classmethod
    def from_settings(cls, settings: CanvasSettings | None = None) -> CanvasClient:
        """Build a client from settings (loaded from the environment if omitted)."""
        settings = settings or CanvasSettings.load()
        return cls(CanvasTransport.from_settings(settings), settings)

    # --- courses -----------------------------------------------------------

    async def list_courses(self) -> PaginatedResult:
        """Active courses of the authenticated user."""
        return await self._transport.get_all("/courses?enrollment_state=active&per_page=100")

    async def get_course(self, course_id: int | str) -> Any:
        result = await self._transport.get_all(f"/courses/{_segment(course_id)}")
        return result.first()

    async def list_course_users(
        self, course_id: int | str, enrollment_type: str = "student"
    ) -> PaginatedResult:
        return await self._transport.get_all(
            f"/courses/{_segment(course_id)}/users?enrollment_type={quote(enrollment_type)}"
        )

    # --- groups ------------------------------------------------------------

    async def list_course_groups(self, course_id: int | str) -> PaginatedResult:
        """Groups of a course, each including its ``group_category``."""
        return await self._transport.get_all(
            f"/courses/{_segment(course_id)}/groups?include[]=group_category"
        )

    async def list_group_memberships(
        self, group_id: int | str, *, include_user: bool = True
    ) -> PaginatedResult:
        path = f"/groups/{_segment(group_id)}/memberships"
        if include_user:
            path += "?include[]=user"
        return await self._transport.get_all(path)

    async def list_course_group_memberships(self, course_id: int | str) -> list[dict[str, Any]]:
        """Every group of a course with a ``members`` list attached.

        Groups are fetched first, then each group's memberships, one group at
        a time. Any failure aborts the whole call.
        """
        groups = await self.list_course_groups(course_id)
        with_members: list[dict[str, Any]] = []
        for group in groups.data:
            members = await self.list_group_memberships(group["id"], include_user=False)
            with_members.append({**group, "members": list(members.data)})
        return with_members

    async def list_course_group_categories(self, course_id: int | str) -> list[str]:
        """Sorted, de-duplicated group category names used in a course."""
        groups = await self.list_course_groups(course_id)
        names = {
            group["group_category"]["name"]
            for group in groups.data
            if isinstance(group.get("group_category"), dict) and group["group_category"].get("name")
        }
        return sorted(names)

    # --- mutations ---------------------------------------------------------

    async def create_group(self, category_id: int | str, name: str) -> MutationResult:
        return await self._transport.send(
            HTTPMethod.POST, f"/group_categories/{_segment(category_id)}/groups", {"name": name}
        )

    async def add_group_member(self, group_id: int | str, user_id: int | str) -> MutationResult:
        return await self._transport.send(
            HTTPMethod.POST, f"/groups/{_segment(group_id)}/memberships", {"user_id": user_id}
        )

    async def remove_group_member(
        self, group_id: int | str, membership_id: int | str
    ) -> MutationResult:
        return await self._transport.send(
            HTTPMethod.DELETE,
            f"/groups/{_segment(group_id)}/memberships/{_segment(membership_id)}",
        )

    # --- service info ------------------------------------------------------

    def health(self) -> dict[str, Any]:
        """Liveness summary; does not contact Canvas."""
        config = self._transport.config
        return {
            "status": "ok",
            "environment": self._settings.environment if self._settings else None,
            "canvas_host": config.host,
            "canvas_api_url": f"{config.base_url}{config.api_prefix}",
            "timestamp": datetime.now(UTC).isoformat(),
            "uptime": time.monotonic() - self._started,
        }

    def describe_config(self) -> dict[str, Any]:
        """Redacted configuration; never includes the access token itself."""
        if self._settings is not None:
            return self._settings.describe()
        config = self._transport.config
        return {
            "canvas_host": config.host,
            "log_level": config.log_level.value,
            "request_timeout_ms": config.timeout_ms,
            "page_delay_ms": config.page_delay_ms,
            "max_pages": config.max_pages,
            "max_retries": config.max_retries,
        }

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> CanvasClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def _segment(value: int | str) -> str:
    """Quote an identifier for use as a single path segment."""
    return quote(str(value), safe="")
