from __future__ import annotations

from typing import Protocol


class SchedulePageProvider(Protocol):
    async def fetch_page(self, url: str) -> str:
        """Fetch the upstream HTML page that embeds the schedule literal."""
