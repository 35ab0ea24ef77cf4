from __future__ import annotations

from dataclasses import dataclass, field

import httpx


class ProviderError(RuntimeError):
    pass


BROWSER_HEADERS: dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
        "image/webp,image/apng,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
}


@dataclass
class HttpPageProvider:
    timeout_seconds: int = 90
    headers: dict[str, str] = field(default_factory=lambda: dict(BROWSER_HEADERS))

    async def fetch_page(self, url: str) -> str:
        if not url:
            raise ProviderError("Upstream URL is empty")

        timeout = httpx.Timeout(self.timeout_seconds)
        async with httpx.AsyncClient(
            timeout=timeout,
            headers=self.headers,
            follow_redirects=True,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.text
