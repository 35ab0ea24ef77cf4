from __future__ import annotations

from discon_facts.config import Settings
from discon_facts.providers.base import SchedulePageProvider
from discon_facts.providers.http_page import HttpPageProvider


class UnknownProviderError(RuntimeError):
    pass


def build_provider(settings: Settings) -> SchedulePageProvider:
    if settings.provider_kind == "http_page":
        return HttpPageProvider(timeout_seconds=settings.fetch_timeout_seconds)

    raise UnknownProviderError(f"Unsupported provider kind: {settings.provider_kind}")
