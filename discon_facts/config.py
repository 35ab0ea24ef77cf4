from __future__ import annotations

import json
import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Settings:
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    data_dir: str = "./data"
    outputs_dir: str = "./outputs"
    template_path: str = "./data/_template.json"
    pretty_output: bool = True

    fact_timezone: str = "Europe/Kyiv"
    fact_ttl_seconds: int = 300

    region_sources: dict[str, str] = field(default_factory=dict)
    provider_kind: str = "http_page"
    fetch_timeout_seconds: int = 90

    enable_scheduler: bool = False
    poll_interval_minutes: int = 30
    poll_align_clock: bool = True


def _as_bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    return int(raw)


def _as_region_sources(raw: str | None) -> dict[str, str]:
    if raw is None or not raw.strip():
        return {}

    try:
        parsed = json.loads(raw)
    except ValueError as exc:
        raise ValueError(f"REGION_SOURCES_JSON is not valid JSON: {exc}") from exc

    if not isinstance(parsed, dict) or not all(
        isinstance(key, str) and isinstance(value, str) for key, value in parsed.items()
    ):
        raise ValueError("REGION_SOURCES_JSON must be a JSON object mapping region ids to URLs")
    return parsed


def load_settings() -> Settings:
    data_dir = os.getenv("DATA_DIR", "./data")
    return Settings(
        app_host=os.getenv("APP_HOST", "0.0.0.0"),
        app_port=_as_int(os.getenv("APP_PORT"), 8000),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        data_dir=data_dir,
        outputs_dir=os.getenv("OUTPUTS_DIR", "./outputs"),
        template_path=os.getenv("TEMPLATE_PATH", os.path.join(data_dir, "_template.json")),
        pretty_output=_as_bool(os.getenv("PRETTY_OUTPUT"), True),
        fact_timezone=os.getenv("FACT_TIMEZONE", "Europe/Kyiv"),
        fact_ttl_seconds=_as_int(os.getenv("FACT_TTL_SECONDS"), 300),
        region_sources=_as_region_sources(os.getenv("REGION_SOURCES_JSON")),
        provider_kind=os.getenv("PROVIDER_KIND", "http_page"),
        fetch_timeout_seconds=_as_int(os.getenv("FETCH_TIMEOUT_SECONDS"), 90),
        enable_scheduler=_as_bool(os.getenv("ENABLE_SCHEDULER"), False),
        poll_interval_minutes=_as_int(os.getenv("POLL_INTERVAL_MINUTES"), 30),
        poll_align_clock=_as_bool(os.getenv("POLL_ALIGN_CLOCK"), True),
    )
