"""
Pure transitions over the persisted per-region fact document.

Every function takes the prior document (or ``None``) and returns a new
document; the prior one is never mutated.
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any

from discon_facts.core.constants import (
    CODE_OK,
    REASON_EMPTY_AFTER_PARSE,
    REASON_INITIALIZED,
    SCHEMA_VERSION,
    SOURCE_NOTES,
    SOURCE_TYPE,
    STATUS_ERROR,
    STATUS_IDLE,
    STATUS_PARSED,
    TEMPLATE_NOTES,
)
from discon_facts.core.models import DocumentDefaults, FactDocument, NormalizedFact


def format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="seconds")


def previous_attempt(document: FactDocument | None) -> int:
    if not isinstance(document, dict):
        return 0
    status = document.get("lastUpdateStatus")
    if not isinstance(status, dict):
        return 0
    attempt = status.get("attempt")
    if isinstance(attempt, int) and not isinstance(attempt, bool):
        return attempt
    return 0


def is_empty_data(data: Any) -> bool:
    if data is None:
        return True
    if isinstance(data, (dict, list, str)):
        return len(data) == 0
    return False


def _meta(document: FactDocument | None) -> dict[str, Any]:
    if isinstance(document, dict) and isinstance(document.get("meta"), dict):
        return document["meta"]
    return {}


def build_template(
    region_id: str | None,
    upstream: str | None,
    now: datetime,
    defaults: DocumentDefaults,
    base: FactDocument | None = None,
) -> FactDocument:
    """Baseline document for a region that has never been written."""
    if isinstance(base, dict):
        template = copy.deepcopy(base)
    else:
        template = {
            "regionId": None,
            "regionName": None,
            "regionType": None,
            "lastUpdated": None,
            "data": [],
            "lastUpdateStatus": {
                "status": STATUS_IDLE,
                "ok": True,
                "code": None,
                "message": None,
                "at": None,
                "attempt": 0,
            },
            "meta": {
                "schemaVersion": SCHEMA_VERSION,
                "fileCreated": None,
                "timezone": defaults.timezone,
                "source": {"type": SOURCE_TYPE, "upstream": None, "notes": TEMPLATE_NOTES},
                "ttlSeconds": defaults.ttl_seconds,
                "nextScheduledFetch": None,
                "etag": None,
                "contentHash": None,
                "dataEmpty": True,
                "dataEmptyReason": REASON_INITIALIZED,
                "rawFactIncluded": False,
            },
        }

    template["regionId"] = region_id or template.get("regionId")
    meta = template.setdefault("meta", {})
    source = meta.setdefault("source", {"type": SOURCE_TYPE})
    if isinstance(source, dict):
        source["upstream"] = upstream or source.get("upstream")
    if not meta.get("fileCreated"):
        meta["fileCreated"] = format_timestamp(now)
    return template


def apply_failure(
    prior: FactDocument | None,
    *,
    region_id: str | None,
    upstream: str | None,
    code: int,
    message: str | None,
    now: datetime,
    defaults: DocumentDefaults,
    template: FactDocument | None = None,
) -> FactDocument:
    """Record a failed attempt, keeping ``data``, ``lastUpdated`` and ``contentHash``."""
    if isinstance(prior, dict):
        document = copy.deepcopy(prior)
    else:
        document = build_template(region_id, upstream, now, defaults, base=template)

    stamp = format_timestamp(now)
    document["lastUpdateStatus"] = {
        "status": STATUS_ERROR,
        "ok": False,
        "code": code,
        "message": message,
        "at": stamp,
        "attempt": previous_attempt(prior) + 1,
    }

    meta = document.get("meta")
    if isinstance(meta, dict):
        if not meta.get("fileCreated"):
            meta["fileCreated"] = stamp
        if upstream:
            source = meta.get("source")
            if not isinstance(source, dict):
                source = meta["source"] = {"type": SOURCE_TYPE}
            source["upstream"] = upstream
    return document


def apply_success(
    prior: FactDocument | None,
    *,
    region_id: str,
    upstream: str | None,
    fact: NormalizedFact,
    content_hash: str,
    now: datetime,
    defaults: DocumentDefaults,
    template: FactDocument | None = None,
) -> FactDocument:
    """
    Build a fresh document from a successful parse.

    ``fileCreated`` and the descriptive region fields are carried over from
    ``prior`` (or from ``template`` when there is no prior document);
    ``lastUpdated`` moves only when ``content_hash`` differs from the prior
    one.
    """
    stamp = format_timestamp(now)
    prior_meta = _meta(prior)
    prior_source = prior_meta.get("source") if isinstance(prior_meta.get("source"), dict) else {}
    carried = prior if isinstance(prior, dict) else {}
    described = carried or (template if isinstance(template, dict) else {})

    data_empty = is_empty_data(fact.data)
    reason = fact.data_empty_reason
    if data_empty and not reason:
        reason = REASON_EMPTY_AFTER_PARSE

    # Unchanged upstream content keeps its original timestamp.
    last_updated = stamp
    if prior_meta.get("contentHash") == content_hash and carried.get("lastUpdated"):
        last_updated = carried["lastUpdated"]

    return {
        "regionId": region_id,
        "regionName": described.get("regionName"),
        "regionType": described.get("regionType"),
        "lastUpdated": last_updated,
        "data": fact.data,
        "lastUpdateStatus": {
            "status": STATUS_PARSED,
            "ok": True,
            "code": CODE_OK,
            "message": None,
            "at": stamp,
            "attempt": previous_attempt(prior) + 1,
        },
        "meta": {
            "schemaVersion": SCHEMA_VERSION,
            "fileCreated": prior_meta.get("fileCreated") or stamp,
            "timezone": defaults.timezone,
            "source": {
                "type": SOURCE_TYPE,
                "upstream": upstream or prior_source.get("upstream"),
                "notes": SOURCE_NOTES,
            },
            "ttlSeconds": defaults.ttl_seconds,
            "nextScheduledFetch": None,
            "etag": None,
            "contentHash": content_hash,
            "dataEmpty": data_empty,
            "dataEmptyReason": reason,
            "rawFactIncluded": fact.raw_fact_included,
        },
    }
