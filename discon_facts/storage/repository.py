from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

from discon_facts.core.models import FactDocument

logger = logging.getLogger("discon.storage")


def dump_document(document: FactDocument, *, pretty: bool) -> str:
    if pretty:
        return json.dumps(document, ensure_ascii=False, indent=2)
    return json.dumps(document, ensure_ascii=False, separators=(",", ":"))


class FactDocumentStore:
    def __init__(self, data_dir: str, template_path: str | None = None) -> None:
        self.data_dir = data_dir
        self.template_path = template_path

    def document_path(self, region_id: str) -> Path:
        return Path(self.data_dir) / f"{region_id}.json"

    def load(self, path: str | Path) -> FactDocument | None:
        """Return the previously written document, or None if absent or unreadable."""
        target = Path(path)
        if not target.exists():
            return None
        try:
            document = json.loads(target.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            logger.warning("Ignoring unreadable document %s: %s", target, exc)
            return None
        if not isinstance(document, dict):
            logger.warning("Ignoring document %s: top-level value is not an object", target)
            return None
        return document

    def load_template(self) -> FactDocument | None:
        if not self.template_path:
            return None
        return self.load(self.template_path)

    def write(self, path: str | Path, document: FactDocument, *, pretty: bool = False) -> int:
        """Write ``document`` atomically and return the number of characters written."""
        target = Path(path)
        text = dump_document(document, pretty=pretty)
        write_text_atomic(target, text)
        return len(text)

    def list_regions(self) -> list[str]:
        root = Path(self.data_dir)
        if not root.is_dir():
            return []
        return sorted(
            path.stem
            for path in root.glob("*.json")
            if path.is_file() and not path.name.startswith("_")
        )

    def get_document(self, region_id: str) -> dict[str, Any] | None:
        return self.load(self.document_path(region_id))

    def ping(self) -> bool:
        return Path(self.data_dir).is_dir()


def _target_mode(target: Path) -> int:
    # Existing mode, else what a plain open() would create.
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_text_atomic(target: Path, text: str) -> None:
    """Write to a sibling temporary file, then rename it over ``target``."""
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, _target_mode(target))
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
