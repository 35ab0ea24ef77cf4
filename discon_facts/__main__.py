from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import uvicorn

from discon_facts.config import load_settings
from discon_facts.core.document import apply_failure
from discon_facts.core.models import DocumentDefaults
from discon_facts.main import build_batch, configure_logging
from discon_facts.parsers.errors import InternalFault
from discon_facts.pipeline.engine import build_engine
from discon_facts.pipeline.fetch import fetch_regions
from discon_facts.providers.registry import build_provider
from discon_facts.storage.repository import FactDocumentStore

logger = logging.getLogger("discon.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="discon_facts")
    commands = parser.add_subparsers(dest="command", required=True)

    parse = commands.add_parser("parse", help="parse one downloaded page into its fact document")
    parse.add_argument("--region", required=True)
    parse.add_argument("--in", dest="input", required=True)
    parse.add_argument("--out", dest="output", required=True)
    parse.add_argument("--upstream", default=None)
    parse.add_argument("--pretty", action="store_true")

    commands.add_parser("parse-all", help="parse every page in OUTPUTS_DIR")

    fetch = commands.add_parser("fetch", help="download pages for configured regions")
    fetch.add_argument("regions", nargs="*")

    commands.add_parser("serve", help="run the HTTP API")
    return parser


def _record_startup_fault(args: argparse.Namespace, exc: Exception) -> None:
    output = Path(args.output)
    store = FactDocumentStore(str(output.parent))
    fault = InternalFault(f"Parser crashed: {exc}")
    try:
        document = apply_failure(
            store.load(output),
            region_id=args.region,
            upstream=args.upstream,
            code=fault.code,
            message=str(fault),
            now=datetime.now(timezone.utc),
            defaults=DocumentDefaults(),
        )
        store.write(output, document, pretty=args.pretty)
    except Exception:
        logger.exception("Could not persist error status for region %s", args.region)


def _run_parse(args: argparse.Namespace) -> int:
    try:
        settings = load_settings()
        configure_logging(settings.log_level)
        engine = build_engine(settings)
    except Exception as exc:
        configure_logging("INFO")
        logger.exception("Parser setup failed for region %s", args.region)
        _record_startup_fault(args, exc)
        return 0

    engine.process(
        args.region,
        args.input,
        args.output,
        upstream=args.upstream,
        pretty=args.pretty,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    if args.command == "parse":
        return _run_parse(args)

    settings = load_settings()
    configure_logging(settings.log_level)

    if args.command == "parse-all":
        build_batch(settings).run()
        return 0

    if args.command == "fetch":
        asyncio.run(
            fetch_regions(
                build_provider(settings),
                settings.region_sources,
                settings.outputs_dir,
                only=args.regions or None,
            )
        )
        return 0

    uvicorn.run(
        "discon_facts.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
