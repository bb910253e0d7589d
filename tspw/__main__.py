# tspw/__main__.py
from __future__ import annotations

import asyncio
import sys
from typing import Optional, Sequence

import structlog

from . import orchestrator
from .cli import USAGE, parse_args
from .config import settings
from .exceptions import HelpRequested, ParseError
from .logging_setup import configure_logging
from .models import Options

logger = structlog.get_logger()


async def _run(options: Options) -> int:
    report = await orchestrator.run(options)
    if report.state is orchestrator.RunState.FAILED:
        return 1
    if report.state is orchestrator.RunState.WATCHING:
        # Nothing left to do but keep the watcher streams attached.
        results = await asyncio.gather(*report.watchers, return_exceptions=True)
        for res in results:
            if isinstance(res, Exception):
                logger.error("watcher_stream_failed", error=str(res))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    # CLI owns logging configuration; library modules just use get_logger().
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    tokens = list(sys.argv[1:] if argv is None else argv)
    try:
        options = parse_args(tokens)
    except HelpRequested:
        print(USAGE)
        return 0
    except ParseError as e:
        logger.error("parse_failed", error=str(e))
        print(USAGE)
        return 1

    try:
        return asyncio.run(_run(options))
    except KeyboardInterrupt:
        logger.info("interrupted")
        return 0


if __name__ == "__main__":
    sys.exit(main())
