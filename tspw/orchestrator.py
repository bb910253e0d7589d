# tspw/orchestrator.py
from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import structlog

from . import supervisor
from .exceptions import CompileFailure
from .models import CompilationBatch, Options

logger = structlog.get_logger()


class RunState(str, Enum):
    DONE = "done"
    FAILED = "failed"
    WATCHING = "watching"


@dataclass
class RunReport:
    state: RunState
    # Live watcher tasks; the caller keeps the loop alive on them.
    watchers: List["asyncio.Task[int]"] = field(default_factory=list)
    failure: Optional[CompileFailure] = None


async def run_batch(batch: CompilationBatch, options: Options) -> None:
    """
    Compile every project of one batch concurrently and wait for all of them.
    The first failure cancels what is still pending and is re-raised.
    """
    if not batch.projects:
        logger.info("compile_batch_empty", source=batch.source)
        return

    logger.info("compile_batch_started", source=batch.source, projects=len(batch.projects))
    tasks = []
    for project in batch.projects:
        logger.info("compiling", project=str(project))
        tasks.append(asyncio.create_task(supervisor.run_to_completion(project, options)))

    done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)

    # Retrieve every finished exception, not just the one re-raised.
    failures = [t.exception() for t in tasks if t in done and not t.cancelled()]
    failures = [e for e in failures if e is not None]
    if failures:
        for p in pending:
            p.cancel()
        raise failures[0]


def _echo_failure(failure: CompileFailure) -> None:
    for text in (failure.stderr, failure.stdout):
        if text.strip():
            sys.stderr.write(text if text.endswith("\n") else text + "\n")
    sys.stderr.flush()


async def run(options: Options) -> RunReport:
    """Compile phase (serial batches), then watch phase."""
    for index, batch in enumerate(options.compilation_batches, start=1):
        try:
            await run_batch(batch, options)
        except CompileFailure as e:
            logger.error(
                "compile_failed",
                project=str(e.project),
                returncode=e.returncode,
                batch=index,
                source=batch.source,
            )
            _echo_failure(e)
            return RunReport(state=RunState.FAILED, failure=e)

    if options.compilation_batches:
        logger.info("compile_phase_complete", batches=len(options.compilation_batches))

    watchers: List["asyncio.Task[int]"] = []
    for project in options.watch_projects:
        logger.info("watching", project=str(project))
        handle = await supervisor.start_watcher(project, options)
        if handle is not None:
            watchers.append(handle)

    if watchers:
        return RunReport(state=RunState.WATCHING, watchers=watchers)
    return RunReport(state=RunState.DONE)
