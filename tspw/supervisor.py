# tspw/supervisor.py
from __future__ import annotations

import asyncio
import codecs
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, TextIO

import structlog

from .config import Settings, settings as default_settings
from .exceptions import CompileFailure
from .models import Options

logger = structlog.get_logger()


@dataclass(frozen=True)
class CompileResult:
    project: Path
    returncode: int
    stdout: str = ""
    stderr: str = ""


# -----------------------------------------------------------------------------
# Argument vectors
# -----------------------------------------------------------------------------
def build_argv(project: Path, options: Options, *, watch: bool = False) -> List[str]:
    argv = [str(options.compiler_path), "-p", str(project)]
    if watch:
        argv.append("-w")
    argv.extend(options.extra_args_split())
    return argv


def _launch_cmd(argv: List[str], cfg: Settings) -> List[str]:
    node = (cfg.NODE_BIN or "").strip()
    return [node, *argv] if node else list(argv)


def _simulate(argv: List[str]) -> None:
    print(" ".join(argv), flush=True)


def _decode(data: Optional[bytes]) -> str:
    return (data or b"").decode("utf-8", errors="replace")


# -----------------------------------------------------------------------------
# Compile mode
# -----------------------------------------------------------------------------
async def run_to_completion(
    project: Path,
    options: Options,
    *,
    settings: Optional[Settings] = None,
) -> CompileResult:
    """
    Run one compile to completion. Captured output is echoed on success;
    a non-zero exit or a spawn error raises CompileFailure.
    """
    argv = build_argv(project, options)
    if options.simulate:
        _simulate(argv)
        return CompileResult(project=project, returncode=0)

    cmd = _launch_cmd(argv, settings or default_settings)
    logger.debug("executing_subprocess", cmd=" ".join(cmd))
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise CompileFailure(project, None, stderr=str(e)) from e

    out, err = await proc.communicate()
    stdout, stderr = _decode(out), _decode(err)

    if proc.returncode != 0:
        raise CompileFailure(project, proc.returncode, stdout=stdout, stderr=stderr)

    if stdout:
        sys.stdout.write(stdout)
        sys.stdout.flush()
    if stderr:
        sys.stderr.write(stderr)
        sys.stderr.flush()
    return CompileResult(project=project, returncode=0, stdout=stdout, stderr=stderr)


# -----------------------------------------------------------------------------
# Watch mode
# -----------------------------------------------------------------------------
_CHUNK_SIZE = 65536


async def _forward(stream: Optional[asyncio.StreamReader], sink: TextIO) -> None:
    # Chunked reads; tsc lines can exceed the StreamReader line limit.
    if stream is None:
        return
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        text = decoder.decode(chunk, final=not chunk)
        if text:
            sink.write(text)
            sink.flush()
        if not chunk:
            return


async def _pump(proc: asyncio.subprocess.Process, project: Path) -> int:
    await asyncio.gather(
        _forward(proc.stdout, sys.stdout),
        _forward(proc.stderr, sys.stderr),
    )
    code = await proc.wait()
    logger.debug("watcher_exited", project=str(project), returncode=code)
    return code


async def start_watcher(
    project: Path,
    options: Options,
    *,
    settings: Optional[Settings] = None,
) -> Optional["asyncio.Task[int]"]:
    """
    Spawn a detached `tsc -w` and forward its output as it arrives.

    Returns the forwarding task, or None when simulating or when the
    process could not be spawned. Watchers are never awaited, tracked
    or restarted by the supervisor.
    """
    argv = build_argv(project, options, watch=True)
    if options.simulate:
        _simulate(argv)
        return None

    cmd = _launch_cmd(argv, settings or default_settings)
    logger.debug("executing_subprocess", cmd=" ".join(cmd))
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as e:
        logger.error("watcher_spawn_failed", project=str(project), error=str(e))
        return None

    return asyncio.create_task(_pump(proc, project))
