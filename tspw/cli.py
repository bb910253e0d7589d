# tspw/cli.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

import structlog

from . import __version__
from . import compiler_path as compiler
from .config import INSTALL_DIR, Settings, settings as default_settings
from .exceptions import HelpRequested, MissingArgumentError, UnhandledParameterError
from .locator import resolve_path
from .models import CompilationBatch, Options

logger = structlog.get_logger()

USAGE = f"""
Version {__version__}
Syntax: tspw [options] [projectDirOrFile ...]

Examples:   tspw
            tspw ./editor/core ./plugins/log_console/tsconfig.json
            tspw --watch . --tsc ./node_modules/typescript/bin/tsc
            tspw --watch . --tsc-args "--allowJs true --alwaysStrict true"
            tspw --compile ./core --compile ./plugins --watch .

--compile <path> : compile every project under <path> (dir or tsconfig.json); each --compile is a serial stage, its projects build in parallel
--watch <path> : start a watcher on every project under <path> (dir or tsconfig.json)
--tsc (-t) <pathToTsc> : where to find tsc. By default look in the enclosing node_modules, then the global npm install
--tsc-args (-a) <args> : custom parameters to pass to tsc, split on spaces. Should be specified between "" (ex: "--allowJs true")
--simulate : print the tsc command lines instead of running them
--help : print this help
bare paths : same as --watch for each path
"""


_VALUE_FLAGS = ("--compile", "--watch", "--tsc", "-t", "--tsc-args", "-a")


def _help_requested(tokens: Sequence[str]) -> bool:
    """`--help` at a flag position; flag values and implicit watch paths don't count."""
    mode_seen = False
    i = 0
    while i < len(tokens):
        param = tokens[i]
        if param == "--help":
            return True
        if param in _VALUE_FLAGS:
            mode_seen = mode_seen or param in ("--compile", "--watch")
            i += 2
            continue
        if not param.startswith("-") and not mode_seen:
            return False
        i += 1
    return False


def _take_value(tokens: Sequence[str], i: int, flag: str) -> str:
    if i + 1 >= len(tokens):
        raise MissingArgumentError(f"No value specified with option {flag}")
    return tokens[i + 1]


def parse_args(
    tokens: Sequence[str],
    *,
    cwd: Optional[Path] = None,
    install_dir: Optional[Path] = None,
    settings: Optional[Settings] = None,
) -> Options:
    """
    Turn command-line tokens into Options.

    Paths are resolved as soon as their token is seen; the first failure
    raises and nothing is returned. `--help` at any flag position wins
    over everything, including invalid tokens before it.
    """
    cfg = settings or default_settings
    cwd = cwd or Path.cwd()

    if _help_requested(tokens):
        raise HelpRequested()

    batches: List[CompilationBatch] = []
    watch: List[Path] = []
    tsc: Optional[Path] = None
    extra_args: Optional[str] = None
    simulate = False
    mode_seen = False

    i = 0
    while i < len(tokens):
        param = tokens[i]
        if param == "--compile":
            source = _take_value(tokens, i, param)
            batches.append(
                CompilationBatch(source=source, projects=tuple(resolve_path(source, cwd)))
            )
            mode_seen = True
            i += 2
        elif param == "--watch":
            watch.extend(resolve_path(_take_value(tokens, i, param), cwd))
            mode_seen = True
            i += 2
        elif param in ("--tsc", "-t"):
            raw = Path(_take_value(tokens, i, param))
            tsc = compiler.validate_compiler(raw if raw.is_absolute() else cwd / raw)
            i += 2
        elif param in ("--tsc-args", "-a"):
            extra_args = _take_value(tokens, i, param)
            i += 2
        elif param == "--simulate":
            simulate = True
            i += 1
        elif not param.startswith("-") and not mode_seen:
            # Implicit watch mode swallows the rest of the input.
            for rest in tokens[i:]:
                watch.extend(resolve_path(rest, cwd))
            mode_seen = True
            break
        else:
            raise UnhandledParameterError(f"Unhandled parameters: {param}")

    if tsc is None:
        if cfg.TSC:
            raw = Path(cfg.TSC)
            tsc = compiler.validate_compiler(raw if raw.is_absolute() else cwd / raw)
        else:
            tsc = compiler.default_compiler_path(install_dir or INSTALL_DIR, cfg.user_data_dir)

    if not mode_seen:
        # Assume we want to watch the working directory.
        watch.extend(resolve_path(cwd, cwd))

    options = Options(
        compilation_batches=tuple(batches),
        watch_projects=tuple(watch),
        compiler_path=tsc,
        extra_args=extra_args,
        simulate=simulate,
    )
    logger.debug(
        "options_parsed",
        batches=len(options.compilation_batches),
        watch=len(options.watch_projects),
        tsc=str(options.compiler_path),
        simulate=options.simulate,
    )
    return options
