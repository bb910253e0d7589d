# tests/conftest.py
import logging
import sys
import textwrap
from pathlib import Path
from typing import Callable, Iterable, List

import pytest
import structlog

from tspw import logging_setup
from tspw.config import Settings
from tspw.models import CompilationBatch, Options

FAKE_TSC = textwrap.dedent(
    """\
    import os
    import sys

    args = sys.argv[1:]
    project = args[args.index("-p") + 1]
    print("argv: " + " ".join(args), flush=True)
    name = os.path.basename(os.path.dirname(project))
    if name == "chatty":
        print("x" * 200000, flush=True)
        print("after-long-line", flush=True)
    if name == "noisy":
        print("warning: noisy " + project, file=sys.stderr, flush=True)
    if name == "broken":
        print("error TS1005: ';' expected.", flush=True)
        print("fatal: " + project, file=sys.stderr, flush=True)
        sys.exit(2)
    if "-w" in args:
        print("watching " + project, flush=True)
        print("watch-diagnostic " + project, file=sys.stderr, flush=True)
    """
)


@pytest.fixture
def fake_tsc(tmp_path: Path) -> Path:
    """A python script named `tsc`, launched through sys.executable."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    tsc = bin_dir / "tsc"
    tsc.write_text(FAKE_TSC, encoding="utf-8")
    return tsc


@pytest.fixture
def node_settings() -> Settings:
    """Settings that run `tsc` with the current interpreter instead of node."""
    return Settings(NODE_BIN=sys.executable, TSC=None)


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[..., Path]:
    """
    Build a project tree under tmp_path/"ws".
    Each entry is a directory (relative) that gets a tsconfig.json.
    """

    def _make(project_dirs: Iterable[str], extra_dirs: Iterable[str] = ()) -> Path:
        root = tmp_path / "ws"
        root.mkdir(exist_ok=True)
        for d in extra_dirs:
            (root / d).mkdir(parents=True, exist_ok=True)
        for d in project_dirs:
            target = root / d
            target.mkdir(parents=True, exist_ok=True)
            (target / "tsconfig.json").write_text("{}", encoding="utf-8")
        return root

    return _make


@pytest.fixture
def make_options() -> Callable[..., Options]:
    def _make(
        compiler: Path,
        batches: Iterable[List[Path]] = (),
        watch: Iterable[Path] = (),
        **kwargs,
    ) -> Options:
        return Options(
            compilation_batches=tuple(
                CompilationBatch(source=f"batch{i}", projects=tuple(b))
                for i, b in enumerate(batches)
            ),
            watch_projects=tuple(watch),
            compiler_path=compiler,
            **kwargs,
        )

    return _make


@pytest.fixture(autouse=True)
def _reset_logging():
    """main() installs handlers bound to the captured streams of one test."""
    yield
    root = logging.getLogger()
    for h in logging_setup._installed:
        root.removeHandler(h)
    logging_setup._installed.clear()
    structlog.reset_defaults()
