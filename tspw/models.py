# tspw/models.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import CONFIG_FILENAME


def _check_project(p: Path) -> Path:
    if p.name != CONFIG_FILENAME:
        raise ValueError(f"project must point at a {CONFIG_FILENAME} file: {p}")
    return p


class CompilationBatch(BaseModel):
    """
    One serial compile stage. Projects inside the batch build in parallel.
    `source` is the raw argument that produced it, kept for logging.
    """

    model_config = ConfigDict(frozen=True)

    source: str
    projects: Tuple[Path, ...] = Field(default_factory=tuple)

    @field_validator("projects")
    @classmethod
    def _projects_are_configs(cls, v: Tuple[Path, ...]) -> Tuple[Path, ...]:
        for p in v:
            _check_project(p)
        return v


class Options(BaseModel):
    """Everything one invocation does. Read-only once parsed."""

    model_config = ConfigDict(frozen=True)

    compilation_batches: Tuple[CompilationBatch, ...] = Field(default_factory=tuple)
    # Insertion order; duplicates are kept.
    watch_projects: Tuple[Path, ...] = Field(default_factory=tuple)
    compiler_path: Path
    extra_args: Optional[str] = None
    simulate: bool = False

    @field_validator("watch_projects")
    @classmethod
    def _watch_are_configs(cls, v: Tuple[Path, ...]) -> Tuple[Path, ...]:
        for p in v:
            _check_project(p)
        return v

    def extra_args_split(self) -> List[str]:
        # Split on single spaces, no quoting. Scripts rely on this exact split.
        if not self.extra_args:
            return []
        return self.extra_args.split(" ")
