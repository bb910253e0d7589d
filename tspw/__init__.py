"""
tspw package.

Starts one TypeScript compiler per tsconfig.json found under the given
directories, in compile mode, watch mode, or serial compile stages
followed by watchers.

Public API surface:
  - parse_args: command-line tokens -> Options
  - run: async orchestration of an Options instance
"""

__version__ = "1.1.0"

from .cli import parse_args  # noqa: E402
from .orchestrator import run  # noqa: E402

__all__ = ["__version__", "parse_args", "run"]
