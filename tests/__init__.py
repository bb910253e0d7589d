# tests\__init__.py
"""
Test Suite for tspw

Organization:
- locator / compiler_path / cli: pure parsing and discovery against tmp_path trees.
- supervisor: real child processes driven through a fake `tsc` script.
- orchestrator / main: sequencing with the supervisor mocked, plus exit codes.
"""
