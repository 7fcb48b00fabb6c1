#!/usr/bin/env python3
# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the LeanHeaders CI checks locally.

Usage::

    tools/ci.py                 # every step
    tools/ci.py lint tests      # only the named steps
"""

import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: dict[str, tuple[str, list[str]]] = {
    "format": ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    "lint": ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    "tests": ("Tests", ["uv", "run", "pytest", "--cov=leanheaders", "--cov-report=term-missing"]),
    "build": ("Build", ["uv", "build"]),
}


def main(argv: list[str]) -> int:
    """Run the selected CI steps and print a summary; returns the exit code."""
    unknown = [key for key in argv if key not in STEPS]
    if unknown:
        print(chalk.red(f"Unknown step(s): {', '.join(unknown)}. Known: {', '.join(STEPS)}"))
        return 2

    selected = argv or list(STEPS)
    results: list[tuple[str, bool, float]] = []
    for key in selected:
        title, cmd = STEPS[key]
        _banner(title)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_REPO_ROOT)
        results.append((title, proc.returncode == 0, time.monotonic() - start))

    _banner("Summary")
    for title, passed, elapsed in results:
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {'PASS' if passed else 'FAIL'}  {title} ({elapsed:.1f}s)"))
    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################

_REPO_ROOT = pathlib.Path(__file__).resolve().parent.parent


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}\n{chalk.blue(title)}\n{sep}")


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
