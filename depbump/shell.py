"""Shell and console utilities.

Provides simple wrappers around subprocess calls for running install and
git commands, plus the colored output helpers every step reports through.
"""

from __future__ import annotations

import subprocess
import sys
import time
from pathlib import Path

import click


def capture(*args: str, cwd: Path | None = None, check: bool = True) -> str:
    """Run a command and return its stripped stdout.

    Args:
        *args: Command and arguments (e.g., "npm", "info", "react").
        cwd: Working directory, defaults to the current one.
        check: If True (default), raise CalledProcessError on non-zero exit.
               Set to False for commands whose failure is reported in-band
               (e.g., npm's JSON error payload).
    """
    result = subprocess.run(args, cwd=cwd, capture_output=True, text=True, check=check)
    return result.stdout.strip()


def git(*args: str, cwd: Path | None = None, check: bool = True) -> str:
    """Run a git command and return stdout."""
    return capture("git", *args, cwd=cwd, check=check)


def run(
    *args: str,
    cwd: Path | None = None,
    check: bool = True,
    log_time: bool = False,
) -> subprocess.CompletedProcess[bytes]:
    """Run a command, streaming its output to the terminal.

    Unlike capture(), output is not collected so the operator sees install
    progress as it happens. There is no timeout: this blocks until the
    command exits.

    Args:
        *args: Command and arguments (e.g., "yarn", "add", "react@18.2.0").
        cwd: Working directory for the command.
        check: If True (default), raise CalledProcessError on non-zero exit.
        log_time: If True, print how long the command took.
    """
    started = time.perf_counter()
    result = subprocess.run(args, cwd=cwd, check=check)
    if log_time:
        info(click.style(f"  done in {format_duration(time.perf_counter() - started)}", dim=True))
    return result


def format_duration(seconds: float) -> str:
    """Format an elapsed time for humans.

    Examples:
        0.85 → "850ms"
        4.2 → "4.2s"
        63.4 → "1m 3s"
    """
    if seconds < 1:
        return f"{round(seconds * 1000)}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs}s"


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate the phases of the upgrade wizard in terminal output.
    """
    click.echo(f"\n{'─' * 60}\n{click.style(msg, bold=True)}\n{'─' * 60}")


def info(msg: str = "") -> None:
    click.echo(msg)


def success(msg: str) -> None:
    click.secho(msg, fg="green")


def warn(msg: str) -> None:
    click.secho(msg, fg="yellow")


def error(msg: str) -> None:
    """Print an error without stopping (e.g., a single failed install)."""
    click.secho(msg, fg="red", bold=True, err=True)


def fatal(msg: str) -> None:
    """Print an error message and exit with code 1.

    Use for unrecoverable errors that should halt the wizard.
    """
    click.secho(f"ERROR: {msg}", fg="red", bold=True, err=True)
    sys.exit(1)
