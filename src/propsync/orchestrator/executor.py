"""Run a single migration unit as an isolated child process."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path
from typing import Mapping, Optional

from propsync.exceptions import UnitError, UnitExecutionError, UnitTimeoutError
from propsync.orchestrator.report import UnitResult
from propsync.types import FailureKind

__all__ = ["DEFAULT_UNIT_TIMEOUT", "build_unit_environment", "run_unit"]

logger = logging.getLogger(__name__)

DEFAULT_UNIT_TIMEOUT = 60.0

# Read by node's TLS stack and by libpq-based clients respectively.
TLS_RELAX_VARIABLES = {
    "NODE_TLS_REJECT_UNAUTHORIZED": "0",
    "PGSSLMODE": "no-verify",
}


def build_unit_environment(
    base: Optional[Mapping[str, str]] = None,
    tls_insecure: bool = True,
    extra: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """Build the environment for a child unit.

    Always returns a new dict; os.environ is never modified.

    Args:
        base: Starting environment (default: a copy of os.environ)
        tls_insecure: Relax certificate validation for database connections
        extra: Additional variables, applied last
    """
    env = dict(os.environ if base is None else base)
    if tls_insecure:
        env.update(TLS_RELAX_VARIABLES)
    if extra:
        env.update(extra)
    return env


def _launch(
    name: str,
    script: Path,
    interpreter: str,
    timeout: Optional[float],
    env: Optional[Mapping[str, str]],
) -> None:
    try:
        completed = subprocess.run(
            [interpreter, str(script.resolve())],
            cwd=script.parent,
            env=dict(env) if env is not None else None,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise UnitTimeoutError(name, timeout or 0.0) from exc
    except OSError as exc:
        raise UnitExecutionError(name, f"failed to start {interpreter}: {exc}") from exc

    if completed.returncode != 0:
        raise UnitExecutionError(
            name,
            f"{name} exited with code {completed.returncode}",
            returncode=completed.returncode,
        )


def run_unit(
    name: str,
    directory: Path,
    timeout: Optional[float] = DEFAULT_UNIT_TIMEOUT,
    interpreter: str = "node",
    env: Optional[Mapping[str, str]] = None,
    location: str = "scripts",
) -> UnitResult:
    """
    Run one unit and report its outcome. Never raises for unit failures.

    Standard output and error are inherited so unit progress shows live.

    Args:
        name: File name of the unit inside ``directory``.
        directory: Directory holding the unit; also the child's working directory.
        timeout: Seconds before the child is killed; None waits indefinitely.
        interpreter: Program used to execute the unit.
        env: Child environment (default: inherit the parent's).
        location: Label for log lines and results ("scripts" or "root").
    """
    label = f"{location}/{name}"
    started = time.monotonic()

    try:
        _launch(name, Path(directory) / name, interpreter, timeout, env)
    except UnitError as exc:
        duration = time.monotonic() - started
        returncode = getattr(exc, "returncode", None)
        if isinstance(exc, UnitTimeoutError):
            kind = FailureKind.TIMEOUT
        elif returncode is None:
            kind = FailureKind.SPAWN
        else:
            kind = FailureKind.EXIT_CODE
        logger.warning(f"✗ Error in {label}, skipping: {exc}")
        return UnitResult.failure(
            name,
            kind,
            str(exc),
            location=location,
            returncode=returncode,
            duration=duration,
        )

    duration = time.monotonic() - started
    logger.info(f"✓ {label} finished ({duration:.1f}s)")
    return UnitResult.success(name, location=location, duration=duration)
