"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called for pipeline
operations. Stages never call subprocess directly; tests patch
``run_command`` in the stage module instead.

No timeout: package managers and compiles run until they exit or the
operator interrupts them.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# How much captured output is kept in the result dict
_OUTPUT_LIMIT = 4000


def run_command(
    cmd: list[str],
    *,
    needs_sudo: bool = False,
    cwd: Path | str | None = None,
    env_overrides: dict[str, str] | None = None,
    capture: bool = True,
    log_path: Path | None = None,
    input_text: str | None = None,
) -> dict[str, Any]:
    """Run a command and report the outcome as a dict. Never raises.

    Output handling, by priority:
      - ``log_path``: stdout and stderr both go to that file
        (truncated first); nothing reaches the terminal.
      - ``capture=True``: output is captured and returned.
      - ``capture=False``: output streams to the terminal, and the
        command may prompt the user directly.

    ``needs_sudo`` prefixes ``sudo`` unless already running as root.
    sudo reads the password from the controlling terminal, so this
    works with captured output too.

    Returns:
        ``{"ok": bool, "returncode": int, "stdout": "...", "stderr": "...",
        "elapsed_ms": N}``; on launch failure ``{"ok": False,
        "returncode": None, "error": "..."}``.
    """
    if needs_sudo and _euid() != 0:
        cmd = ["sudo"] + list(cmd)

    env = None
    if env_overrides:
        env = os.environ.copy()
        env.update(env_overrides)

    logger.debug("Executing: %s (cwd=%s)", " ".join(cmd), cwd or ".")
    start = time.monotonic()

    try:
        if log_path is not None:
            with open(log_path, "w", encoding="utf-8", errors="replace") as fh:
                result = subprocess.run(
                    cmd,
                    cwd=cwd,
                    env=env,
                    stdout=fh,
                    stderr=subprocess.STDOUT,
                    input=input_text,
                    text=True,
                )
            stdout = stderr = ""
        elif capture:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                env=env,
                capture_output=True,
                input=input_text,
                text=True,
                errors="replace",
            )
            stdout = result.stdout or ""
            stderr = result.stderr or ""
        else:
            result = subprocess.run(cmd, cwd=cwd, env=env, input=input_text, text=True)
            stdout = stderr = ""
    except FileNotFoundError:
        return {
            "ok": False,
            "returncode": None,
            "error": f"Command not found: {cmd[0]}",
            "stdout": "",
            "stderr": "",
        }
    except OSError as e:
        logger.debug("Subprocess launch failed: %s", e)
        return {
            "ok": False,
            "returncode": None,
            "error": str(e),
            "stdout": "",
            "stderr": "",
        }

    elapsed_ms = int((time.monotonic() - start) * 1000)
    ok = result.returncode == 0
    out: dict[str, Any] = {
        "ok": ok,
        "returncode": result.returncode,
        "stdout": stdout[-_OUTPUT_LIMIT:],
        "stderr": stderr[-_OUTPUT_LIMIT:],
        "elapsed_ms": elapsed_ms,
    }
    if not ok:
        out["error"] = f"Command failed (exit {result.returncode})"
    return out


def _euid() -> int:
    """Effective uid, or -1 where the platform has none."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid() if geteuid else -1
