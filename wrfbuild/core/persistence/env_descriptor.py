"""
Environment descriptor — the sourceable ``wrf_env.sh`` file.

The descriptor is a plain POSIX shell script of ``export KEY="value"``
lines. Writes replace the whole file atomically (write to temp file,
then rename); it is never appended to.

``PATH`` is the one value that refers to the caller's environment: it
is written as ``"<bin dir>:$PATH"`` so sourcing it prepends the WRF
binaries to whatever PATH the shell already has.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

PATH_REFERENCE = "$PATH"

_HEADER = "#!/bin/bash\n# WRF Environment Variables\n"
_FOOTER = '\necho "WRF environment variables set."\n'

_EXPORT_RE = re.compile(r'^\s*export\s+([A-Za-z_][A-Za-z0-9_]*)="((?:[^"\\]|\\.)*)"\s*$')

# Characters that are special inside double quotes
_ESCAPE_RE = re.compile(r'([\\"$`])')
_UNESCAPE_RE = re.compile(r'\\([\\"$`])')


def _escape(value: str) -> str:
    return _ESCAPE_RE.sub(r"\\\1", value)


def _quote(key: str, value: str) -> str:
    if key == "PATH" and value.endswith(":" + PATH_REFERENCE):
        prefix = value[: -len(PATH_REFERENCE) - 1]
        return _escape(prefix) + ":" + PATH_REFERENCE
    return _escape(value)


def render_descriptor(assignments: dict[str, str], comments: dict[str, str] | None = None) -> str:
    """Render assignments as shell source, in insertion order."""
    comments = comments or {}
    lines = [_HEADER]
    for key, value in assignments.items():
        if key in comments:
            lines.append(f"\n# {comments[key]}\n")
        lines.append(f'export {key}="{_quote(key, value)}"\n')
    lines.append(_FOOTER)
    return "".join(lines)


def write_descriptor(
    path: Path,
    assignments: dict[str, str],
    comments: dict[str, str] | None = None,
) -> None:
    """Write (or overwrite) the descriptor and mark it executable.

    Raises:
        OSError: If the file cannot be written.
    """
    content = render_descriptor(assignments, comments)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".wrf_env_", suffix=".tmp")
    os.close(fd)
    tmp = Path(tmp_path)
    try:
        tmp.write_text(content, encoding="utf-8")
        tmp.chmod(0o755)
        tmp.replace(path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    logger.debug("Descriptor written to %s", path)


def read_descriptor(path: Path) -> dict[str, str]:
    """Read ``export KEY="value"`` lines back into a dict.

    A naive reader: values come back exactly as written, so PATH keeps
    its literal ``$PATH`` suffix. Other lines are ignored.
    """
    values: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        m = _EXPORT_RE.match(line)
        if m:
            values[m.group(1)] = _UNESCAPE_RE.sub(r"\1", m.group(2))
    return values


def apply_descriptor(assignments: dict[str, str], environ: dict[str, str] | None = None) -> None:
    """Load assignments into the current process environment.

    Mirrors what ``source`` would do in a shell. The PATH prefix is
    added only once, so re-applying after a rewrite does not grow PATH.
    """
    target = os.environ if environ is None else environ
    for key, value in assignments.items():
        if key == "PATH" and value.endswith(":" + PATH_REFERENCE):
            bin_dir = value[: -len(PATH_REFERENCE) - 1]
            current = target.get("PATH", "")
            entries = current.split(os.pathsep) if current else []
            if bin_dir not in entries:
                target["PATH"] = os.pathsep.join([bin_dir] + entries)
            continue
        target[key] = value
