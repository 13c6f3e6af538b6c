"""
L1 Domain — Failure log analysis (pure).

Classifies captured failure output against the known root causes and
scans compile logs for build-failure signatures. No I/O, no subprocess.
"""

from __future__ import annotations

from wrfbuild.core.models.result import Diagnosis
from wrfbuild.core.services.build.data.diagnosis import (
    BUILD_LOG_SIGNATURES,
    DIAGNOSIS_RULES,
    MAKE_ERROR_CONTEXT,
    UNKNOWN_TITLE,
)


def classify_failure(text: str) -> Diagnosis:
    """Return the first matching diagnosis for ``text``.

    Total: unmatched (or empty) text yields the ``unknown`` category.
    """
    for category, pattern, title, fixes in DIAGNOSIS_RULES:
        if text and pattern.search(text):
            return Diagnosis(category=category, title=title, fixes=list(fixes))
    return Diagnosis(category="unknown", title=UNKNOWN_TITLE)


def scan_build_log(log_text: str) -> dict | None:
    """Look for a known build-failure signature in a compile log.

    Signatures are checked in order; the first present wins.

    Returns:
        ``{"signature": "...", "reason": "...", "context": [...]}``
        or None when no signature is present. ``context`` holds the
        lines carrying the signature; for ``make: ***`` also the lines
        following each one.
    """
    if not log_text:
        return None

    for signature, reason in BUILD_LOG_SIGNATURES:
        if signature not in log_text:
            continue
        after = MAKE_ERROR_CONTEXT if signature.startswith("make:") else 0
        context = _lines_after(log_text, signature, after)
        return {"signature": signature, "reason": reason, "context": context}

    return None


def tail_lines(text: str, count: int) -> list[str]:
    """Last ``count`` lines of ``text``."""
    if count <= 0 or not text:
        return []
    return text.splitlines()[-count:]


def _lines_after(text: str, marker: str, after: int) -> list[str]:
    """Every line containing ``marker`` plus ``after`` lines of trailing context."""
    lines = text.splitlines()
    picked: list[str] = []
    last_taken = -1
    for i, line in enumerate(lines):
        if marker in line:
            start = max(i, last_taken + 1)
            end = min(len(lines), i + after + 1)
            picked.extend(lines[start:end])
            last_taken = end - 1
    return picked
