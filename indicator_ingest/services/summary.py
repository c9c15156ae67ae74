from __future__ import annotations

from ..models.diagnostic import ValidationDiagnostic
from ..models.processing_result import ProcessingResult

"""Summary line and diagnostic rendering for upload runs."""

__all__ = [
    "DEFAULT_DISPLAY_LIMIT",
    "format_diagnostic",
    "render_diagnostics",
    "render_summary_line",
]

DEFAULT_DISPLAY_LIMIT = 10


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation for very small numbers
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return str(seconds)


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line of an upload run.

    Format:
    SUMMARY files={n} validated={v} failed={f} rows={r} accepted={a}
    diagnostics={d} elapsed_sec={e}

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     validated_files=1, failed_files=1, total_rows=10, accepted_rows=4,
        ...     total_diagnostics=7, start_time=t, end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=2 validated=1 failed=1 rows=10 accepted=4 diagnostics=7 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={result.total_files} "
        f"validated={result.validated_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"accepted={result.accepted_rows} "
        f"diagnostics={result.total_diagnostics} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )


def format_diagnostic(diag: ValidationDiagnostic) -> str:
    if diag.is_fatal:
        return diag.message
    line = f"row {diag.row} [{diag.column}] {diag.message}"
    if diag.value:
        line += f": '{diag.value}'"
    return line


def render_diagnostics(
    diagnostics: list[ValidationDiagnostic], limit: int = DEFAULT_DISPLAY_LIMIT
) -> list[str]:
    """Render at most ``limit`` diagnostics plus an ``...and N more errors`` tail."""
    lines = [format_diagnostic(d) for d in diagnostics[:limit]]
    hidden = len(diagnostics) - limit
    if hidden > 0:
        lines.append(f"...and {hidden} more errors")
    return lines
