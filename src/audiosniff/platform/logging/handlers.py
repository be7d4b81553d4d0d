"""Rich console handler for inspection logs.

Where: platform/logging/handlers.py
What: Render structured inspection events with icons, colours and compact paths.
Why: Keep console output scannable when validating many files in one run.
"""

from __future__ import annotations

import logging
from pathlib import PurePath, PurePosixPath, PureWindowsPath
from typing import Any, ClassVar, override

from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.style import Style
from rich.text import Text


class InspectionRichHandler(RichHandler):
    """Rich handler that renders inspection events and white file paths."""

    _EVENT_STYLES: ClassVar[dict[str, tuple[str, str]]] = {
        "inspection.detect.complete": ("🔎", "cyan"),
        "inspection.detect.cache_hit": ("♻️", "green"),
        "inspection.detect.fallback": ("⚠️", "yellow"),
        "inspection.validate.pass": ("✅", "green"),
        "inspection.validate.fail": ("❌", "red"),
        "inspection.metadata.complete": ("🏷️", "blue"),
        "inspection.metadata.missing": ("ℹ️", "yellow"),
        "inspection.batch.start": ("🚀", "cyan"),
        "inspection.batch.complete": ("🎉", "green"),
        "inspection.batch.item_error": ("⛔", "red"),
    }
    _EVENT_LABELS: ClassVar[dict[str, str]] = {
        "inspection.detect.complete": "Detected ",
        "inspection.detect.cache_hit": "Cached ",
        "inspection.detect.fallback": "Heuristic only ",
        "inspection.validate.pass": "Valid ",
        "inspection.validate.fail": "Invalid ",
        "inspection.metadata.complete": "Tagged ",
        "inspection.metadata.missing": "No tags ",
        "inspection.batch.start": "Batch start",
        "inspection.batch.complete": "Batch complete",
        "inspection.batch.item_error": "Failed ",
    }
    _PATH_SEGMENT_LIMIT: ClassVar[int] = 3

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs["show_time"] = False
        kwargs["show_path"] = False
        kwargs["show_level"] = False
        kwargs["rich_tracebacks"] = True
        kwargs["markup"] = True
        super().__init__(*args, **kwargs)

    @staticmethod
    def _to_pure_path(raw_path: str) -> PurePath:
        """Return a platform-aware ``PurePath`` for the given raw string."""

        if "\\" in raw_path:
            return PureWindowsPath(raw_path)
        return PurePosixPath(raw_path)

    def _format_path(self, path: str) -> Text:
        """Render the trailing segments of ``path`` with magenta separators."""

        pure_path = self._to_pure_path(path)
        separator = "\\" if isinstance(pure_path, PureWindowsPath) else "/"
        parts = [part for part in pure_path.parts if part and part != pure_path.anchor]
        truncated = len(parts) > self._PATH_SEGMENT_LIMIT
        if truncated:
            parts = parts[-self._PATH_SEGMENT_LIMIT:]

        text = Text()
        if truncated:
            _ = text.append("…" + separator, style=Style(color="magenta"))
        elif pure_path.anchor:
            _ = text.append(pure_path.anchor, style=Style(color="magenta"))
        for index, part in enumerate(parts):
            if index:
                _ = text.append(separator, style=Style(color="magenta"))
            _ = text.append(part, style=Style(color="white"))
        return text

    def _render_inspection_message(self, record: logging.LogRecord) -> Text | None:
        """Render structured inspection events with dedicated styling."""

        event = getattr(record, "inspection_event", None)
        if not isinstance(event, str):
            return None

        icon, color = self._EVENT_STYLES.get(event, ("ℹ️", "blue"))
        text = Text()
        _ = text.append(f"{icon} ", style=Style(color=color, bold=True))

        body = Text(style=Style(color=color))
        _ = body.append(self._EVENT_LABELS.get(event, ""))

        file_path = getattr(record, "file_path", None)
        if file_path:
            _ = body.append_text(self._format_path(str(file_path)))

        details: list[str] = []
        audio_format = getattr(record, "audio_format", None)
        if audio_format:
            details.append(str(audio_format))
        confidence = getattr(record, "confidence", None)
        if isinstance(confidence, (int, float)):
            details.append(f"confidence={confidence:.2f}")
        method = getattr(record, "method", None)
        if method:
            details.append(str(method))
        total = getattr(record, "total", None)
        if isinstance(total, int):
            details.append(f"total={total}")
        failed = getattr(record, "failed", None)
        if isinstance(failed, int):
            details.append(f"failed={failed}")
        error_message = getattr(record, "error_message", None)
        if error_message:
            details.append(str(error_message))
        if details:
            _ = body.append(" (" + ", ".join(details) + ")")

        _ = text.append_text(body)
        return text

    @override
    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        """Render message with custom styling for inspection events."""

        inspection_text = self._render_inspection_message(record)
        if inspection_text is not None:
            return inspection_text
        return super().render_message(record, message)


__all__ = ["InspectionRichHandler"]
