"""Application service for inspecting many audio files at once.

This layer owns construction of the detector, validator and metadata
extractor and fans batch requests out over a thread pool so callers get one
outcome per input, in input order.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeVar, final

from audiosniff.config.settings import MAX_WORKERS
from audiosniff.features.detection import DetectionResult, FormatDetector, by_extension
from audiosniff.features.metadata import AudioMetadata, MetadataExtractor
from audiosniff.features.validation import FormatValidator, ValidationResult
from audiosniff.platform.logging import logger
from audiosniff.shared.audio_format import FormatKind
from audiosniff.shared.events import InspectionEvent
from audiosniff.shared.introspection import Introspector

T = TypeVar("T")

PathInput = str | os.PathLike[str]


@dataclass(frozen=True, slots=True)
class BatchOutcome(Generic[T]):
    """Result of one batch item: either a value or the error it raised."""

    path: Path
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@final
class InspectionService:
    """Application service that runs detection, validation and tag extraction in bulk."""

    def __init__(
        self,
        *,
        introspector: Introspector | None = None,
        detector: FormatDetector | None = None,
        validator: FormatValidator | None = None,
        metadata_extractor: MetadataExtractor | None = None,
        max_workers: int = MAX_WORKERS,
        executor_factory: Callable[[int], ThreadPoolExecutor] | None = None,
    ) -> None:
        """Create a service with overridable collaborators.

        Tests can inject doubles; production code builds every component around
        one shared introspector so deep inspection is configured once.
        """

        self._detector: FormatDetector = detector or FormatDetector(introspector=introspector)
        self._validator: FormatValidator = validator or FormatValidator(
            detector=self._detector, introspector=introspector
        )
        self._metadata_extractor: MetadataExtractor = metadata_extractor or MetadataExtractor(
            introspector=introspector or self._detector.introspector
        )
        self._max_workers: int = max(1, max_workers)
        self._executor_factory: Callable[[int], ThreadPoolExecutor] = executor_factory or (
            lambda workers: ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix="audiosniff-batch"
            )
        )

    @property
    def detector(self) -> FormatDetector:
        return self._detector

    @property
    def validator(self) -> FormatValidator:
        return self._validator

    @property
    def metadata_extractor(self) -> MetadataExtractor:
        return self._metadata_extractor

    def detect_many(self, paths: Iterable[PathInput]) -> list[BatchOutcome[DetectionResult]]:
        """Detect the format of every path."""

        return self._run("detect", paths, self._detector.detect_file)

    def validate_many(
        self,
        paths: Iterable[PathInput],
        expected_format: FormatKind | str | None = None,
    ) -> list[BatchOutcome[ValidationResult]]:
        """Validate every path.

        Args:
            paths: Files to validate.
            expected_format: Format every file must be. When omitted each file
                is validated against the format its extension declares.
        """
        expected = FormatKind(expected_format) if expected_format is not None else None

        def validate_one(path: Path) -> ValidationResult:
            declared = expected if expected is not None else by_extension(path.suffix).kind
            return self._validator.validate_file(path, declared)

        return self._run("validate", paths, validate_one)

    def extract_metadata_many(
        self, paths: Iterable[PathInput]
    ) -> list[BatchOutcome[AudioMetadata]]:
        """Extract tags from every path."""

        return self._run("extract metadata", paths, self._metadata_extractor.extract)

    def clear_caches(self) -> None:
        self._detector.clear_cache()
        self._metadata_extractor.clear_cache()

    # Internals ------------------------------------------------------------

    def _run(
        self,
        operation: str,
        paths: Iterable[PathInput],
        task: Callable[[Path], T],
    ) -> list[BatchOutcome[T]]:
        items: Sequence[Path] = [Path(path) for path in paths]
        logger.info(
            "Starting batch %s of %d file(s)",
            operation,
            len(items),
            extra={"inspection_event": InspectionEvent.BATCH_START, "total": len(items)},
        )
        if not items:
            return []

        workers = min(self._max_workers, len(items))
        with self._executor_factory(workers) as executor:
            futures: list[Future[T]] = [executor.submit(task, path) for path in items]
            outcomes = [
                self._collect(operation, path, future)
                for path, future in zip(items, futures, strict=True)
            ]

        failed = sum(1 for outcome in outcomes if not outcome.ok)
        logger.info(
            "Finished batch %s: %d file(s), %d failed",
            operation,
            len(outcomes),
            failed,
            extra={
                "inspection_event": InspectionEvent.BATCH_COMPLETE,
                "total": len(outcomes),
                "failed": failed,
            },
        )
        return outcomes

    @staticmethod
    def _collect(operation: str, path: Path, future: Future[T]) -> BatchOutcome[T]:
        try:
            return BatchOutcome(path=path, value=future.result())
        except Exception as exc:
            logger.error(
                "Failed to %s %s: %s",
                operation,
                path,
                exc,
                extra={
                    "inspection_event": InspectionEvent.BATCH_ITEM_ERROR,
                    "file_path": str(path),
                    "error_message": str(exc),
                },
            )
            return BatchOutcome(path=path, error=exc)


__all__ = ["BatchOutcome", "InspectionService"]
