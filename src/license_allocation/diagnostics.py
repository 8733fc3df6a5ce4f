# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import collections
import logging
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, Field

from license_allocation.types import DiagnosticSeverity

logger = logging.getLogger("license_allocation.diagnostics")

_LOG_LEVELS: dict[str, int] = {
    DiagnosticSeverity.WARNING: logging.WARNING,
    DiagnosticSeverity.ERROR: logging.ERROR,
}


class Diagnostic(BaseModel, frozen=True):
    """
    A non-fatal anomaly observed during an allocation run.

    Attributes:
        kind: One of the :class:`~license_allocation.types.DiagnosticKind`
            values.
        severity: ``'warning'`` or ``'error'``.
        message: Human-readable description for operators.
        context: Identifiers of the records involved (agreement id, host
            name, license name, ...).
    """

    kind: str
    severity: str = DiagnosticSeverity.ERROR
    message: str
    context: dict[str, Any] = Field(default_factory=dict)


class DiagnosticsCollector:
    """
    Collects diagnostics for a single allocation run.

    Each diagnostic is kept in a bounded deque and mirrored to the
    ``license_allocation.diagnostics`` logger, so callers can either inspect
    the returned list or rely on their logging setup.

    Example::

        collector = DiagnosticsCollector(max_records=100)
        collector.record(
            DiagnosticKind.UNKNOWN_METRIC,
            "Unknown metric 'Per Core'",
            agreement_id="AGR-1",
        )
        assert len(collector) == 1
    """

    def __init__(self, max_records: int = 10_000) -> None:
        self._records: collections.deque[Diagnostic] = collections.deque(maxlen=max_records)

    def record(
        self,
        kind: str,
        message: str,
        severity: str = DiagnosticSeverity.ERROR,
        **context: Any,
    ) -> Diagnostic:
        """
        Record a diagnostic and log it.

        Args:
            kind: Diagnostic kind.
            message: Description of the anomaly.
            severity: Severity used to pick the log level.
            **context: Identifiers stored on the diagnostic.

        Returns:
            The stored :class:`Diagnostic`.
        """
        diagnostic = Diagnostic(kind=kind, severity=severity, message=message, context=context)
        self._records.append(diagnostic)
        logger.log(
            _LOG_LEVELS.get(severity, logging.ERROR),
            message,
            extra={"diagnostic_kind": kind, "diagnostic_context": context},
        )
        return diagnostic

    def of_kind(self, kind: str) -> list[Diagnostic]:
        """Return the diagnostics of ``kind``, oldest first."""
        return [diagnostic for diagnostic in self._records if diagnostic.kind == kind]

    def to_list(self) -> list[Diagnostic]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._records))
