# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from typing import Literal


# Named User Plus licenses are counted in users; 25 users weigh as much as
# one processor license.
NAMED_USERS_PER_PROCESSOR = 25


class LicenseMetric(str):
    """
    Licensing unit conventions understood by the allocation engine.

    Processor and Computer Perpetual licenses are counted one unit per
    license. Named User Plus Perpetual licenses are counted in users.
    """

    PROCESSOR_PERPETUAL: Literal["Processor Perpetual"] = "Processor Perpetual"
    COMPUTER_PERPETUAL: Literal["Computer Perpetual"] = "Computer Perpetual"
    NAMED_USER_PLUS_PERPETUAL: Literal["Named User Plus Perpetual"] = (
        "Named User Plus Perpetual"
    )


PROCESSOR_METRICS = frozenset(
    {LicenseMetric.PROCESSOR_PERPETUAL, LicenseMetric.COMPUTER_PERPETUAL}
)

LICENSE_METRIC_VALUES = frozenset(
    PROCESSOR_METRICS | {LicenseMetric.NAMED_USER_PLUS_PERPETUAL}
)


def is_processor_metric(metric: str | None) -> bool:
    """Return True for metrics counted one unit per processor license."""
    return metric in PROCESSOR_METRICS


def is_named_user_metric(metric: str | None) -> bool:
    """Return True for the Named User Plus Perpetual metric."""
    return metric == LicenseMetric.NAMED_USER_PLUS_PERPETUAL


def unit_multiplier(metric: str | None) -> int:
    """Return the factor converting processor-equivalent units to native units."""
    if is_named_user_metric(metric):
        return NAMED_USERS_PER_PROCESSOR
    return 1


class DiagnosticKind(str):
    """Kinds of non-fatal anomalies recorded during an allocation run."""

    UNRESOLVED_ALIAS = "unresolved_alias"
    UNKNOWN_LICENSE_TYPE = "unknown_license_type"
    UNKNOWN_METRIC = "unknown_metric"
    AVAILABLE_WITH_UNCOVERED = "available_with_uncovered"


DIAGNOSTIC_KIND_VALUES = frozenset(
    {
        DiagnosticKind.UNRESOLVED_ALIAS,
        DiagnosticKind.UNKNOWN_LICENSE_TYPE,
        DiagnosticKind.UNKNOWN_METRIC,
        DiagnosticKind.AVAILABLE_WITH_UNCOVERED,
    }
)


class DiagnosticSeverity(str):
    """Severity attached to a diagnostic and used for its log level."""

    WARNING = "warning"
    ERROR = "error"
