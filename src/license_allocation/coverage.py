# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Metric-specific coverage of one host usage by one agreement.

Processor and Computer Perpetual agreements count one unit per license.
Named User Plus Perpetual agreements count users: a host license is covered
by 25 users and only whole host licenses are covered. The host's
``license_count`` is always decreased by the number of host licenses
covered, while the agreement side is charged and credited in users.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from license_allocation.context import AllocationContext
from license_allocation.models import Agreement, HostUsage
from license_allocation.types import (
    NAMED_USERS_PER_PROCESSOR,
    DiagnosticKind,
    is_named_user_metric,
    is_processor_metric,
)


@dataclass(frozen=True, slots=True)
class Coverage:
    """Outcome of applying an agreement to a host usage."""

    covered: float
    """Host licenses covered; subtracted from ``HostUsage.license_count``."""

    credited: float
    """Units credited to the associated host, in the agreement's native unit."""


NO_COVERAGE = Coverage(covered=0.0, credited=0.0)


def cover_host(
    agreement: Agreement,
    host: HostUsage,
    context: AllocationContext,
) -> Coverage:
    """
    Cover as much of ``host``'s uncovered usage as ``agreement`` allows.

    Mutates ``agreement.available_count`` and ``host.license_count``.
    An unlimited agreement covers the whole usage and its available count
    is set to 0. An unknown metric covers nothing and is reported.

    Returns:
        The :class:`Coverage` applied.
    """
    if is_processor_metric(agreement.metric):
        if agreement.unlimited:
            covered = host.license_count
            agreement.available_count = 0.0
        else:
            covered = min(agreement.available_count, host.license_count)
            agreement.available_count -= covered
        credited = covered

    elif is_named_user_metric(agreement.metric):
        if agreement.unlimited:
            covered = host.license_count
            agreement.available_count = 0.0
        else:
            coverable_users = min(
                agreement.available_count, host.license_count * NAMED_USERS_PER_PROCESSOR
            )
            covered = float(math.floor(coverable_users / NAMED_USERS_PER_PROCESSOR))
            agreement.available_count -= covered * NAMED_USERS_PER_PROCESSOR
        credited = covered * NAMED_USERS_PER_PROCESSOR

    else:
        context.diagnostics.record(
            DiagnosticKind.UNKNOWN_METRIC,
            f"Distributing licenses. Unknown metric type: '{agreement.metric}'",
            agreement_id=agreement.agreement_id,
            metric=agreement.metric,
            host=host.name,
        )
        return NO_COVERAGE

    host.license_count -= covered
    return Coverage(covered=covered, credited=credited)
