# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from license_allocation.context import AllocationContext
from license_allocation.models import Agreement, HostUsage
from license_allocation.ordering import HostIndex
from license_allocation.types import (
    LICENSE_METRIC_VALUES,
    NAMED_USERS_PER_PROCESSOR,
    DiagnosticKind,
    DiagnosticSeverity,
    is_named_user_metric,
    unit_multiplier,
)


@dataclass(slots=True)
class CoverStatus:
    """Totals of one license name across every host using it."""

    consumed: float = 0.0
    covered: float = 0.0

    @property
    def uncovered(self) -> float:
        return self.consumed - self.covered


def cover_status_by_license_name(hosts: Sequence[HostUsage]) -> dict[str, CoverStatus]:
    """Sum consumed and covered usage per license name over all hosts."""
    statuses: dict[str, CoverStatus] = {}
    for host in hosts:
        status = statuses.setdefault(host.license_name, CoverStatus())
        status.consumed += host.original_count
        status.covered += host.covered_count
    return statuses


def finalize_agreements(
    agreements: Sequence[Agreement],
    hosts: Sequence[HostUsage],
    index: HostIndex,
    context: AllocationContext,
) -> None:
    """
    Record per-host coverage on agreements and charge uncovered usage.

    For each associated host found in ``index``, the host's total covered
    and consumed usage is stored on the association (in users for named-user
    agreements). The uncovered usage relevant to the agreement (every host
    of its aliases for a catch-all agreement, only its associated hosts
    otherwise) is subtracted from ``available_count``, which may go
    negative.

    The subtraction always starts from the balance left by the allocation
    passes, so finalizing the same snapshot twice gives the same result.
    Spare capacity alongside uncovered usage is reported as an
    ``available_with_uncovered`` diagnostic.
    """
    statuses = cover_status_by_license_name(hosts)

    for agreement in agreements:
        balance = agreement.allocated_balance()

        known_metric = agreement.metric in LICENSE_METRIC_VALUES
        multiplier = unit_multiplier(agreement.metric)
        uncovered_by_associated = 0.0
        uncovered_by_all_hosts = 0.0

        for alias in context.aliases_of(agreement.license_type_id):
            for associated in agreement.hosts:
                host = index.get(alias, associated.hostname)
                if host is None:
                    continue

                if not known_metric:
                    context.diagnostics.record(
                        DiagnosticKind.UNKNOWN_METRIC,
                        f"Unknown metric type: '{agreement.metric}'",
                        agreement_id=agreement.agreement_id,
                        metric=agreement.metric,
                        host=host.name,
                    )
                    continue

                associated.total_covered_licenses_count = host.covered_count * multiplier
                associated.consumed_licenses_count = host.original_count * multiplier
                uncovered_by_associated += host.license_count * multiplier

            status = statuses.get(alias)
            if status is not None:
                uncovered_by_all_hosts += status.uncovered

        uncovered = uncovered_by_all_hosts if agreement.catch_all else uncovered_by_associated

        if uncovered <= 0:
            agreement.available_count = balance
            continue

        spare_threshold = NAMED_USERS_PER_PROCESSOR if is_named_user_metric(agreement.metric) else 0
        if balance > spare_threshold:
            context.diagnostics.record(
                DiagnosticKind.AVAILABLE_WITH_UNCOVERED,
                f"Agreement '{agreement.agreement_id}' has still {balance} available "
                f"licenses but {uncovered} are uncovered",
                severity=DiagnosticSeverity.WARNING,
                agreement_id=agreement.agreement_id,
                license_type_id=agreement.license_type_id,
                available_count=balance,
                uncovered=uncovered,
            )

        agreement.available_count = balance - uncovered
