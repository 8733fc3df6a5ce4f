# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from collections.abc import Sequence

from license_allocation.context import AllocationContext
from license_allocation.models import Agreement, HostUsage
from license_allocation.types import DiagnosticKind, LicenseMetric


def resolve_license_types(
    hosts: Sequence[HostUsage],
    context: AllocationContext,
) -> tuple[list[HostUsage], list[HostUsage]]:
    """
    Resolve the license type of every host usage from its license name.

    The first license type of the catalog listing the host's
    ``license_name`` among its aliases wins. Hosts matching no alias are
    reported as ``unresolved_alias`` diagnostics and left out of the
    allocation.

    Args:
        hosts: Host usages to resolve; ``license_type_id`` is set in place.
        context: The run context holding the license-type catalog.

    Returns:
        A ``(resolved, unresolved)`` pair of lists, each in input order.
    """
    resolved: list[HostUsage] = []
    unresolved: list[HostUsage] = []

    for host in hosts:
        license_type_id = _match_alias(host.license_name, context)
        if license_type_id is None:
            context.diagnostics.record(
                DiagnosticKind.UNRESOLVED_ALIAS,
                f"Can't find a license type for host '{host.name}' "
                f"using license '{host.license_name}'",
                host=host.name,
                license_name=host.license_name,
            )
            unresolved.append(host)
            continue

        host.license_type_id = license_type_id
        resolved.append(host)

    return resolved, unresolved


def _match_alias(license_name: str, context: AllocationContext) -> str | None:
    for license_type in context.license_types:
        if license_name in license_type.aliases:
            return license_type.id
    return None


def fill_agreements_info(
    agreements: Sequence[Agreement],
    context: AllocationContext,
) -> list[Agreement]:
    """
    Copy catalog information onto agreements and derive their sort counts.

    ``item_description`` and ``metric`` come from the license type. A
    processor-metric agreement gets ``licenses_count = count``; a named-user
    agreement gets ``users_count = count``. Agreements whose license type is
    not in the catalog are reported and excluded from allocation.
    Every agreement also drops the balance captured by a previous run.

    Returns:
        The agreements whose license type is known, in input order.
    """
    known: list[Agreement] = []

    for agreement in agreements:
        agreement.reset_allocated_balance()
        license_type = context.license_type(agreement.license_type_id)
        if license_type is None:
            context.diagnostics.record(
                DiagnosticKind.UNKNOWN_LICENSE_TYPE,
                f"Unknown license type '{agreement.license_type_id}' "
                f"in agreement '{agreement.agreement_id}'",
                agreement_id=agreement.agreement_id,
                license_type_id=agreement.license_type_id,
            )
            continue

        agreement.item_description = license_type.item_description
        agreement.metric = license_type.metric

        if agreement.metric == LicenseMetric.PROCESSOR_PERPETUAL:
            agreement.licenses_count = agreement.count
        elif agreement.metric == LicenseMetric.NAMED_USER_PLUS_PERPETUAL:
            agreement.users_count = agreement.count

        known.append(agreement)

    return known
