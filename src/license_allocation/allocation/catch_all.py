# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from collections.abc import Sequence

from license_allocation.context import AllocationContext
from license_allocation.coverage import cover_host
from license_allocation.models import Agreement, HostUsage


def assign_from_catch_all_agreements(
    agreements: Sequence[Agreement],
    hosts: Sequence[HostUsage],
    context: AllocationContext,
) -> None:
    """
    Cover remaining usage of any host with catch-all agreements.

    Hosts are visited in the given order, which must be the current priority
    order of :func:`~license_allocation.ordering.sort_hosts`. For each host
    with uncovered usage, catch-all agreements with capacity are tried in
    agreement priority order. Catch-all coverage is not credited to any
    associated host record.
    """
    for host in hosts:
        if host.license_count <= 0:
            continue

        for agreement in agreements:
            if not agreement.catch_all or not agreement.has_capacity():
                continue

            for alias in context.aliases_of(agreement.license_type_id):
                if not agreement.has_capacity():
                    break
                if alias != host.license_name:
                    continue

                coverage = cover_host(agreement, host, context)

                context.trace(
                    "Catch-all agreement %s (metric=%s unlimited=%s) covered %s licenses "
                    "of %s (%s). available=%s uncovered=%s",
                    agreement.agreement_id,
                    agreement.metric,
                    agreement.unlimited,
                    coverage.covered,
                    host.name,
                    alias,
                    agreement.available_count,
                    host.license_count,
                )

    context.trace("Catch-all distribution finished. hosts=%s", [host.name for host in hosts])
