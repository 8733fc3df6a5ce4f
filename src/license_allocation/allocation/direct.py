# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from collections.abc import Sequence

from license_allocation.context import AllocationContext
from license_allocation.coverage import cover_host
from license_allocation.models import Agreement
from license_allocation.ordering import HostIndex


def sort_associated_hosts(
    agreement: Agreement,
    index: HostIndex,
    context: AllocationContext,
) -> None:
    """
    Sort an agreement's associated hosts by decreasing uncovered usage.

    A host's usage is the largest current ``license_count`` it has under any
    alias of the agreement's license type, so a host consuming the license
    under several product names is ranked by its biggest one.
    """
    aliases = context.aliases_of(agreement.license_type_id)
    agreement.hosts.sort(
        key=lambda associated: index.max_license_count(aliases, associated.hostname),
        reverse=True,
    )


def assign_to_associated_hosts(
    agreements: Sequence[Agreement],
    index: HostIndex,
    context: AllocationContext,
) -> None:
    """
    Distribute each agreement's licenses to the hosts associated with it.

    Agreements are served in the given order, which must be the priority
    order of :func:`~license_allocation.ordering.sort_agreements`. Covered
    units are credited to ``AssociatedHost.covered_licenses_count``.

    Args:
        agreements: Agreements with a known license type, in priority order.
        index: Host index built from the current host order.
        context: The run context.
    """
    for position, agreement in enumerate(agreements):
        sort_associated_hosts(agreement, index, context)
        aliases = context.aliases_of(agreement.license_type_id)

        context.trace(
            "Distributing licenses of agreement #%d (%s) to its hosts: available=%s hosts=%s",
            position,
            agreement.agreement_id,
            agreement.available_count,
            agreement.hostnames,
        )

        for associated in agreement.hosts:
            for alias in aliases:
                if not agreement.has_capacity():
                    break

                host = index.get(alias, associated.hostname)
                if host is None or host.license_count <= 0:
                    continue

                coverage = cover_host(agreement, host, context)
                associated.covered_licenses_count += coverage.credited

                context.trace(
                    "Covered %s licenses of host %s (%s). metric=%s available=%s "
                    "covered_on_host=%s uncovered=%s",
                    coverage.covered,
                    associated.hostname,
                    alias,
                    agreement.metric,
                    agreement.available_count,
                    associated.covered_licenses_count,
                    host.license_count,
                )

            if not agreement.has_capacity():
                break
