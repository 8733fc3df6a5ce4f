# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from pydantic import BaseModel, Field

from license_allocation.allocation.catch_all import assign_from_catch_all_agreements
from license_allocation.allocation.direct import assign_to_associated_hosts
from license_allocation.allocation.shortfall import finalize_agreements
from license_allocation.config import AllocationConfig
from license_allocation.context import AllocationContext
from license_allocation.diagnostics import Diagnostic
from license_allocation.errors import HostNotFoundError
from license_allocation.models import Agreement, HostUsage, LicenseType
from license_allocation.ordering import HostIndex, sort_agreements, sort_hosts
from license_allocation.resolver import fill_agreements_info, resolve_license_types

logger = logging.getLogger("license_allocation.engine")


class AllocationResult(BaseModel):
    """
    Output of one allocation run.

    The agreement and host objects are the ones passed to
    :meth:`AllocationEngine.allocate`, mutated in place.

    Attributes:
        agreements: Every input agreement, in allocation priority order.
        hosts: Host usages that took part in the allocation, in their final
            priority order.
        unresolved_hosts: Host usages whose license name matched no alias.
        diagnostics: Non-fatal anomalies observed during the run.
    """

    agreements: list[Agreement]
    hosts: list[HostUsage]
    unresolved_hosts: list[HostUsage] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    def agreement(self, agreement_id: str) -> list[Agreement]:
        """Return the rows of ``agreement_id`` (one per associated license type)."""
        return [agr for agr in self.agreements if agr.agreement_id == agreement_id]

    def summary(self) -> list[dict[str, object]]:
        """
        Return a presentation snapshot of the allocated agreements.

        Returns:
            List of dicts, one per agreement row, with fields
            ``agreement_id``, ``license_type_id``, ``item_description``,
            ``metric``, ``count``, ``available_count``, ``unlimited``,
            ``catch_all``, ``compliant`` and ``hosts`` (a list of dicts
            with the per-host coverage fields).
        """
        return [
            {
                "agreement_id": agr.agreement_id,
                "license_type_id": agr.license_type_id,
                "item_description": agr.item_description,
                "metric": agr.metric,
                "count": agr.count,
                "available_count": agr.available_count,
                "unlimited": agr.unlimited,
                "catch_all": agr.catch_all,
                "compliant": agr.available_count >= 0,
                "hosts": [host.model_dump() for host in agr.hosts],
            }
            for agr in self.agreements
        ]


def validate_host_references(agreements: Iterable[Agreement], inventory: Iterable[str]) -> None:
    """
    Check that every associated host of every agreement is in ``inventory``.

    Raises:
        HostNotFoundError: On the first hostname missing from the inventory.
    """
    known = set(inventory)
    for agreement in agreements:
        for hostname in agreement.hostnames:
            if hostname not in known:
                raise HostNotFoundError(hostname, agreement_id=agreement.agreement_id)


class AllocationEngine:
    """
    Assigns purchased licenses to the hosts consuming them.

    One call to :meth:`allocate` runs the whole pipeline synchronously:

    1. Resolve each host's license name to a license type.
    2. Fill agreement metrics and sort agreements and hosts by priority.
    3. Distribute each agreement to its associated hosts.
    4. Re-sort hosts, rebuild the host index, and distribute catch-all
       agreements to any host still uncovered.
    5. Record per-host coverage on agreements and charge uncovered usage
       to their available counts.

    The engine holds only configuration; each run builds its own
    :class:`~license_allocation.context.AllocationContext`.

    Example::

        engine = AllocationEngine()
        result = engine.allocate(agreements, license_types, hosts)
        for agreement in result.agreements:
            print(agreement.agreement_id, agreement.available_count)
    """

    def __init__(self, config: AllocationConfig | None = None) -> None:
        self._config = config or AllocationConfig()

    @property
    def config(self) -> AllocationConfig:
        return self._config

    def allocate(
        self,
        agreements: Sequence[Agreement],
        license_types: Sequence[LicenseType],
        hosts: Sequence[HostUsage],
        inventory: Iterable[str] | None = None,
    ) -> AllocationResult:
        """
        Run a full allocation over a snapshot of agreements and usages.

        Args:
            agreements: Agreement rows, mutated in place.
            license_types: The license-type catalog.
            hosts: Host usages, mutated in place.
            inventory: Known hostnames. When given (and host validation is
                enabled), agreements referencing other hosts are rejected
                before anything is mutated.

        Returns:
            An :class:`AllocationResult`.

        Raises:
            HostNotFoundError: If an associated host is missing from
                ``inventory``.
        """
        if inventory is not None and self._config.validate_hosts:
            validate_host_references(agreements, inventory)

        context = AllocationContext(license_types, config=self._config)

        working_hosts, unresolved = resolve_license_types(hosts, context)

        ordered = list(agreements)
        allocatable = fill_agreements_info(ordered, context)
        sort_agreements(ordered)
        sort_agreements(allocatable)
        sort_hosts(working_hosts)

        context.trace("Agreements=%s", [agr.model_dump() for agr in ordered])
        context.trace("Hosts=%s", [host.model_dump() for host in working_hosts])

        index = HostIndex.build(working_hosts)
        assign_to_associated_hosts(allocatable, index, context)

        # Allocation changed the sort keys: re-sort and rebuild the index.
        sort_hosts(working_hosts)
        index = HostIndex.build(working_hosts)
        context.trace("Resorted hosts=%s", [host.model_dump() for host in working_hosts])

        assign_from_catch_all_agreements(allocatable, working_hosts, context)
        finalize_agreements(allocatable, working_hosts, index, context)

        logger.info(
            "Allocated %d agreements over %d host usages (%d unresolved, %d diagnostics)",
            len(ordered),
            len(working_hosts),
            len(unresolved),
            len(context.diagnostics),
        )

        return AllocationResult(
            agreements=ordered,
            hosts=working_hosts,
            unresolved_hosts=unresolved,
            diagnostics=context.diagnostics.to_list(),
        )
