# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Priority orders and derived lookup indexes used by the allocation passes.

Allocation mutates the fields the orders are keyed on, so every pass that
needs a fresh priority view re-sorts, and any :class:`HostIndex` built
before the re-sort is discarded and rebuilt from the new order.
"""
from __future__ import annotations

from collections.abc import Sequence

from license_allocation.models import Agreement, HostUsage, LicenseType


def agreement_sort_key(agreement: Agreement) -> tuple[bool, bool, float, float]:
    """Key ordering non catch-all, then limited, then bigger agreements first."""
    return (
        agreement.catch_all,
        agreement.unlimited,
        -agreement.users_count,
        -agreement.licenses_count,
    )


def sort_agreements(agreements: list[Agreement]) -> None:
    """
    Sort agreements in place by allocation priority.

    Order: ``catch_all`` false first, ``unlimited`` false first, then
    decreasing ``users_count``, then decreasing ``licenses_count``.
    """
    agreements.sort(key=agreement_sort_key)


def sort_hosts(hosts: list[HostUsage]) -> None:
    """
    Sort host usages in place by allocation priority.

    Order: decreasing uncovered ``license_count``, then decreasing ``name``,
    then decreasing ``license_name``.
    """
    hosts.sort(key=lambda host: (host.license_count, host.name, host.license_name), reverse=True)


class HostIndex:
    """
    Lookup of host usages by license name and host name.

    Built from one ordering of the host collection; rebuild it with
    :meth:`build` after re-sorting rather than patching it. Host and cluster
    names are assumed not to collide.
    """

    def __init__(self, entries: dict[str, dict[str, HostUsage]]) -> None:
        self._entries = entries

    @classmethod
    def build(cls, hosts: Sequence[HostUsage]) -> HostIndex:
        entries: dict[str, dict[str, HostUsage]] = {}
        for host in hosts:
            entries.setdefault(host.license_name, {})[host.name] = host
        return cls(entries)

    def get(self, license_name: str, hostname: str) -> HostUsage | None:
        """Return the usage of ``license_name`` by ``hostname``, if recorded."""
        by_host = self._entries.get(license_name)
        if by_host is None:
            return None
        return by_host.get(hostname)

    def max_license_count(self, aliases: Sequence[str], hostname: str) -> float:
        """Largest uncovered count of ``hostname`` across ``aliases`` (0 when none)."""
        best = 0.0
        for alias in aliases:
            host = self.get(alias, hostname)
            if host is not None:
                best = max(best, host.license_count)
        return best


def build_license_type_index(license_types: Sequence[LicenseType]) -> dict[str, LicenseType]:
    """Map license type ids to catalog entries. Later duplicates win."""
    return {license_type.id: license_type for license_type in license_types}
