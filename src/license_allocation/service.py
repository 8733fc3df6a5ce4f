# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from license_allocation.compliance import LicenseCompliance, compliance_by_license_type
from license_allocation.config import ServiceConfig
from license_allocation.engine import AllocationEngine, AllocationResult
from license_allocation.filters import AgreementFilter, search_agreements
from license_allocation.models import Agreement
from license_allocation.registry.interface import AgreementStorage, UsageSource
from license_allocation.registry.manager import AgreementRegistry


class LicenseComplianceService:
    """
    Wires the agreement store, the usage source and the allocation engine.

    Each query loads a fresh snapshot from both stores and runs a complete
    allocation over it; nothing is cached between queries.

    Example::

        service = LicenseComplianceService(storage, usage)
        service.registry.add_associated_license_type(request)
        rows = service.search_agreements(AgreementFilter(catch_all=True))
    """

    def __init__(
        self,
        storage: AgreementStorage,
        usage: UsageSource,
        config: ServiceConfig | None = None,
    ) -> None:
        cfg = config or ServiceConfig()
        self._config = cfg
        self._storage = storage
        self._usage = usage
        self.engine = AllocationEngine(cfg.allocation)
        self.registry = AgreementRegistry(storage, usage, cfg.registry)

    def allocate(self) -> AllocationResult:
        """
        Run an allocation over the current agreements and usages.

        Raises:
            HostNotFoundError: If a stored agreement references a host that is
                no longer in the inventory (when host validation is enabled).
        """
        agreements: list[Agreement] = []
        for record in self._storage.list_agreements():
            agreements.extend(record.flatten())

        return self.engine.allocate(
            agreements,
            self._storage.list_license_types(),
            self._usage.list_host_usages(),
            inventory=self._usage.list_hostnames(),
        )

    def search_agreements(self, agreement_filter: AgreementFilter | None = None) -> list[Agreement]:
        """Allocate, then return the agreements matching ``agreement_filter``."""
        return search_agreements(self.allocate().agreements, agreement_filter)

    def compliance(self) -> list[LicenseCompliance]:
        """Allocate, then summarise compliance per license type."""
        return compliance_by_license_type(self.allocate(), self._storage.list_license_types())
