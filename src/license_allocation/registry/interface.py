# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

from abc import ABC, abstractmethod

from license_allocation.models import AgreementRecord, HostUsage, LicenseType


class AgreementStorage(ABC):
    """
    Persistence contract for agreements and the license-type catalog.

    Implementors may back this with a document database or any key-value
    store. :class:`~license_allocation.registry.memory.MemoryAgreementStorage`
    is suitable for single-process use and testing only.
    """

    # ─── Agreements ───────────────────────────────────────────────────────────

    @abstractmethod
    def get_agreement(self, agreement_id: str) -> AgreementRecord | None:
        """Return the agreement with business id ``agreement_id``."""

    @abstractmethod
    def find_by_associated_license_type(self, associated_id: str) -> AgreementRecord | None:
        """Return the agreement holding the associated license type ``associated_id``."""

    @abstractmethod
    def save_agreement(self, agreement: AgreementRecord) -> None:
        ...

    @abstractmethod
    def delete_agreement(self, record_id: str) -> None:
        ...

    @abstractmethod
    def list_agreements(self) -> list[AgreementRecord]:
        ...

    # ─── License types ────────────────────────────────────────────────────────

    @abstractmethod
    def get_license_type(self, license_type_id: str) -> LicenseType | None:
        ...

    @abstractmethod
    def list_license_types(self) -> list[LicenseType]:
        ...


class UsageSource(ABC):
    """
    Read-only access to the current host inventory and license usage.
    """

    @abstractmethod
    def list_host_usages(self) -> list[HostUsage]:
        """Return fresh usage records, one per host (or cluster) and license name."""

    @abstractmethod
    def list_hostnames(self) -> list[str]:
        """Return the names of the hosts agreements may be associated with."""
