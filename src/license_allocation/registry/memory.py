# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

from collections.abc import Iterable

from license_allocation.models import AgreementRecord, HostUsage, LicenseType
from license_allocation.registry.interface import AgreementStorage, UsageSource


class MemoryAgreementStorage(AgreementStorage):
    """
    In-process agreement store, suitable for tests and single-process tools.

    Records are deep-copied on the way in and out so callers never share
    state with the store.
    """

    def __init__(self, license_types: Iterable[LicenseType] = ()) -> None:
        self._agreements: dict[str, AgreementRecord] = {}
        self._license_types: dict[str, LicenseType] = {
            license_type.id: license_type for license_type in license_types
        }

    # ─── Agreements ───────────────────────────────────────────────────────────

    def get_agreement(self, agreement_id: str) -> AgreementRecord | None:
        for record in self._agreements.values():
            if record.agreement_id == agreement_id:
                return record.model_copy(deep=True)
        return None

    def find_by_associated_license_type(self, associated_id: str) -> AgreementRecord | None:
        for record in self._agreements.values():
            if record.associated_license_type(associated_id) is not None:
                return record.model_copy(deep=True)
        return None

    def save_agreement(self, agreement: AgreementRecord) -> None:
        self._agreements[agreement.id] = agreement.model_copy(deep=True)

    def delete_agreement(self, record_id: str) -> None:
        self._agreements.pop(record_id, None)

    def list_agreements(self) -> list[AgreementRecord]:
        return [record.model_copy(deep=True) for record in self._agreements.values()]

    # ─── License types ────────────────────────────────────────────────────────

    def get_license_type(self, license_type_id: str) -> LicenseType | None:
        return self._license_types.get(license_type_id)

    def list_license_types(self) -> list[LicenseType]:
        return list(self._license_types.values())

    def save_license_type(self, license_type: LicenseType) -> None:
        """Add or replace a catalog entry."""
        self._license_types[license_type.id] = license_type


class MemoryUsageSource(UsageSource):
    """
    Fixed snapshot of host usages and inventory.

    Every call to :meth:`list_host_usages` returns fresh copies, so each
    allocation run starts from the original counts.
    """

    def __init__(
        self,
        usages: Iterable[HostUsage] = (),
        hostnames: Iterable[str] | None = None,
    ) -> None:
        self._usages = [usage.model_copy(deep=True) for usage in usages]
        if hostnames is None:
            hostnames = dict.fromkeys(usage.name for usage in self._usages)
        self._hostnames = list(hostnames)

    def list_host_usages(self) -> list[HostUsage]:
        return [usage.model_copy(deep=True) for usage in self._usages]

    def list_hostnames(self) -> list[str]:
        return list(self._hostnames)
