# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel, Field

from license_allocation.config import RegistryConfig
from license_allocation.errors import (
    AgreementNotFoundError,
    AssociatedLicenseTypeNotFoundError,
    HostNotFoundError,
    LicenseTypeNotFoundError,
)
from license_allocation.models import AgreementRecord, AssociatedLicenseType
from license_allocation.registry.interface import AgreementStorage, UsageSource

logger = logging.getLogger("license_allocation.registry")


class AssociatedLicenseTypeRequest(BaseModel, frozen=True):
    """
    Request to add or update one associated license type of an agreement.

    Attributes:
        id: Associated license type to update. Ignored when adding.
        agreement_id: Agreement to add the license type to; created when
            it does not exist yet.
        csi: Customer support identifier, used when creating the agreement.
        license_type_id: License type purchased. Must exist in the catalog.
        reference_number: Order reference.
        unlimited: Infinite supply.
        count: Purchased quantity in native units.
        catch_all: May cover hosts it is not associated with.
        hosts: Hostnames associated with the license type. Each must be in
            the host inventory.
    """

    id: str | None = None
    agreement_id: str
    csi: str = ""
    license_type_id: str
    reference_number: str = ""
    unlimited: bool = False
    count: float = Field(default=0.0, ge=0)
    catch_all: bool = False
    hosts: list[str] = Field(default_factory=list)


class AgreementRegistry:
    """
    Creates and edits agreements, validating host references first.

    Every operation that associates hosts checks them against the usage
    source's inventory before the agreement is touched; a missing host
    rejects the whole operation with
    :class:`~license_allocation.errors.HostNotFoundError`.

    Example::

        registry = AgreementRegistry(storage, usage)
        associated_id = registry.add_associated_license_type(
            AssociatedLicenseTypeRequest(
                agreement_id="AGR-1",
                license_type_id="A90611",
                count=10,
                hosts=["db01"],
            )
        )
        registry.add_host_to_associated_license_type(associated_id, "db02")
    """

    def __init__(
        self,
        storage: AgreementStorage,
        usage: UsageSource,
        config: RegistryConfig | None = None,
    ) -> None:
        self._storage = storage
        self._usage = usage
        self._config = config or RegistryConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_agreement(self, agreement_id: str) -> AgreementRecord:
        """
        Return the stored agreement ``agreement_id``.

        Raises:
            AgreementNotFoundError: If no such agreement exists.
        """
        record = self._storage.get_agreement(agreement_id)
        if record is None:
            raise AgreementNotFoundError(agreement_id)
        return record

    def add_associated_license_type(self, request: AssociatedLicenseTypeRequest) -> str:
        """
        Add a license type to an agreement, creating the agreement if needed.

        Returns:
            The id of the new associated license type.

        Raises:
            HostNotFoundError: If a requested host is not in the inventory.
            LicenseTypeNotFoundError: If the license type is not in the catalog.
        """
        self.check_hosts(request.hosts, agreement_id=request.agreement_id)
        self._require_license_type(request.license_type_id)

        record = self._storage.get_agreement(request.agreement_id)
        if record is None:
            record = AgreementRecord(agreement_id=request.agreement_id, csi=request.csi)

        associated = AssociatedLicenseType(
            license_type_id=request.license_type_id,
            reference_number=request.reference_number,
            unlimited=request.unlimited,
            count=request.count,
            catch_all=request.catch_all,
            hosts=list(request.hosts),
        )
        record.license_types.append(associated)
        self._storage.save_agreement(record)

        logger.info(
            "Added license type %s to agreement %s", request.license_type_id, request.agreement_id
        )
        return associated.id

    def update_associated_license_type(self, request: AssociatedLicenseTypeRequest) -> None:
        """
        Replace the fields of an existing associated license type.

        Raises:
            HostNotFoundError: If a requested host is not in the inventory.
            AssociatedLicenseTypeNotFoundError: If ``request.id`` is unknown.
            LicenseTypeNotFoundError: If the license type is not in the catalog.
        """
        self.check_hosts(request.hosts, agreement_id=request.agreement_id)

        record, associated = self._find(request.id or "")
        self._require_license_type(request.license_type_id)

        associated.license_type_id = request.license_type_id
        associated.reference_number = request.reference_number
        associated.unlimited = request.unlimited
        associated.count = request.count
        associated.catch_all = request.catch_all
        associated.hosts = list(request.hosts)
        self._storage.save_agreement(record)

    def delete_associated_license_type(self, associated_id: str) -> None:
        """
        Remove an associated license type; the agreement goes with its last one.

        Raises:
            AssociatedLicenseTypeNotFoundError: If ``associated_id`` is unknown.
        """
        record, associated = self._find(associated_id)

        if len(record.license_types) <= 1:
            self._storage.delete_agreement(record.id)
            logger.info("Deleted agreement %s", record.agreement_id)
            return

        record.license_types.remove(associated)
        self._storage.save_agreement(record)

    def add_host_to_associated_license_type(self, associated_id: str, hostname: str) -> None:
        """
        Associate a host with a license type. Already associated hosts are ignored.

        Raises:
            AssociatedLicenseTypeNotFoundError: If ``associated_id`` is unknown.
            HostNotFoundError: If ``hostname`` is not in the inventory.
        """
        record, associated = self._find(associated_id)
        if hostname in associated.hosts:
            return

        self.check_hosts([hostname], agreement_id=record.agreement_id)
        associated.hosts.append(hostname)
        self._storage.save_agreement(record)

    def remove_host_from_associated_license_type(self, associated_id: str, hostname: str) -> None:
        """
        Drop a host from a license type. Hosts not associated are ignored.

        Raises:
            AssociatedLicenseTypeNotFoundError: If ``associated_id`` is unknown.
        """
        record, associated = self._find(associated_id)
        if hostname not in associated.hosts:
            return

        associated.hosts.remove(hostname)
        self._storage.save_agreement(record)

    def check_hosts(self, hostnames: Iterable[str], agreement_id: str | None = None) -> None:
        """
        Check that every hostname is in the host inventory.

        Does nothing when host checks are disabled in the config.

        Raises:
            HostNotFoundError: On the first unknown hostname.
        """
        if not self._config.check_hosts:
            return

        inventory = set(self._usage.list_hostnames())
        for hostname in hostnames:
            if hostname not in inventory:
                raise HostNotFoundError(hostname, agreement_id=agreement_id)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _find(self, associated_id: str) -> tuple[AgreementRecord, AssociatedLicenseType]:
        record = self._storage.find_by_associated_license_type(associated_id)
        if record is None:
            raise AssociatedLicenseTypeNotFoundError(associated_id)
        associated = record.associated_license_type(associated_id)
        assert associated is not None  # noqa: S101
        return record, associated

    def _require_license_type(self, license_type_id: str) -> None:
        if self._storage.get_license_type(license_type_id) is None:
            raise LicenseTypeNotFoundError(license_type_id)
