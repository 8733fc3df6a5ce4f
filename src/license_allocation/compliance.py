# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel

from license_allocation.engine import AllocationResult
from license_allocation.models import LicenseType
from license_allocation.types import unit_multiplier


class LicenseCompliance(BaseModel, frozen=True):
    """
    Compliance status of one license type after an allocation run.

    All quantities are in the license type's native unit (users for Named
    User Plus, licenses otherwise).

    Attributes:
        license_type_id: The license type.
        item_description: Catalog description.
        metric: Catalog metric.
        purchased: Sum of agreement counts, or None when any agreement for
            the license type is unlimited.
        consumed: Usage reported by hosts.
        covered: Usage covered by agreements.
        uncovered: ``consumed - covered``.
        compliant: True when no usage is left uncovered.
    """

    license_type_id: str
    item_description: str
    metric: str
    purchased: float | None
    consumed: float
    covered: float
    uncovered: float
    compliant: bool


def compliance_by_license_type(
    result: AllocationResult,
    license_types: Sequence[LicenseType],
) -> list[LicenseCompliance]:
    """
    Summarise an allocation result per license type of the catalog.

    License types with neither agreements nor usage are omitted. Output
    follows catalog order.
    """
    rows: list[LicenseCompliance] = []

    for license_type in license_types:
        agreements = [agr for agr in result.agreements if agr.license_type_id == license_type.id]
        hosts = [host for host in result.hosts if host.license_type_id == license_type.id]
        if not agreements and not hosts:
            continue

        multiplier = unit_multiplier(license_type.metric)
        purchased: float | None = None
        if not any(agr.unlimited for agr in agreements):
            purchased = sum(agr.count for agr in agreements)

        consumed = sum(host.original_count for host in hosts) * multiplier
        covered = sum(host.covered_count for host in hosts) * multiplier
        uncovered = consumed - covered

        rows.append(
            LicenseCompliance(
                license_type_id=license_type.id,
                item_description=license_type.item_description,
                metric=license_type.metric,
                purchased=purchased,
                consumed=consumed,
                covered=covered,
                uncovered=uncovered,
                compliant=uncovered <= 0,
            )
        )

    return rows
