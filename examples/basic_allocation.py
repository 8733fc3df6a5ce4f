# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Basic allocation example.

Registers two agreements against an in-memory host inventory, runs an
allocation and prints per-agreement balances and a compliance summary.

Run with:
    python examples/basic_allocation.py
"""
from __future__ import annotations

import logging

from license_allocation import (
    AgreementFilter,
    AllocationConfig,
    AssociatedLicenseTypeRequest,
    HostNotFoundError,
    HostUsage,
    LicenseComplianceService,
    LicenseMetric,
    LicenseType,
    MemoryAgreementStorage,
    MemoryUsageSource,
    ServiceConfig,
)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # ------------------------------------------------------------------ #
    # 1. Catalog, inventory and service
    # ------------------------------------------------------------------ #
    storage = MemoryAgreementStorage(
        [
            LicenseType(
                id="A90611",
                item_description="Oracle Database Enterprise Edition",
                metric=LicenseMetric.PROCESSOR_PERPETUAL,
                aliases=["Oracle ENT", "Oracle Enterprise"],
            ),
            LicenseType(
                id="A90649",
                item_description="Oracle Database Enterprise Edition",
                metric=LicenseMetric.NAMED_USER_PLUS_PERPETUAL,
                aliases=["Oracle ENT NUP"],
            ),
        ]
    )
    usage = MemoryUsageSource(
        [
            HostUsage(name="db01", license_name="Oracle ENT", original_count=8),
            HostUsage(name="db02", license_name="Oracle Enterprise", original_count=2),
            HostUsage(name="app01", license_name="Oracle ENT NUP", original_count=3),
        ]
    )
    service = LicenseComplianceService(
        storage,
        usage,
        ServiceConfig(allocation=AllocationConfig(debug=False)),
    )

    # ------------------------------------------------------------------ #
    # 2. Register agreements
    # ------------------------------------------------------------------ #
    service.registry.add_associated_license_type(
        AssociatedLicenseTypeRequest(
            agreement_id="AGR-1001",
            csi="6871235",
            license_type_id="A90611",
            count=6,
            hosts=["db01"],
        )
    )
    service.registry.add_associated_license_type(
        AssociatedLicenseTypeRequest(
            agreement_id="AGR-1001",
            license_type_id="A90649",
            count=100,
            hosts=["app01"],
        )
    )
    service.registry.add_associated_license_type(
        AssociatedLicenseTypeRequest(
            agreement_id="AGR-2002",
            license_type_id="A90611",
            count=3,
            catch_all=True,
        )
    )

    try:
        service.registry.add_associated_license_type(
            AssociatedLicenseTypeRequest(
                agreement_id="AGR-3003",
                license_type_id="A90611",
                count=1,
                hosts=["decommissioned01"],
            )
        )
    except HostNotFoundError as exc:
        print(f"Rejected: {exc.message} [{exc.code}]")

    # ------------------------------------------------------------------ #
    # 3. Allocate and report
    # ------------------------------------------------------------------ #
    print("\n=== Agreements ===")
    for row in service.allocate().summary():
        status = "OK" if row["compliant"] else "SHORTFALL"
        print(
            f"{row['agreement_id']:<10} {row['metric']:<28} "
            f"count={row['count']:<6} available={row['available_count']:<6} {status}"
        )

    print("\n=== Agreements with a deficit ===")
    for agreement in service.search_agreements(AgreementFilter(available_count_lte=-1)):
        print(f"{agreement.agreement_id} ({agreement.license_type_id}): {agreement.available_count}")

    print("\n=== Compliance per license type ===")
    for compliance in service.compliance():
        print(
            f"{compliance.license_type_id} {compliance.metric}: "
            f"consumed={compliance.consumed} covered={compliance.covered} "
            f"uncovered={compliance.uncovered} compliant={compliance.compliant}"
        )


if __name__ == "__main__":
    main()
