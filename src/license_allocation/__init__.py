# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
license-allocation: reconcile purchased database licenses with host usage.

Quick start::

    from license_allocation import (
        Agreement, AllocationEngine, HostUsage, LicenseMetric, LicenseType,
    )

    license_types = [
        LicenseType(
            id="A90611",
            metric=LicenseMetric.PROCESSOR_PERPETUAL,
            aliases=["Oracle ENT"],
        ),
    ]
    agreements = [
        Agreement(agreement_id="AGR-1", license_type_id="A90611", count=10, hosts=["db01"]),
    ]
    hosts = [HostUsage(name="db01", license_name="Oracle ENT", original_count=15)]

    result = AllocationEngine().allocate(agreements, license_types, hosts)
    print(result.agreements[0].available_count)  # -5.0
"""
from __future__ import annotations

from license_allocation.compliance import LicenseCompliance, compliance_by_license_type
from license_allocation.config import AllocationConfig, RegistryConfig, ServiceConfig
from license_allocation.context import AllocationContext
from license_allocation.coverage import Coverage, cover_host
from license_allocation.diagnostics import Diagnostic, DiagnosticsCollector
from license_allocation.engine import AllocationEngine, AllocationResult, validate_host_references
from license_allocation.errors import (
    AgreementNotFoundError,
    AssociatedLicenseTypeNotFoundError,
    HostNotFoundError,
    LicenseAllocationError,
    LicenseTypeNotFoundError,
)
from license_allocation.filters import AgreementFilter, search_agreements
from license_allocation.models import (
    Agreement,
    AgreementRecord,
    AssociatedHost,
    AssociatedLicenseType,
    HostUsage,
    LicenseType,
)
from license_allocation.ordering import HostIndex, sort_agreements, sort_hosts
from license_allocation.registry import (
    AgreementRegistry,
    AgreementStorage,
    AssociatedLicenseTypeRequest,
    MemoryAgreementStorage,
    MemoryUsageSource,
    UsageSource,
)
from license_allocation.resolver import fill_agreements_info, resolve_license_types
from license_allocation.service import LicenseComplianceService
from license_allocation.types import (
    LICENSE_METRIC_VALUES,
    NAMED_USERS_PER_PROCESSOR,
    DiagnosticKind,
    DiagnosticSeverity,
    LicenseMetric,
)

__version__ = "0.1.0"

__all__ = [
    # Core types
    "LicenseMetric",
    "LICENSE_METRIC_VALUES",
    "NAMED_USERS_PER_PROCESSOR",
    "DiagnosticKind",
    "DiagnosticSeverity",
    # Configuration
    "AllocationConfig",
    "RegistryConfig",
    "ServiceConfig",
    # Records
    "LicenseType",
    "Agreement",
    "AssociatedHost",
    "HostUsage",
    "AgreementRecord",
    "AssociatedLicenseType",
    # Engine
    "AllocationEngine",
    "AllocationResult",
    "AllocationContext",
    "validate_host_references",
    "resolve_license_types",
    "fill_agreements_info",
    "sort_agreements",
    "sort_hosts",
    "HostIndex",
    "cover_host",
    "Coverage",
    # Diagnostics
    "Diagnostic",
    "DiagnosticsCollector",
    # Reporting
    "AgreementFilter",
    "search_agreements",
    "LicenseCompliance",
    "compliance_by_license_type",
    # Registry
    "AgreementRegistry",
    "AssociatedLicenseTypeRequest",
    "AgreementStorage",
    "UsageSource",
    "MemoryAgreementStorage",
    "MemoryUsageSource",
    "LicenseComplianceService",
    # Errors
    "LicenseAllocationError",
    "HostNotFoundError",
    "LicenseTypeNotFoundError",
    "AgreementNotFoundError",
    "AssociatedLicenseTypeNotFoundError",
    "__version__",
]
