# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from license_allocation.registry.interface import AgreementStorage, UsageSource
from license_allocation.registry.manager import AgreementRegistry, AssociatedLicenseTypeRequest
from license_allocation.registry.memory import MemoryAgreementStorage, MemoryUsageSource

__all__ = [
    "AgreementRegistry",
    "AssociatedLicenseTypeRequest",
    "AgreementStorage",
    "UsageSource",
    "MemoryAgreementStorage",
    "MemoryUsageSource",
]
