# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field


class AllocationConfig(BaseModel, frozen=True):
    """
    Configuration for the AllocationEngine.

    Attributes:
        debug: When True, every distribution step is traced at DEBUG level
            to the ``license_allocation.engine`` logger.
        validate_hosts: When True and an inventory is passed to
            :meth:`~license_allocation.engine.AllocationEngine.allocate`,
            every associated hostname must be present in it.
        max_diagnostics: Maximum number of diagnostics retained for a single
            run. Oldest diagnostics are dropped once the limit is reached.
    """

    debug: bool = False
    validate_hosts: bool = True
    max_diagnostics: Annotated[int, Field(gt=0)] = 10_000


class RegistryConfig(BaseModel, frozen=True):
    """
    Configuration for the AgreementRegistry.

    Attributes:
        check_hosts: When True, hosts added to an associated license type
            must exist in the host inventory.
    """

    check_hosts: bool = True


class ServiceConfig(BaseModel, frozen=True):
    """
    Top-level configuration for the LicenseComplianceService.

    Example::

        config = ServiceConfig(
            allocation=AllocationConfig(debug=True),
            registry=RegistryConfig(check_hosts=False),
        )
        service = LicenseComplianceService(config=config)
    """

    allocation: AllocationConfig = Field(default_factory=AllocationConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
