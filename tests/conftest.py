# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Shared fixtures for license-allocation tests."""

from __future__ import annotations

import pytest

from license_allocation.context import AllocationContext
from license_allocation.engine import AllocationEngine
from license_allocation.models import LicenseType
from license_allocation.types import LicenseMetric

PROCESSOR_ID = "A90611"
NAMED_USER_ID = "A90649"
COMPUTER_ID = "L76084"


@pytest.fixture
def license_types() -> list[LicenseType]:
    """A small catalog with one license type per metric."""
    return [
        LicenseType(
            id=PROCESSOR_ID,
            item_description="Oracle Database Enterprise Edition",
            metric=LicenseMetric.PROCESSOR_PERPETUAL,
            aliases=["Oracle ENT", "Oracle Enterprise"],
        ),
        LicenseType(
            id=NAMED_USER_ID,
            item_description="Oracle Database Enterprise Edition",
            metric=LicenseMetric.NAMED_USER_PLUS_PERPETUAL,
            aliases=["Oracle ENT NUP"],
        ),
        LicenseType(
            id=COMPUTER_ID,
            item_description="Oracle Database Standard Edition One",
            metric=LicenseMetric.COMPUTER_PERPETUAL,
            aliases=["Oracle STD"],
        ),
    ]


@pytest.fixture
def context(license_types: list[LicenseType]) -> AllocationContext:
    """A fresh run context over the default catalog."""
    return AllocationContext(license_types)


@pytest.fixture
def engine() -> AllocationEngine:
    """An AllocationEngine with default config."""
    return AllocationEngine()
