# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from license_allocation.allocation.catch_all import assign_from_catch_all_agreements
from license_allocation.allocation.direct import assign_to_associated_hosts, sort_associated_hosts
from license_allocation.allocation.shortfall import (
    CoverStatus,
    cover_status_by_license_name,
    finalize_agreements,
)

__all__ = [
    "assign_to_associated_hosts",
    "sort_associated_hosts",
    "assign_from_catch_all_agreements",
    "finalize_agreements",
    "cover_status_by_license_name",
    "CoverStatus",
]
