# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from license_allocation.config import AllocationConfig
from license_allocation.diagnostics import DiagnosticsCollector
from license_allocation.models import LicenseType
from license_allocation.ordering import build_license_type_index

logger = logging.getLogger("license_allocation.engine")


class AllocationContext:
    """
    Everything one allocation run needs besides the records it mutates.

    A context is created per run and passed explicitly to each pipeline
    step; nothing is read from module-level state.

    Attributes:
        config: The :class:`AllocationConfig` of the run.
        license_types: The license-type catalog, in catalog order.
        diagnostics: Collector receiving the run's anomalies.
    """

    def __init__(
        self,
        license_types: Sequence[LicenseType],
        config: AllocationConfig | None = None,
        diagnostics: DiagnosticsCollector | None = None,
    ) -> None:
        self.config = config or AllocationConfig()
        self.license_types = list(license_types)
        self.diagnostics = diagnostics or DiagnosticsCollector(self.config.max_diagnostics)
        self._by_id = build_license_type_index(self.license_types)

    def license_type(self, license_type_id: str | None) -> LicenseType | None:
        """Return the catalog entry for ``license_type_id``, if any."""
        if license_type_id is None:
            return None
        return self._by_id.get(license_type_id)

    def aliases_of(self, license_type_id: str | None) -> list[str]:
        """Return the aliases of a license type, or an empty list when unknown."""
        license_type = self.license_type(license_type_id)
        if license_type is None:
            return []
        return license_type.aliases

    def trace(self, message: str, *args: Any) -> None:
        """Log a DEBUG trace of the algorithm when ``config.debug`` is set."""
        if self.config.debug:
            logger.debug(message, *args)
