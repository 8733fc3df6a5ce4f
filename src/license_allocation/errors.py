# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations


class LicenseAllocationError(Exception):
    """Base class for all license-allocation errors."""

    def __init__(self, message: str, code: str = "LICENSE_ALLOCATION_ERROR") -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class HostNotFoundError(LicenseAllocationError):
    """
    Raised when an agreement references a host missing from the inventory.

    Attributes:
        hostname: The first hostname that could not be found.
        agreement_id: The agreement referencing it, when known.
    """

    def __init__(self, hostname: str, agreement_id: str | None = None) -> None:
        agreement_text = f" referenced by agreement '{agreement_id}'" if agreement_id else ""
        super().__init__(
            f"Host '{hostname}'{agreement_text} is not present in the host inventory.",
            code="HOST_NOT_FOUND",
        )
        self.hostname = hostname
        self.agreement_id = agreement_id


class LicenseTypeNotFoundError(LicenseAllocationError):
    """Raised when a referenced license type is not in the catalog."""

    def __init__(self, license_type_id: str) -> None:
        super().__init__(
            f"License type '{license_type_id}' does not exist.",
            code="LICENSE_TYPE_NOT_FOUND",
        )
        self.license_type_id = license_type_id


class AgreementNotFoundError(LicenseAllocationError):
    """Raised when a referenced agreement does not exist."""

    def __init__(self, agreement_id: str) -> None:
        super().__init__(
            f"Agreement '{agreement_id}' does not exist.",
            code="AGREEMENT_NOT_FOUND",
        )
        self.agreement_id = agreement_id


class AssociatedLicenseTypeNotFoundError(LicenseAllocationError):
    """Raised when no agreement holds the given associated license type."""

    def __init__(self, associated_license_type_id: str) -> None:
        super().__init__(
            f"Associated license type '{associated_license_type_id}' does not exist "
            "in any agreement.",
            code="ASSOCIATED_LICENSE_TYPE_NOT_FOUND",
        )
        self.associated_license_type_id = associated_license_type_id
