# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Records exchanged with the allocation engine.

Field names are snake_case in Python and camelCase on the wire
(``model_dump(by_alias=True)``), which is the shape the agreement and
usage stores produce.
"""
from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _new_id() -> str:
    return str(uuid.uuid4())


def _fill_default(data: Any, field: str, source: str) -> Any:
    """Copy ``source`` into ``field`` when the caller supplied only the former."""
    if not isinstance(data, dict):
        return data
    field_alias = to_camel(field)
    if data.get(field) is not None or data.get(field_alias) is not None:
        return data
    value = data.get(source, data.get(to_camel(source)))
    if value is None:
        return data
    return {**data, field: value}


class LicenseType(BaseModel, frozen=True):
    """
    Reference data describing one purchasable license type.

    Attributes:
        id: Part number identifying the license type.
        item_description: Human-readable product description.
        metric: Licensing unit convention, see
            :class:`~license_allocation.types.LicenseMetric`.
        aliases: Product names under which hosts report consumption of
            this license type. Order is significant.
    """

    model_config = _WIRE_CONFIG

    id: str
    item_description: str = ""
    metric: str
    aliases: list[str] = Field(default_factory=list)


class AssociatedHost(BaseModel):
    """
    A host explicitly linked to an agreement.

    Attributes:
        hostname: Name of the host or cluster.
        covered_licenses_count: Units credited by direct allocation,
            in the agreement's native unit.
        total_covered_licenses_count: Units of the host's consumption covered
            by any agreement, set by the finalizer.
        consumed_licenses_count: The host's total consumption, set by the
            finalizer.
    """

    model_config = _WIRE_CONFIG

    hostname: str
    covered_licenses_count: float = 0.0
    total_covered_licenses_count: float = 0.0
    consumed_licenses_count: float = 0.0


class Agreement(BaseModel):
    """
    One associated license type of a purchase agreement, as seen by the engine.

    ``available_count`` starts at ``count`` and only decreases during
    allocation. A negative value after finalization is a compliance deficit.

    Attributes:
        id: Identifier of the associated license type row.
        agreement_id: Identifier of the purchase agreement.
        csi: Customer support identifier of the purchase.
        reference_number: Order reference of the purchase.
        license_type_id: License type purchased.
        item_description: Copied from the license type before allocation.
        metric: Copied from the license type before allocation.
        count: Purchased quantity in the agreement's native unit.
        unlimited: Treat the agreement as an infinite supply.
        catch_all: The agreement may cover hosts it is not associated with.
        available_count: Running balance in the agreement's native unit.
        licenses_count: ``count`` for processor-metric agreements, else 0.
        users_count: ``count`` for named-user agreements, else 0.
        hosts: Associated hosts, in the order they are served.
    """

    model_config = _WIRE_CONFIG

    id: str = Field(default_factory=_new_id)
    agreement_id: str
    csi: str = ""
    reference_number: str = ""
    license_type_id: str
    item_description: str = ""
    metric: str | None = None
    count: float = 0.0
    unlimited: bool = False
    catch_all: bool = False
    available_count: float = 0.0
    licenses_count: float = 0.0
    users_count: float = 0.0
    hosts: list[AssociatedHost] = Field(default_factory=list)

    # Balance left after both allocation passes; the finalizer always
    # subtracts shortfalls from this value.
    _allocated_balance: float | None = PrivateAttr(default=None)

    @model_validator(mode="before")
    @classmethod
    def _default_available_count(cls, data: Any) -> Any:
        return _fill_default(data, "available_count", "count")

    @field_validator("hosts", mode="before")
    @classmethod
    def _coerce_hostnames(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [{"hostname": item} if isinstance(item, str) else item for item in value]
        return value

    @property
    def hostnames(self) -> list[str]:
        """Names of the associated hosts, in their current order."""
        return [host.hostname for host in self.hosts]

    def has_capacity(self) -> bool:
        """Return True while the agreement can still cover demand."""
        return self.unlimited or self.available_count > 0

    def allocated_balance(self) -> float:
        """
        Return the balance left by the allocation passes.

        The first call captures the current ``available_count``; later calls
        return the captured value even after shortfalls have been charged.
        """
        if self._allocated_balance is None:
            self._allocated_balance = self.available_count
        return self._allocated_balance

    def reset_allocated_balance(self) -> None:
        """Forget the captured balance so the next run captures its own."""
        self._allocated_balance = None


class HostUsage(BaseModel):
    """
    Consumption of one license name by one host or cluster.

    ``license_count`` is the part of the consumption not yet covered by any
    agreement. It starts equal to ``original_count`` and is only decreased.

    Attributes:
        name: Host or cluster name.
        license_name: Product name reported by the host.
        original_count: Consumption as first observed. Cannot be reassigned.
        license_count: Remaining uncovered consumption.
        license_type_id: License type resolved from ``license_name``.
    """

    model_config = _WIRE_CONFIG

    name: str
    license_name: str
    original_count: float = Field(ge=0, frozen=True)
    license_count: float = Field(default=0.0, ge=0)
    license_type_id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _default_license_count(cls, data: Any) -> Any:
        return _fill_default(data, "license_count", "original_count")

    @model_validator(mode="after")
    def _check_license_count(self) -> HostUsage:
        if self.license_count > self.original_count:
            raise ValueError(
                f"license_count ({self.license_count}) cannot exceed "
                f"original_count ({self.original_count})"
            )
        return self

    @property
    def covered_count(self) -> float:
        """Part of the original consumption covered so far."""
        return self.original_count - self.license_count


class AssociatedLicenseType(BaseModel):
    """
    Stored shape of one purchased license type inside an agreement.

    Attributes:
        id: Identifier used by registry operations.
        license_type_id: License type purchased.
        reference_number: Order reference.
        unlimited: Infinite supply.
        count: Purchased quantity in native units.
        catch_all: May cover hosts it is not associated with.
        hosts: Hostnames associated with this license type.
    """

    model_config = _WIRE_CONFIG

    id: str = Field(default_factory=_new_id)
    license_type_id: str
    reference_number: str = ""
    unlimited: bool = False
    count: float = 0.0
    catch_all: bool = False
    hosts: list[str] = Field(default_factory=list)


class AgreementRecord(BaseModel):
    """
    A purchase agreement as persisted by the agreement store.

    Attributes:
        id: Storage identifier.
        agreement_id: Business identifier of the agreement.
        csi: Customer support identifier.
        license_types: License types purchased under this agreement.
    """

    model_config = _WIRE_CONFIG

    id: str = Field(default_factory=_new_id)
    agreement_id: str
    csi: str = ""
    license_types: list[AssociatedLicenseType] = Field(default_factory=list)

    def associated_license_type(self, associated_id: str) -> AssociatedLicenseType | None:
        """Return the associated license type with ``associated_id``, if any."""
        for associated in self.license_types:
            if associated.id == associated_id:
                return associated
        return None

    def flatten(self) -> list[Agreement]:
        """Return one engine :class:`Agreement` per associated license type."""
        return [
            Agreement(
                id=associated.id,
                agreement_id=self.agreement_id,
                csi=self.csi,
                reference_number=associated.reference_number,
                license_type_id=associated.license_type_id,
                count=associated.count,
                unlimited=associated.unlimited,
                catch_all=associated.catch_all,
                hosts=list(associated.hosts),
            )
            for associated in self.license_types
        ]
