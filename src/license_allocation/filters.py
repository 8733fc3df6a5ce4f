# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel

from license_allocation.models import Agreement


class AgreementFilter(BaseModel, frozen=True):
    """
    Filter criteria for allocated agreements.

    Text criteria match case-insensitively as substrings; an empty string
    matches everything. ``metric`` must match exactly (case-insensitive).
    Boolean criteria left as None match both values. Count bounds left as
    None are unbounded.

    Attributes:
        agreement_id: Substring of the agreement id.
        license_type_id: Substring of the license type id.
        item_description: Substring of the item description.
        csi: Substring of the customer support identifier.
        reference_number: Substring of the order reference.
        metric: Exact metric.
        unlimited: Required value of ``unlimited``.
        catch_all: Required value of ``catch_all``.
        licenses_count_lte: Upper bound on ``licenses_count``.
        licenses_count_gte: Lower bound on ``licenses_count``.
        users_count_lte: Upper bound on ``users_count``.
        users_count_gte: Lower bound on ``users_count``.
        available_count_lte: Upper bound on ``available_count``.
        available_count_gte: Lower bound on ``available_count``.
    """

    agreement_id: str = ""
    license_type_id: str = ""
    item_description: str = ""
    csi: str = ""
    reference_number: str = ""
    metric: str | None = None
    unlimited: bool | None = None
    catch_all: bool | None = None
    licenses_count_lte: float | None = None
    licenses_count_gte: float | None = None
    users_count_lte: float | None = None
    users_count_gte: float | None = None
    available_count_lte: float | None = None
    available_count_gte: float | None = None

    def matches(self, agreement: Agreement) -> bool:
        """Return True if ``agreement`` satisfies every criterion."""
        text_criteria = (
            (self.agreement_id, agreement.agreement_id),
            (self.license_type_id, agreement.license_type_id),
            (self.item_description, agreement.item_description),
            (self.csi, agreement.csi),
            (self.reference_number, agreement.reference_number),
        )
        for wanted, actual in text_criteria:
            if wanted.lower() not in actual.lower():
                return False

        if self.metric and (agreement.metric or "").lower() != self.metric.lower():
            return False
        if self.unlimited is not None and agreement.unlimited != self.unlimited:
            return False
        if self.catch_all is not None and agreement.catch_all != self.catch_all:
            return False

        return (
            _within(agreement.licenses_count, self.licenses_count_gte, self.licenses_count_lte)
            and _within(agreement.users_count, self.users_count_gte, self.users_count_lte)
            and _within(agreement.available_count, self.available_count_gte, self.available_count_lte)
        )


def _within(value: float, lower: float | None, upper: float | None) -> bool:
    if lower is not None and value < lower:
        return False
    if upper is not None and value > upper:
        return False
    return True


def search_agreements(
    agreements: Iterable[Agreement],
    agreement_filter: AgreementFilter | None = None,
) -> list[Agreement]:
    """Return the agreements matching ``agreement_filter``, preserving order."""
    criteria = agreement_filter or AgreementFilter()
    return [agreement for agreement in agreements if criteria.matches(agreement)]
