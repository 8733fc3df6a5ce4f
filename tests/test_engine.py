# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Tests for the allocation passes and the AllocationEngine pipeline.
"""

from __future__ import annotations

import logging

import pytest

from license_allocation.allocation import (
    assign_from_catch_all_agreements,
    assign_to_associated_hosts,
    cover_status_by_license_name,
    finalize_agreements,
)
from license_allocation.config import AllocationConfig
from license_allocation.context import AllocationContext
from license_allocation.engine import AllocationEngine
from license_allocation.errors import HostNotFoundError
from license_allocation.models import Agreement, HostUsage, LicenseType
from license_allocation.ordering import HostIndex
from license_allocation.resolver import fill_agreements_info
from license_allocation.types import DiagnosticKind, LicenseMetric


def _processor(agreement_id: str, count: float = 0, **fields: object) -> Agreement:
    return Agreement(agreement_id=agreement_id, license_type_id="A90611", count=count, **fields)


def _named_user(agreement_id: str, count: float = 0, **fields: object) -> Agreement:
    return Agreement(agreement_id=agreement_id, license_type_id="A90649", count=count, **fields)


def _usage(name: str, count: float, license_name: str = "Oracle ENT") -> HostUsage:
    return HostUsage(name=name, license_name=license_name, original_count=count)


# ---------------------------------------------------------------------------
# TestDirectAllocation
# ---------------------------------------------------------------------------


class TestDirectAllocation:
    def test_processor_agreement_covers_its_associated_host(
        self, context: AllocationContext
    ) -> None:
        agreement = _processor("AGR-1", count=10, hosts=["db01"])
        host = _usage("db01", 15)
        fill_agreements_info([agreement], context)

        assign_to_associated_hosts([agreement], HostIndex.build([host]), context)

        assert agreement.hosts[0].covered_licenses_count == 10
        assert agreement.available_count == 0
        assert host.license_count == 5

    def test_named_user_agreement_credits_users(self, context: AllocationContext) -> None:
        agreement = _named_user("AGR-1", count=100, hosts=["db01"])
        host = _usage("db01", 3, license_name="Oracle ENT NUP")
        fill_agreements_info([agreement], context)

        assign_to_associated_hosts([agreement], HostIndex.build([host]), context)

        assert agreement.hosts[0].covered_licenses_count == 75
        assert agreement.available_count == 25
        assert host.license_count == 0

    def test_associated_hosts_served_by_largest_usage_first(
        self, context: AllocationContext
    ) -> None:
        agreement = _processor("AGR-1", count=5, hosts=["small", "big"])
        small = _usage("small", 2)
        big = _usage("big", 8)
        fill_agreements_info([agreement], context)

        assign_to_associated_hosts([agreement], HostIndex.build([small, big]), context)

        assert agreement.hostnames == ["big", "small"]
        assert agreement.hosts[0].covered_licenses_count == 5
        assert agreement.hosts[1].covered_licenses_count == 0
        assert big.license_count == 3
        assert small.license_count == 2

    def test_host_using_several_aliases_is_covered_alias_by_alias(
        self, context: AllocationContext
    ) -> None:
        agreement = _processor("AGR-1", count=4, hosts=["db01"])
        ent = _usage("db01", 2, license_name="Oracle ENT")
        enterprise = _usage("db01", 3, license_name="Oracle Enterprise")
        fill_agreements_info([agreement], context)

        assign_to_associated_hosts([agreement], HostIndex.build([ent, enterprise]), context)

        assert agreement.hosts[0].covered_licenses_count == 4
        assert ent.license_count == 0
        assert enterprise.license_count == 1
        assert agreement.available_count == 0

    def test_hosts_without_matching_usage_are_skipped(self, context: AllocationContext) -> None:
        agreement = _processor("AGR-1", count=5, hosts=["db01", "db02"])
        other_license = _usage("db01", 4, license_name="Oracle STD")
        fill_agreements_info([agreement], context)

        assign_to_associated_hosts([agreement], HostIndex.build([other_license]), context)

        assert agreement.available_count == 5
        assert other_license.license_count == 4


# ---------------------------------------------------------------------------
# TestCatchAllAllocation
# ---------------------------------------------------------------------------


class TestCatchAllAllocation:
    def test_catch_all_covers_unassociated_host(self, context: AllocationContext) -> None:
        agreement = _processor("AGR-1", count=10, catch_all=True)
        host = _usage("db02", 2)
        fill_agreements_info([agreement], context)

        assign_from_catch_all_agreements([agreement], [host], context)

        assert host.license_count == 0
        assert agreement.available_count == 8

    def test_non_catch_all_agreements_are_ignored(self, context: AllocationContext) -> None:
        agreement = _processor("AGR-1", count=10)
        host = _usage("db02", 2)
        fill_agreements_info([agreement], context)

        assign_from_catch_all_agreements([agreement], [host], context)

        assert host.license_count == 2
        assert agreement.available_count == 10

    def test_catch_all_does_not_credit_associated_hosts(
        self, context: AllocationContext
    ) -> None:
        agreement = _processor("AGR-1", count=10, catch_all=True, hosts=["db01"])
        host = _usage("db01", 3)
        fill_agreements_info([agreement], context)

        assign_from_catch_all_agreements([agreement], [host], context)

        assert host.license_count == 0
        assert agreement.hosts[0].covered_licenses_count == 0

    def test_catch_all_agreements_are_tried_in_priority_order(
        self, context: AllocationContext
    ) -> None:
        first = _processor("first", count=1, catch_all=True)
        second = _processor("second", count=10, catch_all=True)
        host = _usage("db01", 3)
        fill_agreements_info([first, second], context)

        assign_from_catch_all_agreements([first, second], [host], context)

        assert first.available_count == 0
        assert second.available_count == 8
        assert host.license_count == 0


# ---------------------------------------------------------------------------
# TestFinalizer
# ---------------------------------------------------------------------------


class TestFinalizer:
    def test_uncovered_associated_usage_drives_available_negative(
        self, context: AllocationContext
    ) -> None:
        agreement = _processor("AGR-1", count=6, hosts=["db01"])
        host = _usage("db01", 10)
        fill_agreements_info([agreement], context)
        index = HostIndex.build([host])
        assign_to_associated_hosts([agreement], index, context)
        assert host.license_count == 4

        finalize_agreements([agreement], [host], index, context)

        assert agreement.available_count == -4
        assert agreement.hosts[0].total_covered_licenses_count == 6
        assert agreement.hosts[0].consumed_licenses_count == 10
        assert context.diagnostics.of_kind(DiagnosticKind.AVAILABLE_WITH_UNCOVERED) == []

    def test_spare_capacity_with_uncovered_hosts_is_reported(
        self, context: AllocationContext
    ) -> None:
        agreement = _processor("AGR-1", count=5, hosts=["db01"])
        host = _usage("db01", 3)
        fill_agreements_info([agreement], context)

        finalize_agreements([agreement], [host], HostIndex.build([host]), context)

        assert agreement.available_count == 2
        anomalies = context.diagnostics.of_kind(DiagnosticKind.AVAILABLE_WITH_UNCOVERED)
        assert len(anomalies) == 1
        assert anomalies[0].context["agreement_id"] == "AGR-1"

    def test_named_user_spare_below_twenty_five_is_not_reported(
        self, context: AllocationContext
    ) -> None:
        agreement = _named_user("AGR-1", count=40, hosts=["db01"])
        host = _usage("db01", 3, license_name="Oracle ENT NUP")
        fill_agreements_info([agreement], context)
        index = HostIndex.build([host])
        assign_to_associated_hosts([agreement], index, context)
        assert agreement.available_count == 15
        assert host.license_count == 2

        finalize_agreements([agreement], [host], index, context)

        assert agreement.available_count == 15 - 50
        assert agreement.hosts[0].total_covered_licenses_count == 25
        assert agreement.hosts[0].consumed_licenses_count == 75
        assert context.diagnostics.of_kind(DiagnosticKind.AVAILABLE_WITH_UNCOVERED) == []

    def test_catch_all_is_charged_for_every_host_of_its_aliases(
        self, context: AllocationContext
    ) -> None:
        agreement = _processor("AGR-1", count=0, catch_all=True)
        hosts = [_usage("db01", 2), _usage("db02", 3, license_name="Oracle Enterprise")]
        fill_agreements_info([agreement], context)

        finalize_agreements([agreement], hosts, HostIndex.build(hosts), context)

        assert agreement.available_count == -5

    def test_finalizing_twice_does_not_double_charge(self, context: AllocationContext) -> None:
        agreement = _processor("AGR-1", count=6, hosts=["db01"])
        host = _usage("db01", 10)
        fill_agreements_info([agreement], context)
        index = HostIndex.build([host])
        assign_to_associated_hosts([agreement], index, context)

        finalize_agreements([agreement], [host], index, context)
        first = agreement.model_dump()
        finalize_agreements([agreement], [host], index, context)

        assert agreement.model_dump() == first
        assert agreement.available_count == -4

    def test_reallocating_an_agreement_uses_the_new_run_balance(
        self, engine: AllocationEngine, license_types: list[LicenseType]
    ) -> None:
        agreement = _processor("AGR-1", count=10, hosts=["db01"])
        engine.allocate([agreement], license_types, [_usage("db01", 4)])
        assert agreement.available_count == 6

        agreement.available_count = 10
        engine.allocate([agreement], license_types, [_usage("db01", 7)])

        assert agreement.available_count == 3

    def test_cover_status_sums_per_license_name(self) -> None:
        first = _usage("db01", 4)
        second = _usage("db02", 6)
        first.license_count = 1
        statuses = cover_status_by_license_name([first, second])

        assert statuses["Oracle ENT"].consumed == 10
        assert statuses["Oracle ENT"].covered == 3
        assert statuses["Oracle ENT"].uncovered == 7


# ---------------------------------------------------------------------------
# TestAllocationEngine
# ---------------------------------------------------------------------------


class TestAllocationEngine:
    def test_processor_shortfall_end_to_end(
        self, engine: AllocationEngine, license_types: list[LicenseType]
    ) -> None:
        agreement = _processor("AGR-1", count=10, hosts=["db01"])
        host = _usage("db01", 15)

        result = engine.allocate([agreement], license_types, [host])

        assert result.agreements == [agreement]
        assert agreement.metric == LicenseMetric.PROCESSOR_PERPETUAL
        assert agreement.licenses_count == 10
        assert agreement.hosts[0].covered_licenses_count == 10
        assert agreement.hosts[0].total_covered_licenses_count == 10
        assert agreement.hosts[0].consumed_licenses_count == 15
        assert agreement.available_count == -5
        assert host.license_count == 5

    def test_named_user_end_to_end(
        self, engine: AllocationEngine, license_types: list[LicenseType]
    ) -> None:
        agreement = _named_user("AGR-1", count=100, hosts=["db01"])
        host = _usage("db01", 3, license_name="Oracle ENT NUP")

        engine.allocate([agreement], license_types, [host])

        assert agreement.users_count == 100
        assert agreement.available_count == 25
        assert agreement.hosts[0].covered_licenses_count == 75
        assert agreement.hosts[0].total_covered_licenses_count == 75
        assert host.license_count == 0

    def test_catch_all_picks_up_what_direct_allocation_left(
        self, engine: AllocationEngine, license_types: list[LicenseType]
    ) -> None:
        associated = _processor("AGR-1", count=3, hosts=["db01"])
        catch_all = _processor("AGR-2", count=10, catch_all=True)
        db01 = _usage("db01", 5)
        db02 = _usage("db02", 4)

        result = engine.allocate([catch_all, associated], license_types, [db01, db02])

        assert [agr.agreement_id for agr in result.agreements] == ["AGR-1", "AGR-2"]
        assert associated.available_count == 0
        assert catch_all.available_count == 4
        assert db01.license_count == 0
        assert db02.license_count == 0
        assert associated.hosts[0].covered_licenses_count == 3
        assert associated.hosts[0].total_covered_licenses_count == 5
        assert [host.name for host in result.hosts] == ["db02", "db01"]

    def test_larger_agreement_is_served_first(
        self, engine: AllocationEngine, license_types: list[LicenseType]
    ) -> None:
        small = _processor("small", count=4, hosts=["db01"])
        large = _processor("large", count=10, hosts=["db01"])
        host = _usage("db01", 12)

        engine.allocate([small, large], license_types, [host])

        assert large.available_count == 0
        assert small.available_count == 2
        assert small.hosts[0].covered_licenses_count == 2

    def test_unlimited_agreement_covers_all_usage(
        self, engine: AllocationEngine, license_types: list[LicenseType]
    ) -> None:
        agreement = _processor("ULA", unlimited=True, hosts=["db01"])
        host = _usage("db01", 20)

        engine.allocate([agreement], license_types, [host])

        assert agreement.hosts[0].covered_licenses_count == 20
        assert agreement.available_count == 0
        assert host.license_count == 0

    def test_unresolved_hosts_are_reported_and_excluded(
        self, engine: AllocationEngine, license_types: list[LicenseType]
    ) -> None:
        agreement = _processor("AGR-1", count=5, catch_all=True)
        unknown = _usage("db09", 2, license_name="Some Other Product")

        result = engine.allocate([agreement], license_types, [unknown])

        assert result.unresolved_hosts == [unknown]
        assert result.hosts == []
        assert unknown.license_type_id is None
        assert unknown.license_count == 2
        assert agreement.available_count == 5
        kinds = [diagnostic.kind for diagnostic in result.diagnostics]
        assert kinds == [DiagnosticKind.UNRESOLVED_ALIAS]

    def test_agreement_with_unknown_license_type_is_left_untouched(
        self, engine: AllocationEngine, license_types: list[LicenseType]
    ) -> None:
        agreement = Agreement(
            agreement_id="AGR-X", license_type_id="UNKNOWN", count=5, hosts=["db01"]
        )
        host = _usage("db01", 2)

        result = engine.allocate([agreement], license_types, [host])

        assert agreement in result.agreements
        assert agreement.available_count == 5
        assert host.license_count == 2
        assert result.diagnostics[0].kind == DiagnosticKind.UNKNOWN_LICENSE_TYPE

    def test_resolves_license_type_of_hosts(
        self, engine: AllocationEngine, license_types: list[LicenseType]
    ) -> None:
        hosts = [
            _usage("db01", 1, license_name="Oracle Enterprise"),
            _usage("db02", 1, license_name="Oracle STD"),
        ]

        result = engine.allocate([], license_types, hosts)

        assert {host.name: host.license_type_id for host in result.hosts} == {
            "db01": "A90611",
            "db02": "L76084",
        }

    def test_unknown_associated_host_rejects_the_run_before_mutation(
        self, engine: AllocationEngine, license_types: list[LicenseType]
    ) -> None:
        agreement = _processor("AGR-1", count=10, hosts=["db01", "ghost"])
        host = _usage("db01", 4)

        with pytest.raises(HostNotFoundError) as excinfo:
            engine.allocate([agreement], license_types, [host], inventory=["db01"])

        assert excinfo.value.hostname == "ghost"
        assert excinfo.value.code == "HOST_NOT_FOUND"
        assert agreement.available_count == 10
        assert host.license_count == 4
        assert host.license_type_id is None

    def test_host_validation_can_be_disabled(self, license_types: list[LicenseType]) -> None:
        engine = AllocationEngine(AllocationConfig(validate_hosts=False))
        agreement = _processor("AGR-1", count=10, hosts=["ghost"])

        result = engine.allocate([agreement], license_types, [], inventory=[])

        assert result.agreements == [agreement]

    def test_debug_mode_traces_the_algorithm(
        self, license_types: list[LicenseType], caplog: pytest.LogCaptureFixture
    ) -> None:
        engine = AllocationEngine(AllocationConfig(debug=True))
        agreement = _processor("AGR-1", count=3, hosts=["db01"])

        with caplog.at_level(logging.DEBUG, logger="license_allocation.engine"):
            engine.allocate([agreement], license_types, [_usage("db01", 2)])

        assert any("Distributing licenses of agreement" in message for message in caplog.messages)

    def test_summary_reports_compliance_per_agreement(
        self, engine: AllocationEngine, license_types: list[LicenseType]
    ) -> None:
        agreement = _processor("AGR-1", count=2, hosts=["db01"])

        result = engine.allocate([agreement], license_types, [_usage("db01", 3)])
        rows = result.summary()

        assert rows[0]["agreement_id"] == "AGR-1"
        assert rows[0]["available_count"] == -1
        assert rows[0]["compliant"] is False
        assert rows[0]["hosts"][0]["hostname"] == "db01"


# ---------------------------------------------------------------------------
# TestAllocationInvariants
# ---------------------------------------------------------------------------


class TestAllocationInvariants:
    @pytest.fixture
    def fleet(self) -> tuple[list[Agreement], list[HostUsage]]:
        agreements = [
            _processor("P-1", count=7, hosts=["db01", "db02", "db03"]),
            _processor("P-2", count=3, hosts=["db02"]),
            _processor("P-CA", count=4, catch_all=True, hosts=["db04"]),
            _processor("P-ULA", unlimited=True, hosts=["db05"]),
            _named_user("N-1", count=130, hosts=["db06", "db07"]),
            _named_user("N-CA", count=60, catch_all=True),
        ]
        hosts = [
            _usage("db01", 4),
            _usage("db02", 6),
            _usage("db02", 1, license_name="Oracle Enterprise"),
            _usage("db03", 2.5),
            _usage("db04", 3),
            _usage("db05", 8),
            _usage("db06", 2, license_name="Oracle ENT NUP"),
            _usage("db07", 4, license_name="Oracle ENT NUP"),
            _usage("db08", 1, license_name="Oracle ENT NUP"),
            _usage("db09", 2, license_name="Oracle STD"),
        ]
        return agreements, hosts

    def test_license_count_stays_between_zero_and_original(
        self,
        engine: AllocationEngine,
        license_types: list[LicenseType],
        fleet: tuple[list[Agreement], list[HostUsage]],
    ) -> None:
        agreements, hosts = fleet
        result = engine.allocate(agreements, license_types, hosts)

        for host in result.hosts:
            assert 0 <= host.license_count <= host.original_count

    def test_credited_units_never_exceed_purchased_count(
        self,
        engine: AllocationEngine,
        license_types: list[LicenseType],
        fleet: tuple[list[Agreement], list[HostUsage]],
    ) -> None:
        agreements, hosts = fleet
        engine.allocate(agreements, license_types, hosts)

        for agreement in agreements:
            if agreement.unlimited or agreement.catch_all:
                continue
            credited = sum(host.covered_licenses_count for host in agreement.hosts)
            assert credited <= agreement.count
