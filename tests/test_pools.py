"""
Unit tests for district-aware pool assignment.
"""
import copy
import logging
import random
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from roster.pools import (
    UNASSIGNED,
    assign_pools,
    assign_manually,
    calculate_pool_count,
    district_representation,
    find_collisions,
    group_by_district,
    group_by_pool,
    pool_name,
)


class TestPoolHelpers:
    """Tests for grouping and pool count helpers."""

    def test_pool_name_is_one_based(self):
        assert pool_name(0) == "Pool 1"
        assert pool_name(9) == "Pool 10"

    def test_group_by_district_keeps_order(self, mixed_participants):
        groups = group_by_district(mixed_participants)
        assert list(groups) == ["CHE", "MDU", "TNJ", "SAL"]
        assert [p.id for p in groups["CHE"]] == ["P1", "P3", "P6"]
        assert [p.id for p in groups["MDU"]] == ["P2", "P5"]

    def test_pool_count_follows_largest_district(self, mixed_participants):
        assert calculate_pool_count(mixed_participants) == 3

    def test_pool_count_has_floor_of_two(self, distinct_participants):
        assert calculate_pool_count(distinct_participants) == 2

    def test_pool_count_empty(self):
        assert calculate_pool_count([]) == 0


class TestAssignPools:
    """Tests for automatic pool assignment."""

    def test_distinct_districts_split_evenly(self, distinct_participants):
        """Ten participants from ten districts make two pools of five."""
        result = assign_pools(distinct_participants)

        assert list(result.pools) == ["Pool 1", "Pool 2"]
        assert result.pools["Pool 1"] == ["P1", "P3", "P5", "P7", "P9"]
        assert result.pools["Pool 2"] == ["P2", "P4", "P6", "P8", "P10"]
        assert result.fallbacks == []

    def test_crowded_district_sets_pool_count(self, crowded_district_participants):
        """Six from one district need six pools; the lone other lands in Pool 1."""
        result = assign_pools(crowded_district_participants)

        assert result.pool_count == 6
        for i in range(6):
            assert f"P{i + 1}" in result.pools[pool_name(i)]
        assert result.pools["Pool 1"] == ["P1", "P7"]
        assert find_collisions(crowded_district_participants, result.pools) == []

    def test_cursor_carries_across_districts(self, mixed_participants):
        result = assign_pools(mixed_participants)

        assert result.pools == {
            "Pool 1": ["P1", "P2", "P7"],
            "Pool 2": ["P3", "P5"],
            "Pool 3": ["P6", "P4"],
        }

    def test_placements_recorded_in_order(self, mixed_participants):
        result = assign_pools(mixed_participants)

        assert [p.participant_id for p in result.placements] == ["P1", "P3", "P6", "P2", "P5", "P4", "P7"]
        assert result.placements[0].pool_name == "Pool 1"
        assert not any(p.fallback for p in result.placements)

    def test_empty_input_returns_empty_assignment(self):
        result = assign_pools([])

        assert result.is_empty
        assert result.pools == {}
        assert result.placements == []
        assert result.pool_count == 0

    def test_too_few_pools_falls_back(self, participant_factory, caplog):
        """An inconsistent pool count places the participant anyway and reports it."""
        participants = participant_factory(["CHE", "CHE", "CHE", "MDU"])

        with caplog.at_level(logging.WARNING, logger="roster.pools"):
            result = assign_pools(participants, pool_count=2)

        assert result.pools == {"Pool 1": ["P1", "P3"], "Pool 2": ["P2", "P4"]}
        assert [(p.participant_id, p.pool_name) for p in result.fallbacks] == [("P3", "Pool 1")]
        assert "apart from district CHE; placing in Pool 1" in caplog.text
        assert find_collisions(participants, result.pools) == [("Pool 1", "CHE", ["P1", "P3"])]

    def test_invalid_pool_count(self, distinct_participants):
        with pytest.raises(ValueError):
            assign_pools(distinct_participants, pool_count=0)

    def test_input_list_not_modified(self, mixed_participants):
        before = [p.id for p in mixed_participants]
        assign_pools(mixed_participants)
        assert [p.id for p in mixed_participants] == before

    def test_invariants_on_varied_rosters(self, participant_factory):
        """Pool count, coverage and no collisions across assorted rosters."""
        rng = random.Random(2025)
        districts = ["TVY", "CBE", "MDU", "TNJ", "CHE", "TVL", "ERO"]

        for size in (2, 3, 7, 12, 25, 40, 63):
            participants = participant_factory([rng.choice(districts) for _ in range(size)])
            result = assign_pools(participants)

            largest = max(len(m) for m in group_by_district(participants).values())
            assert result.pool_count == max(largest, 2)

            assigned = [pid for ids in result.pools.values() for pid in ids]
            assert sorted(assigned) == sorted(p.id for p in participants)
            assert len(assigned) == len(set(assigned))

            assert result.fallbacks == []
            assert find_collisions(participants, result.pools) == []


class TestAssignManually:
    """Tests for manual pool moves."""

    @pytest.fixture
    def pools(self, mixed_participants):
        return assign_pools(mixed_participants).pools

    def test_move_to_pool_without_district(self, mixed_participants, pools):
        result = assign_manually(mixed_participants, "P4", "Pool 1", pools)

        assert result.ok
        assert result.pools["Pool 1"] == ["P1", "P2", "P7", "P4"]
        assert result.pools["Pool 3"] == ["P6"]

    def test_move_into_same_district_rejected(self, mixed_participants, pools):
        before = copy.deepcopy(pools)

        result = assign_manually(mixed_participants, "P5", "Pool 1", pools)

        assert not result.ok
        assert result.conflict.district == "MDU"
        assert result.conflict.pool_name == "Pool 1"
        assert result.conflict.message == 'Pool "Pool 1" already has a participant from MDU.'
        assert result.pools == before
        assert pools == before

    def test_move_to_unassigned_always_succeeds(self, mixed_participants, pools):
        result = assign_manually(mixed_participants, "P1", UNASSIGNED, pools)

        assert result.ok
        assert result.pools["Pool 1"] == ["P2", "P7"]
        assert all("P1" not in ids for ids in result.pools.values())

    def test_successful_move_does_not_mutate_input(self, mixed_participants, pools):
        before = copy.deepcopy(pools)
        assign_manually(mixed_participants, "P4", "Pool 1", pools)
        assert pools == before

    def test_move_to_own_pool_is_noop(self, mixed_participants, pools):
        result = assign_manually(mixed_participants, "P1", "Pool 1", pools)

        assert result.ok
        assert result.pools == pools

    def test_move_to_new_pool_creates_it(self, mixed_participants, pools):
        result = assign_manually(mixed_participants, "P6", "Pool 4", pools)

        assert result.ok
        assert result.pools["Pool 4"] == ["P6"]
        assert result.pools["Pool 3"] == ["P4"]

    def test_unassigned_participant_can_be_placed(self, mixed_participants):
        pools = {"Pool 1": ["P1"], "Pool 2": ["P3"]}
        result = assign_manually(mixed_participants, "P7", "Pool 2", pools)

        assert result.ok
        assert result.pools == {"Pool 1": ["P1"], "Pool 2": ["P3", "P7"]}

    def test_unknown_participant(self, mixed_participants, pools):
        with pytest.raises(ValueError):
            assign_manually(mixed_participants, "P99", "Pool 1", pools)


class TestPoolViews:
    """Tests for grouped pool views and analytics."""

    def test_group_by_pool_natural_order_and_unassigned(self, participant_factory):
        participants = participant_factory(["A", "B", "C", "D"])
        pools = {"Pool 10": ["P1"], "Pool 2": ["P2", "P3"]}

        grouped = group_by_pool(participants, pools)

        assert [name for name, _ in grouped] == [UNASSIGNED, "Pool 2", "Pool 10"]
        assert [p.id for p in grouped[0][1]] == ["P4"]
        assert [p.id for p in grouped[1][1]] == ["P2", "P3"]

    def test_group_by_pool_ignores_unknown_ids(self, participant_factory):
        participants = participant_factory(["A"])
        grouped = group_by_pool(participants, {"Pool 1": ["P1", "ghost"]})
        assert [p.id for p in dict(grouped)["Pool 1"]] == ["P1"]
        assert dict(grouped)[UNASSIGNED] == []

    def test_district_representation(self, mixed_participants):
        assert district_representation(mixed_participants) == [
            ("CHE", 3), ("MDU", 2), ("TNJ", 1), ("SAL", 1)
        ]
        assert district_representation(mixed_participants, limit=2) == [("CHE", 3), ("MDU", 2)]

    def test_district_representation_empty(self):
        assert district_representation([]) == []
