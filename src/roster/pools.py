"""
District-aware pool assignment.

Participants are spread over pools so that no two participants from the same
district share a pool. The pool count is driven by the largest district: if
six athletes come from one district, six pools are needed to keep them apart.

All functions take the participant list and the current mapping as input and
return new values; nothing here keeps state between calls.
"""
import logging
import re
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

MIN_POOL_COUNT = 2
POOL_NAME_PREFIX = "Pool"
UNASSIGNED = "unassigned"


def pool_name(index: int) -> str:
    """Name of the pool at a 0-based index ("Pool 1" for index 0)."""
    return f"{POOL_NAME_PREFIX} {index + 1}"


def group_by_district(participants) -> Dict[str, List]:
    """Group participants by district, keeping first-appearance order."""
    groups = {}
    for participant in participants:
        if participant.district not in groups:
            groups[participant.district] = []
        groups[participant.district].append(participant)
    return groups


def calculate_pool_count(participants) -> int:
    """Number of pools needed to keep every district apart (at least 2)."""
    groups = group_by_district(participants)
    if not groups:
        return 0
    return max(max(len(members) for members in groups.values()), MIN_POOL_COUNT)


class Placement:
    """Where one participant landed during automatic assignment."""

    def __init__(self, participant_id, pool_name, fallback=False):
        self.participant_id = participant_id
        self.pool_name = pool_name
        # True when every pool already held this district and the collision was accepted
        self.fallback = fallback

    def __repr__(self):
        return f"Placement(participant_id={self.participant_id}, pool_name={self.pool_name}, fallback={self.fallback})"


class PoolAssignment:
    """Result of a full automatic pool assignment."""

    def __init__(self, pools: Dict[str, List], placements: List[Placement]):
        self.pools = pools
        self.placements = placements

    @property
    def pool_count(self) -> int:
        return len(self.pools)

    @property
    def fallbacks(self) -> List[Placement]:
        return [p for p in self.placements if p.fallback]

    @property
    def is_empty(self) -> bool:
        return not self.pools

    def __repr__(self):
        return f"PoolAssignment(pools={self.pools}, fallbacks={len(self.fallbacks)})"


def assign_pools(participants, pool_count: Optional[int] = None) -> PoolAssignment:
    """
    Assign every participant to a pool, avoiding same-district collisions.

    Districts are walked in grouping order and their members in registration
    order. A round-robin cursor carries over from one participant to the next;
    each participant takes the first pool at or after the cursor that has no
    one from its district yet.

    Args:
        participants: Participants to distribute (full recompute).
        pool_count: Override for the number of pools. When it is smaller than
            the largest district some participants cannot be kept apart; they
            are placed at the cursor anyway and reported as fallbacks.

    Returns:
        PoolAssignment with the pool mapping and one Placement per participant.
        Empty input yields an empty assignment.
    """
    participants = list(participants)
    if not participants:
        logger.info("No participants to assign to pools")
        return PoolAssignment(pools={}, placements=[])

    if pool_count is None:
        pool_count = calculate_pool_count(participants)
    if pool_count < 1:
        raise ValueError(f"pool_count must be at least 1, got {pool_count}")

    pools = {pool_name(i): [] for i in range(pool_count)}
    pool_districts = [set() for _ in range(pool_count)]
    placements = []

    cursor = 0
    for district, members in group_by_district(participants).items():
        for participant in members:
            target = None
            for probe in range(pool_count):
                index = (cursor + probe) % pool_count
                if district not in pool_districts[index]:
                    target = index
                    break

            fallback = target is None
            if fallback:
                target = cursor
                logger.warning(
                    f"Could not keep {participant.name} ({participant.id}) apart from district {district}; "
                    f"placing in {pool_name(target)}"
                )

            pools[pool_name(target)].append(participant.id)
            pool_districts[target].add(district)
            placements.append(Placement(participant.id, pool_name(target), fallback=fallback))
            cursor = (target + 1) % pool_count

    logger.debug(f"Assigned {len(participants)} participants to {pool_count} pools")
    return PoolAssignment(pools=pools, placements=placements)


class DistrictConflict:
    """A manual move rejected because the target pool already has the district."""

    def __init__(self, participant_id, district, pool_name):
        self.participant_id = participant_id
        self.district = district
        self.pool_name = pool_name

    @property
    def message(self) -> str:
        return f'Pool "{self.pool_name}" already has a participant from {self.district}.'

    def __repr__(self):
        return f"DistrictConflict(participant_id={self.participant_id}, district={self.district}, pool_name={self.pool_name})"


class ManualAssignment:
    """Outcome of assign_manually: either a new mapping or a conflict."""

    def __init__(self, pools: Dict[str, List], conflict: Optional[DistrictConflict] = None):
        self.pools = pools
        self.conflict = conflict

    @property
    def ok(self) -> bool:
        return self.conflict is None


def assign_manually(participants, participant_id, target_pool: str, pools: Dict[str, List]) -> ManualAssignment:
    """
    Move one participant to another pool (or to "unassigned").

    The move is rejected when the target pool already holds a different
    participant from the same district; in that case the caller's mapping is
    returned untouched alongside the conflict. Moving to "unassigned" always
    succeeds. A pool name not in the mapping is created.

    Raises:
        ValueError: if participant_id is not among participants.
    """
    by_id = {p.id: p for p in participants}
    if participant_id not in by_id:
        raise ValueError(f"Participant {participant_id} not found")
    moving = by_id[participant_id]

    if target_pool != UNASSIGNED:
        for other_id in pools.get(target_pool, []):
            if other_id == participant_id:
                continue
            other = by_id.get(other_id)
            if other is not None and other.district == moving.district:
                conflict = DistrictConflict(participant_id, moving.district, target_pool)
                logger.info(f"Rejected manual move: {conflict.message}")
                return ManualAssignment(pools=pools, conflict=conflict)

    new_pools = {}
    for name, member_ids in pools.items():
        if name == target_pool and participant_id in member_ids:
            new_pools[name] = list(member_ids)
        else:
            new_pools[name] = [pid for pid in member_ids if pid != participant_id]

    if target_pool != UNASSIGNED:
        if target_pool not in new_pools:
            new_pools[target_pool] = []
        if participant_id not in new_pools[target_pool]:
            new_pools[target_pool].append(participant_id)

    return ManualAssignment(pools=new_pools)


def _natural_key(name: str):
    return [int(part) if part.isdigit() else part.lower() for part in re.split(r'(\d+)', name)]


def group_by_pool(participants, pools: Dict[str, List]) -> List[Tuple[str, List]]:
    """
    Participants grouped for display, one entry per pool plus "unassigned".

    Pools are sorted by name with numbers compared numerically. Participants
    not in any pool are collected under "unassigned", which is always present.
    """
    by_id = {p.id: p for p in participants}
    assigned = set()
    grouped = []
    for name in sorted(pools, key=_natural_key):
        members = [by_id[pid] for pid in pools[name] if pid in by_id]
        assigned.update(p.id for p in members)
        grouped.append((name, members))

    unassigned = [p for p in participants if p.id not in assigned]
    grouped.insert(0, (UNASSIGNED, unassigned))
    return grouped


def find_collisions(participants, pools: Dict[str, List]) -> List[Tuple[str, str, List]]:
    """List (pool, district, participant ids) for each district repeated within a pool."""
    by_id = {p.id: p for p in participants}
    collisions = []
    for name, member_ids in pools.items():
        districts = {}
        for pid in member_ids:
            participant = by_id.get(pid)
            if participant is None:
                continue
            districts.setdefault(participant.district, []).append(pid)
        for district, ids in districts.items():
            if len(ids) > 1:
                collisions.append((name, district, ids))
    return collisions


def district_representation(participants, limit: Optional[int] = 10) -> List[Tuple[str, int]]:
    """Participant count per district, largest first (ties keep first appearance)."""
    counts = [(district, len(members)) for district, members in group_by_district(participants).items()]
    counts.sort(key=lambda item: -item[1])
    if limit is not None:
        counts = counts[:limit]
    return counts
