"""
Single elimination bracket generation and rendering geometry.
"""
import math
from typing import List, Optional, Tuple


def get_round_name(entrants_in_round: int) -> str:
    """Get the name of a round based on number of entrants."""
    if entrants_in_round == 2:
        return "Final"
    elif entrants_in_round == 4:
        return "Semifinal"
    elif entrants_in_round == 8:
        return "Quarterfinal"
    else:
        return f"Round of {entrants_in_round}"


def calculate_bracket_size(num_participants: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_participants <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_participants))


def calculate_byes(num_participants: int) -> int:
    """Calculate number of byes needed."""
    return calculate_bracket_size(num_participants) - num_participants


class _Bye:
    """Empty bracket slot; its opponent advances without playing."""

    def __repr__(self):
        return "BYE"

    def __reduce__(self):
        return "BYE"


BYE = _Bye()


def is_bye(entrant) -> bool:
    return entrant is BYE


class WinnerOf:
    """Placeholder entrant: the winner of an earlier match."""

    def __init__(self, round_number: int, match_number: int):
        self.round_number = round_number
        self.match_number = match_number

    def __eq__(self, other):
        return (isinstance(other, WinnerOf)
                and (self.round_number, self.match_number) == (other.round_number, other.match_number))

    def __hash__(self):
        return hash((self.round_number, self.match_number))

    def __repr__(self):
        return f"Winner R{self.round_number}-M{self.match_number}"


def _seed(participants: list, size: int) -> list:
    if size == 1:
        return [participants[0] if participants else BYE]
    top_count = math.ceil(len(participants) / 2)
    half = size // 2
    return _seed(participants[:top_count], half) + _seed(participants[top_count:], half)


def build_bracket(participants) -> list:
    """
    Lay out participants over the first-round slots of a bracket.

    The list is halved recursively: the top half of each sub-bracket gets
    ceil(n/2) participants and the bottom half the rest, down to single slots.
    Byes end up spread over distinct first-round matches, always in the lower
    slot of a pair, so no two byes meet when there are at least 2 participants.

    Returns:
        List of length 2^ceil(log2(n)) holding participants and BYE markers.
        Empty for no participants.
    """
    participants = list(participants)
    size = calculate_bracket_size(len(participants))
    if size == 0:
        return []
    return _seed(participants, size)


class Match:
    """
    One pairing of two adjacent positions in a round.

    Positions are vertical coordinates in slot units (first-round slot i sits
    at i). A played match outputs at the midpoint of its inputs; a walkover
    outputs at the surviving entrant's own position.
    """

    def __init__(self, round_number: int, match_number: int, top, bottom,
                 top_position: float, bottom_position: float):
        self.round_number = round_number
        self.match_number = match_number
        self.top = top
        self.bottom = bottom
        self.top_position = top_position
        self.bottom_position = bottom_position

    @property
    def is_empty(self) -> bool:
        return is_bye(self.top) and is_bye(self.bottom)

    @property
    def is_walkover(self) -> bool:
        return is_bye(self.top) != is_bye(self.bottom)

    @property
    def is_playable(self) -> bool:
        return not is_bye(self.top) and not is_bye(self.bottom)

    @property
    def position(self) -> float:
        if self.is_walkover:
            return self.bottom_position if is_bye(self.top) else self.top_position
        return (self.top_position + self.bottom_position) / 2

    @property
    def advances(self):
        """Entrant carried into the next round."""
        if self.is_empty:
            return BYE
        if self.is_walkover:
            return self.bottom if is_bye(self.top) else self.top
        return WinnerOf(self.round_number, self.match_number)

    def to_dict(self) -> dict:
        return {
            'round': self.round_number,
            'match_number': self.match_number,
            'teams': (_entrant_label(self.top), _entrant_label(self.bottom)),
            'positions': (self.top_position, self.bottom_position),
            'position': self.position,
            'is_bye': self.is_walkover,
            'is_empty': self.is_empty,
        }

    def __repr__(self):
        return f"Match(R{self.round_number}-M{self.match_number}: {self.top!r} vs {self.bottom!r})"


def _entrant_label(entrant) -> str:
    if is_bye(entrant):
        return 'BYE'
    if isinstance(entrant, WinnerOf):
        return repr(entrant)
    return getattr(entrant, 'name', str(entrant))


def _entrant_id(entrant):
    if is_bye(entrant) or isinstance(entrant, WinnerOf):
        return None
    return getattr(entrant, 'id', None)


Segment = Tuple[Tuple[float, float], Tuple[float, float]]


class Bracket:
    """
    Seeded single elimination bracket with the connector layout needed to draw it.

    Horizontal coordinates are in rounds: round r takes its inputs at x = r - 1,
    joins them at x = r - 0.5 and outputs at x = r. Vertical coordinates are in
    first-round slots. Renderers scale both to their own units.
    """

    STUB_LENGTH = 0.5

    def __init__(self, participants):
        self.participants = list(participants)
        self.slots = build_bracket(self.participants)
        self.rounds: List[List[Match]] = []
        self.winner_position: Optional[float] = None
        self._build_rounds()

    @property
    def size(self) -> int:
        return len(self.slots)

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    @property
    def bye_count(self) -> int:
        return calculate_byes(self.participant_count)

    @property
    def round_count(self) -> int:
        return len(self.rounds)

    def _build_rounds(self):
        if not self.slots:
            return
        entrants = list(self.slots)
        positions = [float(i) for i in range(len(entrants))]
        round_number = 1
        while len(entrants) > 1:
            matches = []
            for i in range(0, len(entrants), 2):
                matches.append(Match(
                    round_number, i // 2 + 1,
                    entrants[i], entrants[i + 1],
                    positions[i], positions[i + 1],
                ))
            self.rounds.append(matches)
            entrants = [m.advances for m in matches]
            positions = [m.position for m in matches]
            round_number += 1
        self.winner_position = positions[0]

    def round_name(self, round_number: int) -> str:
        entrants = self.size // (2 ** (round_number - 1))
        return get_round_name(entrants)

    def first_round_matches(self) -> List[Match]:
        """Round 1 matches that are actually played (byes excluded)."""
        if not self.rounds:
            return []
        return [m for m in self.rounds[0] if m.is_playable]

    def segments(self) -> List[Segment]:
        """
        Line segments ((x1, y1), (x2, y2)) connecting the bracket.

        A played match draws two input stubs, a vertical joining them and an
        output stub from the midpoint. A walkover draws one straight line at
        the surviving entrant's position. Two byes draw nothing. A closing
        stub follows the final output.
        """
        lines = []
        for matches in self.rounds:
            for m in matches:
                x_in = m.round_number - 1
                x_join = m.round_number - 0.5
                x_out = m.round_number
                if m.is_empty:
                    continue
                if m.is_walkover:
                    lines.append(((x_in, m.position), (x_out, m.position)))
                    continue
                lines.append(((x_in, m.top_position), (x_join, m.top_position)))
                lines.append(((x_in, m.bottom_position), (x_join, m.bottom_position)))
                lines.append(((x_join, m.top_position), (x_join, m.bottom_position)))
                lines.append(((x_join, m.position), (x_out, m.position)))
        if self.winner_position is not None:
            x_end = self.round_count
            lines.append(((x_end, self.winner_position), (x_end + self.STUB_LENGTH, self.winner_position)))
        return lines

    def to_dict(self) -> dict:
        """Serializable view for APIs and exporters."""
        return {
            'slots': [_entrant_label(s) for s in self.slots],
            'slot_ids': [_entrant_id(s) for s in self.slots],
            'bracket_size': self.size,
            'total_participants': self.participant_count,
            'byes': self.bye_count,
            'total_rounds': self.round_count,
            'rounds': [
                {
                    'name': self.round_name(i + 1),
                    'matches': [m.to_dict() for m in matches],
                }
                for i, matches in enumerate(self.rounds)
            ],
            'winner_position': self.winner_position,
            'segments': self.segments(),
        }
