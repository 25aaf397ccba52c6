"""
Pool sheet exports: CSV and YAML downloads and printable text fixture sheets.
"""
import csv
import io
import math
from typing import List, Optional

import yaml

from roster.categories import get_category_info
from roster.elimination import Bracket
from roster.models import Competition
from roster.pools import UNASSIGNED
from roster.settings import get_default_settings

CSV_COLUMNS = ['Pool', 'Name', 'District', 'Age Category', 'Weight Category']
SHEET_WIDTH = 80


def competition_from_settings(settings: dict) -> Competition:
    """Competition header built from the 'competition' settings block."""
    data = settings.get('competition') or {}
    return Competition(
        id=None,
        name=data.get('name') or 'Competition',
        date=data.get('date'),
        address=data.get('address'),
        organized_by=data.get('organized_by'),
        age_category=data.get('age_category'),
        weight_category=data.get('weight_category'),
    )


def _exportable(grouped_pools):
    for name, members in grouped_pools:
        if name == UNASSIGNED and not members:
            continue
        yield name, members


def pools_to_csv(grouped_pools, competition: Optional[Competition] = None) -> str:
    """
    Flatten grouped pools (see roster.pools.group_by_pool) to CSV text.

    One row per participant; an empty "unassigned" group is left out.
    """
    info = get_category_info(
        competition.age_category if competition else None,
        competition.weight_category if competition else None,
    )
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_COLUMNS)
    for name, members in _exportable(grouped_pools):
        for participant in members:
            writer.writerow([
                name,
                participant.name,
                participant.district,
                info['age_category_name'] or '',
                info['weight_category_name'] or '',
            ])
    return output.getvalue()


def pools_to_yaml(grouped_pools) -> str:
    """Grouped pools as a YAML mapping of pool name to participant records."""
    export_data = {}
    for name, members in _exportable(grouped_pools):
        export_data[name] = [p.to_dict() for p in members]
    return yaml.dump(export_data, default_flow_style=False, allow_unicode=True, sort_keys=False)


def fixture_page_count(num_participants: int, thresholds: Optional[List[dict]] = None) -> int:
    """Pages needed to print a pool sheet of this many participants."""
    if thresholds is None:
        thresholds = get_default_settings()['fixture_page_thresholds']
    for rule in sorted(thresholds, key=lambda r: r['above'], reverse=True):
        if num_participants > rule['above']:
            return rule['pages']
    return 1


def _sheet_header(competition: Competition, page_number: int, page_count: int) -> List[str]:
    info = get_category_info(competition.age_category, competition.weight_category)
    lines = [f"Page {page_number} of {page_count}", competition.name]
    if competition.address:
        lines.append(f"Venue: {competition.address}")
    if competition.date:
        lines.append(f"Date: {competition.date}")
    if competition.organized_by:
        lines.append(f"Organised By: {competition.organized_by}")
    category = " - ".join(n for n in (info['age_category_name'], info['weight_category_name']) if n)
    if category:
        lines.append(f"Wt: {category}".rjust(SHEET_WIDTH))
    lines.append("")
    return lines


def _bracket_lines(bracket: Bracket) -> List[str]:
    if bracket.participant_count == 1:
        return [f"Winner: {bracket.slots[0].name} (no opponents)"]
    lines = []
    for index, matches in enumerate(bracket.rounds):
        lines.append(f"{bracket.round_name(index + 1)}:")
        for m in matches:
            top, bottom = m.to_dict()['teams']
            if m.is_empty:
                continue
            if m.is_walkover:
                advancing = bottom if top == 'BYE' else top
                lines.append(f"  M{m.match_number}: {advancing} (bye)")
            else:
                lines.append(f"  M{m.match_number}: {top} vs {bottom}")
    return lines


def fixture_sheet(pool_name: str, participants, competition: Optional[Competition] = None,
                  settings: Optional[dict] = None) -> List[str]:
    """
    Printable text pages for one pool: header, numbered roster, bracket.

    The roster is split evenly over fixture_page_count() pages; the bracket
    listing follows the roster on the last page.
    """
    settings = settings or get_default_settings()
    competition = competition or competition_from_settings(settings)
    participants = list(participants)

    page_count = fixture_page_count(len(participants), settings.get('fixture_page_thresholds'))
    per_page = max(1, math.ceil(len(participants) / page_count))

    pages = []
    for page_number in range(1, page_count + 1):
        start = (page_number - 1) * per_page
        page_rows = participants[start:start + per_page]
        lines = _sheet_header(competition, page_number, page_count)
        lines.append(pool_name)
        lines.append("S.No | District | Player Name")
        for offset, participant in enumerate(page_rows):
            lines.append(f"{start + offset + 1}) {participant.district} {participant.name}")
        if page_number == page_count and participants:
            lines.append("")
            lines.extend(_bracket_lines(Bracket(participants)))
        pages.append("\n".join(lines))
    return pages
