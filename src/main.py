# Entry point for printing pool fixture sheets from a participant roster

import logging
import os
import sys

import yaml
from roster.models import Participant
from roster.pools import assign_pools, group_by_pool, UNASSIGNED
from roster.export import fixture_sheet
from roster.settings import load_settings


def load_participants(file_path):
    """
    Read participants from YAML.

    Accepts either a list of {id, name, district} records or a mapping of
    district -> list of names (ids are then generated in file order).
    """
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file)

    if not data:
        return []
    if isinstance(data, list):
        return [Participant.from_dict(entry) for entry in data]
    if isinstance(data, dict):
        participants = []
        for district, names in data.items():
            for name in names or []:
                participants.append(Participant(id=str(len(participants) + 1), name=str(name), district=str(district)))
        return participants
    raise ValueError(f"Unsupported roster format in {file_path}")


def main():
    script_dir = os.path.dirname(__file__)
    base_dir = os.path.dirname(script_dir)

    # Use command line argument if provided, otherwise use default path
    participants_file = sys.argv[1] if len(sys.argv) > 1 else os.path.join(base_dir, 'data', 'participants.yaml')

    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, str(settings.get('log_level', 'INFO')).upper(), logging.INFO),
        format='%(levelname)s %(name)s: %(message)s'
    )

    participants = load_participants(participants_file)
    if not participants:
        print(f"No participants loaded. Check {participants_file}")
        return

    result = assign_pools(participants)
    if result.fallbacks:
        print(f"Warning: {len(result.fallbacks)} participant(s) share a pool with their district")

    first_pool = True
    for pool_name, members in group_by_pool(participants, result.pools):
        if pool_name == UNASSIGNED or not members:
            continue
        if not first_pool:
            print("\n" + "=" * 80 + "\n")
        pages = fixture_sheet(pool_name, members, settings=settings)
        print(("\n\n" + "-" * 80 + "\n\n").join(pages))
        first_pool = False


if __name__ == '__main__':
    main()
