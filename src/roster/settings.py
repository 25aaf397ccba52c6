"""
Settings loaded from settings.yaml in the data directory, merged over defaults.
"""
import copy
import logging
import os

import yaml

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DATA_DIR = os.environ.get('ROSTER_DATA_DIR', os.path.join(BASE_DIR, 'data'))
SETTINGS_FILE = os.path.join(DATA_DIR, 'settings.yaml')


def get_default_settings():
    """Return default settings."""
    return {
        'log_level': 'INFO',
        'district_chart_limit': 10,
        # Participant counts above which a fixture sheet is split into more pages
        'fixture_page_thresholds': [
            {'above': 50, 'pages': 4},
            {'above': 25, 'pages': 2},
        ],
        'competition': {
            'name': 'State Championship',
            'date': None,
            'end_date': None,
            'address': None,
            'organized_by': None,
            'age_category': None,
            'weight_category': None,
        },
    }


def load_settings(path=None):
    """Load settings from YAML file, merging with defaults."""
    defaults = get_default_settings()
    path = path or SETTINGS_FILE
    if not os.path.exists(path):
        return defaults
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning(f'Failed to parse {path}: {e}')
        return defaults
    if not data:
        return defaults
    if not isinstance(data, dict):
        logger.warning(f'Ignoring {path}: expected a mapping, got {type(data).__name__}')
        return defaults

    merged = copy.deepcopy(defaults)
    for key, value in data.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged
