"""
Age and weight categories used to label competitions and exported pool sheets.
"""
from typing import Dict, List, Optional


AGE_CATEGORIES = [
    {'id': 'sub_junior_boys', 'name': 'Sub-Junior Boys', 'description': 'Age: 12-14 Years'},
    {'id': 'sub_junior_girls', 'name': 'Sub-Junior Girls', 'description': 'Age: 12-14 Years'},
    {'id': 'cadet_boys', 'name': 'Cadet Boys', 'description': 'Age: 15-17 Years'},
    {'id': 'cadet_girls', 'name': 'Cadet Girls', 'description': 'Age: 15-17 Years'},
    {'id': 'junior_boys', 'name': 'Junior Boys', 'description': 'Age: 18-20 Years'},
    {'id': 'junior_girls', 'name': 'Junior Girls', 'description': 'Age: 18-20 Years'},
    {'id': 'senior_boys', 'name': 'Senior Boys', 'description': 'Age: 21+ Years'},
    {'id': 'senior_girls', 'name': 'Senior Girls', 'description': 'Age: 21+ Years'},
]

# Upper weight limits (kg) per age category; the last entry is the open "Over" class
_WEIGHT_LIMITS = {
    'sub_junior_boys': ('sjb', [16, 18, 21, 23, 25, 27, 29, 32, 35, 38, 41, 44, 50]),
    'sub_junior_girls': ('sjg', [14, 16, 18, 20, 22, 24, 26, 29, 32, 35, 38, 41, 47]),
    'cadet_boys': ('cb', [33, 37, 41, 45, 49, 53, 57, 61, 65]),
    'cadet_girls': ('cg', [29, 33, 37, 41, 44, 47, 51, 55, 59]),
    'junior_boys': ('jb', [45, 48, 51, 55, 59, 63, 68, 73, 78]),
    'junior_girls': ('jg', [42, 44, 46, 49, 52, 55, 59, 63, 68]),
    'senior_boys': ('sb', [54, 58, 63, 68, 74, 80, 87]),
    'senior_girls': ('sg', [46, 49, 53, 57, 62, 67, 73]),
}


def _build_weight_categories(prefix: str, limits: List[int]) -> List[Dict]:
    categories = []
    lower = None
    for limit in limits:
        if lower is None:
            description = f"Weight: Up to {limit}kg"
        else:
            description = f"Weight: {lower}kg to {limit}kg"
        categories.append({
            'id': f"{prefix}_u{limit}",
            'name': f"Under {limit}",
            'description': description,
        })
        lower = limit
    categories.append({
        'id': f"{prefix}_o{lower}",
        'name': f"Over {lower}",
        'description': f"Weight: {lower}kg+",
    })
    return categories


WEIGHT_CATEGORIES = {
    age_id: _build_weight_categories(prefix, limits)
    for age_id, (prefix, limits) in _WEIGHT_LIMITS.items()
}


def get_weight_categories_for_age_category(age_category_id: Optional[str]) -> List[Dict]:
    """Weight classes for an age category (empty list when unknown)."""
    if not age_category_id:
        return []
    return WEIGHT_CATEGORIES.get(age_category_id, [])


def get_category_info(age_category_id: Optional[str], weight_category_id: Optional[str]) -> Dict:
    """
    Resolve display names for a competition's age and weight category.

    Unknown ids resolve to None rather than failing, so exports of partially
    configured competitions still render.
    """
    age_category = next((c for c in AGE_CATEGORIES if c['id'] == age_category_id), None)
    weight_category = next(
        (c for c in get_weight_categories_for_age_category(age_category_id) if c['id'] == weight_category_id),
        None
    )
    return {
        'age_category_name': age_category['name'] if age_category else None,
        'age_category_description': age_category['description'] if age_category else None,
        'weight_category_name': weight_category['name'] if weight_category else None,
        'weight_category_description': weight_category['description'] if weight_category else None,
    }
