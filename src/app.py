"""
Flask JSON API over the pool and bracket engine.

Every request carries the roster it operates on; nothing is stored server-side.
"""
import logging

from flask import Flask, request, jsonify, Response
from roster.models import Participant, Competition
from roster.categories import AGE_CATEGORIES, get_weight_categories_for_age_category
from roster.pools import assign_pools, assign_manually, group_by_pool, district_representation
from roster.elimination import Bracket
from roster.export import pools_to_csv, competition_from_settings
from roster.settings import load_settings

app = Flask(__name__)
app.logger.setLevel(getattr(logging, str(load_settings().get('log_level', 'INFO')).upper(), logging.INFO))


def _request_payload():
    """JSON body of the request as a dict. Raises ValueError for non-object bodies."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError('Request body must be a JSON object.')
    return payload


def _load_participants(payload):
    """Parse the participants list of a request body. Raises ValueError."""
    entries = payload.get('participants')
    if not isinstance(entries, list):
        raise ValueError('participants must be a list.')
    participants = [Participant.from_dict(entry) for entry in entries]
    ids = [p.id for p in participants]
    if len(set(ids)) != len(ids):
        raise ValueError('Participant ids must be unique.')
    return participants


def _load_pools(payload):
    pools = payload.get('pools') or {}
    if not isinstance(pools, dict) or not all(isinstance(v, list) for v in pools.values()):
        raise ValueError('pools must map pool names to lists of participant ids.')
    return {str(name): [str(pid) for pid in ids] for name, ids in pools.items()}


def _load_competition(payload):
    data = payload.get('competition')
    if not data:
        return competition_from_settings(load_settings())
    if not isinstance(data, dict):
        raise ValueError('competition must be an object.')

    def text(*keys):
        for key in keys:
            if data.get(key) not in (None, ''):
                return str(data[key])
        return None

    return Competition(
        id=text('id'),
        name=text('name', 'competition_name') or 'Competition',
        date=text('date', 'competition_date'),
        address=text('address'),
        organized_by=text('organized_by'),
        age_category=text('age_category'),
        weight_category=text('weight_category'),
        status=text('status') or 'draft',
    )


def _error(message, status=400):
    return jsonify({'success': False, 'error': message}), status


@app.route('/api/categories', methods=['GET'])
def api_categories():
    """Age categories with their weight classes."""
    return jsonify({
        'success': True,
        'age_categories': [
            dict(category, weight_categories=get_weight_categories_for_age_category(category['id']))
            for category in AGE_CATEGORIES
        ],
    })


@app.route('/api/pools/generate', methods=['POST'])
def api_generate_pools():
    """Recompute pool assignments for the posted participants."""
    try:
        payload = _request_payload()
        participants = _load_participants(payload)
    except ValueError as e:
        return _error(str(e))

    pool_count = payload.get('pool_count')
    if pool_count is not None and (not isinstance(pool_count, int) or isinstance(pool_count, bool) or pool_count < 1):
        return _error('pool_count must be a positive integer.')

    result = assign_pools(participants, pool_count=pool_count)
    if result.is_empty:
        return _error('No participants to assign to pools.')

    for placement in result.fallbacks:
        app.logger.warning(f'District collision accepted for {placement.participant_id} in {placement.pool_name}')

    return jsonify({
        'success': True,
        'pools': result.pools,
        'pool_count': result.pool_count,
        'fallbacks': [
            {'participant_id': p.participant_id, 'pool': p.pool_name}
            for p in result.fallbacks
        ],
    })


@app.route('/api/pools/assign', methods=['POST'])
def api_assign_pool():
    """Manually move one participant to a pool or back to unassigned."""
    try:
        payload = _request_payload()
        participants = _load_participants(payload)
        pools = _load_pools(payload)
    except ValueError as e:
        return _error(str(e))

    participant_id = payload.get('participant_id')
    target_pool = payload.get('pool')
    if participant_id is None or not target_pool:
        return _error('participant_id and pool are required.')

    try:
        result = assign_manually(participants, str(participant_id), str(target_pool), pools)
    except ValueError as e:
        return _error(str(e), 404)

    if not result.ok:
        return jsonify({
            'success': False,
            'error': result.conflict.message,
            'district': result.conflict.district,
            'pool': result.conflict.pool_name,
            'pools': result.pools,
        }), 409

    return jsonify({'success': True, 'pools': result.pools})


@app.route('/api/bracket', methods=['POST'])
def api_bracket():
    """Seeded bracket, rounds and connector segments for one pool."""
    try:
        payload = _request_payload()
        participants = _load_participants(payload)
    except ValueError as e:
        return _error(str(e))

    if not participants:
        return _error('No participants to build a bracket for.')

    bracket = Bracket(participants)
    return jsonify(dict(bracket.to_dict(), success=True))


@app.route('/api/pools/export', methods=['POST'])
def api_export_pools():
    """Download the posted pools as CSV."""
    try:
        payload = _request_payload()
        participants = _load_participants(payload)
        pools = _load_pools(payload)
        competition = _load_competition(payload)
    except ValueError as e:
        return _error(str(e))

    csv_content = pools_to_csv(group_by_pool(participants, pools), competition)
    filename = f"{competition.name.replace(' ', '_')}_pools.csv"

    return Response(
        csv_content,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'}
    )


@app.route('/api/analytics/districts', methods=['POST'])
def api_district_analytics():
    """Participants per district, largest first."""
    try:
        payload = _request_payload()
        participants = _load_participants(payload)
    except ValueError as e:
        return _error(str(e))

    limit = load_settings().get('district_chart_limit', 10)
    return jsonify({
        'success': True,
        'districts': [
            {'name': district, 'value': count}
            for district, count in district_representation(participants, limit=limit)
        ],
    })


if __name__ == '__main__':
    app.run(debug=True)
