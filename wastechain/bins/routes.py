"""
Bin Routes

Bin CRUD and control of the IoT sensor simulation.
"""

from flask import request, jsonify, current_app
from wastechain.bins import bins_bp
from wastechain.errors import ValidationError
from wastechain.services.bins import list_bins, get_bin, create_bin, update_bin, delete_bin
from wastechain.services.scheduler import DEFAULT_INTERVAL_MS


def _scheduler():
    return current_app.extensions['simulation_scheduler']


@bins_bp.route('/bins', methods=['GET'])
def bins_index():
    """All bins with their latest readings"""
    return jsonify([b.to_dict() for b in list_bins()])


@bins_bp.route('/bins', methods=['POST'])
def bins_create():
    bin_obj = create_bin(request.get_json(silent=True) or {})
    return jsonify(bin_obj.to_dict()), 201


@bins_bp.route('/bins/<bin_id>', methods=['GET'])
def bins_detail(bin_id):
    return jsonify(get_bin(bin_id).to_dict())


@bins_bp.route('/bins/<bin_id>', methods=['PATCH'])
def bins_update(bin_id):
    """Administrative update; settling a bin resolves its open reports"""
    bin_obj = update_bin(bin_id, request.get_json(silent=True) or {})
    return jsonify(bin_obj.to_dict())


@bins_bp.route('/bins/<bin_id>', methods=['DELETE'])
def bins_delete(bin_id):
    delete_bin(bin_id)
    return jsonify({'success': True})


@bins_bp.route('/simulation/run', methods=['POST'])
def simulation_control():
    """Start, stop or run the IoT simulation once.

    Body: {"action": "start" | "stop" | "run-once", "interval": <ms>}
    """
    data = request.get_json(silent=True) or {}
    action = data.get('action')
    scheduler = _scheduler()

    if action == 'start':
        interval = data.get('interval') or DEFAULT_INTERVAL_MS
        scheduler.start(interval)
        return jsonify({
            'success': True,
            'message': f'IoT simulation started (updates every {int(interval) / 1000:g} seconds)',
        })

    if action == 'stop':
        scheduler.stop()
        return jsonify({'success': True, 'message': 'IoT simulation stopped'})

    if action == 'run-once':
        result = scheduler.run_once()
        return jsonify({
            'success': True,
            'message': 'IoT simulation run completed',
            'result': result.to_dict(),
        })

    raise ValidationError('Invalid action. Use "start", "stop", or "run-once"')


@bins_bp.route('/simulation/run', methods=['GET'])
def simulation_run_once():
    result = _scheduler().run_once()
    return jsonify({
        'success': True,
        'message': 'IoT simulation run completed',
        'result': result.to_dict(),
    })


@bins_bp.route('/simulation/status')
def simulation_status():
    scheduler = _scheduler()
    engine = current_app.extensions['iot_engine']
    return jsonify({
        'running': scheduler.is_running,
        'intervalMs': scheduler.interval_ms,
        'trackedBins': len(engine.states),
        'states': [state.to_dict() for state in engine.states.values()],
    })
