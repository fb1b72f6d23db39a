"""
Citizen Routes

Citizen accounts and issue reports.
"""

from flask import request, jsonify
from wastechain.citizens import citizens_bp
from wastechain.errors import NotFound
from wastechain import repositories
from wastechain.models import Citizen
from wastechain.services.accounts import create_citizen, update_citizen
from wastechain.services.reports import submit_report, update_report_status, list_reports


@citizens_bp.route('/citizens', methods=['GET'])
def citizens_index():
    return jsonify([c.to_dict() for c in Citizen.query.order_by(Citizen.created_at).all()])


@citizens_bp.route('/citizens', methods=['POST'])
def citizens_create():
    data = request.get_json(silent=True) or {}
    citizen = create_citizen(data.get('name'), data.get('email'))
    return jsonify(citizen.to_dict()), 201


@citizens_bp.route('/citizens/<citizen_id>', methods=['GET'])
def citizens_detail(citizen_id):
    citizen = repositories.citizens.find_by_id(citizen_id)
    if citizen is None:
        raise NotFound('Citizen')
    return jsonify(citizen.to_dict())


@citizens_bp.route('/citizens/<citizen_id>', methods=['PATCH'])
def citizens_update(citizen_id):
    citizen = update_citizen(citizen_id, request.get_json(silent=True) or {})
    return jsonify(citizen.to_dict())


def _submit(citizen_id, data):
    return submit_report(
        citizen_id,
        data.get('binId'),
        data.get('issueType'),
        data.get('description') or '',
    )


@citizens_bp.route('/citizens/<citizen_id>/report', methods=['POST'])
def citizens_report(citizen_id):
    """Submit an issue report on behalf of the citizen in the URL"""
    return jsonify(_submit(citizen_id, request.get_json(silent=True) or {}))


@citizens_bp.route('/reports', methods=['POST'])
def reports_create():
    """Submit an issue report.

    Body: {"citizenId", "binId", "issueType", "description"?}
    """
    data = request.get_json(silent=True) or {}
    return jsonify(_submit(data.get('citizenId'), data))


@citizens_bp.route('/reports', methods=['GET'])
def reports_index():
    """Reports newest first, filtered by ?status= and ?citizenId="""
    reports = list_reports(
        status=request.args.get('status'),
        citizen_id=request.args.get('citizenId'),
    )
    return jsonify([r.to_dict() for r in reports])


@citizens_bp.route('/reports/<report_id>', methods=['PATCH'])
def reports_update(report_id):
    data = request.get_json(silent=True) or {}
    report = update_report_status(report_id, data.get('status'))
    return jsonify(report.to_dict())
