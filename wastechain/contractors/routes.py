"""
Contractor Routes

Contractor accounts, pickup confirmations and the transaction ledger.
"""

from flask import request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from wastechain.contractors import contractors_bp
from wastechain.errors import NotFound, ValidationError, InternalError
from wastechain.extensions import db
from wastechain import repositories
from wastechain.models import Contractor
from wastechain.services.accounts import create_contractor, update_contractor
from wastechain.services.pickups import process_pickup, record_transaction, list_transactions, COLLECTED


@contractors_bp.route('/contractors', methods=['GET'])
def contractors_index():
    return jsonify([c.to_dict() for c in Contractor.query.order_by(Contractor.created_at).all()])


@contractors_bp.route('/contractors', methods=['POST'])
def contractors_create():
    data = request.get_json(silent=True) or {}
    contractor = create_contractor(data.get('name'), data.get('email'))
    return jsonify(contractor.to_dict()), 201


@contractors_bp.route('/contractors/<contractor_id>', methods=['GET'])
def contractors_detail(contractor_id):
    contractor = repositories.contractors.find_by_id(contractor_id)
    if contractor is None:
        raise NotFound('Contractor')
    return jsonify(contractor.to_dict())


@contractors_bp.route('/contractors/<contractor_id>', methods=['PATCH'])
def contractors_update(contractor_id):
    contractor = update_contractor(contractor_id, request.get_json(silent=True) or {})
    return jsonify(contractor.to_dict())


@contractors_bp.route('/contractors/<contractor_id>/pickup', methods=['POST'])
def contractors_pickup(contractor_id):
    """Confirm a pickup by the contractor in the URL"""
    data = request.get_json(silent=True) or {}
    return jsonify(process_pickup(contractor_id, data.get('binId'), data.get('action') or COLLECTED))


@contractors_bp.route('/pickups', methods=['POST'])
def pickups_create():
    """Confirm a pickup.

    Body: {"contractorId", "binId", "action"?: "Collected" | "Hazard_Resolved"}
    """
    data = request.get_json(silent=True) or {}
    return jsonify(process_pickup(data.get('contractorId'), data.get('binId'), data.get('action') or COLLECTED))


@contractors_bp.route('/ledger', methods=['GET'])
def ledger_index():
    """Ledger transactions newest first (?limit=, default 100)"""
    limit = request.args.get('limit', 100, type=int)
    return jsonify([tx.to_dict() for tx in list_transactions(limit)])


@contractors_bp.route('/ledger', methods=['POST'])
def ledger_create():
    data = request.get_json(silent=True) or {}
    if not data.get('binId') or not data.get('action'):
        raise ValidationError('binId and action are required')
    try:
        tx = record_transaction(data['binId'], data['action'], data.get('contractorId'))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise InternalError('Failed to create transaction')
    return jsonify(tx.to_dict()), 201
