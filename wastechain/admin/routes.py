"""
Admin Routes

Activity feed, analytics and demo data initialisation.
"""

import logging

from flask import request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from wastechain.admin import admin_bp
from wastechain.admin.services import compute_analytics
from wastechain.errors import ValidationError, InternalError
from wastechain.extensions import db
from wastechain.services.activity import log_activity, recent_activities
from wastechain.services.seed import ensure_default_data

logger = logging.getLogger(__name__)


@admin_bp.route('/activities', methods=['GET'])
def activities_index():
    """Newest activities first (?limit=, default 50; ?type=)"""
    limit = request.args.get('limit', 50, type=int)
    activities = recent_activities(limit=limit, type_=request.args.get('type'))
    return jsonify([a.to_dict() for a in activities])


@admin_bp.route('/activities', methods=['POST'])
def activities_create():
    data = request.get_json(silent=True) or {}
    type_, message, user = data.get('type'), data.get('message'), data.get('user')
    if not type_ or not message or not user:
        raise ValidationError('type, message, and user are required')
    try:
        activity = log_activity(type_, message, user)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise InternalError('Failed to create activity')
    return jsonify(activity.to_dict()), 201


@admin_bp.route('/analytics')
def analytics():
    return jsonify(compute_analytics())


@admin_bp.route('/init', methods=['GET', 'POST'])
def init_data():
    """Create the demo bins and accounts if missing"""
    try:
        ensure_default_data()
    except SQLAlchemyError as e:
        logger.error('Could not initialize database: %s', e)
        raise InternalError('Failed to initialize database')
    return jsonify({'success': True, 'message': 'Database initialized successfully'})
