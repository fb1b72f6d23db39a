"""
Bin Administration Service

Create, update and delete bins outside the simulation loop.
"""

import json
import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from wastechain.errors import ValidationError, NotFound, InternalError
from wastechain.extensions import db
from wastechain.models import Bin
from wastechain import repositories
from wastechain.services.activity import log_activity
from wastechain.services.classifier import classify, BIN_STATUSES
from wastechain.services.reports import resolve_open_reports, RESOLVING_STATUSES
from wastechain.services.simulation import round_half_up

logger = logging.getLogger(__name__)


def _validate_reading(name, value, low, high):
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be a number')
    if not low <= number <= high:
        raise ValidationError(f'{name} must be between {low} and {high}')
    return round_half_up(number)


def _validate_columns(columns):
    if 'fill_level' in columns:
        columns['fill_level'] = _validate_reading('fillLevel', columns['fill_level'], 0, 100)
    if 'gas_level' in columns:
        columns['gas_level'] = _validate_reading('gasLevel', columns['gas_level'], 1, 5)
    if 'status' in columns and columns['status'] not in BIN_STATUSES:
        raise ValidationError(f'Invalid status "{columns["status"]}". Use one of: {", ".join(BIN_STATUSES)}')
    if 'location' in columns and not (columns['location'] or '').strip():
        raise ValidationError('Location is required')
    return columns


def _next_bin_id():
    highest = 0
    for bin_obj in repositories.bins.read_all():
        suffix = bin_obj.id[3:] if bin_obj.id.startswith('BIN') else ''
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f'BIN{highest + 1:03d}'


def list_bins():
    return Bin.query.order_by(Bin.id).all()


def get_bin(bin_id):
    bin_obj = repositories.bins.find_by_id(bin_id)
    if bin_obj is None:
        raise NotFound('Bin')
    return bin_obj


def create_bin(payload):
    """Add a bin from a camelCase payload; status defaults to the classified one."""
    columns = _validate_columns(Bin.columns_from_payload(payload))
    if not columns.get('location'):
        raise ValidationError('Location is required')
    columns.setdefault('fill_level', 0)
    columns.setdefault('gas_level', 1)
    columns.setdefault('status', classify(columns['fill_level'], columns['gas_level']))

    with repositories.bins.locked('__new__'):
        bin_id = _next_bin_id()
        try:
            bin_obj = repositories.bins.create(id=bin_id, last_updated=datetime.utcnow(), **columns)
            log_activity('info', f'New bin {bin_id} added at {columns["location"]}', 'Admin')
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error('Could not create bin: %s', e)
            raise InternalError('Failed to create bin')

    logger.info('Created bin %s at %s', bin_id, bin_obj.location)
    return bin_obj


def update_bin(bin_id, payload):
    """Apply an administrative update to a bin.

    An explicit status is kept as an override. Otherwise a change of fill or
    gas level re-derives the status. When the resulting status settles the
    bin (Empty or Normal) its open reports are resolved.
    """
    columns = _validate_columns(Bin.columns_from_payload(payload))

    with repositories.bins.locked(bin_id), repositories.reports.locked(bin_id):
        bin_obj = repositories.bins.find_by_id(bin_id)
        if bin_obj is None:
            raise NotFound('Bin')

        new_status = columns.get('status')
        if new_status is None and ('fill_level' in columns or 'gas_level' in columns):
            new_status = classify(columns.get('fill_level', bin_obj.fill_level),
                                  columns.get('gas_level', bin_obj.gas_level))
            columns['status'] = new_status

        try:
            repositories.bins.update(bin_obj, last_updated=datetime.utcnow(), **columns)
            if new_status in RESOLVING_STATUSES:
                resolve_open_reports(bin_id)
            log_activity('info', f'Bin {bin_id} updated: {json.dumps(payload, sort_keys=True)}', 'System')
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error('Could not update bin %s: %s', bin_id, e)
            raise InternalError('Failed to update bin')

    return bin_obj


def delete_bin(bin_id):
    with repositories.bins.locked(bin_id):
        try:
            deleted = repositories.bins.delete(bin_id)
            if not deleted:
                raise NotFound('Bin')
            log_activity('warning', f'Bin {bin_id} deleted from system', 'Admin')
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error('Could not delete bin %s: %s', bin_id, e)
            raise InternalError('Failed to delete bin')
    logger.info('Deleted bin %s', bin_id)
