"""
Citizen and Contractor Account Service
"""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from wastechain.errors import ValidationError, NotFound, InternalError
from wastechain.extensions import db
from wastechain.models import Citizen, Contractor
from wastechain.models.base import new_id
from wastechain import repositories

logger = logging.getLogger(__name__)


def _commit(what):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error('Could not save %s: %s', what, e)
        raise InternalError(f'Failed to save {what}')


def _require_name_and_email(name, email):
    if not name or not email:
        raise ValidationError('Name and email are required')


# column: (API name, whole number, upper bound)
CITIZEN_NUMBERS = {
    'points': ('points', True, None),
    'reports_submitted': ('reportsSubmitted', True, None),
    'co2_saved': ('co2Saved', False, None),
    'waste_disposed': ('wasteDisposed', False, None),
    'recycling_rate': ('recyclingRate', False, 100),
}

CONTRACTOR_NUMBERS = {
    'todays_earnings': ('todaysEarnings', False, None),
    'completed_pickups': ('completedPickups', True, None),
    'weekly_pickups_completed': ('pickupsCompleted', True, None),
    'weekly_total_earnings': ('totalEarnings', False, None),
    'efficiency_rating': ('efficiencyRating', False, 5),
    'on_time_rate': ('onTimeRate', False, 100),
}


def _validate_number(name, value, whole, high):
    if isinstance(value, bool):
        raise ValidationError(f'{name} must be a number')
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be a number')
    if whole and not number.is_integer():
        raise ValidationError(f'{name} must be a whole number')
    if number < 0 or (high is not None and number > high):
        limit = f'between 0 and {high}' if high is not None else 'zero or more'
        raise ValidationError(f'{name} must be {limit}')
    return int(number) if whole else number


def _validate_account_columns(columns, numbers):
    for column in ('name', 'email'):
        if column in columns and not str(columns[column] or '').strip():
            raise ValidationError(f'{column} must not be empty')
    for column, (name, whole, high) in numbers.items():
        if column in columns:
            columns[column] = _validate_number(name, columns[column], whole, high)
    return columns


def create_citizen(name, email):
    _require_name_and_email(name, email)
    citizen = repositories.citizens.create(
        id=new_id('citizen'),
        name=name,
        email=email,
        points=0,
        reports_submitted=0,
        co2_saved=0.0,
        waste_disposed=0.0,
        recycling_rate=0.0,
        created_at=datetime.utcnow(),
    )
    _commit('citizen')
    logger.info('Registered citizen %s (%s)', citizen.id, email)
    return citizen


def find_or_create_citizen(email, name=None):
    """Citizen accounts are provisioned on first login by email."""
    if not email:
        raise ValidationError('Email is required for citizen login')
    citizen = Citizen.query.filter_by(email=email).first()
    if citizen is None:
        citizen = create_citizen(name or email.split('@')[0], email)
    return citizen


def update_citizen(citizen_id, payload):
    columns = _validate_account_columns(Citizen.columns_from_payload(payload), CITIZEN_NUMBERS)
    with repositories.citizens.locked(citizen_id):
        citizen = repositories.citizens.find_by_id(citizen_id)
        if citizen is None:
            raise NotFound('Citizen')
        repositories.citizens.update(citizen, **columns)
        _commit('citizen')
    return citizen


def create_contractor(name, email):
    _require_name_and_email(name, email)
    contractor = repositories.contractors.create(
        id=new_id('contractor'),
        name=name,
        email=email,
        todays_earnings=0.0,
        completed_pickups=0,
        weekly_pickups_completed=0,
        weekly_total_earnings=0.0,
        efficiency_rating=5.0,
        on_time_rate=100.0,
        created_at=datetime.utcnow(),
    )
    _commit('contractor')
    logger.info('Registered contractor %s (%s)', contractor.id, email)
    return contractor


def update_contractor(contractor_id, payload):
    columns = _validate_account_columns(Contractor.columns_from_payload(payload), CONTRACTOR_NUMBERS)
    with repositories.contractors.locked(contractor_id):
        contractor = repositories.contractors.find_by_id(contractor_id)
        if contractor is None:
            raise NotFound('Contractor')
        repositories.contractors.update(contractor, **columns)
        _commit('contractor')
    return contractor
