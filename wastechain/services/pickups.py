"""
Contractor Pickup Service

Processes pickup confirmations: resets the bin, resolves the reports it
settles, pays the contractor and records the ledger transaction.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from wastechain.errors import ValidationError, NotFound, InternalError
from wastechain.extensions import db
from wastechain.models import LedgerTransaction
from wastechain.models.base import new_id
from wastechain import repositories
from wastechain.services.activity import log_activity
from wastechain.services.classifier import EMPTY, NORMAL
from wastechain.services.reports import resolve_open_reports, RESOLVING_STATUSES

logger = logging.getLogger(__name__)

COLLECTED = 'Collected'
HAZARD_RESOLVED = 'Hazard_Resolved'

PICKUP_EARNINGS = 25.00


def status_after_action(action, current_status):
    if action == COLLECTED:
        return EMPTY
    if action == HAZARD_RESOLVED:
        return NORMAL
    return current_status


def record_transaction(bin_id, action, contractor_id=None, earnings=None):
    """Append a ledger transaction to the current session."""
    if not bin_id or not action:
        raise ValidationError('binId and action are required')
    return repositories.ledger.create(
        id=new_id('TX'),
        bin_id=bin_id,
        action=action,
        contractor_id=contractor_id or 'system',
        timestamp=datetime.utcnow(),
        earnings=earnings,
    )


def list_transactions(limit=100):
    """Ledger transactions newest first."""
    return LedgerTransaction.query.order_by(LedgerTransaction.timestamp.desc()).limit(limit).all()


def process_pickup(contractor_id, bin_id, action=COLLECTED):
    """Confirm a contractor's pickup or hazard resolution at a bin.

    Returns a dict with the updated ``bin``, ``earnings`` for this pickup,
    the contractor's ``totalEarnings`` today and the ledger ``transaction``.

    Raises:
        ValidationError: binId missing
        NotFound: unknown contractor or bin
    """
    if not bin_id:
        raise ValidationError('binId is required')
    action = action or COLLECTED

    contractor = repositories.contractors.find_by_id(contractor_id)
    if contractor is None:
        raise NotFound('Contractor')

    with repositories.bins.locked(bin_id), repositories.reports.locked(bin_id), \
            repositories.contractors.locked(contractor_id):
        bin_obj = repositories.bins.find_by_id(bin_id)
        if bin_obj is None:
            raise NotFound('Bin')
        contractor = repositories.contractors.find_by_id(contractor_id)

        now = datetime.utcnow()
        new_status = status_after_action(action, bin_obj.status)
        fill_level = 0 if action == COLLECTED else bin_obj.fill_level

        try:
            repositories.bins.update(bin_obj, status=new_status, fill_level=fill_level, last_updated=now)

            resolved = 0
            if new_status in RESOLVING_STATUSES:
                resolved = resolve_open_reports(bin_id, now=now)

            total_earnings = (contractor.todays_earnings or 0) + PICKUP_EARNINGS
            repositories.contractors.update(
                contractor,
                todays_earnings=total_earnings,
                completed_pickups=(contractor.completed_pickups or 0) + 1,
                weekly_pickups_completed=(contractor.weekly_pickups_completed or 0) + 1,
                weekly_total_earnings=(contractor.weekly_total_earnings or 0) + PICKUP_EARNINGS,
            )

            transaction = record_transaction(bin_id, action, contractor_id, earnings=PICKUP_EARNINGS)

            log_activity(
                'success',
                f'Contractor {contractor.name} {action.lower()} {bin_id}. Earned ${PICKUP_EARNINGS:.2f}',
                contractor.name,
            )
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error('Could not process pickup of %s by %s: %s', bin_id, contractor_id, e)
            raise InternalError('Failed to process pickup')

    logger.info('Contractor %s %s %s (%d report(s) resolved)', contractor_id, action, bin_id, resolved)
    return {
        'success': True,
        'bin': bin_obj.to_dict(),
        'earnings': PICKUP_EARNINGS,
        'totalEarnings': total_earnings,
        'transaction': transaction.to_dict(),
    }
