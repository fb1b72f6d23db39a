"""
Citizen Report Service

Validates citizen issue reports against bin status and duplicate rules and
awards points to the first reporter of each problem episode.
"""

import logging
import math
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from wastechain.errors import ValidationError, NotFound, ConflictError, InternalError
from wastechain.extensions import db
from wastechain.models import Report, REPORT_STATUSES, OPEN_STATUSES
from wastechain.models.base import new_id
from wastechain.models.report import PENDING, RESOLVED
from wastechain import repositories
from wastechain.services.activity import log_activity
from wastechain.services.classifier import ATTENTION_STATUSES, EMPTY, NORMAL

logger = logging.getLogger(__name__)

REPORT_POINTS = 50
REPORT_COOLDOWN_MINUTES = 60

# Bin statuses that settle any open report on the bin
RESOLVING_STATUSES = (EMPTY, NORMAL)


def _minutes_since(timestamp, now):
    return max(0.0, (now - timestamp).total_seconds() / 60.0)


def _latest_report(citizen_id, bin_id):
    return Report.query.filter_by(citizen_id=citizen_id, bin_id=bin_id)\
        .order_by(Report.created_at.desc()).first()


def _open_report_by_other_citizen(citizen_id, bin_id):
    return Report.query.filter(
        Report.bin_id == bin_id,
        Report.status.in_(OPEN_STATUSES),
        Report.citizen_id != citizen_id,
    ).first()


def check_prior_report(report, now):
    """Reject a citizen re-reporting a bin they already reported.

    A resolved report blocks re-reporting for an hour after resolution; an
    open report blocks it until resolved.
    """
    if report is None:
        return
    if not report.is_open:
        elapsed = _minutes_since(report.resolved_at or report.created_at, now)
        if elapsed < REPORT_COOLDOWN_MINUTES:
            minutes_left = math.ceil(REPORT_COOLDOWN_MINUTES - elapsed)
            raise ConflictError(
                f'You have already reported this bin. Please wait {minutes_left} minute(s) before reporting again.',
                payload={'existingReport': report.to_dict()},
            )
        return
    report_age = math.floor(_minutes_since(report.created_at, now))
    raise ConflictError(
        f'You have already reported this bin {report_age} minute(s) ago. Please wait until the issue is resolved.',
        payload={'existingReport': report.to_dict()},
    )


def submit_report(citizen_id, bin_id, issue_type, description=''):
    """Submit a citizen's issue report for a bin.

    Returns a dict with ``success``, ``pointsAwarded``, ``newPointsTotal``
    and the created ``report``.

    Raises:
        ValidationError: binId or issueType missing
        NotFound: unknown citizen or bin
        ConflictError: bin not reportable or citizen already reported it
    """
    if not bin_id or not issue_type:
        raise ValidationError('binId and issueType are required')

    citizen = repositories.citizens.find_by_id(citizen_id)
    if citizen is None:
        raise NotFound('Citizen')

    if repositories.bins.find_by_id(bin_id) is None:
        raise NotFound('Bin')

    # Bin status, prior reports and the insert are checked under the bin locks;
    # a pickup cannot interleave and one reporter per episode is rewarded
    with repositories.bins.locked(bin_id), repositories.reports.locked(bin_id), \
            repositories.citizens.locked(citizen_id):
        bin_obj = repositories.bins.find_by_id(bin_id)
        if bin_obj is None:
            raise NotFound('Bin')
        if bin_obj.status not in ATTENTION_STATUSES:
            raise ConflictError(
                f'Cannot report issue: Bin {bin_id} is currently {bin_obj.status}. '
                f'Only Hazard or Full bins can be reported.'
            )

        now = datetime.utcnow()
        check_prior_report(_latest_report(citizen_id, bin_id), now)

        already_reported = _open_report_by_other_citizen(citizen_id, bin_id) is not None
        points = 0 if already_reported else REPORT_POINTS

        try:
            report = repositories.reports.create(
                id=new_id('report'),
                citizen_id=citizen_id,
                bin_id=bin_id,
                issue_type=issue_type,
                description=description or '',
                status=PENDING,
                points_awarded=points,
                created_at=now,
            )

            if already_reported:
                log_activity(
                    'info',
                    f'Citizen {citizen.name} also reported issue with {bin_id} (already reported by another citizen).',
                    citizen.name,
                )
            else:
                citizen = repositories.citizens.find_by_id(citizen_id)
                repositories.citizens.update(
                    citizen,
                    points=(citizen.points or 0) + REPORT_POINTS,
                    reports_submitted=(citizen.reports_submitted or 0) + 1,
                )
                log_activity(
                    'success',
                    f'Citizen {citizen.name} reported issue with {bin_id}. Awarded {REPORT_POINTS} points.',
                    citizen.name,
                )

            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error('Could not store report for bin %s: %s', bin_id, e)
            raise InternalError('Failed to create report')

    result = {
        'success': True,
        'pointsAwarded': points,
        'newPointsTotal': citizen.points or 0,
        'report': report.to_dict(),
    }
    if already_reported:
        result['message'] = ('Issue already reported by another citizen. '
                             'Your report has been logged but no points awarded.')
        logger.info('Citizen %s reported %s after another citizen; no points', citizen_id, bin_id)
    else:
        logger.info('Citizen %s reported %s; awarded %d points', citizen_id, bin_id, points)
    return result


def resolve_open_reports(bin_id, now=None):
    """Mark every pending or investigating report on a bin as resolved.

    Callers hold the bin's report lock and commit the session.
    Returns the number of reports resolved.
    """
    now = now or datetime.utcnow()
    open_reports = Report.query.filter(
        Report.bin_id == bin_id,
        Report.status.in_(OPEN_STATUSES),
    ).all()
    for report in open_reports:
        repositories.reports.update(report, status=RESOLVED, resolved_at=now)
    if open_reports:
        logger.info('Auto-resolved %d report(s) for bin %s', len(open_reports), bin_id)
    return len(open_reports)


def update_report_status(report_id, status):
    """Move a report to ``status``; resolving stamps ``resolvedAt``."""
    if status not in REPORT_STATUSES:
        raise ValidationError(f'Invalid status "{status}". Use one of: {", ".join(REPORT_STATUSES)}')

    report = repositories.reports.find_by_id(report_id)
    if report is None:
        raise NotFound('Report')

    with repositories.reports.locked(report.bin_id):
        report = repositories.reports.find_by_id(report_id)
        fields = {'status': status}
        if status == RESOLVED and report.status != RESOLVED:
            fields['resolved_at'] = datetime.utcnow()
        elif status != RESOLVED:
            fields['resolved_at'] = None
        try:
            repositories.reports.update(report, **fields)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error('Could not update report %s: %s', report_id, e)
            raise InternalError('Failed to update report')
    return report


def list_reports(status=None, citizen_id=None):
    """Reports newest first, optionally filtered by status and citizen."""
    query = Report.query
    if status:
        query = query.filter_by(status=status)
    if citizen_id:
        query = query.filter_by(citizen_id=citizen_id)
    return query.order_by(Report.created_at.desc()).all()
