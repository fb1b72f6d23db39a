"""
Activity Log Service

Append-only feed of timestamped events shared by every engine.
"""

import logging
from datetime import datetime

from wastechain.errors import ValidationError
from wastechain.models import Activity, ACTIVITY_TYPES
from wastechain.models.base import new_id
from wastechain import repositories

logger = logging.getLogger(__name__)


def log_activity(type_, message, user):
    """Append an activity record to the current session."""
    if type_ not in ACTIVITY_TYPES:
        raise ValidationError(f'Invalid activity type "{type_}". Use one of: {", ".join(ACTIVITY_TYPES)}')
    activity = repositories.activities.create(
        id=new_id('activity'),
        type=type_,
        message=message,
        user=user,
        timestamp=datetime.utcnow(),
    )
    logger.debug('Activity [%s] %s: %s', type_, user, message)
    return activity


def recent_activities(limit=50, type_=None):
    """Newest activities first, optionally filtered by type."""
    query = Activity.query
    if type_:
        query = query.filter_by(type=type_)
    return query.order_by(Activity.timestamp.desc()).limit(limit).all()
