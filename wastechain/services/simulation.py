"""
IoT Sensor Simulation Service

Advances the simulated fill and gas readings of every bin by one tick,
persists the new readings and logs status transitions.
"""

import logging
import math
import random
from datetime import datetime

from wastechain.extensions import db
from wastechain import repositories
from wastechain.services.activity import log_activity
from wastechain.services.classifier import classify, EMPTY, NORMAL, FULL, HAZARD, ATTENTION_STATUSES

logger = logging.getLogger(__name__)

INCREASING = 'increasing'
DECREASING = 'decreasing'
STABLE = 'stable'

SYSTEM_ACTOR = 'IoT Sensor System'


def round_half_up(value, digits=0):
    """Round halves away from zero for non-negative readings."""
    if digits == 0:
        return int(math.floor(value + 0.5))
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def determine_trend(fill_level, status, rng=random):
    """Pick the fill trend for the next tick from the bin's current state."""
    if status == EMPTY:
        return INCREASING
    if status in ATTENTION_STATUSES:
        # Full bins stay full until collected
        return STABLE
    if fill_level < 50:
        return INCREASING
    if rng.random() < 0.1:
        return DECREASING
    return INCREASING


def simulate_fill_level(current, trend, rng=random):
    """Next fill level (0-100, one decimal) for a trend."""
    if trend == INCREASING:
        change = rng.random() * 4 + 1
    elif trend == DECREASING:
        change = -(rng.random() * 1.5 + 0.5)
    else:
        change = (rng.random() - 0.5) * 2

    # Sensor noise
    change += rng.random() - 0.5

    new_level = max(0.0, min(100.0, current + change))
    return round_half_up(new_level, 1)


def simulate_gas_level(fill_level, current_gas, rng=random):
    """Next gas level (integer 1-5) given the new fill level."""
    new_gas = current_gas
    if fill_level > 70:
        new_gas += rng.random() * 0.5
    elif fill_level < 30:
        new_gas -= rng.random() * 0.3
    else:
        new_gas += (rng.random() - 0.3) * 0.2

    new_gas = max(1.0, min(5.0, new_gas))
    return round_half_up(new_gas)


def describe_status_change(bin_id, status, fill_level, gas_level):
    """Activity type and message for a bin entering ``status``."""
    if status == FULL:
        return 'warning', f'Bin {bin_id} is now FULL ({fill_level}%) - requires pickup'
    if status == HAZARD:
        return 'error', (f'HAZARD detected at {bin_id} ({fill_level}% full, gas level: {gas_level}) '
                         f'- IMMEDIATE ATTENTION REQUIRED')
    if status == EMPTY:
        return 'success', f'Bin {bin_id} is now EMPTY and ready for use'
    return 'info', f'Bin {bin_id} status normalized ({fill_level}%)'


class IoTState:
    """Working memory the engine keeps for one bin between ticks."""

    def __init__(self, bin_id, fill_level, gas_level, status=NORMAL, trend=INCREASING):
        self.bin_id = bin_id
        self.fill_level = fill_level
        self.gas_level = gas_level
        self.status = status
        self.trend = trend
        self.last_update = datetime.utcnow()

    def to_dict(self):
        return {
            'binId': self.bin_id,
            'fillLevel': self.fill_level,
            'gasLevel': self.gas_level,
            'status': self.status,
            'trend': self.trend,
            'lastUpdate': self.last_update.isoformat(),
        }


class TickResult:
    """Counters for one simulation pass."""

    def __init__(self):
        self.bins_updated = 0
        self.status_changes = 0
        self.errors = 0

    def to_dict(self):
        return {
            'binsUpdated': self.bins_updated,
            'statusChanges': self.status_changes,
            'errors': self.errors,
        }


class IoTSimulationEngine:
    """Simulated smart-bin sensors.

    Args:
        bins: bin repository (read_all, find_by_id, update, locked)
        log: activity sink called as ``log(type_, message, user)``
        rng: source of randomness exposing ``random()`` and ``randint()``
    """

    def __init__(self, bins=None, log=None, rng=None):
        self.bins = bins if bins is not None else repositories.bins
        self.log = log if log is not None else log_activity
        self.rng = rng if rng is not None else random.Random()
        self.states = {}

    def state_for(self, bin_id):
        """Get the runtime state for a bin, seeding it on first sight."""
        state = self.states.get(bin_id)
        if state is None:
            state = IoTState(
                bin_id,
                fill_level=self.rng.randint(10, 59),
                gas_level=self.rng.randint(1, 3),
            )
            self.states[bin_id] = state
        return state

    def advance(self, bin_id):
        """Advance one bin by a tick.

        Returns True if the status changed, False if not, None if the bin
        no longer exists.
        """
        bin_obj = self.bins.find_by_id(bin_id)
        if bin_obj is None:
            return None

        state = self.state_for(bin_id)
        state.trend = determine_trend(bin_obj.fill_level, bin_obj.status, self.rng)
        state.fill_level = simulate_fill_level(bin_obj.fill_level, state.trend, self.rng)
        state.gas_level = simulate_gas_level(state.fill_level, bin_obj.gas_level, self.rng)

        # Classify what gets stored so the persisted status always matches
        fill_level = round_half_up(state.fill_level)
        gas_level = round_half_up(state.gas_level)
        new_status = classify(fill_level, gas_level)
        previous_status = bin_obj.status

        state.status = new_status
        state.last_update = datetime.utcnow()

        self.bins.update(
            bin_obj,
            fill_level=fill_level,
            gas_level=gas_level,
            status=new_status,
            last_updated=state.last_update,
        )
        logger.debug('Bin %s: %s%% gas %s %s (%s)', bin_id, fill_level, gas_level, new_status, state.trend)

        if new_status == previous_status:
            return False

        activity_type, message = describe_status_change(bin_id, new_status, fill_level, gas_level)
        self.log(activity_type, message, SYSTEM_ACTOR)
        logger.info('Bin %s changed status %s -> %s', bin_id, previous_status, new_status)
        return True

    def run_once(self):
        """Run one tick over every bin.

        Failures are logged and counted; one bad bin never stops the pass.
        """
        result = TickResult()
        try:
            bin_ids = [bin_obj.id for bin_obj in self.bins.read_all()]
        except Exception:
            db.session.rollback()
            logger.exception('Simulation tick could not read bins')
            result.errors += 1
            return result

        for bin_id in bin_ids:
            try:
                with self.bins.locked(bin_id):
                    changed = self.advance(bin_id)
                    db.session.commit()
            except Exception:
                db.session.rollback()
                result.errors += 1
                logger.exception('Simulation update failed for bin %s', bin_id)
                continue

            if changed is None:
                continue
            result.bins_updated += 1
            if changed:
                result.status_changes += 1

        logger.info('Simulated %d bins (%d status changes, %d errors)',
                    result.bins_updated, result.status_changes, result.errors)
        return result
