from datetime import datetime

import pytest

from wastechain import create_app
from wastechain.config import TestConfig
from wastechain.extensions import db
from wastechain.models import Bin, Citizen, Contractor, Report
from wastechain.services.classifier import classify


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    yield app
    app.extensions['simulation_scheduler'].stop()


@pytest.fixture(autouse=True)
def app_context(app):
    with app.app_context():
        yield
        db.session.remove()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_bin():
    def _make(bin_id='BIN001', fill_level=50, gas_level=1, status=None, location='MI Road, Jaipur'):
        bin_obj = Bin(
            id=bin_id,
            location=location,
            fill_level=fill_level,
            gas_level=gas_level,
            status=status or classify(fill_level, gas_level),
            last_updated=datetime.utcnow(),
        )
        db.session.add(bin_obj)
        db.session.commit()
        return bin_obj
    return _make


@pytest.fixture()
def make_citizen():
    def _make(citizen_id='citizen-1', name='Ravi', points=0, reports_submitted=0):
        citizen = Citizen(
            id=citizen_id,
            name=name,
            email=f'{citizen_id}@example.com',
            points=points,
            reports_submitted=reports_submitted,
            created_at=datetime.utcnow(),
        )
        db.session.add(citizen)
        db.session.commit()
        return citizen
    return _make


@pytest.fixture()
def make_contractor():
    def _make(contractor_id='contractor-1', name='Green Haulers', todays_earnings=0.0, completed_pickups=0):
        contractor = Contractor(
            id=contractor_id,
            name=name,
            email=f'{contractor_id}@example.com',
            todays_earnings=todays_earnings,
            completed_pickups=completed_pickups,
            weekly_pickups_completed=completed_pickups,
            weekly_total_earnings=todays_earnings,
            created_at=datetime.utcnow(),
        )
        db.session.add(contractor)
        db.session.commit()
        return contractor
    return _make


@pytest.fixture()
def make_report():
    def _make(report_id, citizen_id, bin_id, status='pending', points_awarded=50,
              created_at=None, resolved_at=None):
        report = Report(
            id=report_id,
            citizen_id=citizen_id,
            bin_id=bin_id,
            issue_type='overflow',
            description='',
            status=status,
            points_awarded=points_awarded,
            created_at=created_at or datetime.utcnow(),
            resolved_at=resolved_at,
        )
        db.session.add(report)
        db.session.commit()
        return report
    return _make


class StubRandom:
    """Replays a fixed sequence from random(); randint returns the low bound."""

    def __init__(self, *values):
        self.values = list(values) or [0.5]
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value

    def randint(self, low, high):
        return low


@pytest.fixture()
def stub_random():
    return StubRandom
