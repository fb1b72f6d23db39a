from datetime import datetime, timedelta

import pytest

from wastechain import repositories
from wastechain.errors import ValidationError, NotFound, ConflictError
from wastechain.models import Activity, Report
from wastechain.services.classifier import FULL, HAZARD
from wastechain.services.reports import (
    submit_report, resolve_open_reports, update_report_status, list_reports, REPORT_POINTS,
)


@pytest.fixture()
def full_bin(make_bin):
    return make_bin('BIN001', 85, 2, status=FULL)


def test_first_reporter_is_rewarded(full_bin, make_citizen):
    make_citizen('citizen-1', 'Ravi', points=100, reports_submitted=2)

    result = submit_report('citizen-1', 'BIN001', 'overflow', 'Spilling onto the road')

    assert result['success'] is True
    assert result['pointsAwarded'] == REPORT_POINTS
    assert result['newPointsTotal'] == 150
    assert result['report']['status'] == 'pending'
    assert result['report']['pointsAwarded'] == REPORT_POINTS
    citizen = repositories.citizens.find_by_id('citizen-1')
    assert citizen.points == 150
    assert citizen.reports_submitted == 3
    activity = Activity.query.one()
    assert activity.type == 'success'
    assert activity.user == 'Ravi'


def test_second_citizen_gets_no_points(full_bin, make_citizen):
    make_citizen('citizen-1', 'Ravi')
    make_citizen('citizen-2', 'Meena', points=10)
    submit_report('citizen-1', 'BIN001', 'overflow')

    result = submit_report('citizen-2', 'BIN001', 'odor')

    assert result['success'] is True
    assert result['pointsAwarded'] == 0
    assert result['newPointsTotal'] == 10
    assert 'already reported by another citizen' in result['message']
    citizen = repositories.citizens.find_by_id('citizen-2')
    assert citizen.points == 10
    assert citizen.reports_submitted == 0
    assert Report.query.count() == 2
    assert Activity.query.filter_by(type='info').count() == 1


@pytest.mark.parametrize('fill_level, gas_level', [(10, 1), (50, 2)])
def test_only_full_or_hazard_bins_can_be_reported(make_bin, make_citizen, fill_level, gas_level):
    bin_obj = make_bin('BIN001', fill_level, gas_level)
    make_citizen()

    with pytest.raises(ConflictError) as exc:
        submit_report('citizen-1', 'BIN001', 'overflow')

    assert f'is currently {bin_obj.status}' in exc.value.message
    assert Report.query.count() == 0


def test_hazard_bin_can_be_reported(make_bin, make_citizen):
    make_bin('BIN001', 40, 5, status=HAZARD)
    make_citizen()
    assert submit_report('citizen-1', 'BIN001', 'gas leak')['pointsAwarded'] == REPORT_POINTS


def test_missing_fields(full_bin, make_citizen):
    make_citizen()
    with pytest.raises(ValidationError):
        submit_report('citizen-1', 'BIN001', '')
    with pytest.raises(ValidationError):
        submit_report('citizen-1', None, 'overflow')


def test_unknown_citizen_is_checked_before_bin(make_citizen):
    with pytest.raises(NotFound) as exc:
        submit_report('ghost', 'BIN404', 'overflow')
    assert exc.value.message == 'Citizen not found'

    make_citizen()
    with pytest.raises(NotFound) as exc:
        submit_report('citizen-1', 'BIN404', 'overflow')
    assert exc.value.message == 'Bin not found'


def test_open_report_blocks_same_citizen(full_bin, make_citizen, make_report):
    make_citizen()
    make_report('report-1', 'citizen-1', 'BIN001',
                created_at=datetime.utcnow() - timedelta(minutes=5, seconds=10))

    with pytest.raises(ConflictError) as exc:
        submit_report('citizen-1', 'BIN001', 'overflow')

    assert '5 minute(s) ago' in exc.value.message
    assert exc.value.payload['existingReport']['id'] == 'report-1'
    assert Report.query.count() == 1


def test_recently_resolved_report_blocks_for_an_hour(full_bin, make_citizen, make_report):
    make_citizen()
    now = datetime.utcnow()
    make_report('report-1', 'citizen-1', 'BIN001', status='resolved',
                created_at=now - timedelta(hours=2), resolved_at=now - timedelta(minutes=59))

    with pytest.raises(ConflictError) as exc:
        submit_report('citizen-1', 'BIN001', 'overflow')

    assert 'wait 1 minute(s)' in exc.value.message


def test_report_allowed_after_cooldown(full_bin, make_citizen, make_report):
    make_citizen()
    now = datetime.utcnow()
    make_report('report-1', 'citizen-1', 'BIN001', status='resolved',
                created_at=now - timedelta(hours=2), resolved_at=now - timedelta(minutes=61))

    result = submit_report('citizen-1', 'BIN001', 'overflow')

    assert result['pointsAwarded'] == REPORT_POINTS
    assert Report.query.count() == 2


def test_resolve_open_reports(full_bin, make_citizen, make_report):
    make_citizen('citizen-1')
    make_citizen('citizen-2')
    make_report('report-1', 'citizen-1', 'BIN001')
    make_report('report-2', 'citizen-2', 'BIN001', status='investigating')
    make_report('report-3', 'citizen-2', 'BIN001', status='resolved', resolved_at=datetime.utcnow())

    assert resolve_open_reports('BIN001') == 2

    for report in Report.query.all():
        assert report.status == 'resolved'
        assert report.resolved_at is not None


def test_update_report_status(full_bin, make_citizen, make_report):
    make_citizen()
    make_report('report-1', 'citizen-1', 'BIN001')

    report = update_report_status('report-1', 'investigating')
    assert report.status == 'investigating'
    assert report.resolved_at is None

    report = update_report_status('report-1', 'resolved')
    assert report.resolved_at is not None
    assert 'resolvedAt' in report.to_dict()

    with pytest.raises(ValidationError):
        update_report_status('report-1', 'closed')
    with pytest.raises(NotFound):
        update_report_status('report-404', 'resolved')


def test_list_reports_filters(full_bin, make_citizen, make_report):
    make_citizen('citizen-1')
    make_citizen('citizen-2')
    make_report('report-1', 'citizen-1', 'BIN001')
    make_report('report-2', 'citizen-2', 'BIN001', status='resolved', resolved_at=datetime.utcnow())

    assert [r.id for r in list_reports(status='pending')] == ['report-1']
    assert [r.id for r in list_reports(citizen_id='citizen-2')] == ['report-2']
    assert len(list_reports()) == 2


def test_report_endpoint(client, full_bin, make_citizen):
    make_citizen()

    r = client.post('/api/reports', json={'citizenId': 'citizen-1', 'binId': 'BIN001', 'issueType': 'overflow'})

    assert r.status_code == 200
    assert r.get_json()['pointsAwarded'] == REPORT_POINTS


def test_report_endpoint_errors(client, make_bin, make_citizen):
    make_bin('BIN001', 50, 2)
    make_citizen()

    r = client.post('/api/reports', json={'citizenId': 'citizen-1', 'binId': 'BIN001', 'issueType': 'overflow'})
    assert r.status_code == 400
    assert 'currently Normal' in r.get_json()['error']

    r = client.post('/api/citizens/nobody/report', json={'binId': 'BIN001', 'issueType': 'overflow'})
    assert r.status_code == 404
    assert r.get_json()['error'] == 'Citizen not found'


def test_duplicate_report_endpoint_returns_existing(client, full_bin, make_citizen):
    make_citizen()
    body = {'binId': 'BIN001', 'issueType': 'overflow'}
    assert client.post('/api/citizens/citizen-1/report', json=body).status_code == 200

    r = client.post('/api/citizens/citizen-1/report', json=body)

    assert r.status_code == 400
    data = r.get_json()
    assert 'already reported this bin' in data['error']
    assert data['existingReport']['binId'] == 'BIN001'
