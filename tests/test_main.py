import json

import pytest

from exceptions import MalformedRequestError, SeatingValidationError
from main import (
    branch_seating_report, error_response, load_student_pool, load_student_roster,
    lookup_student_seat, main, plan_response, run_seating_plan
)
from models import SeatingAssignment


REQUEST = {
    'block': 'A',
    'rooms': [{'roomNumber': '101', 'branches': [
        {'branch': 'CSE', 'subject': 'DS', 'studentsCount': 4},
        {'branch': 'ECE', 'subject': 'OS', 'studentsCount': 4},
    ]}],
}


def test_roster_loads_students_only(seeded_app):
    df = load_student_roster()
    assert list(df.columns) == ['role', 'roll_no', 'branch']
    assert len(df) == 20
    assert set(df['role']) == {'student'}

    pool = load_student_pool()
    assert [s.roll_no for s in pool['ECE'][:2]] == ['E01', 'E02']


def test_run_seating_plan_stores_result(seeded_app):
    plan = run_seating_plan(REQUEST)

    assert plan.total_assigned == 8
    stored = SeatingAssignment.ordered()
    assert [s.roll_no for s in stored] == [a.roll_no for a in plan.assignments]

    response = plan_response(plan)
    assert response['success'] is True
    assert response['message'] == 'Successfully assigned 8 students'
    assert response['stats']['branchDistribution']['CSE'] == {'total': 10, 'assigned': 4, 'available': 6}
    json.dumps(response)


def test_dry_run_does_not_store(seeded_app):
    run_seating_plan(REQUEST, persist=False)
    assert SeatingAssignment.query.count() == 0


def test_failed_batch_keeps_previous_plan(seeded_app):
    run_seating_plan(REQUEST)
    before = [s.to_dict() for s in SeatingAssignment.ordered()]

    too_many = {'block': 'A', 'rooms': [
        {'roomNumber': '101', 'branches': [{'branch': 'CSE', 'subject': 'DS', 'studentsCount': 6}]},
        {'roomNumber': '102', 'branches': [{'branch': 'CSE', 'subject': 'DS', 'studentsCount': 6}]},
    ]}
    with pytest.raises(SeatingValidationError) as excinfo:
        run_seating_plan(too_many)

    assert [s.to_dict() for s in SeatingAssignment.ordered()] == before

    response = error_response(excinfo.value)
    assert response['success'] is False
    assert response['details']['type'] == 'ValidationError'
    assert response['details']['room'] == '102'
    assert response['details']['availableBranches'] == {'CSE': 10, 'ECE': 10}


def test_malformed_request_is_rejected_before_roster_use(seeded_app):
    with pytest.raises(MalformedRequestError):
        run_seating_plan({'block': 'A', 'rooms': []})


def test_lookup_student_seat(seeded_app):
    run_seating_plan(REQUEST)
    seat = lookup_student_seat('c01')
    assert seat == {
        'roll_no': 'C01', 'block': 'A', 'room': '101',
        'seat_no': '01', 'branch': 'CSE', 'subject': 'DS'
    }
    assert lookup_student_seat('Z99') is None


def test_branch_seating_report(seeded_app):
    run_seating_plan(REQUEST)
    report = branch_seating_report('CSE')

    assert len(report) == 10
    assert report[0]['room'] == '101'
    assert report[0]['seat_no'] == 1
    assert report[-1] == {
        'roll_no': 'C10', 'branch': 'CSE', 'room': 'Not Assigned',
        'seat_no': 'Not Assigned', 'subject': 'Not Assigned', 'block': 'Not Assigned'
    }


def test_cli_generates_and_looks_up(seeded_app, tmp_path, capsys):
    request_file = tmp_path / 'request.json'
    request_file.write_text(json.dumps(REQUEST))

    assert main([str(request_file)], app=seeded_app) == 0
    output = json.loads(capsys.readouterr().out)
    assert output['success'] is True
    assert len(output['data']) == 8

    assert main(['--lookup', 'E02'], app=seeded_app) == 0
    output = json.loads(capsys.readouterr().out)
    assert output['data']['seat_no'] == '04'

    assert main(['--lookup', 'NOPE'], app=seeded_app) == 1


def test_cli_reports_validation_error(seeded_app, tmp_path, capsys):
    request_file = tmp_path / 'request.json'
    request_file.write_text(json.dumps({'block': 'A', 'rooms': [
        {'roomNumber': '101', 'branches': [{'branch': 'MECH', 'subject': 'TD', 'studentsCount': 1}]},
    ]}))

    assert main([str(request_file)], app=seeded_app) == 1
    output = json.loads(capsys.readouterr().out)
    assert output['success'] is False
    assert output['details']['branch'] == 'MECH'
    assert output['details']['available'] == 0
    assert SeatingAssignment.query.count() == 0
