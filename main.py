import argparse
import json
import logging
import sys

import pandas as pd

from config import LOG_LEVEL, NOT_ASSIGNED
from exceptions import SeatingPlanError
from models import SeatingAssignment, User, db
from room_assignment import generate_seating_plan
from seating_request import normalize_branch, parse_seating_request
from student_pool import branch_totals, group_by_branch, roster_from_frame

LOG = logging.getLogger(__name__)


def load_student_roster():
    """
    Load the student roster from the users table.
    Returns a DataFrame with role, roll_no and branch columns in insertion order.
    """
    df = pd.read_sql(User.roster_select(), db.session.connection())
    LOG.info("[Roster] Loaded %d student records", len(df))
    return df


def load_student_pool():
    """Roster grouped by branch, ready for the seating generator."""
    pool = group_by_branch(roster_from_frame(load_student_roster()))
    for branch, students in pool.items():
        LOG.info("[Roster] %s: %d students", branch, len(students))
    return pool


def run_seating_plan(body, persist=True, used_set=None):
    """
    Parse a request, seat every room and store the result.

    The stored plan is replaced only when the whole batch succeeds; any
    SeatingPlanError propagates before storage is touched.

    Args:
        body: Decoded request JSON
        persist: Write the plan to seating_assignments when True
        used_set: Optional UsedSet of students already seated elsewhere

    Returns:
        SeatingPlan
    """
    block, rooms = parse_seating_request(body)
    pool = load_student_pool()
    plan = generate_seating_plan(block, rooms, pool, used_set)
    if persist:
        SeatingAssignment.replace_all(plan.assignments)
    return plan


def plan_response(plan):
    return {
        'success': True,
        'data': plan.to_records(),
        'message': f'Successfully assigned {plan.total_assigned} students',
        'stats': plan.stats
    }


def error_response(error):
    """Failure payload with the error details and current roster sizes per branch."""
    try:
        available = branch_totals(load_student_pool())
    except Exception:
        LOG.exception("[Roster] Could not load roster for error details")
        available = {}
    details = error.to_dict()
    details['availableBranches'] = available
    return {
        'success': False,
        'message': error.message,
        'details': details
    }


def lookup_student_seat(roll_no):
    """Stored seat for one roll number, seat number zero-padded, or None."""
    seat = SeatingAssignment.find_by_roll_no(roll_no)
    if seat is None:
        LOG.info("[Lookup] No seat found for roll number %s", roll_no)
        return None
    return seat.to_dict(pad_seat=True)


def branch_seating_report(branch):
    """Every roster student of a branch with their stored seat, if any."""
    stored_branch = normalize_branch(branch)
    seats = {s.roll_no: s for s in SeatingAssignment.for_branch(stored_branch)}

    report = []
    for student in User.students_in_branch(stored_branch):
        seat = seats.get(student.roll_no)
        report.append({
            'roll_no': student.roll_no,
            'branch': stored_branch,
            'room': seat.room if seat else NOT_ASSIGNED,
            'seat_no': seat.seat_no if seat else NOT_ASSIGNED,
            'subject': seat.subject if seat else NOT_ASSIGNED,
            'block': seat.block if seat else NOT_ASSIGNED
        })
    return report


def build_parser():
    parser = argparse.ArgumentParser(description='Generate an exam seating plan.')
    parser.add_argument('request', nargs='?', help='Path to a seating request JSON file')
    parser.add_argument('--dry-run', action='store_true',
                        help='Generate and print the plan without storing it')
    parser.add_argument('--lookup', metavar='ROLL_NO',
                        help='Print the stored seat of one student')
    parser.add_argument('--branch', help='Print the seating report of one branch')
    return parser


def main(argv=None, app=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    if app is None:
        from app import create_app
        app = create_app()

    with app.app_context():
        if args.lookup:
            seat = lookup_student_seat(args.lookup)
            if seat is None:
                print(json.dumps({'success': False,
                                  'message': 'No seating arrangement found for this roll number'}))
                return 1
            print(json.dumps({'success': True, 'data': seat}, indent=2))
            return 0

        if args.branch:
            print(json.dumps({'success': True, 'data': branch_seating_report(args.branch)}, indent=2))
            return 0

        if not args.request:
            build_parser().print_usage(sys.stderr)
            return 2

        with open(args.request) as fh:
            body = json.load(fh)

        try:
            plan = run_seating_plan(body, persist=not args.dry_run)
        except SeatingPlanError as e:
            LOG.error("[Seating] %s", e.message)
            print(json.dumps(error_response(e), indent=2))
            return 1

        print(json.dumps(plan_response(plan), indent=2))
        return 0


if __name__ == '__main__':
    sys.exit(main())
