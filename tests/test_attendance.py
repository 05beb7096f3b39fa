"""Test attendance recording and swap inference."""
from datetime import date
import pytest
from campus_attendance import db
from campus_attendance.models import (
    AttendanceRecord, AttendanceSession, ClassSwap, SessionCategory
)
from campus_attendance.services.attendance_service import (
    AttendanceService, Recorder, classify_session, resolve_swap_target, normalize_records
)
from campus_attendance.utils.exceptions import ValidationError

MONDAY = date(2024, 1, 1)

def test_health_check(client):
    response = client.get('/api/attendance/health')
    assert response.status_code == 200

def test_classify_session():
    assert classify_session('CS101', 'CS101', False) == (SessionCategory.NORMAL, 'CS101')
    assert classify_session('CS101', 'CS201', False) == (SessionCategory.SWAP, 'CS201')
    assert classify_session('CS101', 'CS201', True) == (SessionCategory.FREE, None)
    assert classify_session('CS101', None, True) == (SessionCategory.FREE, None)

def test_normalize_records_accepts_any_case():
    records = normalize_records([{'id': 1, 'status': 'PRESENT'}, {'id': '2', 'status': 'Absent'}])
    assert [(sid, status.value) for sid, status in records] == [(1, 'present'), (2, 'absent')]

@pytest.mark.parametrize('records', [
    'not-a-list',
    [{'id': 1, 'status': 'late'}],
    [{'id': 'abc', 'status': 'present'}],
    [{'id': 1, 'status': 'present'}, {'id': 1, 'status': 'absent'}],
])
def test_normalize_records_rejects_bad_input(records):
    with pytest.raises(ValidationError):
        normalize_records(records)

def test_normal_session(app, record, campus):
    """Selecting the scheduled course records a normal session without a swap."""
    response = record()

    assert response.status_code == 201
    data = response.get_json()
    assert data['message'] == 'Attendance processed and swap logged'
    assert data['data']['category'] == 'normal'

    session = db.session.get(AttendanceSession, data['data']['session_id'])
    assert session.session_category == SessionCategory.NORMAL
    assert session.actual_course_code == 'CS101'
    assert session.marked_by_user_id == campus.cr
    assert session.is_verified_by_faculty is False
    assert ClassSwap.query.count() == 0

    statuses = {r.student_id: r.status for r in session.records}
    assert statuses == {campus.st1: 'present', campus.st2: 'absent'}

def test_swap_session(app, record, campus):
    """Teaching CS201 in the CS101 slot logs a swap from F1 to F2."""
    response = record(selected_course_code='CS201')

    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['category'] == 'swap'

    session = db.session.get(AttendanceSession, data['session_id'])
    assert session.actual_course_code == 'CS201'
    assert {r.status for r in session.records} == {'present', 'absent'}

    swaps = ClassSwap.query.all()
    assert len(swaps) == 1
    swap = swaps[0]
    assert swap.source_timetable_id == campus.mon
    assert swap.requesting_faculty_id == campus.f1
    assert swap.target_faculty_id == campus.f2
    assert swap.requested_date == MONDAY
    assert swap.reason == 'Course changed from CS101 to CS201'
    assert swap.status == 'approved'

def test_free_session_ignores_records(app, record, campus):
    response = record(is_free=True, selected_course_code=None,
                      records=[{'id': campus.st1, 'status': 'nonsense'}])

    assert response.status_code == 201
    session = db.session.get(AttendanceSession, response.get_json()['data']['session_id'])
    assert session.session_category == SessionCategory.FREE
    assert session.actual_course_code is None
    assert session.records.count() == 0

    swap = ClassSwap.query.one()
    assert swap.reason == 'Class declared Free during attendance marking'
    assert swap.requesting_faculty_id == campus.f1
    assert swap.target_faculty_id is None

def test_invalid_status_writes_nothing(app, record, campus):
    response = record(records=[
        {'id': campus.st1, 'status': 'present'},
        {'id': campus.st2, 'status': 'late'}
    ])

    assert response.status_code == 400
    assert AttendanceSession.query.count() == 0
    assert AttendanceRecord.query.count() == 0
    assert ClassSwap.query.count() == 0

def test_failure_after_session_insert_rolls_back(app, record, campus, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("swap log unavailable")

    monkeypatch.setattr(AttendanceService, '_log_swap', staticmethod(boom))
    response = record(selected_course_code='CS201')

    assert response.status_code == 500
    assert response.get_json()['message'] == 'Error recording attendance'
    assert AttendanceSession.query.count() == 0
    assert AttendanceRecord.query.count() == 0
    assert ClassSwap.query.count() == 0

def test_duplicate_session_conflicts(app, record, campus):
    assert record().status_code == 201

    response = record(selected_course_code='CS201')
    assert response.status_code == 409
    assert AttendanceSession.query.count() == 1
    assert ClassSwap.query.count() == 0

def test_same_slot_next_week_is_allowed(record):
    assert record().status_code == 201
    assert record(date='2024-01-08').status_code == 201

def test_missing_fields(record):
    assert record(timetable_id=None).status_code == 400
    assert record(date='01/01/2024').status_code == 400
    assert record(selected_course_code=None).status_code == 400

def test_unknown_references(app, record, campus):
    assert record(timetable_id=9999).status_code == 404
    assert record(selected_course_code='XX999').status_code == 404
    assert record(records=[{'id': 9999, 'status': 'present'}]).status_code == 404
    assert AttendanceSession.query.count() == 0

def test_cr_cannot_record_other_section(app, record, campus):
    response = record(user_id=campus.cr_other)
    assert response.status_code == 403
    assert AttendanceSession.query.count() == 0

def test_faculty_and_admin_may_record(record, campus):
    assert record(user_id=campus.f1_user).status_code == 201
    assert record(user_id=campus.admin, date='2024-01-08').status_code == 201

def test_resolve_swap_target_falls_back_to_recording_faculty(app, campus):
    """No slot teaches CS301 to section S1, so the recording faculty is the target."""
    faculty = Recorder(user_id=campus.f3_user, role='faculty')
    assert resolve_swap_target(campus.s1, 'CS301', faculty) == campus.f3

    cr = Recorder(user_id=campus.cr, role='cr', student_id=campus.st1)
    assert resolve_swap_target(campus.s1, 'CS301', cr) is None
    assert resolve_swap_target(campus.s1, 'CS201', cr) == campus.f2

def test_session_inspection(app, client, record, headers, campus):
    session_id = record().get_json()['data']['session_id']

    response = client.get(f'/api/admin/sessions-by-timetable/{campus.mon}',
                          headers=headers(campus.admin))
    assert response.status_code == 200
    sessions = response.get_json()['data']
    assert [s['id'] for s in sessions] == [session_id]
    assert sessions[0]['marked_by'] == 'asha@college.edu'

    response = client.get(f'/api/admin/records-by-session/{session_id}',
                          headers=headers(campus.admin))
    assert [(r['roll_number'], r['status']) for r in response.get_json()['data']] == [
        ('R001', 'present'), ('R002', 'absent')
    ]

    response = client.get(f'/api/admin/sessions-by-timetable/{campus.mon}',
                          headers=headers(campus.cr))
    assert response.status_code == 403

def test_roll_call_for_slot(client, headers, campus):
    response = client.get(f'/api/cr/students-by-timetable/{campus.mon}',
                          headers=headers(campus.cr))
    assert response.status_code == 200
    assert [s['roll_number'] for s in response.get_json()['data']] == ['R001', 'R002']

    response = client.get('/api/cr/students-by-studentid', headers=headers(campus.cr_other))
    assert [s['roll_number'] for s in response.get_json()['data']] == ['R101']

def test_is_free_must_be_boolean(app, record, campus):
    for value in ('false', 'true', 0, 1, None):
        response = record(is_free=value)
        assert response.status_code == 400
        assert response.get_json()['message'] == 'is_free must be a boolean'
    assert AttendanceSession.query.count() == 0
    assert ClassSwap.query.count() == 0

def test_missing_is_free_means_scheduled_class(client, headers, campus):
    response = client.post('/api/cr/attendance', json={
        'timetable_id': campus.mon,
        'date': '2024-01-01',
        'selected_course_code': 'CS101',
        'records': [{'id': campus.st1, 'status': 'present'}]
    }, headers=headers(campus.cr))
    assert response.status_code == 201
    assert response.get_json()['data']['category'] == 'normal'

def test_date_with_trailing_text_is_rejected(app, record):
    assert record(date='2024-01-01xyz').status_code == 400
    assert AttendanceSession.query.count() == 0
