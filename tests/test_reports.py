"""Test attendance reports, the daily overview and the week grid."""
import io
import pandas as pd
import pytest
from campus_attendance.models import WEEK_GRID_OFFSETS, WeekDay
from campus_attendance.services.report_service import attendance_percentage

MONDAYS = ['2024-01-01', '2024-01-08', '2024-01-15', '2024-01-22']

@pytest.fixture
def history(record, campus):
    """Four CS101 Mondays where R001 misses one, plus a free Monday."""
    for index, day in enumerate(MONDAYS):
        first = 'absent' if index == 0 else 'Present'
        response = record(date=day, records=[
            {'id': campus.st1, 'status': first},
            {'id': campus.st2, 'status': 'PRESENT'}
        ])
        assert response.status_code == 201
    assert record(date='2024-01-29', is_free=True).status_code == 201
    return campus

def _report(client, headers, campus, url='/api/admin/attendance-report', **params):
    params.setdefault('section_id', campus.s1)
    response = client.get(url, query_string=params, headers=headers(campus.admin))
    assert response.status_code == 200
    return response.get_json()['data']

def test_health_check(client):
    assert client.get('/api/reports/health').status_code == 200

@pytest.mark.parametrize('attended,total,expected', [
    (3, 4, 75.0),
    (2, 3, 66.7),
    (1, 16, 6.3),
    (0, 5, 0.0),
    (0, 0, None),
])
def test_attendance_percentage(attended, total, expected):
    assert attendance_percentage(attended, total) == expected

def test_report_counts_non_free_sessions(client, headers, history):
    rows = _report(client, headers, history)

    assert rows == [
        {'roll_number': 'R001', 'full_name': 'Asha', 'subject': 'CS101',
         'total': 4, 'attended': 3, 'percentage': 75.0},
        {'roll_number': 'R002', 'full_name': 'Bala', 'subject': 'CS101',
         'total': 4, 'attended': 4, 'percentage': 100.0},
    ]

def test_threshold_is_strictly_below(client, headers, history):
    assert _report(client, headers, history, threshold=75) == []

    rows = _report(client, headers, history, threshold=76)
    assert [(r['roll_number'], r['percentage']) for r in rows] == [('R001', 75.0)]

def test_shortage_list_defaults_to_configured_threshold(app, client, headers, history):
    url = '/api/admin/shortage-list'
    assert _report(client, headers, history, url=url) == []

    app.config['SHORTAGE_THRESHOLD'] = 80
    rows = _report(client, headers, history, url=url)
    assert [r['roll_number'] for r in rows] == ['R001']

def test_swap_counts_for_the_course_taught(client, headers, record, history):
    record(date='2024-02-05', selected_course_code='CS201')

    rows = _report(client, headers, history)
    assert [(r['roll_number'], r['subject']) for r in rows] == [
        ('R001', 'CS101'), ('R001', 'CS201'), ('R002', 'CS101'), ('R002', 'CS201')
    ]

    rows = _report(client, headers, history, course_code='CS201')
    assert [(r['roll_number'], r['total'], r['attended']) for r in rows] == [
        ('R001', 1, 1), ('R002', 1, 0)
    ]

    assert _report(client, headers, history, course_code='ALL') == _report(client, headers, history)

def test_report_for_empty_section(client, headers, history):
    assert _report(client, headers, history, section_id=history.s2) == []

def test_report_csv_export(client, headers, history):
    response = client.get('/api/admin/attendance-report',
                          query_string={'section_id': history.s1, 'format': 'csv'},
                          headers=headers(history.admin))

    assert response.status_code == 200
    assert response.headers['Content-Type'].startswith('text/csv')
    assert 'attachment' in response.headers['Content-Disposition']

    df = pd.read_csv(io.StringIO(response.get_data(as_text=True).lstrip('\ufeff')))
    assert list(df.columns) == ['roll_number', 'full_name', 'subject',
                                'total', 'attended', 'percentage']
    assert df['roll_number'].tolist() == ['R001', 'R002']

def test_report_validation(client, headers, campus):
    response = client.get('/api/admin/attendance-report', headers=headers(campus.admin))
    assert response.status_code == 400

    response = client.get('/api/admin/attendance-report',
                          query_string={'section_id': campus.s1, 'threshold': 'abc'},
                          headers=headers(campus.admin))
    assert response.status_code == 400

def test_daily_overview(client, headers, record, campus):
    record(records=[
        {'id': campus.st1, 'status': 'present'},
        {'id': campus.st2, 'status': 'absent'}
    ], selected_course_code='CS201')

    response = client.get('/api/admin/daily-attendance-overview', query_string={
        'section_id': campus.s1, 'date': '2024-01-01', 'semester': 1
    }, headers=headers(campus.admin))

    assert response.status_code == 200
    rows = response.get_json()['data']
    assert len(rows) == 1
    row = rows[0]
    assert row['timetable_id'] == campus.mon
    assert row['scheduled_course_code'] == 'CS101'
    assert row['scheduled_course_name'] == 'Programming'
    assert row['faculty_name'] == 'Dr. One'
    assert row['session_category'] == 'swap'
    assert row['is_verified_by_faculty'] is False
    assert row['actual_course_code'] == 'CS201'
    assert row['actual_course_name'] == 'Data Structures'
    assert (row['present_count'], row['absent_count'], row['total_count']) == (1, 1, 2)

def test_daily_overview_without_session(client, headers, campus):
    response = client.get('/api/admin/daily-attendance-overview', query_string={
        'section_id': campus.s1, 'date': '2024-01-02', 'semester': 1
    }, headers=headers(campus.admin))

    rows = response.get_json()['data']
    assert [row['timetable_id'] for row in rows] == [campus.tue]
    assert rows[0]['session_id'] is None
    assert rows[0]['total_count'] == 0

def test_daily_overview_missing_parameters(client, headers, campus):
    response = client.get('/api/admin/daily-attendance-overview',
                          query_string={'section_id': campus.s1},
                          headers=headers(campus.admin))
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Missing parameters'

def test_week_grid_offsets():
    assert [WEEK_GRID_OFFSETS[day] for day in (
        WeekDay.MONDAY, WeekDay.TUESDAY, WeekDay.WEDNESDAY, WeekDay.THURSDAY, WeekDay.FRIDAY
    )] == [0, 1, 2, 3, 4]
    assert WeekDay.SATURDAY not in WEEK_GRID_OFFSETS

def test_week_grid(client, headers, record, campus):
    record(timetable_id=campus.tue, date='2024-01-02', selected_course_code='CS201')
    # Weekend slots resolve to the first day of the week
    record(timetable_id=campus.sat, date='2024-01-01', is_free=True)

    response = client.get('/api/common/week-grid', query_string={
        'section_id': campus.s1, 'start_date': '2024-01-01', 'semester': 1
    }, headers=headers(campus.cr))

    assert response.status_code == 200
    rows = response.get_json()['data']
    assert [(r['day'], r['date']) for r in rows] == [
        ('Mon', '2024-01-01'), ('Tue', '2024-01-02'), ('Sat', '2024-01-01')
    ]
    mon, tue, sat = rows
    assert mon['session_id'] is None
    assert tue['session_category'] == 'normal'
    assert tue['total_count'] == 2
    assert sat['session_category'] == 'free'
    assert sat['actual_course_code'] is None

@pytest.mark.parametrize('threshold', ['nan', 'inf', '-inf'])
def test_threshold_must_be_finite(client, headers, history, threshold):
    response = client.get('/api/admin/attendance-report',
                          query_string={'section_id': history.s1, 'threshold': threshold},
                          headers=headers(history.admin))
    assert response.status_code == 400
