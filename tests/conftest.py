"""Shared fixtures for the API tests."""
from datetime import date
from types import SimpleNamespace
import pytest
from campus_attendance import create_app, db
from campus_attendance.models import (
    Batch, Course, Department, FacultyProfile, Section, Student,
    TimetableSlot, User, UserRole, WeekDay
)
from campus_attendance.services.auth_service import AuthService

MONDAY = date(2024, 1, 1)

@pytest.fixture
def app():
    """Create test app."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()

def _user(email, role, password='password123', **kwargs):
    user = User(email=email, role=role, **kwargs)
    user.set_password(password)
    db.session.add(user)
    db.session.flush()
    return user

@pytest.fixture
def campus(app):
    """One department with two sections, three courses and a small timetable.

    Section S1, semester 1:
      Mon slot 1  CS101  taught by F1
      Tue slot 1  CS201  taught by F2
      Sat slot 1  CS101  taught by F1
    Section S2, semester 1:
      Mon slot 1  CS301  taught by F2
    """
    dept = Department(dept_name='Computer Science', dept_code='CSE')
    db.session.add(dept)
    db.session.flush()

    batch = Batch(dept_id=dept.id, start_year=2023, end_year=2027, batch_name='2023-27')
    db.session.add(batch)
    db.session.flush()

    s1 = Section(batch_id=batch.id, section_name='A')
    s2 = Section(batch_id=batch.id, section_name='B')
    db.session.add_all([s1, s2])
    db.session.flush()

    for code, name in [('CS101', 'Programming'), ('CS201', 'Data Structures'),
                       ('CS301', 'Operating Systems')]:
        db.session.add(Course(course_code=code, course_name=name, credits=4, dept_id=dept.id))

    admin = _user('admin@college.edu', UserRole.ADMIN)
    f1_user = _user('f1@college.edu', UserRole.FACULTY)
    f2_user = _user('f2@college.edu', UserRole.FACULTY)
    f3_user = _user('f3@college.edu', UserRole.FACULTY)

    f1 = FacultyProfile(faculty_name='Dr. One', email='f1@college.edu', dept_id=dept.id,
                        authorization_key='123456', user_id=f1_user.id)
    f2 = FacultyProfile(faculty_name='Dr. Two', email='f2@college.edu', dept_id=dept.id,
                        authorization_key='654321', user_id=f2_user.id)
    f3 = FacultyProfile(faculty_name='Dr. Three', email='f3@college.edu', dept_id=dept.id,
                        authorization_key='111111', user_id=f3_user.id)
    db.session.add_all([f1, f2, f3])
    db.session.flush()

    st1 = Student(roll_number='R001', full_name='Asha', email='asha@college.edu', section_id=s1.id)
    st2 = Student(roll_number='R002', full_name='Bala', email='bala@college.edu', section_id=s1.id)
    st3 = Student(roll_number='R101', full_name='Chitra', email='chitra@college.edu', section_id=s2.id)
    db.session.add_all([st1, st2, st3])
    db.session.flush()

    cr = _user('asha@college.edu', UserRole.CR, student_id=st1.id, semester=1)
    cr_other = _user('chitra@college.edu', UserRole.CR, student_id=st3.id, semester=1)

    mon = TimetableSlot(section_id=s1.id, semester=1, day=WeekDay.MONDAY, slot_number=1,
                        course_code='CS101', faculty_profile_id=f1.id, room_info='101')
    tue = TimetableSlot(section_id=s1.id, semester=1, day=WeekDay.TUESDAY, slot_number=1,
                        course_code='CS201', faculty_profile_id=f2.id, room_info='102')
    sat = TimetableSlot(section_id=s1.id, semester=1, day=WeekDay.SATURDAY, slot_number=1,
                        course_code='CS101', faculty_profile_id=f1.id, room_info='101')
    other = TimetableSlot(section_id=s2.id, semester=1, day=WeekDay.MONDAY, slot_number=1,
                          course_code='CS301', faculty_profile_id=f2.id, room_info='201')
    db.session.add_all([mon, tue, sat, other])
    db.session.commit()

    return SimpleNamespace(
        dept_id=dept.id, batch_id=batch.id, s1=s1.id, s2=s2.id,
        f1=f1.id, f2=f2.id, f3=f3.id,
        st1=st1.id, st2=st2.id, st3=st3.id,
        admin=admin.id, cr=cr.id, cr_other=cr_other.id,
        f1_user=f1_user.id, f2_user=f2_user.id, f3_user=f3_user.id,
        mon=mon.id, tue=tue.id, sat=sat.id, other=other.id
    )

@pytest.fixture
def headers(app):
    """Build Authorization headers for a user id."""
    def make(user_id):
        user = db.session.get(User, user_id)
        return {'Authorization': f'Bearer {AuthService.issue_token(user)}'}
    return make

@pytest.fixture
def record(client, headers, campus):
    """POST an attendance submission and return the response."""
    def submit(user_id=None, **body):
        payload = {
            'timetable_id': campus.mon,
            'date': MONDAY.isoformat(),
            'selected_course_code': 'CS101',
            'is_free': False,
            'records': [
                {'id': campus.st1, 'status': 'Present'},
                {'id': campus.st2, 'status': 'absent'}
            ]
        }
        payload.update(body)
        return client.post('/api/cr/attendance', json=payload,
                           headers=headers(user_id or campus.cr))
    return submit
