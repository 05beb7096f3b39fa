"""Test faculty verification and token regeneration."""
from campus_attendance import db
from campus_attendance.models import AttendanceSession, FacultyProfile

def _verify(client, headers, user_id, session_id, token, timetable_id):
    return client.put(f'/api/faculty/verify/{session_id}',
                      json={'token': token, 'timetable_id': timetable_id},
                      headers=headers(user_id))

def test_wrong_token_leaves_session_unverified(app, client, headers, record, campus):
    session_id = record().get_json()['data']['session_id']

    response = _verify(client, headers, campus.cr, session_id, '000000', campus.mon)

    assert response.status_code == 401
    assert response.get_json()['message'] == 'Invalid 6-digit Token'
    session = db.session.get(AttendanceSession, session_id)
    assert session.is_verified_by_faculty is False
    assert session.verified_at is None

def test_correct_token_verifies_once(app, client, headers, record, campus):
    session_id = record().get_json()['data']['session_id']

    response = _verify(client, headers, campus.cr, session_id, '123456', campus.mon)
    assert response.status_code == 200
    data = response.get_json()
    assert data['message'] == 'Attendance verified and locked'
    first_stamp = data['data']['verified_at']
    assert first_stamp is not None

    session = db.session.get(AttendanceSession, session_id)
    assert session.is_verified_by_faculty is True

    response = _verify(client, headers, campus.f1_user, session_id, '123456', campus.mon)
    assert response.status_code == 200
    assert response.get_json()['data']['verified_at'] == first_stamp

def test_scheduled_faculty_key_is_used_for_swaps(app, client, headers, record, campus):
    """The key of F1 (scheduled) verifies a session taught by F2."""
    session_id = record(selected_course_code='CS201').get_json()['data']['session_id']

    assert _verify(client, headers, campus.cr, session_id, '654321', campus.mon).status_code == 401
    assert _verify(client, headers, campus.cr, session_id, '123456', campus.mon).status_code == 200

def test_token_is_compared_as_string(client, headers, record, campus):
    session_id = record().get_json()['data']['session_id']
    assert _verify(client, headers, campus.cr, session_id, 123456, campus.mon).status_code == 200

def test_session_must_belong_to_slot(client, headers, record, campus):
    session_id = record().get_json()['data']['session_id']
    response = _verify(client, headers, campus.cr, session_id, '654321', campus.tue)
    assert response.status_code == 400

def test_unknown_session_or_slot(client, headers, record, campus):
    session_id = record().get_json()['data']['session_id']
    assert _verify(client, headers, campus.cr, 9999, '123456', campus.mon).status_code == 404
    assert _verify(client, headers, campus.cr, session_id, '123456', 9999).status_code == 404

def test_missing_token(client, headers, record, campus):
    session_id = record().get_json()['data']['session_id']
    response = client.put(f'/api/faculty/verify/{session_id}',
                          json={'timetable_id': campus.mon}, headers=headers(campus.cr))
    assert response.status_code == 400

def test_admin_cannot_verify(client, headers, record, campus):
    session_id = record().get_json()['data']['session_id']
    response = _verify(client, headers, campus.admin, session_id, '123456', campus.mon)
    assert response.status_code == 403

def test_regenerate_token(app, client, headers, record, campus):
    response = client.put('/api/faculty/regen-token', headers=headers(campus.f1_user))

    assert response.status_code == 200
    token = response.get_json()['data']['token']
    assert len(token) == 6 and token.isdigit()
    assert 100000 <= int(token) <= 999999
    assert db.session.get(FacultyProfile, campus.f1).authorization_key == token

    session_id = record().get_json()['data']['session_id']
    assert _verify(client, headers, campus.cr, session_id, token, campus.mon).status_code == 200

def test_regenerate_token_requires_faculty(client, headers, campus):
    assert client.put('/api/faculty/regen-token', headers=headers(campus.cr)).status_code == 403
    assert client.put('/api/faculty/regen-token', headers=headers(campus.admin)).status_code == 403

def test_generated_keys_have_six_digits():
    for _ in range(50):
        key = FacultyProfile.generate_authorization_key()
        assert len(key) == 6 and key[0] != '0'

def test_faculty_listing_hides_keys_from_non_admins(client, headers, campus):
    response = client.get('/api/admin/faculty', headers=headers(campus.cr))
    assert response.status_code == 200
    profiles = response.get_json()['data']
    assert profiles
    assert all('authorization_key' not in p for p in profiles)
    assert '123456' not in response.get_data(as_text=True)

    response = client.get('/api/admin/faculty', headers=headers(campus.f2_user))
    assert all('authorization_key' not in p for p in response.get_json()['data'])

    response = client.get('/api/admin/faculty', headers=headers(campus.admin))
    keys = {p['profile_id']: p['authorization_key'] for p in response.get_json()['data']}
    assert keys[campus.f1] == '123456'

def test_faculty_sees_own_key(client, headers, campus):
    response = client.get('/api/auth/me', headers=headers(campus.f1_user))
    assert response.get_json()['data']['faculty_profile']['authorization_key'] == '123456'

    response = client.get('/api/auth/me', headers=headers(campus.cr))
    assert 'faculty_profile' not in response.get_json()['data']
