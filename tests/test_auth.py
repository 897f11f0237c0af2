from datetime import date

from models import db, AuditTrail, Student, User
from services.auth_services import generate_code
from tests.helpers import headers_for, make_user


def test_login_returns_token(app, client):
    response = client.post('/auth/login', json={'username': 'admin',
                                                'password': app.config['ADMIN_PASSWORD']})
    assert response.status_code == 200
    token = response.get_json()["token"]

    me = client.get('/auth/me', headers={"Authorization": f"Bearer {token}"}).get_json()
    assert me["user"]["username"] == 'admin'
    assert "password_hash" not in me["user"]
    assert me["permissions"] == ['admin', 'councillor', 'mentor']
    assert AuditTrail.query.filter_by(operation='LOGIN').count() == 1


def test_audit_ids_are_sequential(app, client):
    for _ in range(2):
        client.post('/auth/login', json={'username': 'admin', 'password': app.config['ADMIN_PASSWORD']})
    ids = sorted(a.audit_id for a in AuditTrail.query.all())
    assert ids[0].startswith('AUD-') and ids[0].endswith('-00001')
    assert ids[1].endswith('-00002')


def test_wrong_password(client):
    response = client.post('/auth/login', data={'username': 'admin', 'password': 'nope'})
    assert response.status_code == 401


def test_inactive_user_cannot_log_in(client):
    make_user('old', 'mentor', password='Secret123!', status='inactive')
    response = client.post('/auth/login', json={'username': 'old', 'password': 'Secret123!'})
    assert response.status_code == 403


def test_missing_credentials(client):
    response = client.post('/auth/login', json={'username': 'admin'})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Missing required fields: password"


def test_endpoints_require_token(client):
    assert client.get('/projects/').status_code == 401


def test_deactivated_token_holder_is_refused(client):
    user = make_user('gone', 'mentor', status='inactive')
    assert client.get('/projects/', headers=headers_for(user)).status_code == 401


def test_mentor_permissions(client, mentor_headers):
    me = client.get('/auth/me', headers=mentor_headers).get_json()
    assert me["permissions"] == ['mentor']


def test_admin_manages_users(client, admin_headers, mentor_headers):
    form = {'username': 'newmentor', 'full_name': 'New Mentor', 'user_type': 'mentor',
            'password': 'Passw0rd!', 'email': 'new@example.com'}
    assert client.post('/users/create_user', headers=mentor_headers, data=form).status_code == 403

    response = client.post('/users/create_user', headers=admin_headers, data=form)
    assert response.status_code == 201
    user_id = response.get_json()["id"]

    response = client.post('/users/create_user', headers=admin_headers, data=form)
    assert response.status_code == 400

    response = client.put(f'/users/update_user/{user_id}', headers=admin_headers,
                          data={**form, 'password': '', 'status': 'inactive'})
    assert response.status_code == 200
    assert User.find(user_id).status == 'inactive'

    assert client.delete(f'/users/delete_user/{user_id}', headers=admin_headers).status_code == 200
    assert User.find(user_id) is None


def test_weak_password_is_rejected(client, admin_headers):
    response = client.post('/users/create_user', headers=admin_headers, data={
        'username': 'weak', 'full_name': 'Weak', 'user_type': 'rbm', 'password': 'short'})
    assert response.status_code == 400
    assert "password" in response.get_json()["fields"]


def test_staff_lookups(client, mentor_headers, mentor, rbm, counselor):
    assert [m["id"] for m in client.get('/users/mentors', headers=mentor_headers).get_json()["mentors"]] == [mentor.id]
    assert [r["id"] for r in client.get('/users/rbms', headers=mentor_headers).get_json()["rbms"]] == [rbm.id]
    body = client.get('/users/counselors', headers=mentor_headers).get_json()
    assert [c["id"] for c in body["counselors"]] == [counselor.id]


def test_user_list_filters(client, mentor_headers, mentor, rbm):
    body = client.get('/users/', query_string={'user_type': 'rbm'}, headers=mentor_headers).get_json()
    assert [u["username"] for u in body["users"]] == ['rbm1']


def test_audit_log_is_admin_only(client, admin_headers, mentor_headers):
    client.post('/projects/create_project', data={'project_name': 'P'}, headers=mentor_headers)
    assert client.get('/auditlogs/fetch_logs', headers=mentor_headers).status_code == 403

    logs = client.get('/auditlogs/fetch_logs', query_string={'table_name': 'Project'},
                      headers=admin_headers).get_json()["logs"]
    assert [(l["username"], l["operation"]) for l in logs] == [('mentor1', 'CREATE')]


def test_generated_codes_grow_past_four_digits(app):
    year = date.today().year
    for code in (f"STU{year}9999", f"STU{year}10000"):
        db.session.add(Student(student_id=code, full_name=code))
    db.session.commit()

    assert generate_code('STU', Student, 'student_id') == f"STU{year}10001"


def test_unknown_user_type_is_rejected(client, admin_headers):
    response = client.post('/users/create_user', headers=admin_headers, data={
        'username': 'visitor', 'full_name': 'Visitor', 'user_type': 'guest', 'password': 'Passw0rd!',
    })
    assert response.status_code == 400
    assert "user_type" in response.get_json()["fields"]
