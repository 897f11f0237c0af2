from datetime import date

from models import db, Board, Publication, PublicationStudent, Student
from tests.helpers import add_student, create_project


def test_create_student_generates_code(client, mentor_headers, rbm, counselor):
    response = client.post('/students/create_student', headers=mentor_headers, data={
        'full_name': 'Asha Iyer', 'email_address': 'asha@example.com',
        'rbm_id': rbm.id, 'counselor_id': counselor.id, 'application_year': '2025',
    })
    assert response.status_code == 201
    body = response.get_json()
    assert body["student_id"] == f"STU{date.today().year}0001"

    view = client.get(f'/students/{body["id"]}', headers=mentor_headers).get_json()
    assert view["rbm_name"] == 'Ravi Menon'
    assert view["counselor_name"] == 'Priya Shah'
    assert view["dependencies"] == {"projects": 0, "ready_publications": 0}


def test_invalid_email_is_rejected(client, mentor_headers):
    response = client.post('/students/create_student', headers=mentor_headers,
                           data={'full_name': 'Asha Iyer', 'email_address': 'not-an-email'})
    assert response.status_code == 400
    assert "email_address" in response.get_json()["fields"]
    assert Student.query.count() == 0


def test_rbm_must_be_an_rbm(client, mentor_headers, counselor):
    response = client.post('/students/create_student', headers=mentor_headers,
                           data={'full_name': 'Asha Iyer', 'rbm_id': counselor.id})
    assert response.status_code == 400
    assert "rbm_id" in response.get_json()["fields"]


def test_custom_board_is_created_once(client, mentor_headers):
    for name in ('Asha Iyer', 'Kiran Patel'):
        response = client.post('/students/create_student', headers=mentor_headers,
                               data={'full_name': name, 'custom_board': 'Cambridge'})
        assert response.status_code == 201
    board = Board.query_first(name='Cambridge')
    assert board is not None
    assert Student.query.filter_by(board_id=board.id).count() == 2


def test_list_filters(client, mentor_headers, rbm):
    add_student('Asha Iyer', rbm_id=rbm.id, application_year=2024)
    add_student('Kiran Patel', application_year=2025)

    body = client.get('/students/', query_string={'rbm': rbm.id}, headers=mentor_headers).get_json()
    assert [s["full_name"] for s in body["students"]] == ['Asha Iyer']
    assert body["application_years"] == [2025, 2024]

    body = client.get('/students/', query_string={'search': 'zzz'}, headers=mentor_headers).get_json()
    assert body["students"] == []
    assert body["message"] == "No students found"


def test_delete_blocked_while_assigned(client, mentor_headers, admin_headers):
    student = add_student()
    create_project(client, mentor_headers, student_ids=[str(student.id)])

    response = client.delete(f'/students/delete_student/{student.id}', headers=admin_headers)
    assert response.status_code == 400
    assert "projects" in response.get_json()["fields"]
    assert db.session.get(Student, student.id) is not None


def test_delete_blocked_while_publication_author(client, mentor_headers, admin_headers):
    student = add_student()
    project_id = create_project(client, mentor_headers).get_json()["id"]
    client.post('/publications/create_publication', headers=mentor_headers, data={
        'project_id': project_id, 'paper_title': 'Tracking the Sun', 'venue_type': 'Journal',
        'student_ids': [str(student.id)],
    })

    response = client.delete(f'/students/delete_student/{student.id}', headers=admin_headers)
    assert response.status_code == 400
    assert "publications" in response.get_json()["fields"]
    assert PublicationStudent.query.count() == 1

    publication = Publication.query.one()
    view = client.get(f'/publications/{publication.id}', headers=mentor_headers).get_json()
    assert view["students"][0]["id"] == student.id


def test_delete_requires_admin(client, mentor_headers, admin_headers):
    student = add_student()
    assert client.delete(f'/students/delete_student/{student.id}', headers=mentor_headers).status_code == 403
    assert client.delete(f'/students/delete_student/{student.id}', headers=admin_headers).status_code == 200
    assert Student.query.count() == 0


def test_export_csv(client, mentor_headers):
    add_student('Asha Iyer', grade='11')
    response = client.get('/students/export', headers=mentor_headers)
    assert response.status_code == 200
    assert response.mimetype == 'text/csv'
    lines = response.get_data(as_text=True).splitlines()
    assert lines[0].startswith('student_id,full_name')
    assert 'Asha Iyer' in lines[1]


def test_boards_lookup(client, mentor_headers):
    names = [b["name"] for b in client.get('/students/boards', headers=mentor_headers).get_json()["boards"]]
    assert names == sorted(names)
    assert 'CBSE' in names
