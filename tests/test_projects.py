from datetime import date

from models import (
    db, Project, ProjectStudent, ProjectMentor, ProjectTagAssignment, Tag, AuditTrail
)
from tests.helpers import add_student, create_project

IN_PROGRESS = 'Project Execution - in progress'
COMPLETED = 'Project Execution - completed'


def test_create_project_generates_code_and_end_date(client, mentor_headers, mentor, statuses):
    response = create_project(client, mentor_headers, project_name='Solar Tracker',
                              start_date='2025-01-15', status_id=statuses[IN_PROGRESS].id,
                              lead_mentor_id=mentor.id)
    assert response.status_code == 201
    body = response.get_json()
    year = date.today().year
    assert body["project_id"] == f"PRJ{year}0001"

    project = db.session.get(Project, body["id"])
    assert project.end_date == date(2025, 5, 15)

    second = create_project(client, mentor_headers, project_name='Water Sensor')
    assert second.get_json()["project_id"] == f"PRJ{year}0002"


def test_end_date_is_null_without_start_date(client, mentor_headers):
    body = create_project(client, mentor_headers).get_json()
    assert db.session.get(Project, body["id"]).end_date is None


def test_update_recomputes_end_date(client, mentor_headers):
    body = create_project(client, mentor_headers, start_date='2025-01-15').get_json()
    response = client.put(f'/projects/update_project/{body["id"]}', headers=mentor_headers,
                          data={'project_name': 'Solar Tracker v2', 'start_date': '2024-10-31'})
    assert response.status_code == 200
    project = db.session.get(Project, body["id"])
    assert project.project_name == 'Solar Tracker v2'
    assert project.end_date == date(2025, 2, 28)


def test_missing_name_is_rejected_with_submitted_data(client, mentor_headers):
    response = client.post('/projects/create_project', headers=mentor_headers,
                           data={'notes': 'draft'})
    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "Missing required fields: project_name"
    assert body["data"]["notes"] == 'draft'
    assert Project.query.count() == 0


def test_unknown_references_are_rejected(client, mentor_headers):
    response = create_project(client, mentor_headers, student_ids=['999'])
    assert response.status_code == 400
    assert "student_ids" in response.get_json()["fields"]
    assert Project.query.count() == 0


def test_assignments_are_replaced_wholesale(client, mentor_headers, mentor, other_mentor):
    first, second = add_student('Asha Iyer'), add_student('Kiran Patel')
    tag = Tag.query_first(tag_name='Priority')
    body = create_project(client, mentor_headers,
                          student_ids=[str(first.id), str(second.id)],
                          mentor_ids=[str(mentor.id)], tag_ids=[str(tag.id)]).get_json()

    view = client.get(f'/projects/{body["id"]}', headers=mentor_headers).get_json()
    assert view["student_count"] == 2
    assert [m["id"] for m in view["mentors"]] == [mentor.id]
    assert view["tags"][0]["tag_name"] == 'Priority'

    client.put(f'/projects/update_project/{body["id"]}', headers=mentor_headers,
               data={'project_name': 'Solar Tracker', 'student_ids': [str(second.id)],
                     'mentor_ids': [str(other_mentor.id)]})
    assert [link.student_id for link in ProjectStudent.query.all()] == [second.id]
    assert [link.mentor_id for link in ProjectMentor.query.all()] == [other_mentor.id]
    assert ProjectTagAssignment.query.count() == 0


def test_view_unknown_project_is_404(client, mentor_headers):
    response = client.get('/projects/4242', headers=mentor_headers)
    assert response.status_code == 404
    assert response.get_json() == {"error": "Project not found"}


def test_list_filters_by_status_mentor_and_search(client, mentor_headers, mentor, other_mentor, statuses):
    in_progress = statuses[IN_PROGRESS].id
    yet_to_start = statuses['Project Execution - yet to start'].id
    create_project(client, mentor_headers, project_name='Solar Tracker',
                   status_id=in_progress, lead_mentor_id=mentor.id)
    create_project(client, mentor_headers, project_name='Water Sensor',
                   status_id=yet_to_start, lead_mentor_id=other_mentor.id)
    create_project(client, mentor_headers, project_name='Solar Car',
                   status_id=yet_to_start, mentor_ids=[str(mentor.id)])

    def names(**args):
        body = client.get('/projects/', query_string=args, headers=mentor_headers).get_json()
        return sorted(p["project_name"] for p in body["projects"])

    assert names(status=in_progress) == ['Solar Tracker']
    assert names(mentor=mentor.id) == ['Solar Car', 'Solar Tracker']
    assert names(search='solar') == ['Solar Car', 'Solar Tracker']
    assert names(search='solar', status=yet_to_start) == ['Solar Car']


def test_empty_list_reports_no_results(client, mentor_headers):
    response = client.get('/projects/', query_string={'search': 'nothing'}, headers=mentor_headers)
    assert response.status_code == 200
    body = response.get_json()
    assert body["projects"] == []
    assert body["message"] == "No projects found"


def test_non_numeric_filter_is_rejected(client, mentor_headers):
    response = client.get('/projects/', query_string={'status': 'abc'}, headers=mentor_headers)
    assert response.status_code == 400


def test_list_rows_carry_badges(client, mentor_headers, statuses):
    create_project(client, mentor_headers, status_id=statuses[IN_PROGRESS].id,
                   start_date='2000-01-01')
    row = client.get('/projects/', headers=mentor_headers).get_json()["projects"][0]
    assert row["status_badge_class"] == 'bg-primary'
    assert row["deadline"]["urgency"] == 'overdue'


def test_delete_requires_admin(client, mentor_headers, admin_headers, mentor):
    student = add_student()
    tag = Tag.query_first(tag_name='Prototype')
    body = create_project(client, mentor_headers, student_ids=[str(student.id)],
                          mentor_ids=[str(mentor.id)], tag_ids=[str(tag.id)]).get_json()

    response = client.delete(f'/projects/delete_project/{body["id"]}', headers=mentor_headers)
    assert response.status_code == 403
    assert response.get_json() == {"error": "Admin privileges required"}
    assert Project.query.count() == 1

    response = client.delete(f'/projects/delete_project/{body["id"]}', headers=admin_headers)
    assert response.status_code == 200
    assert Project.query.count() == 0
    assert ProjectStudent.query.count() == 0
    assert ProjectMentor.query.count() == 0
    assert ProjectTagAssignment.query.count() == 0
    assert AuditTrail.query.filter_by(operation='DELETE', table_name='Project').count() == 1


def test_completed_project_moves_back_to_active(client, mentor_headers, admin_headers, statuses):
    body = create_project(client, mentor_headers, status_id=statuses[COMPLETED].id,
                          completion_date='2025-02-01', has_prototype='Yes').get_json()

    active = client.get('/projects/', headers=mentor_headers).get_json()
    assert active["projects"] == []
    completed = client.get('/projects/completed', headers=mentor_headers).get_json()
    assert [p["id"] for p in completed["projects"]] == [body["id"]]
    assert completed["with_prototypes"] == 1

    response = client.post(f'/projects/move_back/{body["id"]}', headers=mentor_headers)
    assert response.status_code == 403

    response = client.post(f'/projects/move_back/{body["id"]}', headers=admin_headers)
    assert response.status_code == 200

    project = db.session.get(Project, body["id"])
    assert project.status_id == statuses[IN_PROGRESS].id
    assert project.completion_date is None
    assert [p["id"] for p in client.get('/projects/', headers=mentor_headers).get_json()["projects"]] == [body["id"]]
    assert client.get('/projects/completed', headers=mentor_headers).get_json()["projects"] == []


def test_completed_list_sorts_by_name(client, mentor_headers, statuses):
    done = statuses[COMPLETED].id
    create_project(client, mentor_headers, project_name='Beta', status_id=done)
    create_project(client, mentor_headers, project_name='Alpha', status_id=done)
    body = client.get('/projects/completed', query_string={'sort_by': 'project_name'},
                      headers=mentor_headers).get_json()
    assert [p["project_name"] for p in body["projects"]] == ['Alpha', 'Beta']


def test_completed_list_filters_by_mentor_and_search(client, mentor_headers, mentor, other_mentor,
                                                     rbm, statuses):
    done = statuses[COMPLETED].id
    create_project(client, mentor_headers, project_name='Solar Tracker', status_id=done,
                   lead_mentor_id=mentor.id, rbm_id=rbm.id)
    create_project(client, mentor_headers, project_name='Solar Car', status_id=done,
                   lead_mentor_id=other_mentor.id, mentor_ids=[str(mentor.id)])
    create_project(client, mentor_headers, project_name='Water Sensor', status_id=done,
                   lead_mentor_id=other_mentor.id)
    create_project(client, mentor_headers, project_name='Solar Kiln',
                   status_id=statuses[IN_PROGRESS].id, lead_mentor_id=mentor.id)

    def names(**args):
        body = client.get('/projects/completed', query_string=args, headers=mentor_headers).get_json()
        return sorted(p["project_name"] for p in body["projects"])

    assert names(mentor=mentor.id) == ['Solar Car', 'Solar Tracker']
    assert names(search='solar') == ['Solar Car', 'Solar Tracker']
    assert names(search='water', mentor=mentor.id) == []
    assert names(rbm=rbm.id) == ['Solar Tracker']

    body = client.get('/projects/completed', query_string={'search': 'nothing'},
                      headers=mentor_headers).get_json()
    assert body["total_completed"] == 0
    assert body["message"] == "No completed projects found"


def test_update_status_changes_status_and_notes(client, mentor_headers, statuses):
    body = create_project(client, mentor_headers).get_json()
    response = client.post(f'/projects/update_status/{body["id"]}', headers=mentor_headers,
                           data={'status_id': statuses[COMPLETED].id,
                                 'additional_details': 'Paper submitted'})
    assert response.status_code == 200
    project = db.session.get(Project, body["id"])
    assert project.status.status_name == COMPLETED
    assert project.notes == 'Paper submitted'


def test_lookups_can_be_added(client, mentor_headers):
    response = client.post('/projects/add_tag', headers=mentor_headers,
                           data={'tag_name': 'Robotics', 'tag_color': '#123abc'})
    assert response.status_code == 201
    response = client.post('/projects/add_tag', headers=mentor_headers, data={'tag_name': 'robotics'})
    assert response.status_code == 400

    response = client.post('/projects/add_status', headers=mentor_headers, data={'status_name': 'On hold'})
    assert response.status_code == 201
    assert response.get_json()["status"]["status_order"] == 6

    lookups = client.get('/projects/lookups', headers=mentor_headers).get_json()
    assert 'Robotics' in [t["tag_name"] for t in lookups["tags"]]
    assert 'On hold' in [s["status_name"] for s in lookups["statuses"]]


def test_statistics(client, mentor_headers, statuses):
    create_project(client, mentor_headers, status_id=statuses[COMPLETED].id, has_prototype='Yes')
    create_project(client, mentor_headers, status_id=statuses[IN_PROGRESS].id)
    stats = client.get('/projects/statistics', headers=mentor_headers).get_json()
    assert stats["total_projects"] == 2
    assert stats["completed_projects"] == 1
    assert stats["with_prototypes"] == 1
