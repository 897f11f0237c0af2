from models import Publication
from models.publication import CONFERENCE_FIELDS, JOURNAL_FIELDS
from tests.helpers import add_student, create_project


def make_project(client, headers, **form):
    return create_project(client, headers, **form).get_json()["id"]


def test_conference_publication_leaves_journal_fields_null(client, mentor_headers):
    project_id = make_project(client, mentor_headers)
    response = client.post('/publications/create_publication', headers=mentor_headers, data={
        'project_id': project_id,
        'paper_title': 'Tracking the Sun',
        'venue_type': 'Conference',
        'conference_publisher': 'IEEE',
        'conference_acceptance_date': '2025-04-01',
        'journal_publisher': 'Elsevier',
        'journal_link': 'https://example.com/j',
    })
    assert response.status_code == 201
    publication = Publication.query.one()
    assert publication.conference_publisher == 'IEEE'
    for name in JOURNAL_FIELDS:
        assert getattr(publication, name) is None


def test_journal_publication_leaves_conference_fields_null(client, mentor_headers):
    project_id = make_project(client, mentor_headers)
    response = client.post('/publications/create_publication', headers=mentor_headers, json={
        'project_id': project_id,
        'paper_title': 'Tracking the Sun',
        'venue_type': 'Journal',
        'journal_publisher': 'Elsevier',
        'conference_publisher': 'IEEE',
        'conference_doi_link': 'https://doi.org/x',
    })
    assert response.status_code == 201
    publication = Publication.query.one()
    assert publication.journal_publisher == 'Elsevier'
    for name in CONFERENCE_FIELDS:
        assert getattr(publication, name) is None


def test_switching_venue_clears_old_fields(client, mentor_headers):
    project_id = make_project(client, mentor_headers)
    body = client.post('/publications/create_publication', headers=mentor_headers, data={
        'project_id': project_id, 'paper_title': 'P', 'venue_type': 'Conference',
        'conference_publisher': 'IEEE',
    }).get_json()

    response = client.put(f'/publications/update_publication/{body["id"]}', headers=mentor_headers, data={
        'project_id': project_id, 'paper_title': 'P', 'venue_type': 'Journal',
        'journal_publisher': 'Springer', 'conference_publisher': 'IEEE',
    })
    assert response.status_code == 200
    publication = Publication.query.one()
    assert publication.venue_type == 'Journal'
    assert publication.conference_publisher is None
    assert publication.journal_publisher == 'Springer'


def test_unknown_venue_type_is_rejected(client, mentor_headers):
    project_id = make_project(client, mentor_headers)
    response = client.post('/publications/create_publication', headers=mentor_headers, data={
        'project_id': project_id, 'paper_title': 'P', 'venue_type': 'Workshop',
    })
    assert response.status_code == 400
    assert "venue_type" in response.get_json()["fields"]


def test_list_filters_and_stats(client, mentor_headers):
    project_id = make_project(client, mentor_headers)
    for title, venue in (('Alpha', 'Conference'), ('Beta', 'Journal'), ('Gamma', 'Journal')):
        client.post('/publications/create_publication', headers=mentor_headers,
                    data={'project_id': project_id, 'paper_title': title, 'venue_type': venue})

    body = client.get('/publications/', query_string={'venue_type': 'Journal'},
                      headers=mentor_headers).get_json()
    assert sorted(p["paper_title"] for p in body["publications"]) == ['Beta', 'Gamma']

    stats = client.get('/publications/statistics', headers=mentor_headers).get_json()
    assert stats == {"total_publications": 3, "conference_publications": 1,
                     "journal_publications": 2, "projects_with_publications": 1}


def test_authors_are_recorded(client, mentor_headers, mentor):
    student = add_student()
    project_id = make_project(client, mentor_headers)
    body = client.post('/publications/create_publication', headers=mentor_headers, data={
        'project_id': project_id, 'paper_title': 'P', 'venue_type': 'Journal',
        'student_ids': [str(student.id)], 'mentor_ids': [str(mentor.id)], 'lead_mentor_id': mentor.id,
    }).get_json()

    view = client.get(f'/publications/{body["id"]}', headers=mentor_headers).get_json()
    assert [s["id"] for s in view["students"]] == [student.id]
    assert view["mentors"] == [{"id": mentor.id, "full_name": mentor.full_name, "is_lead_mentor": True}]


def test_delete_requires_admin(client, mentor_headers, admin_headers):
    project_id = make_project(client, mentor_headers)
    body = client.post('/publications/create_publication', headers=mentor_headers, data={
        'project_id': project_id, 'paper_title': 'P', 'venue_type': 'Journal',
    }).get_json()
    url = f'/publications/delete_publication/{body["id"]}'
    assert client.delete(url, headers=mentor_headers).status_code == 403
    assert client.delete(url, headers=admin_headers).status_code == 200
    assert Publication.query.count() == 0


def test_get_project_data(client, mentor_headers, mentor, other_mentor):
    student = add_student('Asha Iyer')
    project_id = make_project(client, mentor_headers, lead_mentor_id=mentor.id,
                              mentor_ids=[str(other_mentor.id)], student_ids=[str(student.id)])

    students = client.get('/publications/get_project_data',
                          query_string={'project_id': project_id, 'type': 'students'},
                          headers=mentor_headers).get_json()["students"]
    assert [s["full_name"] for s in students] == ['Asha Iyer']

    mentors = client.get('/publications/get_project_data',
                         query_string={'project_id': project_id, 'type': 'mentors'},
                         headers=mentor_headers).get_json()["mentors"]
    assert [(m["id"], m["is_lead_mentor"]) for m in mentors] == [(mentor.id, True), (other_mentor.id, False)]

    response = client.get('/publications/get_project_data',
                          query_string={'project_id': project_id, 'type': 'tags'},
                          headers=mentor_headers)
    assert response.status_code == 400
