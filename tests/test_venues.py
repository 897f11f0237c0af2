from datetime import timedelta

from models import Conference, Journal
from services.deadlines import today
from tests.helpers import add_conference, add_journal


def test_upcoming_conferences_come_first(client, mentor_headers):
    now = today()
    add_conference('Past', conference_date=now - timedelta(days=10))
    add_conference('Later', conference_date=now + timedelta(days=60))
    add_conference('Soon', conference_date=now + timedelta(days=5),
                   submission_due_date=now + timedelta(days=3))

    body = client.get('/conference/', headers=mentor_headers).get_json()
    assert [c["conference_name"] for c in body["conferences"]] == ['Soon', 'Later', 'Past']
    assert body["conferences"][0]["deadline"]["urgency"] == 'due_soon'
    assert body["conferences"][2]["is_upcoming"] is False
    assert body["statistics"]["upcoming"] == 2


def test_conference_filters(client, mentor_headers):
    add_conference('ICML', affiliation='ACM', conference_type='International')
    add_conference('NCML', affiliation='IEEE', conference_type='National')

    body = client.get('/conference/', query_string={'affiliation': 'IEEE'}, headers=mentor_headers).get_json()
    assert [c["conference_name"] for c in body["conferences"]] == ['NCML']
    assert body["affiliations"] == ['ACM', 'IEEE']

    body = client.get('/conference/', query_string={'search': 'zzz'}, headers=mentor_headers).get_json()
    assert body["message"] == "No conferences found"


def test_conference_crud(client, mentor_headers, admin_headers, mentor):
    response = client.post('/conference/add_conference', headers=mentor_headers, data={
        'conference_name': 'International Conference on Robotics',
        'conference_shortform': 'ICR', 'submission_due_date': '2030-05-01',
    })
    assert response.status_code == 201
    conference = Conference.find(response.get_json()["id"])
    assert conference.created_by == mentor.id

    response = client.put(f'/conference/update_conference/{conference.id}', headers=mentor_headers,
                          data={'conference_name': 'ICR 2030'})
    assert response.status_code == 200
    assert Conference.find(conference.id).conference_name == 'ICR 2030'

    url = f'/conference/delete_conference/{conference.id}'
    assert client.delete(url, headers=mentor_headers).status_code == 403
    assert client.delete(url, headers=admin_headers).status_code == 200


def test_conference_name_is_required(client, mentor_headers):
    response = client.post('/conference/add_conference', headers=mentor_headers, data={'affiliation': 'ACM'})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Missing required fields: conference_name"


def test_journal_filters_and_order(client, mentor_headers):
    add_journal('Science', publisher='AAAS', acceptance_frequency='Monthly')
    add_journal('Nature', publisher='Springer', acceptance_frequency='Weekly')
    add_journal('Cell', publisher='Elsevier', acceptance_frequency='Monthly')

    body = client.get('/journals/', headers=mentor_headers).get_json()
    assert [j["journal_name"] for j in body["journals"]] == ['Cell', 'Nature', 'Science']
    assert body["publishers"] == ['AAAS', 'Elsevier', 'Springer']

    body = client.get('/journals/', query_string={'acceptance': 'Monthly'}, headers=mentor_headers).get_json()
    assert [j["journal_name"] for j in body["journals"]] == ['Cell', 'Science']


def test_journal_crud(client, mentor_headers, admin_headers):
    response = client.post('/journals/add_journal', headers=mentor_headers,
                           json={'journal_name': 'Physical Review', 'publisher': 'APS'})
    assert response.status_code == 201
    journal_id = response.get_json()["id"]

    assert client.get(f'/journals/{journal_id}', headers=mentor_headers).get_json()["publisher"] == 'APS'
    assert client.get('/journals/4242', headers=mentor_headers).status_code == 404

    assert client.delete(f'/journals/delete_journal/{journal_id}', headers=admin_headers).status_code == 200
    assert Journal.query.count() == 0
