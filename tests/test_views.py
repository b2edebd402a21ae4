from repairdesk.models import Repair
from repairdesk.services.repairs import change_status


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json()['status'] == 'healthy'


def test_dashboard_requires_login(client):
    response = client.get('/dashboard/')
    assert response.status_code == 302
    assert '/auth/login' in response.headers['Location']


def test_public_status_page(client, make_repair, admin):
    repair = make_repair()
    change_status(repair, 'Ready', admin)
    response = client.get(f'/repair-status/{repair.public_token}')
    assert response.status_code == 200
    assert b'ready for pickup' in response.data
    assert b'To Be Determined' in response.data


def test_public_status_unknown_token(client):
    response = client.get('/repair-status/nope')
    assert response.status_code == 404
    assert b'Repair not found' in response.data


def test_public_status_does_not_accept_ids(client, make_repair):
    repair = make_repair()
    assert client.get(f'/repair-status/{repair.id}').status_code == 404


def test_student_cannot_open_staff_pages(client, login_technician):
    response = client.get('/staff/technicians')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/dashboard/')


def test_admin_staff_pages(client, login_admin, technician):
    response = client.get('/staff/technicians')
    assert response.status_code == 200
    assert b'Sam Lee' in response.data
    assert client.get('/staff/admins').status_code == 200


def test_add_technician_shows_onboarding_code(client, login_admin):
    response = client.post('/staff/technicians/add', data={
        'name': 'Riya Patel', 'email': 'riya@example.com', 'phone': '',
    })
    assert response.status_code == 200
    assert b'data:image/png;base64,' in response.data
    assert b'/auth/onboard/' in response.data


def test_repair_detail_has_status_qr(client, login_admin, make_repair):
    repair = make_repair()
    response = client.get(f'/dashboard/repairs/{repair.id}')
    assert response.status_code == 200
    assert b'data:image/png;base64,' in response.data
    assert repair.public_token.encode() in response.data
    assert b'https://wa.me/15550100100' in response.data


def test_repair_detail_missing(client, login_admin):
    assert client.get('/dashboard/repairs/999').status_code == 404


def test_student_is_bounced_from_other_repairs(client, login_technician, make_repair, other_technician):
    repair = make_repair(assigned_to=other_technician)
    response = client.get(f'/dashboard/repairs/{repair.id}')
    assert response.status_code == 302


def test_student_intake_assigns_self(client, login_technician, customer):
    response = client.post('/dashboard/new-repair', data={
        'customer_id': customer.id,
        'device_type': 'Tablet',
        'brand': 'Apple',
        'model': 'iPad Air',
        'problem_notes': 'Battery drains',
        'signature': 'Jane Doe',
        'assigned_to': str(login_technician.id),
    })
    assert response.status_code == 302
    repair = Repair.query.one()
    assert repair.technician_id == login_technician.id


def test_status_update_route(client, login_admin, make_repair):
    repair = make_repair()
    response = client.post(f'/dashboard/repairs/{repair.id}/status', data={'status': 'In Progress'})
    assert response.status_code == 302
    assert Repair.query.get(repair.id).status == 'In Progress'


def test_live_snapshot_hides_admins_from_students(client, login_technician):
    assert client.get('/live/snapshot/admins').status_code == 404
    response = client.get('/live/snapshot/repairs')
    assert response.status_code == 200
    assert response.get_json()['items'] == []


def test_live_stream_sends_full_state_first(client, login_admin, app):
    response = client.get('/live/stream')
    assert response.status_code == 200
    assert response.mimetype == 'text/event-stream'

    chunks = iter(response.response)
    assert next(chunks).startswith(b'retry: ')
    assert next(chunks).startswith(b'event: technicians')
    response.close()


def test_live_stream_ends_when_account_is_deleted(client, login_technician, hub):
    from repairdesk.services.staff import delete_technician

    response = client.get('/live/stream')
    chunks = iter(response.response)
    assert next(chunks).startswith(b'retry: ')
    assert next(chunks).startswith(b'event: technicians')

    delete_technician(login_technician)
    # Rest of the opening batch, then the generator returns
    rest = list(chunks)
    assert all(not chunk.startswith(b': heartbeat') for chunk in rest)
    assert hub.subscriber_count == 0
    response.close()


def test_archive_groups_by_technician_with_donations(client, login_admin, make_repair, technician, customer):
    from repairdesk import db
    from repairdesk.services.donations import record_donation

    first = make_repair(assigned_to=technician, model='iPhone 12')
    second = make_repair(assigned_to=technician, model='iPhone 13')
    legacy = make_repair(model='Pixel 5')
    for repair in (first, second):
        change_status(repair, 'Archived', login_admin)
    # Archived before archive dates were recorded
    legacy.status = 'Archived'
    db.session.commit()
    record_donation(customer, 'Phone', 'Apple', 'iPhone 13', '', login_admin)

    response = client.get('/dashboard/archive')
    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert 'Sam Lee (2 repairs)' in html
    assert 'To Be Determined (1 repairs)' in html
    assert html.count('>Donated<') == 1
    assert html.count('>Donate</a>') == 2
    assert 'N/A' in html
    assert 'brand=Apple' in html


def test_archive_hides_donate_actions_from_students(client, login_technician, make_repair, admin):
    repair = make_repair(assigned_to=login_technician)
    change_status(repair, 'Archived', admin)
    html = client.get('/dashboard/archive').get_data(as_text=True)
    assert 'Sam Lee (1 repairs)' in html
    assert 'Donate' not in html


def test_delete_archived_repair_returns_to_archive(client, login_admin, make_repair):
    repair = make_repair()
    change_status(repair, 'Archived', login_admin)
    repair_id = repair.id

    response = client.post(f'/dashboard/repairs/{repair_id}/delete')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/dashboard/archive')
    assert Repair.query.get(repair_id) is None
