from urllib.parse import unquote

import pytest

from repairdesk.services import ValidationError
from repairdesk.services.auth import (authenticate, load_account, load_onboarding_token,
                                      make_onboarding_token)
from repairdesk.services.staff import reset_password
from .conftest import PASSWORD, login, make_admin


def test_api_login_ignores_email_case(client, admin):
    response = client.post('/api/login', json={'email': 'Admin@Example.com', 'password': PASSWORD})
    assert response.status_code == 200
    assert response.get_json() == {'success': True, 'forcePasswordChange': False}


def test_api_login_unknown_email_and_wrong_password_look_the_same(client, admin):
    unknown = client.post('/api/login', json={'email': 'ghost@example.com', 'password': PASSWORD})
    wrong = client.post('/api/login', json={'email': admin.email, 'password': 'nope'})
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.get_json() == wrong.get_json() == {'message': 'Invalid credentials.'}


def test_api_login_rejects_malformed_body(client):
    assert client.post('/api/login', data='not json').status_code == 400
    assert client.post('/api/login', json={'email': 'a@example.com'}).status_code == 400


def test_api_login_reports_forced_change(client, app):
    make_admin('new@example.com', force=True)
    response = client.post('/api/login', json={'email': 'new@example.com', 'password': PASSWORD})
    assert response.get_json()['forcePasswordChange'] is True
    # Parked, not logged in
    assert client.get('/dashboard/').status_code == 302


def test_student_form_login(client, technician):
    response = login(client, 'SAM@example.com', role='Student')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/dashboard/')


def test_role_must_match_account_table(client, technician):
    response = login(client, technician.email, role='Admin')
    assert response.status_code == 200
    assert b'Invalid Credentials' in response.data


def test_forced_password_change_flow(client, app):
    make_admin('new@example.com', force=True)
    response = login(client, 'new@example.com')
    assert response.headers['Location'].endswith('/auth/change-password')

    mismatch = client.post('/auth/change-password', data={
        'new_password': 'brand-new-pw', 'confirm_password': 'other-pw',
    })
    assert mismatch.status_code == 200

    done = client.post('/auth/change-password', data={
        'new_password': 'brand-new-pw', 'confirm_password': 'brand-new-pw',
    })
    assert done.status_code == 302
    assert 'email=new@example.com' in unquote(done.headers['Location'])

    account = authenticate('Admin', 'new@example.com', 'brand-new-pw')
    assert account is not None
    assert account.force_password_change is False


def test_change_password_without_session_redirects(client):
    response = client.get('/auth/change-password')
    assert response.headers['Location'].endswith('/auth/login')


def test_load_account_prefixes(admin, technician):
    assert load_account(admin.get_id()) is admin
    assert load_account(technician.get_id()) is technician
    assert load_account(f'admin:{technician.id + 100}') is None
    assert load_account('garbage') is None


def test_onboarding_token_roundtrip_without_password(technician):
    temp_password = reset_password(technician)
    token = make_onboarding_token(technician)
    assert temp_password not in token
    assert load_onboarding_token(token) is technician


def test_onboarding_token_expires(technician):
    token = make_onboarding_token(technician)
    with pytest.raises(ValidationError) as exc:
        load_onboarding_token(token, max_age=-1)
    assert exc.value.title == 'Link Expired'


def test_onboarding_token_invalid_after_password_reset(technician):
    token = make_onboarding_token(technician)
    reset_password(technician)
    with pytest.raises(ValidationError) as exc:
        load_onboarding_token(token)
    assert exc.value.title == 'Invalid Link'


def test_onboard_link_prefills_login(client, technician):
    token = make_onboarding_token(technician)
    response = client.get(f'/auth/onboard/{token}')
    assert response.status_code == 302
    location = unquote(response.headers['Location'])
    assert 'email=sam@example.com' in location
    assert 'role=Student' in location
    assert 'password' not in location


def test_onboard_link_tampered(client, technician):
    response = client.get('/auth/onboard/not-a-token')
    assert response.headers['Location'].endswith('/auth/login')


def test_logout(client, login_admin):
    assert client.get('/dashboard/').status_code == 200
    client.get('/auth/logout')
    assert client.get('/dashboard/').status_code == 302
