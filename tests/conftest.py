"""
RepairDesk - Test Configuration and Fixtures
"""
import pytest

from config import TestingConfig
from repairdesk import create_app, db
from repairdesk.models import Admin, Technician
from repairdesk.services.customers import create_customer
from repairdesk.services.repairs import create_repair
from repairdesk.sync.events import HUB_EXTENSION
from repairdesk.utils.lifecycle import UNASSIGNED

PASSWORD = 'correct-horse'


@pytest.fixture
def app():
    """Fresh app and in-memory database for each test"""
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def hub(app):
    return app.extensions[HUB_EXTENSION]


def make_admin(email='admin@example.com', password=PASSWORD, force=False):
    admin = Admin(email=email, force_password_change=force)
    admin.set_password(password)
    db.session.add(admin)
    db.session.commit()
    return admin


def make_technician(name, email, password=PASSWORD, force=False):
    technician = Technician(name=name, email=email, force_password_change=force)
    technician.set_password(password)
    db.session.add(technician)
    db.session.commit()
    return technician


@pytest.fixture
def admin(app):
    return make_admin()


@pytest.fixture
def technician(app):
    return make_technician('Sam Lee', 'sam@example.com')


@pytest.fixture
def other_technician(app):
    return make_technician('Riya Patel', 'riya@example.com')


@pytest.fixture
def customer(app):
    return create_customer('Jane Doe', 'jane@example.com', '+1 (555) 010-0100')


@pytest.fixture
def make_repair(customer, admin):
    """Factory: open a ticket for the default customer"""
    def _make_repair(assigned_to=UNASSIGNED, brand='Apple', model='iPhone 12', actor=None):
        return create_repair(
            customer=customer,
            device_type='Phone',
            brand=brand,
            model=model,
            problem_notes='Cracked screen',
            signature='Jane Doe',
            assigned_to=assigned_to,
            accessories=['Charger'],
            actor=actor or admin,
        )
    return _make_repair


def login(client, email, password=PASSWORD, role='Admin'):
    return client.post('/auth/login', data={
        'role': role,
        'email': email,
        'password': password,
    })


@pytest.fixture
def login_admin(client, admin):
    login(client, admin.email)
    return admin


@pytest.fixture
def login_technician(client, technician):
    login(client, technician.email, role='Student')
    return technician
