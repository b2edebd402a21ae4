import pytest

from repairdesk.models import Customer
from repairdesk.services import PermissionDenied, ValidationError
from repairdesk.services.customers import (bulk_import_customers, create_customer, customer_history,
                                           delete_customers, search_customers, update_customer)
from repairdesk.services.donations import record_donation


def test_create_requires_name_and_a_contact(app):
    with pytest.raises(ValidationError):
        create_customer('', 'a@example.com')
    with pytest.raises(ValidationError):
        create_customer('No Contact')
    assert create_customer('Phone Only', phone='555-0199').id is not None


def test_update_customer(customer):
    update_customer(customer, 'Jane Smith', 'jane.smith@example.com', '')
    assert customer.full_name == 'Jane Smith'
    with pytest.raises(ValidationError):
        update_customer(customer, 'Jane Smith', '', '')


def test_search_is_case_insensitive(customer):
    create_customer('Bob Stone', 'bob@example.com', '555-0123')
    assert [c.full_name for c in search_customers('JANE')] == ['Jane Doe']
    assert [c.full_name for c in search_customers('0123')] == ['Bob Stone']
    assert len(search_customers('')) == 2


def test_bulk_import_reports_duplicates_and_skips(admin, customer):
    data = '\n'.join([
        'Ann Lee,ann@example.com,555-0001',
        'Ann Again,ANN@example.com',
        'Jane Copy,Jane@Example.com',
        'just a name',
        ',missing@example.com',
        'Bo Chen,bo@example.com',
    ])
    result = bulk_import_customers(data, admin)

    assert [c.full_name for c in result.added] == ['Ann Lee', 'Bo Chen']
    assert result.duplicates == ['ANN@example.com', 'Jane@Example.com']
    assert result.skipped == 2
    assert Customer.query.count() == 3


def test_bulk_import_accepts_lines(admin):
    result = bulk_import_customers(['Cy,cy@example.com'], admin)
    assert len(result.added) == 1


def test_bulk_import_needs_input(admin):
    with pytest.raises(ValidationError) as exc:
        bulk_import_customers('   \n  ', admin)
    assert exc.value.title == 'No Input'


def test_bulk_import_is_admin_only(technician):
    with pytest.raises(PermissionDenied):
        bulk_import_customers('Ann,ann@example.com', technician)


def test_bulk_delete(admin, technician, customer):
    other = create_customer('Bob', 'bob@example.com')
    keep = create_customer('Cy', 'cy@example.com')

    with pytest.raises(PermissionDenied):
        delete_customers([customer.id, other.id], technician)

    assert delete_customers([customer.id, other.id], admin) == 2
    assert [c.id for c in Customer.query.all()] == [keep.id]


def test_history_lists_repairs_and_donations(make_repair, admin, customer):
    make_repair()
    record_donation(customer, 'Tablet', 'Samsung', 'Tab S6', '', admin)
    repairs, donations = customer_history(customer)
    assert len(repairs) == 1
    assert donations[0].received_by == admin.email


def test_donation_is_admin_only(customer, technician):
    with pytest.raises(PermissionDenied):
        record_donation(customer, 'Tablet', 'Samsung', 'Tab S6', '', technician)


def test_same_email_twice_in_one_batch(admin):
    result = bulk_import_customers(['Ann,ann@x.com,555-1111', 'Ann,ann@x.com,555-2222'], admin)
    assert len(result.added) == 1
    assert result.duplicates == ['ann@x.com']
    assert Customer.query.one().phone == '555-1111'


def test_bulk_import_passes_over_blank_lines(admin):
    result = bulk_import_customers('Ann,ann@example.com\n\n   \nBo,bo@example.com\n', admin)
    assert len(result.added) == 2
    assert result.skipped == 0
