"""
Tests for customer records and statistics
"""

from datetime import date

import pytest

from progress.customers.service import (
    customer_summary,
    delete_customer,
    get_customer_detail,
    list_customers,
    search_customers,
    update_customer,
)
from progress.errors import ConflictError, NotFoundError, ValidationError
from progress.records import Customer


def seed(supabase, user_id=1):
    supabase.tables['customers'] = [
        {'id': 'c1', 'user_id': user_id, 'customer_type': 'individual', 'first_name': 'Ada', 'last_name': 'Obi',
         'email': 'ada@example.com', 'credit_limit': 1000, 'outstanding_balance': 250, 'total_credit_issued': 800,
         'is_active': True, 'created_at': '2024-01-01T00:00:00+00:00'},
        {'id': 'c2', 'user_id': user_id, 'customer_type': 'company', 'company_name': 'Acme Traders',
         'credit_limit': 5000, 'outstanding_balance': 0, 'total_credit_issued': 1200,
         'is_active': False, 'created_at': '2024-02-01T00:00:00+00:00'},
        {'id': 'c3', 'user_id': 999, 'customer_type': 'company', 'company_name': 'Acme Elsewhere',
         'is_active': True, 'created_at': '2024-03-01T00:00:00+00:00'},
    ]


class TestCustomerRecord:
    def test_display_names(self):
        assert Customer(id=1, user_id=1, customer_type='company', company_name='Acme').display_name == 'Acme'
        assert Customer(id=1, user_id=1, customer_type='company').display_name == 'Unnamed Company'
        assert Customer(id=1, user_id=1, customer_type='individual', first_name='Ada').display_name == 'Ada'
        assert Customer(id=1, user_id=1, customer_type='individual').display_name == 'Unnamed Customer'

    def test_credit_helpers(self):
        customer = Customer(id=1, user_id=1, customer_type='individual', credit_limit=1000, outstanding_balance=1250)
        assert customer.credit_utilization == 125
        assert customer.available_credit == 0
        assert Customer(id=1, user_id=1, customer_type='individual').credit_utilization == 0


class TestCustomerQueries:
    def test_list_newest_first_for_owner(self, supabase):
        seed(supabase)
        assert [c.id for c in list_customers(supabase, 1)] == ['c2', 'c1']

    def test_list_filters(self, supabase):
        seed(supabase)
        assert [c.id for c in list_customers(supabase, 1, is_active=True)] == ['c1']
        assert [c.id for c in list_customers(supabase, 1, customer_type='company')] == ['c2']
        assert [c.id for c in list_customers(supabase, 1, search='ACME')] == ['c2']

    def test_search_only_active(self, supabase):
        seed(supabase)
        assert search_customers(supabase, 1, 'acme') == []
        assert [c.id for c in search_customers(supabase, 1, 'ada')] == ['c1']
        assert supabase.calls[-1].limit_count == 10

    def test_search_term_cannot_inject_filters(self, supabase):
        seed(supabase)
        search_customers(supabase, 1, 'ada,email.ilike.%')
        # one clause per searched column, nothing smuggled in
        assert len(supabase.calls[-1].or_filters[0].split(',')) == 4

    def test_detail_counts_loans(self, supabase):
        seed(supabase)
        supabase.tables['loans'] = [
            {'id': 'l1', 'user_id': 1, 'customer_id': 'c1', 'type': 'personal', 'principal': 100,
             'status': 'PAID', 'due_date': '2024-01-10'},
            {'id': 'l2', 'user_id': 1, 'customer_id': 'c1', 'type': 'personal', 'principal': 100,
             'status': 'ACTIVE', 'due_date': '2024-01-10'},
            {'id': 'l3', 'user_id': 1, 'customer_id': 'c1', 'type': 'personal', 'principal': 100,
             'status': 'ACTIVE', 'due_date': '2030-01-10'},
            {'id': 'l4', 'user_id': 1, 'customer_id': 'c1', 'type': 'personal', 'principal': 100,
             'status': 'PENDING'},
        ]

        detail = get_customer_detail(supabase, 1, 'c1', today=date(2025, 1, 1))

        assert detail['display_name'] == 'Ada Obi'
        assert (detail['total_loans'], detail['paid_loans'], detail['overdue_loans']) == (4, 1, 1)

    def test_detail_of_someone_elses_customer(self, supabase):
        seed(supabase)
        with pytest.raises(NotFoundError):
            get_customer_detail(supabase, 1, 'c3')

    def test_summary(self, supabase):
        seed(supabase)
        assert customer_summary(supabase, 1) == {
            'totalCustomers': 2,
            'activeCustomers': 1,
            'totalCreditIssued': 2000,
            'totalOutstanding': 250,
        }


class TestCustomerEndpoints:
    def test_create_company(self, client, supabase, auth_headers, user_id):
        resp = client.post('/customers', json={
            'customer_type': 'company',
            'company_name': 'Blue Ridge Ltd',
            'credit_limit': 10000,
            'payment_terms': 'Net 60',
        }, headers=auth_headers)

        assert resp.status_code == 201
        customer = resp.get_json()['customer']
        assert customer['display_name'] == 'Blue Ridge Ltd'
        assert customer['is_active'] is True
        assert supabase.tables['customers'][0]['user_id'] == user_id

    def test_create_rejects_company_without_name(self, client, supabase, auth_headers):
        resp = client.post('/customers', json={'customer_type': 'company'}, headers=auth_headers)

        assert resp.status_code == 400
        assert 'company_name' in resp.get_json()['message']
        assert supabase.calls == []

    def test_create_rejects_unknown_payment_terms(self, client, auth_headers):
        resp = client.post('/customers', json={
            'customer_type': 'individual', 'first_name': 'Ada', 'payment_terms': 'Net 45',
        }, headers=auth_headers)
        assert resp.status_code == 400

    def test_list_and_detail(self, client, supabase, auth_headers, user_id):
        seed(supabase, user_id=user_id)

        listed = client.get('/customers?active=true', headers=auth_headers).get_json()['customers']
        assert [c['id'] for c in listed] == ['c1']

        assert client.get('/customers/c1', headers=auth_headers).status_code == 200
        missing = client.get('/customers/c3', headers=auth_headers)
        assert missing.status_code == 404
        assert missing.get_json()['message'] == 'Customer not found.'

    def test_unknown_type_filter(self, client, auth_headers):
        assert client.get('/customers?type=robot', headers=auth_headers).status_code == 400

    def test_summary_endpoint(self, client, supabase, auth_headers, user_id):
        seed(supabase, user_id=user_id)
        summary = client.get('/customers/summary', headers=auth_headers).get_json()['summary']
        assert summary['totalCustomers'] == 2

    def test_backend_error_mapped(self, client, supabase, auth_headers):
        from postgrest.exceptions import APIError
        supabase.fail('customers', APIError({'message': 'permission denied', 'code': '42501'}))

        resp = client.get('/customers', headers=auth_headers)

        assert resp.status_code == 500
        assert resp.get_json()['message'] == "You don't have permission to perform this action."

    def test_non_object_body(self, client, supabase, auth_headers):
        resp = client.post('/customers', json=['company'], headers=auth_headers)
        assert resp.status_code == 400
        assert supabase.calls == []

    def test_browser_gets_customer_page(self, client, supabase, register):
        register(email='page@example.com', password='Secret123!')
        client.post('/sign-in', data={'email': 'page@example.com', 'password': 'Secret123!'})
        user_id = client.get('/me').get_json()['user']['id']
        seed(supabase, user_id=user_id)

        resp = client.get('/customers', headers={'Accept': 'text/html'})

        assert resp.status_code == 200
        assert b'Ada Obi' in resp.data
        assert b'Acme Elsewhere' not in resp.data

    def test_patch_and_delete(self, client, supabase, auth_headers, user_id):
        seed(supabase, user_id=user_id)

        resp = client.patch('/customers/c1', json={'is_active': False}, headers=auth_headers)
        assert resp.status_code == 200
        assert resp.get_json()['customer']['is_active'] is False

        resp = client.delete('/customers/c2', headers=auth_headers)
        assert resp.status_code == 200
        assert [c['id'] for c in supabase.tables['customers']] == ['c1', 'c3']

    def test_patch_and_delete_other_owner(self, client, supabase, auth_headers, user_id):
        seed(supabase, user_id=user_id)

        assert client.patch('/customers/c3', json={'notes': 'mine now'}, headers=auth_headers).status_code == 404
        assert client.delete('/customers/c3', headers=auth_headers).status_code == 404
        assert 'notes' not in supabase.tables['customers'][2]


class TestCustomerChanges:
    def test_update_sends_only_changed_fields(self, supabase):
        seed(supabase)

        customer = update_customer(supabase, 1, 'c1', {'credit_limit': 2500, 'unknown': 'x'})

        assert customer.credit_limit == 2500
        update = supabase.calls_for('customers', 'update')[0]
        assert update.payload == {'credit_limit': 2500.0}
        assert update.filters == [('id', 'c1'), ('user_id', 1)]

    def test_update_keeps_record_valid(self, supabase):
        seed(supabase)

        with pytest.raises(ValidationError):
            update_customer(supabase, 1, 'c2', {'company_name': ''})
        with pytest.raises(ValidationError):
            update_customer(supabase, 1, 'c1', {'customer_type': 'company'})
        assert supabase.calls_for('customers', 'update') == []

    def test_update_without_known_fields(self, supabase):
        seed(supabase)
        with pytest.raises(ValidationError):
            update_customer(supabase, 1, 'c1', {'id': 'c9'})
        assert supabase.calls == []

    def test_update_someone_elses_customer(self, supabase):
        seed(supabase)
        with pytest.raises(NotFoundError):
            update_customer(supabase, 1, 'c3', {'notes': 'x'})
        assert supabase.calls_for('customers', 'update') == []

    def test_delete_filters_by_owner(self, supabase):
        seed(supabase)

        with pytest.raises(NotFoundError):
            delete_customer(supabase, 1, 'c3')

        assert len(supabase.tables['customers']) == 3
        assert supabase.calls_for('customers', 'delete')[0].filters == [('id', 'c3'), ('user_id', 1)]

    def test_delete_customer_with_loans(self, supabase):
        from postgrest.exceptions import APIError
        seed(supabase)
        supabase.fail('customers', APIError({'message': 'violates foreign key', 'code': '23503'}))

        with pytest.raises(ConflictError) as excinfo:
            delete_customer(supabase, 1, 'c1')

        assert excinfo.value.status_code == 400
