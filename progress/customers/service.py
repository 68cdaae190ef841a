"""Customer queries against the managed ``customers`` and ``loans`` tables."""
import re
from datetime import date

from pydantic import ValidationError

from ..data import execute, fetch_one, parse_rows
from .. import errors
from ..errors import DataError, NotFoundError, from_validation_error
from ..records import Customer, CustomerFields, CustomerForm, Loan, LoanStatus

SEARCH_COLUMNS = ('company_name', 'first_name', 'last_name', 'email')


def _search_filter(term):
    # PostgREST uses commas and parentheses as or() syntax
    term = re.sub(r'[,()]', ' ', term).strip()
    return ','.join(f"{col}.ilike.%{term}%" for col in SEARCH_COLUMNS)


def list_customers(client, user_id, is_active=None, customer_type=None, search=None):
    query = client.table('customers').select('*').eq('user_id', user_id)
    if is_active is not None:
        query = query.eq('is_active', is_active)
    if customer_type:
        query = query.eq('customer_type', customer_type)
    if search:
        query = query.or_(_search_filter(search))
    rows = execute(query.order('created_at', desc=True))
    return parse_rows(Customer, rows)


def search_customers(client, user_id, term, limit=10):
    """Active customers matching ``term``, for autocomplete."""
    rows = execute(
        client.table('customers')
        .select('*')
        .eq('user_id', user_id)
        .eq('is_active', True)
        .or_(_search_filter(term))
        .limit(limit)
    )
    return parse_rows(Customer, rows)


def get_customer(client, user_id, customer_id):
    row = fetch_one(
        client.table('customers').select('*').eq('id', customer_id).eq('user_id', user_id),
        'Customer',
    )
    return Customer.model_validate(row)


def get_customer_detail(client, user_id, customer_id, today=None):
    """The customer plus loan counts: total, paid, and overdue (unpaid past due date)."""
    customer = get_customer(client, user_id, customer_id)
    rows = execute(
        client.table('loans')
        .select('*')
        .eq('customer_id', customer_id)
        .eq('user_id', user_id)
    )
    loans = parse_rows(Loan, rows)
    today = today or date.today()
    detail = customer.to_json()
    detail.update({
        'total_loans': len(loans),
        'paid_loans': sum(1 for loan in loans if loan.status == LoanStatus.PAID),
        'overdue_loans': sum(1 for loan in loans if loan.is_overdue(today)),
    })
    return detail


def create_customer(client, user_id, data):
    try:
        form = CustomerForm.model_validate(data)
    except ValidationError as e:
        raise from_validation_error(e) from e
    rows = execute(
        client.table('customers').insert({
            'user_id': user_id,
            **form.model_dump(mode='json', exclude_none=True),
        })
    )
    if not rows:
        raise DataError('No data returned from query')
    return Customer.model_validate(rows[0])


def customer_summary(client, user_id):
    rows = execute(
        client.table('customers')
        .select('is_active,total_credit_issued,outstanding_balance')
        .eq('user_id', user_id)
    )
    return {
        'totalCustomers': len(rows),
        'activeCustomers': sum(1 for r in rows if r.get('is_active')),
        'totalCreditIssued': sum(r.get('total_credit_issued') or 0 for r in rows),
        'totalOutstanding': sum(r.get('outstanding_balance') or 0 for r in rows),
    }


def update_customer(client, user_id, customer_id, data):
    """Apply a partial update to one of the user's customers.

    The merged record must still be a valid customer, so a company cannot lose
    its name and an individual cannot lose a first name.
    """
    changes = {k: v for k, v in data.items() if k in CustomerFields.model_fields}
    if not changes:
        raise errors.ValidationError('No customer fields to update', code='VALIDATION_ERROR')

    current = get_customer(client, user_id, customer_id)
    merged = current.model_dump(include=set(CustomerFields.model_fields))
    merged.update(changes)
    try:
        form = CustomerForm.model_validate(merged)
    except ValidationError as e:
        raise from_validation_error(e) from e

    rows = execute(
        client.table('customers')
        .update(form.model_dump(mode='json', include=set(changes)))
        .eq('id', customer_id)
        .eq('user_id', user_id)
    )
    if not rows:
        raise NotFoundError('Customer')
    return Customer.model_validate(rows[0])


def delete_customer(client, user_id, customer_id):
    rows = execute(
        client.table('customers')
        .delete()
        .eq('id', customer_id)
        .eq('user_id', user_id)
    )
    if not rows:
        raise NotFoundError('Customer')
