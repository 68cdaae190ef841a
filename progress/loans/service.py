from pydantic import ValidationError

from ..customers.service import get_customer
from ..data import execute, fetch_one, parse_rows
from ..errors import DataError, from_validation_error
from ..records import Loan, LoanForm, LoanStatus


def list_loans(client, user_id, status=None, customer_id=None):
    query = client.table('loans').select('*').eq('user_id', user_id)
    if status:
        query = query.eq('status', LoanStatus(status).value)
    if customer_id:
        query = query.eq('customer_id', customer_id)
    return parse_rows(Loan, execute(query.order('created_at', desc=True)))


def get_loan(client, user_id, loan_id):
    row = fetch_one(client.table('loans').select('*').eq('id', loan_id).eq('user_id', user_id), 'Loan')
    return Loan.model_validate(row)


def create_loan(client, user_id, data):
    """Record a new loan for one of the user's customers (and groups, for group loans)."""
    try:
        form = LoanForm.model_validate(data)
    except ValidationError as e:
        raise from_validation_error(e) from e

    get_customer(client, user_id, form.customer_id)
    if form.group_id is not None:
        fetch_one(
            client.table('groups').select('id').eq('id', form.group_id).eq('user_id', user_id),
            'Group',
        )

    rows = execute(
        client.table('loans').insert({
            'user_id': user_id,
            **form.model_dump(mode='json', exclude_none=True),
        })
    )
    if not rows:
        raise DataError('No data returned from query')
    return Loan.model_validate(rows[0])
