from flask import g, jsonify, redirect, render_template, request, session, url_for

from . import core_bp
from ..auth.decorators import current_auth_state, login_required
from ..customers.service import customer_summary, list_customers
from ..errors import ProgressError
from ..extensions import db, get_supabase
from ..groups.service import LoanGroups
from ..loans.service import create_loan, list_loans
from ..models import User
from ..notifications import Notifier
from ..records import LoanStatus, LoanType

LOAN_FORM_FIELDS = ('customer_id', 'group_id', 'type', 'principal', 'interest_rate',
                    'currency', 'due_date', 'note', 'tax_rate')


@core_bp.route('/health')
def health():
    return jsonify({'status': 'ok', 'message': 'Progress API is running'})


@core_bp.route('/')
def home():
    if current_auth_state().has_session:
        return redirect(url_for('core.dashboard'))
    return redirect(url_for('auth.sign_in'))


@core_bp.route('/dashboard')
@login_required
def dashboard():
    return render_template('dashboard.html', user_id=g.user_id)


@core_bp.route('/profile')
@login_required
def profile():
    user = db.session.get(User, g.user_id)
    if user is None:
        # token outlived its account
        session.pop('token', None)
        return redirect(url_for('auth.sign_in'))
    return render_template('profile.html', user=user.to_public_dict(include_phone=True))


@core_bp.route('/analytics')
@login_required
def analytics():
    client = get_supabase()
    loans = list_loans(client, g.user_id)
    by_status = {status.value: 0 for status in LoanStatus}
    for loan in loans:
        by_status[loan.status.value] += 1
    return render_template(
        'analytics.html',
        summary=customer_summary(client, g.user_id),
        total_loans=len(loans),
        by_status=by_status,
    )


def _loan_form_page(form=None, error=None, status_code=200):
    client = get_supabase()
    groups = LoanGroups(client, g.user_id, Notifier(), enabled=True)
    page = render_template(
        'create_loan.html',
        customers=list_customers(client, g.user_id, is_active=True),
        groups=groups.groups,
        loan_types=[t.value for t in LoanType],
        form=form or {},
        error=error,
    )
    return page, status_code


@core_bp.route('/create-loan', methods=['GET', 'POST'])
@login_required
def create_loan_page():
    if request.method == 'GET':
        return _loan_form_page()

    # blank inputs mean "not given"
    data = {k: request.form[k] for k in LOAN_FORM_FIELDS if request.form.get(k, '').strip()}
    try:
        create_loan(get_supabase(), g.user_id, data)
    except ProgressError as e:
        if e.status_code >= 500:
            raise
        return _loan_form_page(form=data, error=e.message, status_code=e.status_code)
    return redirect(url_for('core.dashboard'))
