from flask import current_app, g, jsonify, request

from . import loans_bp
from .service import create_loan, get_loan, list_loans
from ..auth.decorators import login_required
from ..errors import ValidationError, json_body
from ..extensions import get_supabase
from ..records import LoanStatus


@loans_bp.route('', methods=['GET'])
@login_required
def index():
    status = request.args.get('status')
    if status and status not in LoanStatus.__members__:
        raise ValidationError(f"Unknown loan status: {status}")
    loans = list_loans(get_supabase(), g.user_id, status=status,
                       customer_id=request.args.get('customer_id'))
    return jsonify({'status': 'success', 'loans': [loan.to_json() for loan in loans]}), 200


@loans_bp.route('', methods=['POST'])
@login_required
def create():
    loan = create_loan(get_supabase(), g.user_id, json_body())
    current_app.logger.info(f"Loan {loan.id} created by user {g.user_id} ({loan.status.value})")
    return jsonify({'status': 'success', 'loan': loan.to_json()}), 201


@loans_bp.route('/<loan_id>', methods=['GET'])
@login_required
def detail(loan_id):
    return jsonify({'status': 'success', 'loan': get_loan(get_supabase(), g.user_id, loan_id).to_json()}), 200
