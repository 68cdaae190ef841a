from flask import current_app, g, jsonify, render_template, request

from . import customers_bp
from .service import (
    create_customer,
    customer_summary,
    delete_customer,
    get_customer_detail,
    list_customers,
    search_customers,
    update_customer,
)
from ..auth.decorators import login_required, wants_html
from ..errors import ValidationError, json_body
from ..extensions import get_supabase
from ..records import CustomerType


def _flag(value):
    if value is None or value == '':
        return None
    return value.lower() in ('1', 'true', 'yes')


@customers_bp.route('', methods=['GET'])
@login_required
def index():
    customer_type = request.args.get('type')
    if customer_type and customer_type not in {t.value for t in CustomerType}:
        raise ValidationError(f"Unknown customer type: {customer_type}")
    customers = list_customers(
        get_supabase(),
        g.user_id,
        is_active=_flag(request.args.get('active')),
        customer_type=customer_type,
        search=request.args.get('q'),
    )
    if wants_html():
        return render_template('customers.html', customers=customers)
    return jsonify({'status': 'success', 'customers': [c.to_json() for c in customers]}), 200


@customers_bp.route('', methods=['POST'])
@login_required
def create():
    customer = create_customer(get_supabase(), g.user_id, json_body())
    return jsonify({'status': 'success', 'customer': customer.to_json()}), 201


@customers_bp.route('/search', methods=['GET'])
@login_required
def search():
    term = (request.args.get('q') or '').strip()
    if not term:
        return jsonify({'status': 'success', 'customers': []}), 200
    limit = request.args.get('limit', 10, type=int)
    customers = search_customers(get_supabase(), g.user_id, term, limit=max(1, min(limit, 50)))
    return jsonify({'status': 'success', 'customers': [c.to_json() for c in customers]}), 200


@customers_bp.route('/summary', methods=['GET'])
@login_required
def summary():
    return jsonify({'status': 'success', 'summary': customer_summary(get_supabase(), g.user_id)}), 200


@customers_bp.route('/<customer_id>', methods=['GET'])
@login_required
def detail(customer_id):
    customer = get_customer_detail(get_supabase(), g.user_id, customer_id)
    return jsonify({'status': 'success', 'customer': customer}), 200


@customers_bp.route('/<customer_id>', methods=['PATCH'])
@login_required
def update(customer_id):
    customer = update_customer(get_supabase(), g.user_id, customer_id, json_body())
    return jsonify({'status': 'success', 'customer': customer.to_json()}), 200


@customers_bp.route('/<customer_id>', methods=['DELETE'])
@login_required
def delete(customer_id):
    delete_customer(get_supabase(), g.user_id, customer_id)
    current_app.logger.info(f"Customer {customer_id} deleted by user {g.user_id}")
    return jsonify({'status': 'success', 'message': 'Customer deleted'}), 200
