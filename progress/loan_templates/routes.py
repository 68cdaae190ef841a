from flask import g, jsonify

from . import loan_templates_bp
from .service import LoanTemplates
from ..auth.decorators import login_required
from ..errors import json_body
from ..extensions import get_supabase
from ..notifications import Notifier


def _templates():
    return LoanTemplates(get_supabase(), g.user_id, Notifier())


@loan_templates_bp.route('', methods=['GET'])
@login_required
def list_templates():
    templates = _templates()
    rows = templates.list()
    notifications = templates.notifier.drain()
    failed = any(m['level'] == 'error' for m in notifications)
    return jsonify({
        'status': 'error' if failed else 'success',
        'templates': [t.to_json() for t in rows],
        'notifications': notifications,
    }), 502 if failed else 200


@loan_templates_bp.route('', methods=['POST'])
@login_required
def save_template():
    data = dict(json_body())
    name = data.pop('name', '')
    if not isinstance(name, str):
        name = ''
    templates = _templates()
    ok = templates.save(data, name=name)
    status_code = 201 if ok else (502 if templates.backend_failed else 400)
    return jsonify({
        'status': 'success' if ok else 'error',
        'notifications': templates.notifier.drain(),
    }), status_code


@loan_templates_bp.route('/<template_id>', methods=['DELETE'])
@login_required
def delete_template(template_id):
    templates = _templates()
    ok = templates.delete(template_id)
    return jsonify({
        'status': 'success' if ok else 'error',
        'notifications': templates.notifier.drain(),
    }), 200 if ok else 502
