from flask import g, jsonify, request

from . import groups_bp
from .service import LoanGroups
from ..auth.decorators import login_required
from ..extensions import get_supabase
from ..notifications import Notifier


@groups_bp.route('', methods=['GET'])
@login_required
def list_groups():
    """List the caller's groups, newest first; ``?selected=<id>`` resolves one of them."""
    notifier = Notifier()
    groups = LoanGroups(get_supabase(), g.user_id, notifier, enabled=True)
    selected = request.args.get('selected')
    if selected:
        groups.select(selected)
    failed = any(m['level'] == 'error' for m in notifier.messages)
    body = {
        'status': 'error' if failed else 'success',
        'groups': [grp.to_json() for grp in groups.groups],
        'selected_group': groups.selected_group.to_json() if groups.selected_group else None,
        'notifications': notifier.drain(),
    }
    return jsonify(body), 502 if failed else 200
