from flask import jsonify, session

from . import ui_bp
from .store import THEMES, AppStore
from ..errors import ValidationError, json_body


@ui_bp.route('/state', methods=['GET'])
def get_state():
    return jsonify({'status': 'success', 'state': AppStore(session).snapshot()}), 200


@ui_bp.route('/state', methods=['PATCH'])
def update_state():
    """Update durable preferences; ephemeral flags are never stored server-side."""
    data = json_body()
    store = AppStore(session)
    if 'theme' in data:
        if data['theme'] not in THEMES:
            raise ValidationError(f"theme must be one of: {', '.join(THEMES)}")
        store.set_theme(data['theme'])
    if 'sidebarOpen' in data:
        if not isinstance(data['sidebarOpen'], bool):
            raise ValidationError('sidebarOpen must be true or false')
        store.set_sidebar_open(data['sidebarOpen'])
    return jsonify({'status': 'success', 'state': store.snapshot()}), 200
