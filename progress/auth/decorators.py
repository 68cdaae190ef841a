from dataclasses import dataclass
from enum import Enum
from functools import wraps
from typing import Optional

from flask import current_app, g, jsonify, redirect, render_template, request, session, url_for

from .tokens import InvalidTokenError, verify_token


class GuardDecision(Enum):
    LOADING = 'loading'
    ALLOW = 'allow'
    REDIRECT = 'redirect'


@dataclass
class AuthState:
    loading: bool = False
    user_id: Optional[int] = None

    @property
    def has_session(self):
        return self.user_id is not None


def evaluate_guard(state):
    if state.loading:
        return GuardDecision.LOADING
    if state.has_session:
        return GuardDecision.ALLOW
    return GuardDecision.REDIRECT


def bearer_token():
    authz = request.headers.get('Authorization', '')
    if authz.lower().startswith('bearer '):
        return authz[7:].strip() or None
    return None


def current_auth_state():
    """Resolve the session from the bearer header, falling back to the browser session."""
    token = bearer_token() or session.get('token')
    if not token:
        return AuthState()
    try:
        return AuthState(user_id=verify_token(token))
    except InvalidTokenError as e:
        current_app.logger.info(f"Rejected session token: {e}")
        return AuthState()


def wants_html():
    return bearer_token() is None and request.accept_mimetypes.accept_html and not request.is_json


def login_required(view_func):
    """Let the view run only with a valid session; otherwise send the caller to sign-in."""
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        state = current_auth_state()
        decision = evaluate_guard(state)
        if decision is GuardDecision.LOADING:
            return render_template('loading.html')
        if decision is GuardDecision.REDIRECT:
            if wants_html():
                # Preserve original destination for the post-login redirect
                return redirect(url_for('auth.sign_in', next=request.full_path.rstrip('?')))
            return jsonify({'status': 'error', 'message': 'Authentication required'}), 401
        g.user_id = state.user_id
        return view_func(*args, **kwargs)
    return wrapper
