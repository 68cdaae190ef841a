from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app
from jwt import InvalidTokenError

ALGORITHM = 'HS256'


def _jwt_secret():
    return current_app.config.get('JWT_SECRET') or current_app.config['SECRET_KEY']


def create_token(user_id, now=None):
    """Sign a session token for ``user_id`` valid for ``JWT_EXPIRES_DAYS`` days."""
    now = now or datetime.now(timezone.utc)
    days = current_app.config.get('JWT_EXPIRES_DAYS', 7)
    payload = {
        'userId': user_id,
        'iat': int(now.timestamp()),
        'exp': int((now + timedelta(days=days)).timestamp()),
    }
    return jwt.encode(payload, _jwt_secret(), algorithm=ALGORITHM)


def decode_token(token):
    return jwt.decode(token, _jwt_secret(), algorithms=[ALGORITHM])


def verify_token(token):
    """Return the user id bound to ``token``; raises ``InvalidTokenError`` when bad or expired."""
    claims = decode_token(token)
    user_id = claims.get('userId')
    if user_id is None:
        raise InvalidTokenError('token carries no userId')
    return user_id
