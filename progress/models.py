from datetime import datetime

import bcrypt
from flask import current_app

from .extensions import db

# rounds -> hash checked when the email is unknown, so both login failures cost the same
_dummy_hashes = {}


def _rounds():
    return current_app.config.get('BCRYPT_ROUNDS', 10)


def dummy_hash():
    rounds = _rounds()
    if rounds not in _dummy_hashes:
        _dummy_hashes[rounds] = hash_password('progress-dummy-password', rounds=rounds)
    return _dummy_hashes[rounds]


def hash_password(password, rounds=None):
    rounds = rounds or _rounds()
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def check_password(password, password_hash):
    """Return True when ``password`` matches ``password_hash``.

    A malformed stored hash raises ``ValueError``; that is a data fault, not a wrong password.
    """
    return bcrypt.checkpw(password.encode('utf-8'), (password_hash or dummy_hash()).encode('utf-8'))


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password = db.Column(db.String(128), nullable=False)
    display_name = db.Column(db.String(120))
    phone_number = db.Column(db.String(32))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def set_password(self, password):
        self.password = hash_password(password)

    def check_password(self, password):
        return check_password(password, self.password)

    def to_public_dict(self, include_phone=False):
        data = {
            'id': self.id,
            'email': self.email,
            'displayName': self.display_name,
        }
        if include_phone:
            data['phoneNumber'] = self.phone_number
        return data

    def __repr__(self):
        return f"<User {self.id} {self.email}>"
