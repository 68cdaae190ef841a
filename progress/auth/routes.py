from urllib.parse import urlparse

from flask import current_app, g, jsonify, redirect, render_template, request, session, url_for
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from . import auth_bp
from .decorators import login_required
from .tokens import create_token
from ..errors import AuthenticationError, DataError, json_body
from ..extensions import db
from ..models import User, check_password
from ..records import EMAIL_RE

INVALID_CREDENTIALS = 'Invalid email or password'
EMAIL_TAKEN = 'User already exists with this email'
# bcrypt only looks at the first 72 bytes and refuses longer input
MAX_PASSWORD_BYTES = 72


def _payload():
    if request.is_json:
        return json_body()
    return request.form


def _normalize_email(email):
    if not isinstance(email, str):
        return ''
    return email.strip().lower()


def _text(value):
    return value if isinstance(value, str) and value.strip() else None


def authenticate(email, password):
    """Return the user owning these credentials.

    Unknown email and wrong password raise the same ``AuthenticationError``; a
    database or hashing fault raises ``DataError``.
    """
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise AuthenticationError(INVALID_CREDENTIALS)
    try:
        user = User.query.filter_by(email=email).first()
        # unknown emails still pay for one bcrypt comparison
        valid = check_password(password, user.password if user else None)
    except (SQLAlchemyError, ValueError) as e:
        current_app.logger.exception(f"Login error for {email}")
        raise DataError('Failed to login', technical=str(e)) from e
    if user is None or not valid:
        raise AuthenticationError(INVALID_CREDENTIALS)
    return user


def _safe_next(target):
    """Only same-site relative paths are honoured as post-login destinations."""
    if not target or not target.startswith('/') or target.startswith('//'):
        return None
    parsed = urlparse(target)
    if parsed.scheme or parsed.netloc:
        return None
    return target


@auth_bp.route('/register', methods=['POST'])
def register():
    data = _payload()
    email = _normalize_email(data.get('email'))
    password = data.get('password')
    password = password if isinstance(password, str) else ''
    if not email or not password:
        return jsonify({'status': 'error', 'message': 'Email and password required'}), 400
    if not EMAIL_RE.match(email):
        return jsonify({'status': 'error', 'message': 'Invalid email'}), 400
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        return jsonify({'status': 'error', 'message': f'Password must be at most {MAX_PASSWORD_BYTES} bytes'}), 400

    try:
        if User.query.filter_by(email=email).first() is not None:
            return jsonify({'status': 'error', 'message': EMAIL_TAKEN}), 400

        user = User(
            email=email,
            display_name=_text(data.get('displayName')),
            phone_number=_text(data.get('phoneNumber')),
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
    except IntegrityError:
        # lost a race with a concurrent registration for the same email
        db.session.rollback()
        return jsonify({'status': 'error', 'message': EMAIL_TAKEN}), 400
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Registration error')
        return jsonify({'status': 'error', 'message': 'Failed to register user'}), 500

    current_app.logger.info(f"Registered user {user.id}")
    return jsonify({
        'status': 'success',
        'message': 'User registered successfully',
        'token': create_token(user.id),
        'user': user.to_public_dict(),
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = _payload()
    email = _normalize_email(data.get('email'))
    password = data.get('password')
    password = password if isinstance(password, str) else ''
    if not email or not password:
        return jsonify({'status': 'error', 'message': 'Email and password required'}), 400

    user = authenticate(email, password)
    token = create_token(user.id)
    session['token'] = token
    return jsonify({
        'status': 'success',
        'message': 'Login successful',
        'token': token,
        'user': user.to_public_dict(include_phone=True),
    }), 200


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    user = db.session.get(User, g.user_id)
    if user is None:
        return jsonify({'status': 'error', 'message': 'Authentication required'}), 401
    return jsonify({'status': 'success', 'user': user.to_public_dict(include_phone=True)}), 200


@auth_bp.route('/sign-in', methods=['GET', 'POST'])
def sign_in():
    next_url = _safe_next(request.values.get('next'))
    if request.method == 'GET':
        return render_template('sign_in.html', next=next_url)

    email = _normalize_email(request.form.get('email'))
    password = request.form.get('password') or ''
    if not email or not password:
        return render_template('sign_in.html', next=next_url, error='Email and password required'), 400
    try:
        user = authenticate(email, password)
    except AuthenticationError as e:
        return render_template('sign_in.html', next=next_url, error=e.message), 401
    session['token'] = create_token(user.id)
    return redirect(next_url or url_for('core.dashboard'))


@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    """Forget the browser session; issued tokens stay valid until they expire."""
    session.pop('token', None)
    if request.method == 'GET' or (request.accept_mimetypes.accept_html and not request.is_json):
        return redirect(url_for('auth.sign_in'))
    return jsonify({'status': 'success', 'message': 'Logged out'}), 200
