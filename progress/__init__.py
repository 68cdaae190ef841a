import logging
import urllib.parse

from flask import Flask, request, session

from .config import DEFAULT_SECRET, Config


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    if not app.testing and (app.config.get('JWT_SECRET') or app.config.get('SECRET_KEY')) == DEFAULT_SECRET:
        app.logger.warning('Session tokens are signed with the default secret; set JWT_SECRET')

    from .extensions import db, init_supabase
    db.init_app(app)
    init_supabase(app)

    from .errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from .auth import auth_bp
    from .core import core_bp
    from .customers import customers_bp
    from .groups import groups_bp
    from .loan_templates import loan_templates_bp
    from .loans import loans_bp
    from .ui import ui_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(core_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(groups_bp)
    app.register_blueprint(loan_templates_bp)
    app.register_blueprint(loans_bp)
    app.register_blueprint(ui_bp)

    from .cli import register_cli
    register_cli(app)

    from .ui.navigation import build_nav
    from .ui.store import AppStore

    @app.context_processor
    def inject_ui():
        return {'nav_items': build_nav(request.path), 'ui': AppStore(session).snapshot()}

    with app.app_context():
        db.create_all()

    return app


def list_routes(app):
    """Print all registered routes with their endpoint and methods."""
    output = []
    for rule in app.url_map.iter_rules():
        methods = ','.join(sorted(rule.methods))
        line = urllib.parse.unquote(f"{rule.endpoint:30s} {methods:25s} {rule}")
        output.append(line)
    for line in sorted(output):
        print(line)
