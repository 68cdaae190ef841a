from flask import Blueprint

loan_templates_bp = Blueprint("loan_templates", __name__, url_prefix="/templates")

from . import routes  # noqa: E402,F401
