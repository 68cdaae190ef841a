from flask import Blueprint

ui_bp = Blueprint("ui", __name__, url_prefix="/ui")

from . import routes  # noqa: E402,F401
