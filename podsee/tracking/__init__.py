"""
Click tracking blueprint
"""
from flask import Blueprint

tracking_bp = Blueprint('tracking', __name__)

from podsee.tracking import routes  # noqa: E402,F401
