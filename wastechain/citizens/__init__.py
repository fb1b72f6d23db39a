"""
Citizens Blueprint
"""

from flask import Blueprint

citizens_bp = Blueprint('citizens', __name__)

from wastechain.citizens import routes  # noqa: E402, F401
