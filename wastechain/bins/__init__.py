"""
Bins Blueprint
"""

from flask import Blueprint

bins_bp = Blueprint('bins', __name__)

from wastechain.bins import routes  # noqa: E402, F401
