"""
Contractors Blueprint
"""

from flask import Blueprint

contractors_bp = Blueprint('contractors', __name__)

from wastechain.contractors import routes  # noqa: E402, F401
