"""
Auth Routes

Login for the three roles. Citizens are identified by email and
provisioned on first login; admin and contractor use the configured
credentials.
"""

from flask import request, jsonify, current_app
from wastechain.auth import auth_bp
from wastechain.errors import ValidationError, AuthenticationError
from wastechain.services.accounts import find_or_create_citizen

ROLES = ('admin', 'contractor', 'citizen')

STAFF_ACCOUNTS = {
    'admin': {'id': 'admin-1', 'name': 'Admin User'},
    'contractor': {'id': 'contractor-1', 'name': 'Contractor User'},
}


def _check_staff_credentials(role, username, password):
    prefix = role.upper()
    return (username == current_app.config[f'{prefix}_USERNAME']
            and password == current_app.config[f'{prefix}_PASSWORD'])


@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    role = data.get('role')
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    
    if role not in ROLES:
        raise ValidationError(f'role must be one of: {", ".join(ROLES)}')
    
    if role == 'citizen':
        citizen = find_or_create_citizen((data.get('email') or '').strip(), username or None)
        return jsonify({
            'success': True,
            'user': {
                'id': citizen.id,
                'username': citizen.name,
                'email': citizen.email,
                'role': 'citizen',
                'name': citizen.name,
            },
        })
    
    if not _check_staff_credentials(role, username, password):
        raise AuthenticationError('Invalid credentials')
    
    account = STAFF_ACCOUNTS[role]
    return jsonify({
        'success': True,
        'user': {
            'id': account['id'],
            'username': username,
            'role': role,
            'name': account['name'],
        },
    })
