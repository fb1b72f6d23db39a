"""
API Errors

Exception types raised by the services and the JSON handlers that turn
them into HTTP responses.
"""

import logging

from flask import jsonify

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code = 500

    def __init__(self, message, payload=None):
        super().__init__(message)
        self.message = message
        self.payload = payload or {}

    def to_dict(self):
        body = dict(self.payload)
        body['error'] = self.message
        return body


class ValidationError(ApiError):
    """Missing or invalid required fields."""
    status_code = 400


class NotFound(ApiError):
    """A referenced entity does not exist."""
    status_code = 404

    def __init__(self, entity, entity_id=None):
        message = f'{entity} not found'
        if entity_id is not None:
            message = f'{entity} {entity_id} not found'
        super().__init__(message)
        self.entity = entity


class ConflictError(ApiError):
    """Duplicate or ineligible request; the message says how to proceed."""
    status_code = 400


class AuthenticationError(ApiError):
    status_code = 401


class InternalError(ApiError):
    """Storage failure."""
    status_code = 500


def register_error_handlers(app):
    """Render service errors as JSON bodies."""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'error': 'Resource not found'}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def handle_internal_error(error):
        logger.error('Unhandled error: %s', error)
        return jsonify({'error': 'Internal server error'}), 500
