# menuplanner/api/decorators.py
import logging
from functools import wraps

from flask import jsonify, request

from menuplanner import constants
from menuplanner.errors import ValidationError
from menuplanner.services import AuthService, connection_scope

logger = logging.getLogger(__name__)


def bearer_token():
    """Token part of an ``Authorization: Bearer <token>`` header, or None."""
    parts = request.headers.get('Authorization', '').split()
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        return None
    return parts[1]


def api_key_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        token = bearer_token()
        if not token:
            logger.info("Authorization header missing")
            return jsonify({
                'code': constants.E_UNAUTHORIZED,
                'message': constants.E_UNAUTHORIZED_MSG,
                'data': None,
            }), 401
        logger.debug("Validating API key [%s...]", token[:10])
        with connection_scope() as session:
            AuthService.validate_api_key(session, token)
        return view(*args, **kwargs)
    return wrapper


def json_body():
    """Request JSON as a dict; anything else is rejected before it reaches a service."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", code=constants.E_INVALIDDATA,
                              message=constants.E_INVALIDDATA_MSG)
    return data


def respond(result, status=None):
    return jsonify(result.to_dict()), status or result.status
