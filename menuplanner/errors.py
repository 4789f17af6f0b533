# menuplanner/errors.py
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from . import constants

logger = logging.getLogger(__name__)


class Result:
    """Uniform success envelope returned by every data-access call."""

    def __init__(self, data=None, code=constants.I_SUCCESS, message=constants.I_SUCCESS_MSG, status=200):
        self.data = data
        self.code = code
        self.message = message
        self.status = status

    def to_dict(self):
        return {'code': self.code, 'message': self.message, 'data': self.data}

    def __repr__(self):
        return f"<Result(status={self.status}, code={self.code})>"


class DataAccessError(Exception):
    """Base for every structured failure.

    ``data`` only ever carries user-facing detail. Driver messages stay on the
    chained exception and in the logs.
    """

    status = 500
    code = constants.E_DBERROR
    message = constants.E_DBERROR_MSG

    def __init__(self, data=None, code=None, message=None, status=None):
        super().__init__(message or self.message)
        self.data = data
        if code is not None:
            self.code = code
        if message is not None:
            self.message = message
        if status is not None:
            self.status = status

    def to_dict(self):
        return {'code': self.code, 'message': self.message, 'data': self.data}


class ValidationError(DataAccessError):
    status = 400
    code = constants.E_INVALIDDATA
    message = constants.E_INVALIDDATA_MSG


class NotFoundError(DataAccessError):
    status = 404
    code = constants.E_NOTFOUND
    message = constants.E_NOTFOUND_MSG


class DuplicateKeyError(DataAccessError):
    status = 400
    code = constants.E_DUPLICATE
    message = constants.E_DUPLICATE_MSG


class AuthFailedError(DataAccessError):
    status = 403
    code = constants.E_USER_AUTH_FAILED
    message = constants.E_USER_AUTH_FAILED_MSG


class UserNotFoundError(DataAccessError):
    status = 401
    code = constants.E_USER_NOT_FOUND
    message = constants.E_USER_NOT_FOUND_MSG


class DatabaseError(DataAccessError):
    pass


def register_error_handlers(app):
    """Map structured errors onto HTTP responses."""

    @app.errorhandler(DataAccessError)
    def handle_data_access_error(err):
        if err.status >= 500:
            logger.error("%s: %s", err.code, err.message, exc_info=err.__cause__)
        return jsonify(err.to_dict()), err.status

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        if err.code == 404:
            return jsonify(NotFoundError().to_dict()), 404
        return jsonify({'code': err.name, 'message': err.description, 'data': None}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        logger.exception("Unhandled error")
        return jsonify(DatabaseError().to_dict()), 500
