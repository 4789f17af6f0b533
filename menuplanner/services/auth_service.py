import logging
import secrets
import string

from flask_jwt_extended import create_access_token

from menuplanner import constants
from menuplanner.constants import Table
from menuplanner.errors import AuthFailedError, Result, UserNotFoundError, ValidationError
from menuplanner.models import ApiKey, User
from menuplanner.utils.parsing import parse_id
from .connection import transaction, translate_errors
from .record_store import RecordStore

logger = logging.getLogger(__name__)

API_KEY_ALPHABET = string.ascii_letters + string.digits


class AuthService:
    """Service class for API key and user credential checks"""

    USER_FIELDS = ('name', 'username', 'password', 'admin')
    KEY_FIELDS = ('description', 'revoked')

    @staticmethod
    def validate_api_key(session, key):
        """Return the id of a live API key.

        Revoked and unknown keys fail the same way so callers cannot tell them apart.
        """
        if not key:
            raise AuthFailedError()
        with translate_errors():
            key_id = session.query(ApiKey.id).filter(
                ApiKey.apikey == str(key),
                ApiKey.revoked == False,  # noqa: E712
            ).scalar()
        if key_id is None:
            logger.warning("Rejected API key [%s...]", str(key)[:10])
            raise AuthFailedError()
        return Result(key_id)

    @staticmethod
    def get_user_by_username(session, username):
        """Get user by username"""
        with translate_errors():
            return session.query(User).filter_by(username=username).populate_existing().first()

    @classmethod
    def validate_user_credentials(cls, session, username, password):
        """Check a username/password pair and issue a signed token"""
        if not username or not password:
            raise ValidationError("Username and password are required", code=constants.E_INFOMISSING,
                                  message=constants.E_INFOMISSING_MSG)

        user = cls.get_user_by_username(session, username)
        if user is None:
            raise UserNotFoundError()
        if not user.check_password(password):
            logger.warning("Bad password for %s", username)
            raise AuthFailedError(status=401)

        token = create_access_token(identity=user.username, additional_claims={'admin': bool(user.admin)})
        logger.info("User %s logged in", username)
        return Result(token)

    @classmethod
    def create_user(cls, session, name, username, password, admin=False):
        """Register a new user; the stored password is a hash"""
        if not name or not username or not password:
            raise ValidationError("Name, username and password are required", code=constants.E_INFOMISSING,
                                  message=constants.E_INFOMISSING_MSG)
        with transaction(session):
            result = RecordStore.insert(session, Table.USERS, {
                'name': name,
                'username': username,
                'password': User.hash_password(password),
                'admin': admin,
            })
        logger.info("User %s created", username)
        return result

    @classmethod
    def update_user(cls, session, user_id, fields):
        user_id = parse_id(user_id)
        values = {k: v for k, v in (fields or {}).items() if k in cls.USER_FIELDS and v is not None}
        if 'password' in values:
            values['password'] = User.hash_password(values['password'])
        with transaction(session):
            RecordStore.get_one(session, Table.USERS, {'id': user_id})
            RecordStore.update(session, Table.USERS, user_id, values)
        return RecordStore.get_one(session, Table.USERS, {'id': user_id})

    @staticmethod
    def generate_api_key(length=40):
        return ''.join(secrets.choice(API_KEY_ALPHABET) for _ in range(length))

    @classmethod
    def create_api_key(cls, session, description, length=40):
        if not description:
            raise ValidationError("description is required", code=constants.E_INFOMISSING,
                                  message=constants.E_INFOMISSING_MSG)
        with transaction(session):
            result = RecordStore.insert(session, Table.API_KEYS, {
                'description': description,
                'apikey': cls.generate_api_key(length),
            })
        logger.info("API key %s issued", result.data['id'])
        return result

    @classmethod
    def update_api_key(cls, session, key_id, fields):
        key_id = parse_id(key_id)
        values = {k: v for k, v in (fields or {}).items() if k in cls.KEY_FIELDS and v is not None}
        with transaction(session):
            RecordStore.get_one(session, Table.API_KEYS, {'id': key_id})
            RecordStore.update(session, Table.API_KEYS, key_id, values)
        return RecordStore.get_one(session, Table.API_KEYS, {'id': key_id})
