from flask import current_app, jsonify, request
from flask_jwt_extended import jwt_required

from menuplanner import constants
from menuplanner.constants import Table
from menuplanner.errors import Result
from menuplanner.services import AuthService, RecordStore, connection_scope, transaction
from menuplanner.utils.parsing import parse_bool, parse_id

from . import auth_bp
from .decorators import json_body, respond


@auth_bp.route('/register', methods=['POST'])
def register():
    """Self-service registration, only while the instance accepts new users"""
    if not current_app.config.get('ALLOW_REGISTRATION'):
        return jsonify({
            'code': constants.I_NOT_ACCEPTING_NEW_USERS,
            'message': constants.I_NOT_ACCEPTING_NEW_USERS_MSG,
            'data': None,
        }), 403

    data = json_body()
    with connection_scope() as session:
        result = AuthService.create_user(session, data.get('name'), data.get('username'), data.get('password'))
    return respond(result, 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    """Exchange username and password for a token"""
    data = json_body()
    with connection_scope() as session:
        result = AuthService.validate_user_credentials(session, data.get('username'), data.get('password'))
    return respond(Result({'token': result.data}))


@auth_bp.route('/users', methods=['GET'])
@jwt_required()
def list_users():
    filters = {'name': request.args.get('name')}
    with connection_scope() as session:
        result = RecordStore.list_all(session, Table.USERS, request.args, filters)
    return respond(result)


@auth_bp.route('/users/<user_id>', methods=['GET'])
@jwt_required()
def get_user(user_id):
    user_id = parse_id(user_id)
    with connection_scope() as session:
        result = RecordStore.get_one(session, Table.USERS, {'id': user_id})
    return respond(result)


@auth_bp.route('/users', methods=['POST'])
@jwt_required()
def create_user():
    data = json_body()
    with connection_scope() as session:
        result = AuthService.create_user(
            session, data.get('name'), data.get('username'), data.get('password'),
            admin=parse_bool(data.get('admin')),
        )
    return respond(result, 201)


@auth_bp.route('/users/<user_id>', methods=['PUT'])
@jwt_required()
def update_user(user_id):
    user_id = parse_id(user_id)
    with connection_scope() as session:
        result = AuthService.update_user(session, user_id, json_body())
    return respond(result)


@auth_bp.route('/users/<user_id>', methods=['DELETE'])
@jwt_required()
def delete_user(user_id):
    user_id = parse_id(user_id)
    with connection_scope() as session:
        with transaction(session):
            result = RecordStore.delete(session, Table.USERS, {'id': user_id})
    return respond(result)


@auth_bp.route('/keys', methods=['GET'])
@jwt_required()
def list_keys():
    with connection_scope() as session:
        result = RecordStore.list_all(session, Table.API_KEYS, request.args)
    return respond(result)


@auth_bp.route('/keys/<key_id>', methods=['GET'])
@jwt_required()
def get_key(key_id):
    key_id = parse_id(key_id)
    with connection_scope() as session:
        result = RecordStore.get_one(session, Table.API_KEYS, {'id': key_id})
    return respond(result)


@auth_bp.route('/keys', methods=['POST'])
@jwt_required()
def create_key():
    data = json_body()
    with connection_scope() as session:
        result = AuthService.create_api_key(
            session, data.get('description'), length=current_app.config['API_KEY_LENGTH']
        )
    return respond(result, 201)


@auth_bp.route('/keys/<key_id>', methods=['PUT'])
@jwt_required()
def update_key(key_id):
    """Change the description or revoke a key"""
    key_id = parse_id(key_id)
    with connection_scope() as session:
        result = AuthService.update_api_key(session, key_id, json_body())
    return respond(result)
