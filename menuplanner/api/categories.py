from flask import request

from menuplanner.constants import Table
from menuplanner.services import CategoryService, RecipeCategoryService, RecordStore, connection_scope, transaction
from menuplanner.utils.parsing import parse_id

from . import categories_bp
from .decorators import api_key_required, json_body, respond


@categories_bp.route('', methods=['GET'], strict_slashes=False)
@api_key_required
def list_categories():
    with connection_scope() as session:
        result = RecordStore.list_all(session, Table.CATEGORIES, request.args, {'name': request.args.get('name')})
    return respond(result)


@categories_bp.route('/<category_id>', methods=['GET'])
@api_key_required
def get_category(category_id):
    category_id = parse_id(category_id)
    with connection_scope() as session:
        result = RecordStore.get_one(session, Table.CATEGORIES, {'id': category_id})
    return respond(result)


@categories_bp.route('', methods=['POST'], strict_slashes=False)
@api_key_required
def create_category():
    data = json_body()
    with connection_scope() as session:
        with transaction(session):
            result = RecordStore.insert(session, Table.CATEGORIES, {'name': data.get('name')})
    return respond(result, 201)


@categories_bp.route('/<category_id>', methods=['PUT'])
@api_key_required
def update_category(category_id):
    category_id = parse_id(category_id)
    data = json_body()
    with connection_scope() as session:
        with transaction(session):
            RecordStore.get_one(session, Table.CATEGORIES, {'id': category_id})
            RecordStore.update(session, Table.CATEGORIES, category_id, {'name': data.get('name')})
        result = RecordStore.get_one(session, Table.CATEGORIES, {'id': category_id})
    return respond(result)


@categories_bp.route('/<category_id>', methods=['DELETE'])
@api_key_required
def delete_category(category_id):
    """Delete the category and every recipe link pointing at it"""
    category_id = parse_id(category_id)
    with connection_scope() as session:
        result = CategoryService.delete_category(session, category_id)
    return respond(result)


@categories_bp.route('/<category_id>/recipes', methods=['GET'])
@api_key_required
def get_category_recipes(category_id):
    category_id = parse_id(category_id)
    with connection_scope() as session:
        result = RecipeCategoryService.recipes_for_category(session, category_id)
    return respond(result)
