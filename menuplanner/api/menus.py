from flask import request

from menuplanner.constants import Table
from menuplanner.services import MenuService, RecordStore, connection_scope
from menuplanner.utils.parsing import parse_date, parse_id, parse_id_list

from . import menus_bp
from .decorators import api_key_required, json_body, respond

MENU_FIELDS = ('date', 'comment')


@menus_bp.route('', methods=['GET'], strict_slashes=False)
@api_key_required
def list_menus():
    filters = {key: request.args.get(key) for key in ('before', 'after', 'date', 'comment')}
    with connection_scope() as session:
        result = RecordStore.list_all(session, Table.MENUS, request.args, filters)
    return respond(result)


@menus_bp.route('/<menu_id>', methods=['GET'])
@api_key_required
def get_menu(menu_id):
    """Menu with its planned recipes"""
    menu_id = parse_id(menu_id)
    with connection_scope() as session:
        RecordStore.get_one(session, Table.MENUS, {'id': menu_id})
        result = MenuService.recipes_for_menu(session, {'id': menu_id})
    return respond(result)


@menus_bp.route('/date/<menu_date>', methods=['GET'])
@api_key_required
def get_menu_for_date(menu_date):
    # an empty day is a normal answer, not a 404
    menu_date = parse_date(menu_date)
    with connection_scope() as session:
        result = MenuService.recipes_for_menu(session, {'date': menu_date})
    return respond(result)


@menus_bp.route('', methods=['POST'], strict_slashes=False)
@api_key_required
def create_menu():
    data = json_body()
    fields = {key: data.get(key) for key in MENU_FIELDS}
    recipe_ids = parse_id_list(data.get('recipes'), 'recipe_id')
    with connection_scope() as session:
        result = MenuService.create_menu(session, fields, recipe_ids)
    return respond(result, 201)


@menus_bp.route('/<menu_id>', methods=['PUT'])
@api_key_required
def update_menu(menu_id):
    menu_id = parse_id(menu_id)
    data = json_body()
    fields = {key: data[key] for key in MENU_FIELDS if key in data}
    recipe_ids = parse_id_list(data.get('recipes'), 'recipe_id')
    with connection_scope() as session:
        result = MenuService.update_menu(session, menu_id, fields, recipe_ids)
    return respond(result)


@menus_bp.route('/<menu_id>', methods=['DELETE'])
@api_key_required
def delete_menu(menu_id):
    menu_id = parse_id(menu_id)
    with connection_scope() as session:
        result = MenuService.delete_menu(session, menu_id)
    return respond(result)
