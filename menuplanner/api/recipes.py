from flask import request

from menuplanner.constants import Table
from menuplanner.services import MenuService, RecipeCategoryService, RecipeService, RecordStore, connection_scope
from menuplanner.utils.parsing import parse_id, parse_id_list

from . import recipes_bp
from .decorators import api_key_required, json_body, respond

RECIPE_FIELDS = ('name', 'link', 'comment')


@recipes_bp.route('', methods=['GET'], strict_slashes=False)
@api_key_required
def list_recipes():
    filters = {
        'name': request.args.get('name'),
        'comment': request.args.get('comment'),
        'categories': request.args.getlist('cat') or None,
        'deleted': request.args.get('deleted'),
        'include_deleted': request.args.get('include_deleted'),
    }
    with connection_scope() as session:
        result = RecordStore.list_all(session, Table.RECIPES, request.args, filters)
    return respond(result)


@recipes_bp.route('/<recipe_id>', methods=['GET'])
@api_key_required
def get_recipe(recipe_id):
    recipe_id = parse_id(recipe_id)
    with connection_scope() as session:
        result = RecordStore.get_one(session, Table.RECIPES, {'id': recipe_id})
    return respond(result)


@recipes_bp.route('', methods=['POST'], strict_slashes=False)
@api_key_required
def create_recipe():
    """Create a recipe and attach its categories"""
    data = json_body()
    fields = {key: data.get(key) for key in RECIPE_FIELDS}
    category_ids = parse_id_list(data.get('categories'), 'category_id')
    with connection_scope() as session:
        result = RecipeService.create_recipe(session, fields, category_ids)
    return respond(result, 201)


@recipes_bp.route('/<recipe_id>', methods=['PUT'])
@api_key_required
def update_recipe(recipe_id):
    """Only the supplied fields change; a supplied category list replaces the old one"""
    recipe_id = parse_id(recipe_id)
    data = json_body()
    fields = {key: data[key] for key in RECIPE_FIELDS + ('deleted',) if key in data}
    category_ids = parse_id_list(data.get('categories'), 'category_id')
    with connection_scope() as session:
        result = RecipeService.update_recipe(session, recipe_id, fields, category_ids)
    return respond(result)


@recipes_bp.route('/<recipe_id>', methods=['DELETE'])
@api_key_required
def delete_recipe(recipe_id):
    recipe_id = parse_id(recipe_id)
    with connection_scope() as session:
        result = RecipeService.soft_delete(session, recipe_id)
    return respond(result)


@recipes_bp.route('/<recipe_id>/categories', methods=['GET'])
@api_key_required
def get_recipe_categories(recipe_id):
    recipe_id = parse_id(recipe_id)
    with connection_scope() as session:
        result = RecipeCategoryService.categories_for_recipe(session, recipe_id)
    return respond(result)


@recipes_bp.route('/<recipe_id>/menus', methods=['GET'])
@api_key_required
def get_recipe_menus(recipe_id):
    recipe_id = parse_id(recipe_id)
    with connection_scope() as session:
        result = MenuService.menus_for_recipe(session, recipe_id)
    return respond(result)
