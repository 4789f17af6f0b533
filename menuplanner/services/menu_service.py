# menuplanner/services/menu_service.py
import logging

from sqlalchemy import insert

from menuplanner import constants
from menuplanner.constants import Table
from menuplanner.errors import Result, ValidationError
from menuplanner.models import Menu, MenuRecipe, Recipe
from menuplanner.utils.parsing import parse_date, parse_id, parse_ids
from .connection import transaction, translate_errors
from .record_store import RecordStore

logger = logging.getLogger(__name__)


class MenuService:
    """Menus and the recipes planned on them."""

    @staticmethod
    def _find_menu(session, filters):
        filters = filters or {}
        query = session.query(Menu)
        if filters.get('id') is not None:
            query = query.filter(Menu.id == parse_id(filters['id']))
        elif filters.get('date') is not None:
            query = query.filter(Menu.date == parse_date(filters['date']))
        else:
            raise ValidationError("id or date is required", code=constants.E_INFOMISSING,
                                  message=constants.E_INFOMISSING_MSG)
        with translate_errors():
            return query.order_by(Menu.id).populate_existing().first()

    @classmethod
    def recipes_for_menu(cls, session, filters):
        """Menu with its recipes embedded.

        Nothing planned for the requested id or date is not an error: the
        result is a success with empty data.
        """
        menu = cls._find_menu(session, filters)
        if menu is None:
            return Result({})

        with translate_errors():
            recipes = session.query(Recipe).join(
                MenuRecipe, MenuRecipe.recipe_id == Recipe.id
            ).filter(
                MenuRecipe.menu_id == menu.id
            ).order_by(Recipe.id).populate_existing().all()

        return Result({
            'id': menu.id,
            'date': menu.date.isoformat(),
            'comment': menu.comment,
            'recipes': [recipe.to_dict() for recipe in recipes],
        })

    @staticmethod
    def menus_for_recipe(session, recipe_id):
        recipe_id = parse_id(recipe_id)
        with translate_errors():
            menus = session.query(Menu).join(
                MenuRecipe, MenuRecipe.menu_id == Menu.id
            ).filter(
                MenuRecipe.recipe_id == recipe_id
            ).order_by(Menu.date, Menu.id).populate_existing().all()
        return Result([menu.to_dict() for menu in menus])

    @staticmethod
    def _check_recipes_exist(session, recipe_ids):
        if not recipe_ids:
            return
        with translate_errors():
            found = {row[0] for row in session.query(Recipe.id).filter(Recipe.id.in_(recipe_ids)).all()}
        missing = sorted(set(recipe_ids) - found)
        if missing:
            raise ValidationError(f"{missing} are not valid Recipe IDs", code=constants.E_INVALIDDATA,
                                  message=constants.E_INVALIDDATA_MSG)

    @classmethod
    def replace_recipes_for_menu(cls, session, menu_id, recipe_ids):
        """Swap the menu's recipe set in one transaction."""
        menu_id = parse_id(menu_id)
        recipe_ids = list(dict.fromkeys(parse_ids(recipe_ids, 'recipe_id')))
        with transaction(session):
            cls.delete_links_for_menu(session, menu_id)
            cls._check_recipes_exist(session, recipe_ids)
            if recipe_ids:
                with translate_errors():
                    session.execute(insert(MenuRecipe), [
                        {'menu_id': menu_id, 'recipe_id': recipe_id} for recipe_id in recipe_ids
                    ])
        logger.debug("Menu %s now plans %d recipes", menu_id, len(recipe_ids))
        return Result({'inserted': len(recipe_ids)})

    @staticmethod
    def delete_links_for_menu(session, menu_id):
        menu_id = parse_id(menu_id)
        with translate_errors():
            affected = session.query(MenuRecipe).filter(
                MenuRecipe.menu_id == menu_id
            ).delete(synchronize_session=False)
        return Result(affected)

    @classmethod
    def create_menu(cls, session, fields, recipe_ids=None):
        with transaction(session):
            created = RecordStore.insert(session, Table.MENUS, fields)
            if recipe_ids:
                cls.replace_recipes_for_menu(session, created.data['id'], recipe_ids)
        return cls.recipes_for_menu(session, {'id': created.data['id']})

    @classmethod
    def update_menu(cls, session, menu_id, fields, recipe_ids=None):
        menu_id = parse_id(menu_id)
        with transaction(session):
            # raises NotFoundError before anything is written
            RecordStore.get_one(session, Table.MENUS, {'id': menu_id})
            RecordStore.update(session, Table.MENUS, menu_id, fields)
            if recipe_ids is not None:
                cls.replace_recipes_for_menu(session, menu_id, recipe_ids)
        return cls.recipes_for_menu(session, {'id': menu_id})

    @classmethod
    def delete_menu(cls, session, menu_id):
        """Remove the menu's links, then the menu itself, as one unit."""
        menu_id = parse_id(menu_id)
        with transaction(session):
            cls.delete_links_for_menu(session, menu_id)
            result = RecordStore.delete(session, Table.MENUS, {'id': menu_id})
        logger.info("Menu %s deleted", menu_id)
        return result
