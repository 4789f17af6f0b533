# menuplanner/services/recipe_category_service.py
import logging

from sqlalchemy import insert

from menuplanner import constants
from menuplanner.errors import Result, ValidationError
from menuplanner.models import Category, Recipe, RecipeCategory
from menuplanner.utils.parsing import parse_id
from .connection import transaction, translate_errors

logger = logging.getLogger(__name__)


class RecipeCategoryService:
    """Recipe <-> category association, always replaced as a whole."""

    @staticmethod
    def recipes_for_category(session, category_id):
        category_id = parse_id(category_id)
        with translate_errors():
            recipes = session.query(Recipe).join(
                RecipeCategory, RecipeCategory.recipe_id == Recipe.id
            ).filter(
                RecipeCategory.category_id == category_id
            ).order_by(Recipe.id).populate_existing().all()
        return Result([recipe.to_dict() for recipe in recipes])

    @staticmethod
    def categories_for_recipe(session, recipe_id):
        recipe_id = parse_id(recipe_id)
        with translate_errors():
            categories = session.query(Category).join(
                RecipeCategory, RecipeCategory.category_id == Category.id
            ).filter(
                RecipeCategory.recipe_id == recipe_id
            ).order_by(Category.id).populate_existing().all()
        return Result([category.to_dict() for category in categories])

    @staticmethod
    def _check_categories_exist(session, category_ids):
        if not category_ids:
            return
        with translate_errors():
            found = {row[0] for row in session.query(Category.id).filter(Category.id.in_(category_ids)).all()}
        missing = sorted(set(category_ids) - found)
        if missing:
            raise ValidationError(f"Unknown category ids: {missing}", code=constants.E_INVALIDDATA,
                                  message=constants.E_INVALIDDATA_MSG)

    @classmethod
    def replace_categories_for_recipe(cls, session, recipe_id, pairs):
        """Install ``pairs`` as the recipe's complete category set.

        ``recipe_id`` is ``None`` only right after the recipe was created, when
        there are no links to clear.
        """
        rows = []
        seen = set()
        for link_recipe_id, category_id in pairs:
            pair = (parse_id(link_recipe_id, 'recipe_id'), parse_id(category_id, 'category_id'))
            if pair not in seen:
                seen.add(pair)
                rows.append({'recipe_id': pair[0], 'category_id': pair[1]})

        with transaction(session):
            if recipe_id is not None:
                cls.delete_all_links_for_recipe(session, recipe_id)
            cls._check_categories_exist(session, [row['category_id'] for row in rows])
            if rows:
                with translate_errors():
                    session.execute(insert(RecipeCategory), rows)
        logger.debug("Recipe %s linked to %d categories", recipe_id, len(rows))
        return Result({'inserted': len(rows)})

    @staticmethod
    def delete_all_links_for_recipe(session, recipe_id):
        recipe_id = parse_id(recipe_id)
        with translate_errors():
            affected = session.query(RecipeCategory).filter(
                RecipeCategory.recipe_id == recipe_id
            ).delete(synchronize_session=False)
        return Result(affected)

    @staticmethod
    def delete_all_links_for_category(session, category_id):
        category_id = parse_id(category_id)
        with translate_errors():
            affected = session.query(RecipeCategory).filter(
                RecipeCategory.category_id == category_id
            ).delete(synchronize_session=False)
        return Result(affected)
