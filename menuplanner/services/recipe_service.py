# menuplanner/services/recipe_service.py
import logging

from menuplanner.constants import Table
from menuplanner.errors import NotFoundError
from menuplanner.utils.parsing import parse_id, parse_ids
from .connection import transaction
from .record_store import RecordStore
from .recipe_category_service import RecipeCategoryService

logger = logging.getLogger(__name__)


class RecipeService:
    """Recipe writes that also touch the category links"""

    @staticmethod
    def create_recipe(session, fields, category_ids=None):
        category_ids = parse_ids(category_ids, 'category_id')
        with transaction(session):
            created = RecordStore.insert(session, Table.RECIPES, fields)
            recipe_id = created.data['id']
            if category_ids:
                # brand new recipe, nothing to clear first
                RecipeCategoryService.replace_categories_for_recipe(
                    session, None, [(recipe_id, category_id) for category_id in category_ids]
                )
        logger.info("Recipe %s created", recipe_id)
        return created

    @staticmethod
    def update_recipe(session, recipe_id, fields, category_ids=None):
        """Partial update; ``category_ids`` replaces the whole set when given."""
        recipe_id = parse_id(recipe_id)
        with transaction(session):
            RecordStore.get_one(session, Table.RECIPES, {'id': recipe_id})
            RecordStore.update(session, Table.RECIPES, recipe_id, fields)
            if category_ids is not None:
                RecipeCategoryService.replace_categories_for_recipe(
                    session, recipe_id,
                    [(recipe_id, category_id) for category_id in parse_ids(category_ids, 'category_id')]
                )
        return RecordStore.get_one(session, Table.RECIPES, {'id': recipe_id})

    @staticmethod
    def soft_delete(session, recipe_id):
        recipe_id = parse_id(recipe_id)
        with transaction(session):
            result = RecordStore.update(session, Table.RECIPES, recipe_id, {'deleted': True})
            if not result.data:
                raise NotFoundError()
        logger.info("Recipe %s marked deleted", recipe_id)
        return result
