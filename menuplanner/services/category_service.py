# menuplanner/services/category_service.py
import logging

from menuplanner.constants import Table
from menuplanner.utils.parsing import parse_id
from .connection import transaction
from .record_store import RecordStore
from .recipe_category_service import RecipeCategoryService

logger = logging.getLogger(__name__)


class CategoryService:

    @staticmethod
    def delete_category(session, category_id):
        """Drop the category's links and then the category, in one transaction.

        If the category row cannot be deleted the link removal is rolled back.
        """
        category_id = parse_id(category_id)
        with transaction(session):
            links = RecipeCategoryService.delete_all_links_for_category(session, category_id)
            result = RecordStore.delete(session, Table.CATEGORIES, {'id': category_id})
        logger.info("Category %s deleted along with %s links", category_id, links.data)
        return result
