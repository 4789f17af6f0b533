from .auth_service import AuthService
from .category_service import CategoryService
from .connection import acquire, connection_scope, release, transaction
from .menu_service import MenuService
from .recipe_category_service import RecipeCategoryService
from .recipe_service import RecipeService
from .record_store import RecordStore

__all__ = ['AuthService', 'CategoryService', 'MenuService', 'RecipeCategoryService', 'RecipeService',
           'RecordStore', 'acquire', 'connection_scope', 'release', 'transaction']
