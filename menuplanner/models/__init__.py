# menuplanner/models/__init__.py
from menuplanner.constants import Table

from .api_key import ApiKey
from .category import Category
from .menu import Menu
from .menu_recipe import MenuRecipe
from .recipe import Recipe
from .recipe_category import RecipeCategory
from .user import User

# Closed mapping used by the record store; nothing outside it is queryable.
MODELS = {
    Table.RECIPES: Recipe,
    Table.CATEGORIES: Category,
    Table.MENUS: Menu,
    Table.RECIPE_CATEGORIES: RecipeCategory,
    Table.MENU_RECIPES: MenuRecipe,
    Table.USERS: User,
    Table.API_KEYS: ApiKey,
}

__all__ = [
    'ApiKey', 'Category', 'Menu', 'MenuRecipe', 'Recipe', 'RecipeCategory',
    'User', 'MODELS'
]
