from flask import Blueprint

recipes_bp = Blueprint('recipes', __name__)
categories_bp = Blueprint('categories', __name__)
menus_bp = Blueprint('menus', __name__)
auth_bp = Blueprint('auth', __name__)
# Import routes to register them with the blueprint
from . import recipes
from . import categories
from . import menus
from . import auth
