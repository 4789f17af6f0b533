# menuplanner/constants.py
from enum import Enum

# Error codes
E_NOTFOUND = "E_NOTFOUND"
E_NOTFOUND_MSG = "Nothing was found"
E_COMMIT = "E_COMMIT"
E_COMMIT_MSG = "Error committing transaction"
E_ID_NAN = "E_IDNAN"
E_ID_NAN_MSG = "ID is not a number"
E_NAME_REQ = "E_NAMEREQ"
E_NAME_REQ_MSG = "Name is required"
E_DBERROR = "E_DBERROR"
E_DBERROR_MSG = "Database error"
E_INFOMISSING = "E_INFOMISSING"
E_INFOMISSING_MSG = "Vital information is missing"
E_NOTDATE = "E_NOTDATE"
E_NOTDATE_MSG = "Not a valid date"
E_INVALIDDATA = "E_INVALIDDATA"
E_INVALIDDATA_MSG = "Data is not valid"
E_DUPLICATE = "E_DUPLICATE"
E_DUPLICATE_MSG = "A record with the same unique value already exists"
E_USER_AUTH_FAILED = "E_USER_AUTH_FAILED"
E_USER_AUTH_FAILED_MSG = "Authentication failed"
E_USER_NOT_FOUND = "E_USER_NOT_FOUND"
E_USER_NOT_FOUND_MSG = "User not found"
E_UNAUTHORIZED = "E_UNAUTHORIZED"
E_UNAUTHORIZED_MSG = "Unauthorized"

# Info codes
I_SUCCESS = "I_SUCCESS"
I_SUCCESS_MSG = "OK"
I_NOT_ACCEPTING_NEW_USERS = "I_NOT_ACCEPTING_NEW_USERS"
I_NOT_ACCEPTING_NEW_USERS_MSG = "This service currently doesn't accept user registrations"


class Table(str, Enum):
    """Every table the record store is allowed to touch."""

    MENUS = "menus"
    RECIPES = "recipes"
    CATEGORIES = "categories"
    RECIPE_CATEGORIES = "category_recipe"
    MENU_RECIPES = "menu_recipe"
    USERS = "users"
    API_KEYS = "apikeys"
