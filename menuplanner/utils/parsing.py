# menuplanner/utils/parsing.py
from datetime import date, datetime

from .. import constants
from ..errors import ValidationError

TRUE_STRINGS = {'true', '1', 'yes', 'on'}


def parse_bool(value):
    """Single boolean parser used for flags coming from queries, bodies and the database."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return False


def parse_id(value, field='id'):
    """Return ``value`` as an int or raise before anything touches the database."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a whole number", code=constants.E_ID_NAN,
                              message=constants.E_ID_NAN_MSG)
    if isinstance(value, int):
        return value
    # isdigit alone lets through digits int() rejects, such as '²'
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        return int(value.strip())
    raise ValidationError(f"{field} must be a whole number", code=constants.E_ID_NAN,
                          message=constants.E_ID_NAN_MSG)


def parse_ids(values, field='id'):
    return [parse_id(v, field) for v in values or []]


def parse_date(value, field='date'):
    """Accept a ``date`` or a ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), '%Y-%m-%d').date()
        except ValueError:
            pass
    raise ValidationError(f"{value} is not a valid {field}", code=constants.E_NOTDATE,
                          message=constants.E_NOTDATE_MSG)


def _non_negative(value, field):
    if isinstance(value, str) and value.strip() == '':
        return None
    number = parse_id(value, field)
    if number < 0:
        raise ValidationError(f"{field} must not be negative", code=constants.E_ID_NAN,
                              message=constants.E_ID_NAN_MSG)
    return number


def parse_pagination(args):
    """Pull ``limit``/``offset`` out of a mapping such as ``request.args``."""
    pagination = {}
    for key in ('limit', 'offset'):
        value = args.get(key)
        if value is not None:
            number = _non_negative(value, key)
            if number is not None:
                pagination[key] = number
    return pagination


def parse_id_list(values, field='id'):
    """Ids from a list of scalars or of ``{"id": ...}`` objects. ``None`` stays ``None``."""
    if values is None:
        return None
    if not isinstance(values, (list, tuple)):
        raise ValidationError(f"{field} must be a list", code=constants.E_INVALIDDATA,
                              message=constants.E_INVALIDDATA_MSG)
    return [parse_id(v.get('id') if isinstance(v, dict) else v, field) for v in values]
