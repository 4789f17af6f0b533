# menuplanner/services/record_store.py
import logging

from sqlalchemy import Boolean, Date, Integer, String, func

from menuplanner import constants
from menuplanner.constants import Table
from menuplanner.errors import NotFoundError, Result, ValidationError
from menuplanner.models import MODELS, RecipeCategory
from menuplanner.utils.parsing import parse_bool, parse_date, parse_id, parse_ids, parse_pagination
from .connection import translate_errors

logger = logging.getLogger(__name__)


class RecordStore:
    """Generic get/list/insert/update/delete over the tables named in ``Table``.

    Every method takes the active session first. Values always travel as bound
    parameters; table identifiers come from the closed ``Table`` enum.
    """

    TEXT_FILTERS = ('name', 'comment')
    SERVER_FIELDS = ('id', 'created_at', 'updated_at')

    @staticmethod
    def model_for(table):
        return MODELS[Table(table)]

    @staticmethod
    def _coerce_value(column, value):
        if value is None:
            return None
        if isinstance(column.type, Boolean):
            return parse_bool(value)
        if isinstance(column.type, Date):
            return parse_date(value, column.name)
        if isinstance(column.type, Integer):
            return parse_id(value, column.name)
        if isinstance(column.type, String) and isinstance(value, (dict, list, tuple)):
            raise ValidationError(f"{column.name} must be text", code=constants.E_INVALIDDATA,
                                  message=constants.E_INVALIDDATA_MSG)
        return value

    @classmethod
    def _coerce(cls, model, fields, check_required=False):
        """Validate field names against the table and coerce each value to its column type."""
        columns = model.__table__.columns
        values = {}
        for key, value in (fields or {}).items():
            if key in cls.SERVER_FIELDS:
                continue
            if key not in columns:
                raise ValidationError(f"Unknown field: {key}")
            column = columns[key]
            if not column.nullable and (value is None or (isinstance(column.type, String) and not str(value).strip())):
                cls._missing(key)
            values[key] = cls._coerce_value(column, value)

        if check_required:
            for column in columns:
                if column.name in cls.SERVER_FIELDS or column.nullable:
                    continue
                if column.default is None and column.server_default is None and column.name not in values:
                    cls._missing(column.name)
        return values

    @staticmethod
    def _missing(field):
        if field == 'name':
            raise ValidationError(f"{field} is required", code=constants.E_NAME_REQ,
                                  message=constants.E_NAME_REQ_MSG)
        raise ValidationError(f"{field} is required", code=constants.E_INFOMISSING,
                              message=constants.E_INFOMISSING_MSG)

    @staticmethod
    def _contains_pattern(text):
        # LIKE wildcards in user input match literally
        escaped = str(text).replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return f"%{escaped}%"

    @classmethod
    def _criteria(cls, model, filters):
        columns = model.__table__.columns
        criteria = {}
        for key, value in (filters or {}).items():
            if key not in columns:
                raise ValidationError(f"Unknown field: {key}")
            criteria[key] = cls._coerce_value(columns[key], value)
        return criteria

    @classmethod
    def list_all(cls, session, table, pagination=None, filters=None):
        """Filtered, paginated scan. An empty match is a success carrying ``E_NOTFOUND``."""
        model = cls.model_for(table)
        columns = model.__table__.columns
        filters = {k: v for k, v in (filters or {}).items() if v is not None}
        pagination = parse_pagination(pagination or {})
        logger.debug("list_all %s filters=%s pagination=%s", model.__tablename__, filters, pagination)

        query = session.query(model)
        for field in cls.TEXT_FILTERS:
            if field in filters and field in columns:
                query = query.filter(columns[field].ilike(cls._contains_pattern(filters[field]), escape="\\"))

        if 'date' in columns:
            if 'date' in filters:
                query = query.filter(columns['date'] == parse_date(filters['date']))
            if 'before' in filters:
                query = query.filter(columns['date'] <= parse_date(filters['before'], 'before'))
            if 'after' in filters:
                query = query.filter(columns['date'] >= parse_date(filters['after'], 'after'))

        if 'deleted' in columns:
            if 'deleted' in filters:
                query = query.filter(columns['deleted'] == parse_bool(filters['deleted']))
            elif not parse_bool(filters.get('include_deleted')):
                query = query.filter(columns['deleted'] == False)  # noqa: E712

        if filters.get('categories') and Table(table) is Table.RECIPES:
            category_ids = sorted(set(parse_ids(filters['categories'], 'category')))
            # a recipe qualifies only when it is linked to every requested category
            linked_to_all = session.query(RecipeCategory.recipe_id).filter(
                RecipeCategory.category_id.in_(category_ids)
            ).group_by(
                RecipeCategory.recipe_id
            ).having(
                func.count(RecipeCategory.category_id) == len(category_ids)
            )
            query = query.filter(columns['id'].in_(linked_to_all))

        query = query.order_by(*model.__table__.primary_key.columns)
        if 'limit' in pagination:
            query = query.offset(pagination.get('offset', 0)).limit(pagination['limit'])

        with translate_errors():
            rows = query.populate_existing().all()

        if not rows:
            return Result([], code=constants.E_NOTFOUND, message=constants.E_NOTFOUND_MSG)
        return Result([row.to_dict() for row in rows])

    @classmethod
    def get_one(cls, session, table, filters):
        model = cls.model_for(table)
        criteria = cls._criteria(model, filters)
        if not criteria:
            cls._missing('id')
        with translate_errors():
            row = session.query(model).filter_by(**criteria).populate_existing().first()
        if row is None:
            raise NotFoundError()
        return Result(row.to_dict())

    @classmethod
    def insert(cls, session, table, fields):
        """Insert a row, then read it back so server-assigned values are visible."""
        model = cls.model_for(table)
        values = cls._coerce(model, fields, check_required=True)
        record = model(**values)
        with translate_errors():
            session.add(record)
            session.flush()
        identity = {col.name: getattr(record, col.name) for col in model.__table__.primary_key.columns}
        logger.debug("Inserted into %s: %s", model.__tablename__, identity)
        return cls.get_one(session, table, identity)

    @classmethod
    def update(cls, session, table, record_id, fields):
        """Partial update. ``updated_at`` is always restamped by the database."""
        model = cls.model_for(table)
        record_id = parse_id(record_id)
        values = cls._coerce(model, fields)
        values['updated_at'] = func.current_timestamp()
        with translate_errors():
            affected = session.query(model).filter(
                model.__table__.columns['id'] == record_id
            ).update(values, synchronize_session=False)
        logger.debug("Updated %s id=%s affected=%s", model.__tablename__, record_id, affected)
        return Result(affected)

    @classmethod
    def delete(cls, session, table, filters):
        """Delete matching rows. Zero affected rows is an error, not a no-op."""
        model = cls.model_for(table)
        criteria = cls._criteria(model, filters)
        if not criteria:
            raise ValidationError("Refusing to delete without a filter", code=constants.E_INFOMISSING,
                                  message=constants.E_INFOMISSING_MSG)
        with translate_errors():
            affected = session.query(model).filter_by(**criteria).delete(synchronize_session=False)
        if affected == 0:
            raise NotFoundError()
        logger.debug("Deleted from %s %s affected=%s", model.__tablename__, criteria, affected)
        return Result(affected)
