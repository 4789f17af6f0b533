# menuplanner/services/connection.py
import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from menuplanner import constants
from menuplanner.errors import DataAccessError, DatabaseError, DuplicateKeyError
from menuplanner.extensions import db

logger = logging.getLogger(__name__)

_DEPTH_KEY = 'menuplanner.transaction_depth'


def acquire():
    """Lease the current request's session from the engine pool."""
    session = db.session()
    logger.debug("Session acquired")
    return session


def release(session):
    """Give the connection back to the pool. Safe to call on a broken session."""
    try:
        session.close()
    except SQLAlchemyError:
        logger.exception("Closing session failed")
    logger.debug("Session released")


@contextmanager
def connection_scope():
    session = acquire()
    try:
        yield session
    finally:
        release(session)


def is_duplicate_key(exc):
    """True when an IntegrityError comes from a unique constraint."""
    orig = getattr(exc, 'orig', None)
    if getattr(orig, 'pgcode', None) == '23505':
        return True
    args = getattr(orig, 'args', ())
    if args and args[0] == 1062:  # MySQL ER_DUP_ENTRY
        return True
    text = str(orig if orig is not None else exc).lower()
    return 'unique constraint' in text or 'duplicate' in text


@contextmanager
def translate_errors():
    """Turn driver exceptions into structured errors without leaking their text."""
    try:
        yield
    except IntegrityError as exc:
        if is_duplicate_key(exc):
            logger.info("Duplicate key: %s", exc.orig)
            raise DuplicateKeyError() from exc
        logger.error("Integrity error: %s", exc.orig)
        raise DatabaseError() from exc
    except SQLAlchemyError as exc:
        logger.error("Database error: %s", exc)
        raise DatabaseError() from exc


def _rollback(session):
    # Best effort: a failed rollback is logged and never retried.
    try:
        session.rollback()
    except SQLAlchemyError:
        logger.exception("Rollback failed")


@contextmanager
def transaction(session):
    """Run a block as one unit of work.

    Nested blocks on the same session join the outermost one, which alone
    commits or rolls back. Structured errors are re-raised unchanged.
    """
    depth = session.info.get(_DEPTH_KEY, 0)
    session.info[_DEPTH_KEY] = depth + 1
    try:
        yield session
    except DataAccessError:
        if depth == 0:
            _rollback(session)
        raise
    except SQLAlchemyError as exc:
        logger.error("Transaction aborted: %s", exc)
        if depth == 0:
            _rollback(session)
        raise DatabaseError() from exc
    except Exception:
        if depth == 0:
            _rollback(session)
        raise
    else:
        if depth == 0:
            try:
                session.commit()
            except SQLAlchemyError as exc:
                logger.error("Commit failed: %s", exc)
                _rollback(session)
                raise DatabaseError(code=constants.E_COMMIT, message=constants.E_COMMIT_MSG) from exc
    finally:
        session.info[_DEPTH_KEY] = depth
