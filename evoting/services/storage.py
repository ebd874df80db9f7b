from contextlib import contextmanager
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..errors import StorageUnavailable
from ..extensions import db


@contextmanager
def storage_errors(action: str):
    """
    Roll back and surface any database failure as StorageUnavailable.
    Domain errors raised inside the block roll back too and propagate as is.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("DB error while %s", action)
        raise StorageUnavailable() from exc
    except Exception:
        db.session.rollback()
        raise
