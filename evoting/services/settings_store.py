import time
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models.setting import Setting
from ..signals import invalidate_views
from .storage import storage_errors


def get_setting(key: str, default=None):
    """Return the stored value for ``key`` or ``default`` when it was never set."""
    with storage_errors(f"reading setting {key}"):
        row = db.session.get(Setting, key)
        return default if row is None or row.value is None else row.value


def _upsert(key: str, value) -> None:
    row = db.session.get(Setting, key)
    if row is None:
        db.session.add(Setting(key=key, value=value))
    else:
        row.value = value


def set_setting(key: str, value):
    with storage_errors(f"updating setting {key}"):
        _upsert(key, value)
        try:
            db.session.commit()
        except IntegrityError:
            # Another writer inserted the key first; last write wins
            db.session.rollback()
            _upsert(key, value)
            db.session.commit()

    current_app.logger.info("Setting %s changed to %r", key, value)
    invalidate_views()
    return value


def get_voting_status() -> bool:
    return bool(get_setting(Setting.VOTING_OPEN, False))


def set_voting_status(is_open: bool) -> bool:
    return bool(set_setting(Setting.VOTING_OPEN, bool(is_open)))


def get_show_results_status() -> bool:
    return bool(get_setting(Setting.SHOW_RESULTS, False))


def set_show_results_status(show: bool) -> bool:
    return bool(set_setting(Setting.SHOW_RESULTS, bool(show)))


def get_voting_session_id() -> str:
    return str(get_setting(Setting.VOTING_SESSION_ID, current_app.config["DEFAULT_VOTING_SESSION_ID"]))


def new_session_id() -> str:
    return f"session_{int(time.time() * 1000)}"


def rotate_voting_session_id() -> str:
    return set_setting(Setting.VOTING_SESSION_ID, new_session_id())
