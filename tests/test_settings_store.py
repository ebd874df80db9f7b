from evoting.models.setting import Setting
from evoting.services import settings_store
from evoting.signals import views_invalidated


def test_missing_key_returns_default(app):
    assert settings_store.get_setting("nope", "fallback") == "fallback"
    assert settings_store.get_setting("nope") is None


def test_documented_defaults(app):
    assert settings_store.get_voting_status() is False
    assert settings_store.get_show_results_status() is False
    assert settings_store.get_voting_session_id() == "default-session"


def test_set_upserts_and_returns_new_value(app):
    assert settings_store.set_voting_status(True) is True
    assert settings_store.get_voting_status() is True

    assert settings_store.set_voting_status(False) is False
    assert settings_store.get_voting_status() is False
    assert Setting.query.filter_by(key=Setting.VOTING_OPEN).count() == 1


def test_show_results_toggle(app):
    settings_store.set_show_results_status(True)
    assert settings_store.get_show_results_status() is True


def test_rotate_session_id(app):
    new_id = settings_store.rotate_voting_session_id()
    assert new_id.startswith("session_")
    assert settings_store.get_voting_session_id() == new_id


def test_set_invalidates_views(app):
    received = []

    def receiver(sender, views):
        received.append(views)

    with views_invalidated.connected_to(receiver):
        settings_store.set_show_results_status(True)

    assert received == [("candidates", "results", "admin")]
