from blinker import Namespace
from flask import current_app

_signals = Namespace()

# Sent after every successful mutation; receivers get ``views=(...)``
views_invalidated = _signals.signal("views-invalidated")

ALL_VIEWS = ("candidates", "results", "admin")


def invalidate_views(*views: str) -> None:
    stale = views or ALL_VIEWS
    current_app.logger.debug("Views invalidated: %s", ", ".join(stale))
    views_invalidated.send(current_app._get_current_object(), views=stale)
