import uuid
from flask import g, request

REQUEST_ID_HEADER = "X-Request-Id"
_MAX_LEN = 64


def get_request_id() -> str | None:
    return getattr(g, "request_id", None)


def init_request_id(app):
    @app.before_request
    def _assign_request_id():
        # Trust a caller supplied id only if it is short and printable
        rid = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
        if not rid or len(rid) > _MAX_LEN or not rid.isprintable():
            rid = str(uuid.uuid4())
        g.request_id = rid

    @app.after_request
    def _add_request_id_header(response):
        rid = get_request_id()
        if rid:
            response.headers[REQUEST_ID_HEADER] = rid
        return response
