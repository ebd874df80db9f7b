import base64
from flask import current_app

from ..errors import InvalidPhoto


def photo_to_data_uri(photo, required: bool = True) -> str | None:
    """
    Validate an uploaded candidate photo (werkzeug FileStorage) and encode it
    as a ``data:<mime>;base64,...`` URI. Returns None when no photo was sent
    and one is not required.
    """
    if photo is None or not photo.filename:
        if required:
            raise InvalidPhoto("Candidate photo must be uploaded")
        return None

    data = photo.read()
    if not data:
        if required:
            raise InvalidPhoto("Candidate photo must be uploaded")
        return None

    max_bytes = current_app.config["CANDIDATE_PHOTO_MAX_BYTES"]
    if len(data) > max_bytes:
        raise InvalidPhoto(f"Photo must be at most {max_bytes // (1024 * 1024)}MB")

    mimetype = (photo.mimetype or "").lower()
    if mimetype not in current_app.config["CANDIDATE_PHOTO_TYPES"]:
        raise InvalidPhoto("Photo must be a PNG or JPG image")

    return f"data:{mimetype};base64,{base64.b64encode(data).decode('ascii')}"
