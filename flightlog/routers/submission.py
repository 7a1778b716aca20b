from fastapi import Request
from starlette.datastructures import UploadFile

from flightlog.core.errors import ValidationError

UPLOAD_FIELD = "filetoupload"


async def read_submission(request: Request) -> tuple[dict, UploadFile | None]:
    """
    Split a request body into plain fields and the optional photo upload.

    Form, multipart and JSON bodies are all accepted.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError as exc:
            raise ValidationError("Invalid JSON") from exc
        if not isinstance(data, dict):
            raise ValidationError("Invalid JSON")
        return data, None

    form = await request.form()
    fields = {}
    upload = None
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key == UPLOAD_FIELD:
                upload = value
        else:
            fields[key] = value
    return fields, upload
