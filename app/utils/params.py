"""
Request parameter collection for the action-dispatched endpoints.
Merges query string, form body and JSON body into one flat mapping.
"""

from fastapi import Request
from starlette.datastructures import UploadFile
import json
import logging

logger = logging.getLogger(__name__)


class RequestParams(dict):
    """
    Flat parameter mapping for one request.

    Body values take precedence over query-string values with the same name.
    Repeated form keys (including the "name[]" convention) are kept as lists.
    """

    @property
    def action(self) -> str:
        return str(self.get("action") or "").strip()


def _collapse(key: str, values: list) -> tuple:
    name = key[:-2] if key.endswith("[]") else key
    if key.endswith("[]") or len(values) > 1:
        return name, values
    return name, values[0]


async def get_request_params(request: Request) -> RequestParams:
    """
    FastAPI dependency returning the merged request parameters.

    File parts of multipart bodies are skipped; the upload endpoint reads
    them directly from the form.
    """
    params = RequestParams()

    for key in request.query_params.keys():
        name, value = _collapse(key, request.query_params.getlist(key))
        params[name] = value

    if request.method in ("POST", "PUT", "PATCH"):
        content_type = request.headers.get("content-type", "")

        if content_type.startswith("application/json"):
            body = await request.body()
            if body:
                try:
                    payload = json.loads(body)
                except ValueError:
                    logger.debug("Ignoring malformed JSON request body")
                    payload = None
                if isinstance(payload, dict):
                    params.update(payload)

        elif content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
            form = await request.form()
            for key in form.keys():
                values = [v for v in form.getlist(key) if not isinstance(v, UploadFile)]
                if values:
                    name, value = _collapse(key, values)
                    params[name] = value

    return params

