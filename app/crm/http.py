import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, jsonify, request

logger = logging.getLogger(__name__)


def json_error(message: str, status: int):
    return jsonify({"error": message}), status


def not_found(resource: str):
    return json_error(f"{resource} not found", 404)


def id_required(resource: str):
    return json_error(f"{resource} ID is required", 400)


def request_payload() -> Any:
    """
    JSON body of the request. Anything that is not valid JSON comes back as
    None, which the document helpers reject as a schema failure.
    """
    return request.get_json(silent=True)


def json_api(failure_message: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Handler boundary for the resource API: any exception is logged, the
    request's session is rolled back and the caller gets a fixed 500 body.
    The underlying cause never reaches the response.
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(fn)
        def wrapped(*args: Any, **kwargs: Any):
            try:
                return fn(*args, **kwargs)
            except Exception:
                logger.exception("%s %s error", request.method, request.path)
                s = getattr(g, "db_session", None)
                if s is not None:
                    s.rollback()
                return json_error(failure_message, 500)

        return wrapped

    return decorator
