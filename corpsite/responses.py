from flask import jsonify


def success_response(message=None, data=None, status=200, pagination=None, **extra):
    """Wrap a payload in the ``{success, message, data, pagination}`` envelope."""
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination
    body.update(extra)
    return jsonify(body), status


def error_response(message, status, errors=None, error=None, stack=None):
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    if error is not None:
        body["error"] = error
    if stack is not None:
        body["stack"] = stack
    return jsonify(body), status


def page_response(page, serializer, message=None, **extra):
    return success_response(
        message=message,
        data=[serializer(item) for item in page.items],
        pagination=page.pagination(),
        **extra,
    )
