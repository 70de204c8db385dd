"""
Helpers shared by the route blueprints
"""
import uuid

from flask import current_app, jsonify, request, session

from part_finder.errors import PartFinderError
from part_finder.services.search_flow import SearchSession


def json_body() -> dict:
    """The request JSON when it is an object, else an empty dict"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def get_session_id() -> str:
    """session_id from the JSON body or form, else one pinned to the cookie session"""
    data = json_body()
    session_id = data.get("session_id") or request.form.get("session_id")
    if session_id:
        return str(session_id)
    if "sid" not in session:
        session["sid"] = uuid.uuid4().hex
    return session["sid"]


def get_search_session() -> SearchSession:
    return current_app.config["SESSIONS"].get(get_session_id())


def error_response(error: PartFinderError):
    body = {
        "success": False,
        "error": error.kind,
        "message": error.notice,
    }
    errors = getattr(error, "errors", None)
    if errors:
        body["errors"] = errors
    return jsonify(body), error.status_code
