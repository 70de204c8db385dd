"""
Search API Routes - JSON access to the part search flow
"""
from flask import Blueprint, current_app, jsonify

from part_finder.api.common import error_response, get_search_session, get_session_id, json_body
from part_finder.errors import PartFinderError
from part_finder.services.search_flow import run_search

search_bp = Blueprint('search', __name__)


@search_bp.route('/search', methods=['POST'])
def search_part():
    """
    Identify a part from a free-text description
    POST /api/search

    Request:
        {
            "query": "16 point 24VDC input card for ControlLogix",
            "session_id": "abc"  // optional
        }

    Response:
        {
            "success": true,
            "session_id": "abc",
            "result": {
                "part_number": "1756-IB16",
                "brand": "Allen-Bradley",
                "description": "...",
                "specs": ["..."],
                "application": "...",
                "stock": "In Stock",
                "alternatives": [...]
            }
        }

    Errors:
        {"success": false, "error": "<kind>", "message": "<notice>"}
        400 empty query, 409 search in progress, 503 API key not set,
        502 request failed or response could not be parsed
    """
    data = json_body()
    query = data.get("query", "")
    if not isinstance(query, str):
        query = ""

    search_session = get_search_session()
    try:
        result = run_search(
            search_session,
            current_app.config["AI_SERVICE"],
            query,
            search_logger=current_app.config.get("SEARCH_LOGGER"),
        )
    except PartFinderError as e:
        return error_response(e)

    return jsonify({
        "success": True,
        "session_id": search_session.session_id,
        "result": result.model_dump(),
    })


@search_bp.route('/clear', methods=['POST'])
def clear_session():
    """
    Drop a session's result and invalidate any search still in flight
    POST /api/clear
    """
    current_app.config["SESSIONS"].clear(get_session_id())
    return jsonify({"success": True})
