"""
Enquiry API Routes - Validate enquiry drafts. Nothing is stored or forwarded.
"""
from flask import Blueprint, jsonify

from part_finder.api.common import error_response, json_body
from part_finder.errors import EnquiryValidationError
from part_finder.services.search_flow import validate_enquiry

enquiry_bp = Blueprint('enquiry', __name__)


@enquiry_bp.route('/enquiry', methods=['POST'])
def submit_enquiry():
    """
    Accept an enquiry about a part and discard it
    POST /api/enquiry

    Request:
        {
            "name": "...",
            "email": "...",
            "phone": "...",
            "part_number": "...",
            "brand": "...",
            "message": "..."  // optional
        }

    Response:
        {"success": true, "discarded": true, "part_number": "..."}
    """
    data = json_body()
    try:
        draft = validate_enquiry(data)
    except EnquiryValidationError as e:
        return error_response(e)

    return jsonify({
        "success": True,
        "discarded": True,
        "part_number": draft.part_number,
    })
