"""
Page Routes - Server-rendered search page, carousel and enquiry modal
"""
from flask import Blueprint, current_app, redirect, render_template, request, url_for

from part_finder.api.common import get_search_session
from part_finder.errors import EnquiryValidationError, PartFinderError
from part_finder.services.search_flow import EnquiryModal, run_search

page_bp = Blueprint('page', __name__)


def _render(search_session, status=200, query=None, alt=None, enquiry_errors=None, enquiry_values=None):
    view = search_session.snapshot(alt=alt)
    if query is not None:
        view["query"] = query
    return render_template(
        "index.html",
        focus_field=EnquiryModal.FOCUS_FIELD,
        enquiry_errors=enquiry_errors or {},
        enquiry_values=enquiry_values or {},
        **view,
    ), status


@page_bp.route('/', methods=['GET'])
def index():
    return _render(get_search_session(), alt=request.args.get('alt', type=int))


@page_bp.route('/search', methods=['POST'])
def search():
    search_session = get_search_session()
    query = request.form.get('query', '')
    try:
        run_search(
            search_session,
            current_app.config["AI_SERVICE"],
            query,
            search_logger=current_app.config.get("SEARCH_LOGGER"),
        )
    except PartFinderError as e:
        # Config errors already set the notice without clearing the result
        search_session.notify(e)
        return _render(search_session, status=e.status_code, query=query)
    return _render(search_session)


@page_bp.route('/notice/dismiss', methods=['POST'])
def dismiss_notice():
    get_search_session().dismiss_notice()
    return redirect(url_for('page.index'))


@page_bp.route('/carousel/<direction>', methods=['POST'])
def move_carousel(direction):
    try:
        get_search_session().move_carousel(direction)
    except ValueError:
        return "Unknown direction", 404
    return redirect(url_for('page.index'))


@page_bp.route('/enquiry/open', methods=['POST'])
def open_enquiry():
    get_search_session().enquiry.open(
        request.form.get('part_number', ''),
        request.form.get('brand', ''),
    )
    return redirect(url_for('page.index'))


@page_bp.route('/enquiry/submit', methods=['POST'])
def submit_enquiry():
    search_session = get_search_session()
    fields = {
        "name": request.form.get('name', ''),
        "email": request.form.get('email', ''),
        "phone": request.form.get('phone', ''),
        "message": request.form.get('message') or None,
    }
    try:
        search_session.enquiry.submit(fields)
    except EnquiryValidationError as e:
        return _render(search_session, status=400, enquiry_errors=e.errors, enquiry_values=fields)
    return redirect(url_for('page.index'))


@page_bp.route('/enquiry/cancel', methods=['POST'])
def cancel_enquiry():
    get_search_session().enquiry.cancel()
    return redirect(url_for('page.index'))
