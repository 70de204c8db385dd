"""
Part finder errors. Every error carries the notice shown to the user.
"""
from part_finder.config import NOTICE_MISSING_KEY, NOTICE_SEARCH_FAILED, NOTICE_PARSE_FAILED


class PartFinderError(Exception):
    kind = "error"
    notice = NOTICE_SEARCH_FAILED
    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.notice)


class ConfigurationError(PartFinderError):
    """Credential missing; raised before any network call"""
    kind = "configuration"
    notice = NOTICE_MISSING_KEY
    status_code = 503


class RemoteServiceError(PartFinderError):
    """Network failure, error status or an unexpected completion envelope"""
    kind = "remote"
    notice = NOTICE_SEARCH_FAILED
    status_code = 502


class ExtractionError(PartFinderError):
    """No brace span, invalid JSON, or a payload that does not decode"""
    kind = "extraction"
    notice = NOTICE_PARSE_FAILED
    status_code = 502


class EmptyQueryError(PartFinderError):
    kind = "empty_query"
    notice = "Query is required"
    status_code = 400


class SearchInProgressError(PartFinderError):
    kind = "search_in_progress"
    notice = "A search is already running. Please wait."
    status_code = 409


class EnquiryValidationError(PartFinderError):
    kind = "validation"
    notice = "Please fill in the required fields."
    status_code = 400

    def __init__(self, errors):
        self.errors = errors
        super().__init__(self.notice)
