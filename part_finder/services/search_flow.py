"""
Search Flow - per-view state for the search form, result carousel and enquiry modal
"""
import logging
import threading
import time
import uuid
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from part_finder.errors import (
    PartFinderError, ConfigurationError, RemoteServiceError, EmptyQueryError,
    SearchInProgressError, EnquiryValidationError,
)
from part_finder.schemas import EnquiryDraft, SearchResult

logger = logging.getLogger(__name__)

STATE_IDLE = "idle"
STATE_SEARCHING = "searching"


class Carousel:
    """Index over the alternatives that wraps at both ends"""

    def __init__(self, count: int = 0, index: int = 0):
        self.count = max(count, 0)
        self.index = 0
        self.go_to(index)

    def go_to(self, index: int) -> int:
        self.index = index % self.count if self.count else 0
        return self.index

    def next(self) -> int:
        return self.go_to(self.index + 1)

    def prev(self) -> int:
        return self.go_to(self.index - 1)

    @property
    def pages(self) -> List[bool]:
        """Page indicator: one flag per item, True for the current one"""
        return [i == self.index for i in range(self.count)]


def validate_enquiry(fields: Dict[str, Any]) -> EnquiryDraft:
    """Build an EnquiryDraft or raise EnquiryValidationError with per-field messages"""
    try:
        return EnquiryDraft.model_validate(fields)
    except ValidationError as e:
        errors = {}
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "__all__"
            errors[field] = err["msg"].replace("Value error, ", "")
        raise EnquiryValidationError(errors) from e


class EnquiryModal:
    """
    Enquiry overlay: closed, or open for one (part_number, brand).

    Submitting validates the draft and then throws it away. Nothing is
    stored or sent anywhere.
    """

    FOCUS_FIELD = "name"

    def __init__(self):
        self.part_number = None
        self.brand = None
        self.is_open = False

    def open(self, part_number: str, brand: str):
        self.part_number = part_number or ""
        self.brand = brand or ""
        self.is_open = True

    def close(self):
        self.part_number = None
        self.brand = None
        self.is_open = False

    def cancel(self):
        self.close()

    def submit(self, fields: Dict[str, Any]) -> None:
        data = dict(fields)
        if self.is_open:
            data["part_number"] = self.part_number
            data["brand"] = self.brand
        draft = validate_enquiry(data)
        logger.info("Enquiry for part %s discarded (submission is local only)", draft.part_number)
        self.close()


class SearchSession:
    """
    State for one view of the page.

    Only one search may be in flight. Each begin() hands out a generation
    token; complete()/fail() with an older token are ignored, so a response
    arriving after reset() never lands.
    """

    def __init__(self, session_id: str = "default"):
        self.session_id = session_id
        self.state = STATE_IDLE
        self.query = ""
        self.result: Optional[SearchResult] = None
        self.notice: Optional[str] = None
        self.carousel = Carousel()
        self.enquiry = EnquiryModal()
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def is_searching(self) -> bool:
        return self.state == STATE_SEARCHING

    def begin(self, query: str) -> int:
        query = (query or "").strip()
        with self._lock:
            if not query:
                raise EmptyQueryError()
            if self.state == STATE_SEARCHING:
                raise SearchInProgressError()
            self._generation += 1
            self.state = STATE_SEARCHING
            self.query = query
            self.result = None
            self.notice = None
            self.carousel = Carousel()
            return self._generation

    def complete(self, token: int, result: SearchResult) -> bool:
        with self._lock:
            if token != self._generation:
                logger.info("Discarding stale search result (token %s)", token)
                return False
            self.state = STATE_IDLE
            self.result = result
            self.notice = None
            self.carousel = Carousel(len(result.alternatives))
            return True

    def fail(self, token: int, error: PartFinderError) -> bool:
        with self._lock:
            if token != self._generation:
                return False
            self.state = STATE_IDLE
            self.result = None
            self.notice = error.notice
            return True

    def notify(self, error: PartFinderError):
        """Show a notice without touching the search state"""
        with self._lock:
            self.notice = error.notice

    def dismiss_notice(self):
        with self._lock:
            self.notice = None

    def reset(self):
        with self._lock:
            self._generation += 1
            self.state = STATE_IDLE
            self.query = ""
            self.result = None
            self.notice = None
            self.carousel = Carousel()
            self.enquiry.close()


    def move_carousel(self, direction: str) -> int:
        with self._lock:
            if direction == "next":
                return self.carousel.next()
            if direction == "prev":
                return self.carousel.prev()
            raise ValueError(f"Unknown carousel direction: {direction}")

    def snapshot(self, alt: int = None) -> Dict[str, Any]:
        """
        Consistent read of everything the page renders.

        alt picks the alternative to show for this render only; the stored
        carousel position is left as it is.
        """
        with self._lock:
            carousel = Carousel(self.carousel.count, self.carousel.index if alt is None else alt)
            return {
                "searching": self.state == STATE_SEARCHING,
                "query": self.query,
                "result": self.result,
                "notice": self.notice,
                "carousel": carousel,
                "enquiry_open": self.enquiry.is_open,
                "enquiry_part_number": self.enquiry.part_number,
                "enquiry_brand": self.enquiry.brand,
            }


class SessionRegistry:
    """
    Process-wide map of session id -> SearchSession.

    Bounded: sessions idle longer than idle_seconds are dropped, and once
    max_sessions is reached the least recently used one goes.
    """

    def __init__(self, max_sessions: int = 1000, idle_seconds: float = 3600, clock=time.monotonic):
        self.max_sessions = max(max_sessions, 1)
        self.idle_seconds = idle_seconds
        self._clock = clock
        self._sessions: "OrderedDict[str, SearchSession]" = OrderedDict()
        self._last_seen: Dict[str, float] = {}
        self._lock = threading.Lock()

    def _evict(self, now: float):
        while self._sessions:
            oldest_id = next(iter(self._sessions))
            expired = now - self._last_seen[oldest_id] > self.idle_seconds
            if not expired and len(self._sessions) < self.max_sessions:
                break
            self._sessions.popitem(last=False)
            self._last_seen.pop(oldest_id, None)
            logger.debug("Evicted search session %s", oldest_id)

    def get(self, session_id: str = None) -> SearchSession:
        session_id = session_id or uuid.uuid4().hex
        now = self._clock()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                self._evict(now)
                session = SearchSession(session_id)
                self._sessions[session_id] = session
            else:
                self._sessions.move_to_end(session_id)
            self._last_seen[session_id] = now
            return session

    def clear(self, session_id: str):
        with self._lock:
            session = self._sessions.pop(session_id, None)
            self._last_seen.pop(session_id, None)
        if session is not None:
            session.reset()

    def __len__(self):
        return len(self._sessions)


def run_search(session: SearchSession, ai_service, query: str, search_logger=None) -> SearchResult:
    """
    One capture -> dispatch -> extract -> render cycle.

    A missing credential is reported before anything else changes, so the
    previous result stays on screen. Any other failure clears the result
    and leaves a notice.
    """
    if not (query or "").strip():
        raise EmptyQueryError()

    try:
        ai_service.ensure_configured()
    except ConfigurationError as e:
        logger.warning("Search blocked: %s", e)
        session.notify(e)
        raise

    token = session.begin(query)
    try:
        result = ai_service.search(session.query)
    except PartFinderError as e:
        session.fail(token, e)
        raise
    except Exception as e:
        error = RemoteServiceError(str(e))
        session.fail(token, error)
        raise error from e

    if session.complete(token, result) and search_logger is not None:
        search_logger(session.query, result)
    return result
