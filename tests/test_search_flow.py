import pytest

from part_finder.errors import (
    ConfigurationError, EmptyQueryError, EnquiryValidationError, ExtractionError,
    RemoteServiceError, SearchInProgressError,
)
from part_finder.schemas import SearchResult
from part_finder.services.search_flow import (
    Carousel, EnquiryModal, SearchSession, SessionRegistry, run_search,
    STATE_IDLE, STATE_SEARCHING,
)


def make_result(part_number="X1", alternatives=0):
    return SearchResult(
        part_number=part_number,
        alternatives=[{"part_number": f"ALT-{i}"} for i in range(alternatives)],
    )


class TestCarousel:

    def test_next_wraps_to_first(self):
        carousel = Carousel(3, index=2)
        assert carousel.next() == 0

    def test_prev_wraps_to_last(self):
        carousel = Carousel(3)
        assert carousel.prev() == 2

    def test_two_items(self):
        carousel = Carousel(2)
        assert [carousel.next(), carousel.next(), carousel.prev()] == [1, 0, 1]

    def test_go_to_out_of_range(self):
        assert Carousel(4).go_to(9) == 1
        assert Carousel(4).go_to(-1) == 3

    def test_empty(self):
        carousel = Carousel(0)
        assert carousel.next() == 0
        assert carousel.prev() == 0
        assert carousel.pages == []

    def test_page_indicator(self):
        carousel = Carousel(3, index=1)
        assert carousel.pages == [False, True, False]


class TestSearchSession:

    def test_begin_clears_previous_result(self):
        session = SearchSession()
        session.complete(session.begin("first"), make_result())
        session.begin("second")
        assert session.result is None
        assert session.state == STATE_SEARCHING

    def test_second_submit_while_searching_is_rejected(self):
        session = SearchSession()
        session.begin("first")
        with pytest.raises(SearchInProgressError):
            session.begin("second")
        assert session.query == "first"

    def test_empty_query_rejected(self):
        session = SearchSession()
        with pytest.raises(EmptyQueryError):
            session.begin("   ")
        assert session.state == STATE_IDLE

    def test_complete_returns_to_idle_with_result(self):
        session = SearchSession()
        token = session.begin("q")
        assert session.complete(token, make_result(alternatives=3))
        assert session.state == STATE_IDLE
        assert session.result.part_number == "X1"
        assert session.carousel.count == 3

    def test_fail_returns_to_idle_with_notice(self):
        session = SearchSession()
        token = session.begin("q")
        session.fail(token, ExtractionError())
        assert session.state == STATE_IDLE
        assert session.result is None
        assert session.notice == "Could not parse AI response. Try again."

    def test_stale_result_after_reset_is_discarded(self):
        session = SearchSession()
        token = session.begin("q")
        session.reset()
        assert not session.complete(token, make_result())
        assert session.result is None
        assert session.state == STATE_IDLE

    def test_reset_allows_new_search(self):
        session = SearchSession()
        session.begin("q")
        session.reset()
        token = session.begin("again")
        assert session.complete(token, make_result("NEW"))
        assert session.result.part_number == "NEW"


class TestSessionRegistry:

    def test_same_id_same_session(self):
        registry = SessionRegistry()
        assert registry.get("a") is registry.get("a")
        assert registry.get("a") is not registry.get("b")

    def test_clear_drops_session(self):
        registry = SessionRegistry()
        session = registry.get("a")
        token = session.begin("q")
        registry.clear("a")
        assert not session.complete(token, make_result())
        assert registry.get("a") is not session


class TestEnquiryModal:

    def test_open_and_cancel(self):
        modal = EnquiryModal()
        modal.open("1756-IB16", "Allen-Bradley")
        assert modal.is_open
        assert modal.part_number == "1756-IB16"
        modal.cancel()
        assert not modal.is_open
        assert modal.part_number is None

    def test_submit_discards_and_closes(self):
        modal = EnquiryModal()
        modal.open("1756-IB16", "Allen-Bradley")
        assert modal.submit({"name": "Sam", "email": "sam@example.com", "phone": "0400 000 000"}) is None
        assert not modal.is_open

    def test_submit_missing_fields_keeps_modal_open(self):
        modal = EnquiryModal()
        modal.open("1756-IB16", "Allen-Bradley")
        with pytest.raises(EnquiryValidationError) as exc:
            modal.submit({"name": "", "email": "not-an-email", "phone": ""})
        assert set(exc.value.errors) == {"name", "email", "phone"}
        assert modal.is_open

    def test_focus_field_is_name(self):
        assert EnquiryModal.FOCUS_FIELD == "name"


class TestRunSearch:

    def test_success(self, api_key, ai_service):
        session = SearchSession()
        result = run_search(session, ai_service, "16 point input")
        assert result.part_number == "1756-IB16"
        assert session.result is result
        assert session.state == STATE_IDLE

    def test_missing_key_leaves_prior_state(self, api_key, ai_service, fake_client, monkeypatch):
        session = SearchSession()
        run_search(session, ai_service, "first")
        monkeypatch.delenv("OPENAI_API_KEY")
        with pytest.raises(ConfigurationError):
            run_search(session, ai_service, "second")
        assert session.result.part_number == "1756-IB16"
        assert session.query == "first"
        assert session.notice == "OpenAI API key not set"
        assert len(fake_client.completions.calls) == 1

    def test_remote_failure_clears_result(self, api_key, ai_service, fake_client):
        session = SearchSession()
        run_search(session, ai_service, "first")
        fake_client.completions.error = TimeoutError("timed out")
        with pytest.raises(RemoteServiceError):
            run_search(session, ai_service, "second")
        assert session.result is None
        assert session.notice == "Failed to search part. Please try again."
        assert session.state == STATE_IDLE

    def test_unexpected_error_still_returns_to_idle(self, api_key):
        class Broken:
            def ensure_configured(self):
                pass

            def search(self, query):
                raise KeyError("boom")

        session = SearchSession()
        with pytest.raises(RemoteServiceError):
            run_search(session, Broken(), "q")
        assert session.state == STATE_IDLE

    def test_search_logger_called_on_success(self, api_key, ai_service):
        logged = []
        run_search(SearchSession(), ai_service, " q ", search_logger=lambda q, r: logged.append((q, r)))
        assert logged[0][0] == "q"
        assert logged[0][1].part_number == "1756-IB16"


class TestSessionRegistryBounds:

    def test_least_recently_used_session_evicted(self):
        registry = SessionRegistry(max_sessions=3)
        first = registry.get("a")
        registry.get("b")
        registry.get("c")
        registry.get("a")
        registry.get("d")
        assert len(registry) == 3
        assert registry.get("a") is first
        assert registry.get("b") is not None
        assert len(registry) == 3

    def test_anonymous_sessions_do_not_accumulate(self):
        registry = SessionRegistry(max_sessions=5)
        for _ in range(50):
            registry.get()
        assert len(registry) == 5

    def test_idle_sessions_expire(self):
        now = [0.0]
        registry = SessionRegistry(max_sessions=100, idle_seconds=60, clock=lambda: now[0])
        stale = registry.get("old")
        now[0] = 30.0
        registry.get("recent")
        now[0] = 90.0
        registry.get("new")
        assert len(registry) == 2
        assert registry.get("old") is not stale


class TestSessionView:

    def test_complete_clears_earlier_notice(self):
        session = SearchSession()
        token = session.begin("q")
        session.notify(SearchInProgressError())
        session.complete(token, make_result())
        assert session.notice is None

    def test_snapshot_alt_does_not_move_carousel(self):
        session = SearchSession()
        session.complete(session.begin("q"), make_result(alternatives=3))
        view = session.snapshot(alt=2)
        assert view["carousel"].index == 2
        assert session.carousel.index == 0
        assert session.snapshot()["carousel"].index == 0

    def test_snapshot_reports_searching(self):
        session = SearchSession()
        session.begin("q")
        view = session.snapshot()
        assert view["searching"] is True
        assert view["query"] == "q"
        assert view["result"] is None

    def test_move_carousel(self):
        session = SearchSession()
        session.complete(session.begin("q"), make_result(alternatives=2))
        assert session.move_carousel("prev") == 1
        assert session.move_carousel("next") == 0
        with pytest.raises(ValueError):
            session.move_carousel("sideways")
