"""Tests for FetchOrchestrator request lifecycle and stale-response handling."""

import pytest

from moviemeter.models import Filter
from moviemeter.sync import FetchOrchestrator, FetchPhase
from tests.mocks.mock_endpoint import StubClient


F1 = Filter(list_id="top", max_items=10)
F2 = Filter(list_id="popular", year=-1, min_rating=6.0, min_votes=50000, max_items=20)


@pytest.fixture
def client(sample_items, other_items):
    return StubClient({
        "list=top&max=10": other_items,
        "list=popular&year=-1&rating=6&votes=50000&max=20": sample_items,
    })


@pytest.fixture
def orchestrator(qapp, client, loader_factory):
    orch = FetchOrchestrator(client, loader_factory=loader_factory)
    yield orch
    orch.shutdown()


@pytest.fixture
def published(orchestrator):
    events = {"results": [], "errors": [], "loading": []}
    orchestrator.resultsChanged.connect(events["results"].append)
    orchestrator.errorChanged.connect(events["errors"].append)
    orchestrator.loadingChanged.connect(events["loading"].append)
    return events


class TestCycle:

    def test_initial_state(self, orchestrator):
        assert orchestrator.phase is FetchPhase.IDLE
        assert orchestrator.results == ()
        assert orchestrator.error is None
        assert not orchestrator.is_fetching
        assert orchestrator.last_outcome is None

    def test_settle_issues_one_request(self, orchestrator, loader_factory, published):
        orchestrator.on_settled(F1)

        assert len(loader_factory.loaders) == 1
        assert loader_factory.last.started
        assert loader_factory.last.generation == orchestrator.generation
        assert orchestrator.phase is FetchPhase.FETCHING
        assert published["loading"] == [True]

    def test_request_uses_encoded_query(self, orchestrator, loader_factory, client):
        orchestrator.on_settled(F2)
        loader_factory.last.resolve()
        assert client.queries == ["list=popular&year=-1&rating=6&votes=50000&max=20"]

    def test_success_publishes_results(self, orchestrator, loader_factory, published, sample_items):
        orchestrator.on_settled(F2)
        loader_factory.last.resolve()

        assert orchestrator.results == tuple(sample_items)
        assert published["results"] == [tuple(sample_items)]
        assert published["loading"] == [True, False]
        assert orchestrator.phase is FetchPhase.IDLE
        assert orchestrator.last_outcome is FetchPhase.SUCCEEDED

    def test_results_replaced_wholesale(self, orchestrator, loader_factory, sample_items, other_items):
        orchestrator.on_settled(F2)
        loader_factory.last.resolve()
        orchestrator.on_settled(F1)
        loader_factory.last.resolve()

        assert orchestrator.results == tuple(other_items)

    def test_each_settle_is_one_cycle(self, orchestrator, loader_factory):
        orchestrator.on_settled(F1)
        loader_factory.last.resolve()
        orchestrator.on_settled(F1)
        assert len(loader_factory.loaders) == 2


class TestFailure:

    def test_failure_keeps_previous_results(self, orchestrator, loader_factory, published, sample_items):
        orchestrator.on_settled(F2)
        loader_factory.last.resolve()

        orchestrator.on_settled(F1)
        loader_factory.last.reject("Results endpoint returned status 500")

        assert orchestrator.error == "Results endpoint returned status 500"
        assert orchestrator.results == tuple(sample_items)
        assert published["errors"] == ["Results endpoint returned status 500"]
        assert not orchestrator.is_fetching
        assert orchestrator.last_outcome is FetchPhase.FAILED

    def test_success_clears_error(self, orchestrator, loader_factory, published):
        orchestrator.on_settled(F1)
        loader_factory.last.reject("offline")
        orchestrator.on_settled(F1)
        loader_factory.last.resolve()

        assert orchestrator.error is None
        assert published["errors"] == ["offline", None]


class TestCancellation:

    def test_new_settle_stops_previous_loader(self, orchestrator, loader_factory):
        orchestrator.on_settled(F1)
        first = loader_factory.last
        orchestrator.on_settled(F2)

        assert first.stopped
        assert not loader_factory.last.stopped
        assert loader_factory.last.generation == first.generation + 1

    def test_late_stale_response_is_discarded(self, orchestrator, loader_factory, published, sample_items, other_items):
        """F1 issued, F2 issued; F2 answers first, F1 answers late -> F2 stays."""
        orchestrator.on_settled(F1)
        first = loader_factory.last
        orchestrator.on_settled(F2)
        second = loader_factory.last

        second.resolve()
        first.resolve()

        assert orchestrator.results == tuple(sample_items)
        assert published["results"] == [tuple(sample_items)]

    def test_stale_response_before_current_is_discarded(self, orchestrator, loader_factory, published):
        orchestrator.on_settled(F1)
        first = loader_factory.last
        orchestrator.on_settled(F2)

        first.resolve()

        assert orchestrator.results == ()
        assert published["results"] == []
        assert orchestrator.is_fetching

    def test_stale_failure_is_discarded(self, orchestrator, loader_factory, published):
        orchestrator.on_settled(F1)
        first = loader_factory.last
        orchestrator.on_settled(F2)

        first.reject("aborted")

        assert orchestrator.error is None
        assert published["errors"] == []
        assert orchestrator.phase is FetchPhase.FETCHING

    def test_loading_stays_on_across_replacement(self, orchestrator, loader_factory, published):
        orchestrator.on_settled(F1)
        orchestrator.on_settled(F2)
        assert published["loading"] == [True]
        loader_factory.last.resolve()
        assert published["loading"] == [True, False]

    def test_shutdown_discards_in_flight(self, orchestrator, loader_factory, published):
        orchestrator.on_settled(F1)
        pending = loader_factory.last
        orchestrator.shutdown()

        pending.resolve()

        assert pending.stopped
        assert orchestrator.results == ()
        assert not orchestrator.is_fetching
        assert published["loading"] == [True, False]
