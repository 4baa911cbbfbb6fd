from __future__ import annotations
import pytest

from moviemeter.models import ResultItem
from .mock_endpoint import FakeLoaderFactory, StubClient


@pytest.fixture
def sample_items():
    return [
        ResultItem(imdb_id='tt4154796', title='Avengers: Endgame', year=2019, rating=8.4, votes=1234567),
        ResultItem(imdb_id='tt9419884', title='Doctor Strange in the Multiverse of Madness', year=2022, rating=6.9, votes=480000),
    ]


@pytest.fixture
def other_items():
    return [
        ResultItem(imdb_id='tt0111161', title='The Shawshank Redemption', year=1994, rating=9.3, votes=2900000),
    ]


@pytest.fixture
def stub_client():
    return StubClient()


@pytest.fixture
def loader_factory():
    return FakeLoaderFactory()
