"""Shared test fixtures for Timeline Walker tests."""

import pytest

from timeline_walker.source import FeedSource

from .fakes import FakeServer


@pytest.fixture
def make_source():
    """Factory returning (FeedSource, FakeServer) over the given statuses."""

    def factory(statuses: list[dict], page_size: int = 20):
        server = FakeServer(statuses, page_size=page_size)
        return FeedSource("mastodon.example.com", server), server

    return factory
