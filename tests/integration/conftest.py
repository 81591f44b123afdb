"""Integration fixtures: every request is authenticated by the fake verifier."""

import pytest


@pytest.fixture(autouse=True)
def authenticated(token_verifier):
    yield token_verifier
