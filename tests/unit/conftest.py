"""
Fixtures for unit tests.

Blocks real HTTP from every unit test: anything that reaches
``requests.request`` without its own mock fails loudly. Tests that
exercise the client patch the same target again, which takes precedence.
"""

import pytest


@pytest.fixture(autouse=True)
def block_real_http(mocker):
    """Fail any test that would talk to the network."""
    return mocker.patch(
        "kazi.api.client.requests.request",
        side_effect=AssertionError("Unexpected real HTTP request in unit test"),
    )
