"""Test utilities for stubroute routers.

Provides a synchronous client and response assertions::

    from stubroute.testing import StubClient, assert_status
"""

from stubroute.testing.assertions import (
    assert_body,
    assert_header,
    assert_json,
    assert_status,
)
from stubroute.testing.client import StubClient

__all__ = [
    "StubClient",
    "assert_body",
    "assert_header",
    "assert_json",
    "assert_status",
]
