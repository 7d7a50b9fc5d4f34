"""
Shared test fixtures and helpers for the Comando test suite.
"""

import pytest
from typing import Any, Dict, Optional

from comando import Controller, Request, action


# ============================================================================
# Request Helpers
# ============================================================================


def make_request(
    params: Optional[Dict[str, Any]] = None,
    session: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    path: str = "/",
    format: Optional[str] = None,
    flash: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Build the plain request mapping a transport would hand over."""
    return {
        "params": params if params is not None else {},
        "session": session if session is not None else {},
        "flash": flash or {},
        "headers": headers or {},
        "path": path,
        "format": format,
    }


class SampleController(Controller):
    """Controller with a single JSON action used across the suite."""

    @action
    def test_action(self):
        return self.json({"message": "test"})


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def request_data():
    return make_request(
        params={
            "id": "123",
            "name": "test",
            "user": {"name": "John", "email": "john@test.com"},
        },
        session={"user_id": 1, "user_roles": ["admin"]},
        headers={"Accept": "text/html"},
    )


@pytest.fixture
def controller(request_data):
    return SampleController(request_data)


@pytest.fixture
def guest_controller():
    return SampleController(make_request())
