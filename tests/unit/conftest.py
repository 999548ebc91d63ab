"""
Unit test fixtures: factory-built desired-state documents.
"""

import pytest

from tests.factories.desired_state_factories import (
    make_app_scenario,
    make_login_role,
    make_role,
)


@pytest.fixture
def role_data():
    """Return randomized non-login role dict."""
    return make_role()


@pytest.fixture
def login_role_data():
    """Return randomized login role dict with a password_env key."""
    return make_login_role()


@pytest.fixture
def app_document():
    """Return the app-owner scenario document dict."""
    return make_app_scenario()
