"""
Wspólne fixture'y testów.
"""

import pytest

from vat_checker.config import VATCheckerSettings
from vat_checker.tests.helpers import API_URL, FakeRegistry, FakeSleep


@pytest.fixture
def settings() -> VATCheckerSettings:
    return VATCheckerSettings(_env_file=None, vat_api_url=API_URL, vat_retry_count=5)


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry({"6920000013": "Czynny", "5260250995": "Zwolniony"})


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()
