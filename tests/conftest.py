"""Shared test fixtures."""

import pytest

from .mocks import FakeSigner, build_payment_requirement


@pytest.fixture
def signer():
    return FakeSigner()


@pytest.fixture
def payment_requirement():
    return build_payment_requirement()
