"""
Pytest configuration and shared fixtures for provider tests.

WHAT: Centralized test configuration with markers
WHY: Enable test organization, filtering, and shared test utilities
HOW: Define pytest markers, settings and fake engine fixtures
"""

import importlib.util
import os

import pytest

from llm_providers.core.config import Settings
from llm_providers.llm.provider_factory import reset_provider
from llm_providers.llm.red_candle import CandleRuntime, ModelCache, RedCandleProvider
from tests.fixtures.fake_candle import build_fake_candle


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (isolated component tests)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (multiple components)"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take significant time to run"
    )
    config.addinivalue_line(
        "markers", "requires_candle: Tests that require the real candle engine and model weights"
    )


@pytest.fixture(autouse=True)
def reset_provider_singleton():
    """
    Reset provider singletons before each test.

    WHAT: Clear provider cache between tests
    WHY: Prevent test pollution and ensure clean state
    HOW: Call reset_provider() before and after each test
    """
    reset_provider()
    yield
    reset_provider()


@pytest.fixture
def test_settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        LLM_PROVIDER="red_candle",
        RED_CANDLE_DEVICE="cpu",
        RED_CANDLE_DEFAULT_MODEL=None,
        LM_STUDIO_BASE_URL="http://localhost:1234/v1",
        LM_STUDIO_DEFAULT_MODEL="test-model",
        LLM_MAX_RETRIES=3,
        LLM_RETRY_DELAY=0,
    )


@pytest.fixture
def fake_candle():
    """Fresh fake engine module."""
    return build_fake_candle()


@pytest.fixture
def candle_runtime(fake_candle):
    return CandleRuntime(module=fake_candle)


@pytest.fixture
def missing_runtime():
    """Runtime for an environment without the engine installed."""
    return CandleRuntime(module=None)


@pytest.fixture
def provider(test_settings, candle_runtime):
    """Red candle provider on the fake engine with a private model cache."""
    return RedCandleProvider(config=test_settings, runtime=candle_runtime, cache=ModelCache())


def candle_installed() -> bool:
    return importlib.util.find_spec("candle") is not None


@pytest.fixture
def skip_if_no_candle():
    """Skip test unless the real engine is installed and live tests are enabled."""
    run_live = os.getenv("RUN_LIVE_PROVIDER_TESTS", "false").lower() == "true"
    if not (run_live and candle_installed()):
        pytest.skip("candle engine not available (install it and set RUN_LIVE_PROVIDER_TESTS=true)")
