"""Pytest configuration and fixtures."""

import os
import pytest

from symkernel.adapter import EngineAdapter
from symkernel.core import Settings, configure_logging, get_settings
from symkernel.engine import (
    Evaluator,
    OutputFormatter,
    bootstrap,
    create_interpreter,
    reset_runtime,
)


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ['SYMKERNEL_LOG_LEVEL'] = 'DEBUG'
    os.environ['SYMKERNEL_SUPERVISED'] = 'false'  # In-process unless a test asks
    configure_logging('DEBUG')


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def runtime(settings):
    """Freshly bootstrapped engine runtime."""
    reset_runtime()
    yield bootstrap(settings)
    reset_runtime()


@pytest.fixture
def restricted_runtime():
    """Runtime bootstrapped with file access disabled."""
    reset_runtime()
    yield bootstrap(Settings(filesystem_enabled=False))
    reset_runtime()


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def evaluator(runtime, settings):
    """Empty evaluation session."""
    return Evaluator(
        runtime,
        history_limit=settings.history_limit,
        parse_cache_size=settings.parse_cache_size,
    )


@pytest.fixture
def formatter():
    """Output formatter with the default decimal pattern."""
    return OutputFormatter()


@pytest.fixture
def interpreter(settings, runtime):
    """In-process interpreter."""
    interp = create_interpreter(settings, runtime)
    yield interp
    interp.close()


@pytest.fixture
def adapter(settings, runtime):
    """In-process engine adapter."""
    engine = EngineAdapter(settings, runtime)
    yield engine
    engine.close()


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def package_file(tmp_path):
    """A source file for Get[]."""
    path = tmp_path / "defs.m"
    path.write_text("(* definitions *)\na = 5\nb = a + 1\na*b\n", encoding="utf-8")
    return path
