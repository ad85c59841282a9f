"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from clonekit import (
    ClonerRegistry,
    CompilingCloner,
    ReflectionCloner,
    SerializationCloner,
    reset_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings re-read from the environment for every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def registry():
    """Empty registry isolated from the process-wide one."""
    return ClonerRegistry()


@pytest.fixture
def reflection_cloner():
    return ReflectionCloner()


@pytest.fixture
def compiled_cloner(registry):
    return CompilingCloner(registry=registry)


@pytest.fixture
def serialization_cloner():
    return SerializationCloner()


@pytest.fixture(params=["reflection", "compiled"])
def cloner(request, registry):
    """Backends supporting all four strategies."""
    if request.param == "reflection":
        return ReflectionCloner()
    return CompilingCloner(registry=registry)


@pytest.fixture(params=["reflection", "compiled", "serialization"])
def deep_cloner(request, registry):
    """Backends supporting the deep strategies."""
    if request.param == "reflection":
        return ReflectionCloner()
    if request.param == "compiled":
        return CompilingCloner(registry=registry)
    return SerializationCloner()
