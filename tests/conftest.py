# FILE: tests/conftest.py

import pytest
import sys
import os
import logging

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from definition_registry import DefinitionRegistry
from hl7_definition_models import DefinitionSet
from hl7_parser import Hl7Parser

# ==============================================================================
# PYTEST CONFIGURATION & HOOKS
# ==============================================================================

def pytest_configure(config):
    """Configure pytest settings and markers."""
    config.addinivalue_line("markers", "unit: Pure unit tests with no external dependencies.")
    config.addinivalue_line("markers", "integration: Tests that exercise several components or the CLI together.")

@pytest.fixture(scope="session", autouse=True)
def setup_test_environment(pytestconfig):
    """Set up test environment with logging configuration."""
    # Use pytest's log_cli_level if available, otherwise default to INFO
    log_level = pytestconfig.getoption("log_cli_level") or "INFO"
    logging.basicConfig(
        level=log_level.upper(),
        format="[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] - %(message)s",
        stream=sys.stdout,
        force=True,
    )
    logging.info(f"Test logging configured with level: {log_level.upper()}")
    yield

# ==============================================================================
# TEST DATA
# ==============================================================================

SAMPLE_MSH = "MSH|^~\\&|SENDING_APP|SENDING_FACILITY|RECEIVING_APP|RECEIVING_FACILITY|20230101120000||ADT^A01|MSG00001|P|2.7"

@pytest.fixture(scope="session")
def sample_msh() -> str:
    return SAMPLE_MSH

@pytest.fixture(scope="session")
def valid_adt_message() -> str:
    """Provides a shared ADT^A01 message that validates cleanly against the built-in definitions."""
    return "\n".join([
        "MSH|^~\\&|EPIC|EPICADT|SMS|SMSADT|199912271408|CHARRIS|ADT^A04|1817457|D|2.5",
        "PID|1||0000112234^^^MR^MRN||EVERYMAN^ADAM^A^III||19610615|M||C|1200 N ELM STREET^^GREENSBORO^NC^27401-1020",
        "NK1|1|JONES^BARBARA^K|10^MOTHER",
        "PV1|1|I|2000^2012^01||||004777^ATTEND^AARON^A",
    ])

@pytest.fixture
def parser() -> Hl7Parser:
    return Hl7Parser()

def make_registry(segments: dict, version: str = "2.5") -> DefinitionRegistry:
    """Build a registry whose `version` definitions are replaced by the given segments."""
    registry = DefinitionRegistry()
    registry._definitions.clear()
    registry.register(DefinitionSet.model_validate({"version": version, "segments": segments}))
    return registry

@pytest.fixture
def registry_factory():
    return make_registry
