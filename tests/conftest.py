"""
Pytest configuration and shared fixtures for wallet scanner tests.
"""

import pytest

from scripts.lib.config import ScannerConfig
from scripts.lib.helius_client import HeliusClient


TEST_ENDPOINT = "https://api.helius.test/v0"


@pytest.fixture
def sample_wallet_address():
    """Sample Solana wallet address for testing."""
    return "GKvqsuNcnwWqPzzuhLmGi4rzzh55FhJtGizkhHaEJqiV"


@pytest.fixture
def mock_helius_api_key():
    """Mock Helius API key for testing."""
    return "test-api-key-12345"


@pytest.fixture
def scanner_config(mock_helius_api_key):
    """ScannerConfig pointing at a fake endpoint."""
    return ScannerConfig(api_key=mock_helius_api_key, endpoint=TEST_ENDPOINT)


@pytest.fixture
def helius_client(scanner_config):
    """HeliusClient bound to the fake endpoint."""
    return HeliusClient(scanner_config)


@pytest.fixture
def balances_url(sample_wallet_address):
    return f"{TEST_ENDPOINT}/addresses/{sample_wallet_address}/balances"


@pytest.fixture
def transactions_url(sample_wallet_address):
    return f"{TEST_ENDPOINT}/addresses/{sample_wallet_address}/transactions"


@pytest.fixture
def metadata_url():
    return f"{TEST_ENDPOINT}/token-metadata"
