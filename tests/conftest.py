import pytest

from swapstring import ContractId


@pytest.fixture
def contract_id():
    return ContractId(bytes(range(32)))


@pytest.fixture
def other_contract_id():
    return ContractId(bytes(range(100, 132)))


@pytest.fixture
def asset(contract_id):
    """Canonical text of contract_id."""
    return str(contract_id)


@pytest.fixture
def other_asset(other_contract_id):
    return str(other_contract_id)


@pytest.fixture
def payment_hash_hex():
    return "aa" * 32
