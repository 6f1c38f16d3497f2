import importlib.util
from pathlib import Path

import contracting
import pytest
from contracting.client import ContractingClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
VAULT_PATH = PROJECT_ROOT / "con_staking_vault.py"
REGISTRY_PATH = PROJECT_ROOT / "con_app_registry.py"
LISTENER_PATH = PROJECT_ROOT / "con_inference_listener.py"
STATS_PATH = PROJECT_ROOT / "con_inference_stats.py"
MOCK_ASSET_PATH = PROJECT_ROOT / "tests" / "contracts" / "con_mock_asset.py"
SILENT_ASSET_PATH = PROJECT_ROOT / "tests" / "contracts" / "con_silent_asset.py"
HELPER_PATH = PROJECT_ROOT / "client_helper.py"
SUBMISSION_PATH = (
    Path(contracting.__file__).resolve().parent / "contracts" / "submission.s.py"
)

UNIT = 10 ** 18
VAULT_NAME = "con_staking_vault"


@pytest.fixture(scope="session")
def helper_module():
    spec = importlib.util.spec_from_file_location("client_helper_tests", HELPER_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def client():
    client = ContractingClient(signer="operator", metering=False)
    client.flush()
    client.set_submission_contract(str(SUBMISSION_PATH))
    return client


def submit(client, path, name, constructor_args=None):
    client.submit(
        path.read_text(),
        name=name,
        owner=None,
        constructor_args=constructor_args or {},
    )
    return client.get_contract(name)


@pytest.fixture
def asset(client):
    token = submit(client, MOCK_ASSET_PATH, "con_mock_asset", {"decimals": 18})
    for user in ("alice", "bob", "carol"):
        token.transfer(amount=1000 * UNIT, to=user)
    return token


@pytest.fixture
def vault(client, asset):
    return submit(
        client,
        VAULT_PATH,
        VAULT_NAME,
        {"asset_contract": "con_mock_asset", "name": "Staking Vault Token", "symbol": "svMTK"},
    )


@pytest.fixture
def live_vault(vault, asset):
    asset.approve(amount=UNIT, to=VAULT_NAME)
    vault.initialize(amount=UNIT)
    return vault


@pytest.fixture
def registry(client):
    return submit(client, REGISTRY_PATH, "con_app_registry")


@pytest.fixture
def listener(client):
    return submit(client, LISTENER_PATH, "con_inference_listener")


@pytest.fixture
def stats(client):
    return submit(client, STATS_PATH, "con_inference_stats")


def events_named(output, name):
    """Flattens the events of a full call output into their indexed and plain fields."""
    found = []
    for event in output["events"]:
        if event["event"] == name:
            found.append({**event.get("data_indexed", {}), **event.get("data", {})})
    return found
