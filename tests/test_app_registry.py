import pytest

from conftest import events_named


def register(registry, app_id, block_num=1, **kwargs):
    registry.register_app(app_id=app_id, environment={"block_num": block_num}, **kwargs)


def test_seed_sets_admin(registry):
    assert registry.get_admin() == "operator"
    assert registry.get_app_count() == 0


def test_register_app_starts_active(registry):
    register(registry, "test-app-1", block_num=7)

    assert registry.get_app_count() == 1
    assert registry.is_app_active(app_id="test-app-1")
    app = registry.get_app(app_id="test-app-1")
    assert app["exists"]
    assert app["registered_at"] == 7


def test_register_rejects_empty_and_duplicate(registry):
    with pytest.raises(AssertionError, match="App ID cannot be empty"):
        register(registry, "")

    register(registry, "dup")
    with pytest.raises(AssertionError, match="App ID already registered"):
        register(registry, "dup", block_num=2)

    assert registry.get_app_count() == 1


def test_register_requires_admin(registry):
    with pytest.raises(AssertionError, match="Only admin"):
        register(registry, "test-app-2", signer="mallory")


def test_update_app_status_toggles(registry):
    register(registry, "toggle")

    registry.update_app_status(app_id="toggle", is_active=False)
    assert not registry.is_app_active(app_id="toggle")

    registry.update_app_status(app_id="toggle", is_active=True)
    assert registry.is_app_active(app_id="toggle")
    assert registry.get_app(app_id="toggle")["registered_at"] == 1


def test_update_app_status_rejects_unknown_app(registry):
    with pytest.raises(AssertionError, match="App ID not registered"):
        registry.update_app_status(app_id="nonexistent-app", is_active=False)

    assert not registry.is_app_active(app_id="nonexistent-app")


def test_update_app_status_requires_admin(registry):
    register(registry, "guarded")

    with pytest.raises(AssertionError, match="Only admin"):
        registry.update_app_status(app_id="guarded", is_active=False, signer="mallory")

    assert registry.is_app_active(app_id="guarded")


def test_transfer_admin_hands_over_control(registry):
    registry.transfer_admin(new_admin="bob")
    assert registry.get_admin() == "bob"

    with pytest.raises(AssertionError, match="Only admin"):
        register(registry, "new-app")

    register(registry, "new-admin-app", signer="bob")
    assert registry.get_app_count() == 1


def test_transfer_admin_rejects_zero_address(registry):
    with pytest.raises(AssertionError, match="Invalid admin address"):
        registry.transfer_admin(new_admin="0" * 64)

    with pytest.raises(AssertionError, match="Invalid admin address"):
        registry.transfer_admin(new_admin="")


def test_register_and_status_events(registry):
    output = registry.register_app(
        app_id="event-test-app", environment={"block_num": 3}, return_full_output=True
    )
    assert events_named(output, "AppRegistered") == [
        {"app_id": "event-test-app", "registration_block": 3}
    ]

    output = registry.update_app_status(
        app_id="event-test-app", is_active=False, return_full_output=True
    )
    assert events_named(output, "AppStatusUpdated") == [
        {"app_id": "event-test-app", "status": "inactive"}
    ]
