import pytest
from admin_registry.config import Settings

pytestmark = pytest.mark.unit


def test_settings_defaults():
    cfg = Settings(_env_file=None)
    assert cfg.admin_path_prefix == "/admin"
    assert cfg.default_order_policy == "append"
    assert cfg.default_order_step == 10
    assert cfg.api_prefix == "/api/v1"


def test_settings_normalizes_path_prefix():
    cfg = Settings(_env_file=None, admin_path_prefix=" /backoffice/ ")
    assert cfg.admin_path_prefix == "/backoffice"


@pytest.mark.parametrize("prefix", ["admin", "/", ""])
def test_settings_rejects_invalid_path_prefix(prefix):
    with pytest.raises(ValueError):
        Settings(_env_file=None, admin_path_prefix=prefix)


@pytest.mark.parametrize("step", [0, -5])
def test_settings_rejects_non_positive_order_step(step):
    with pytest.raises(ValueError):
        Settings(_env_file=None, default_order_step=step)


def test_settings_rejects_unknown_order_policy():
    with pytest.raises(ValueError):
        Settings(_env_file=None, default_order_policy="middle")


def test_settings_normalizes_log_level():
    cfg = Settings(_env_file=None, log_level="debug")
    assert cfg.log_level == "DEBUG"
    assert cfg.log_level_number == 10


def test_settings_rejects_unknown_log_level():
    with pytest.raises(ValueError):
        Settings(_env_file=None, log_level="chatty")


def test_settings_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("ADMIN_REGISTRY_DEFAULT_ORDER_POLICY", "first")
    monkeypatch.setenv("ADMIN_REGISTRY_ADMIN_PATH_PREFIX", "/ops")
    cfg = Settings(_env_file=None)
    assert cfg.default_order_policy == "first"
    assert cfg.admin_path_prefix == "/ops"
