"""Tests for configuration loading."""

import pytest

from payware_auth.core.config import ConfigError, ConfigParameters, PaywareConfig, load_config
from payware_auth.core.digest import DigestAlgorithm
from payware_auth.core.environment import build_environment, load_env_file
from payware_auth.core.strategy import PartnerRole, PartnerType


def test_defaults_for_merchant():
    config = PaywareConfig.from_mapping({"PAYWARE_PARTNER_ID": "PARTNER01"})

    assert config.partner_type is PartnerType.MERCHANT
    assert config.role is PartnerRole.DIRECT
    assert config.sandbox
    assert config.base_url == "https://sandbox.payware.eu/api"
    assert config.oauth2_base_url == "https://sandbox.payware.eu"
    assert config.api_version == "1"
    assert config.digest_algorithm is DigestAlgorithm.SHA256
    assert config.timeout_seconds == 30


def test_isv_is_delegated():
    config = PaywareConfig.from_mapping(
        {
            "PAYWARE_PARTNER_ID": "ISV00001",
            "PAYWARE_PARTNER_TYPE": "isv",
            "PAYWARE_DEFAULT_MERCHANT_ID": "MERCHANT",
        }
    )

    assert config.role is PartnerRole.DELEGATED
    assert config.default_merchant_id == "MERCHANT"


def test_production_settings():
    config = PaywareConfig.from_mapping(
        {
            "PAYWARE_PARTNER_ID": "PARTNER01",
            "PAYWARE_USE_SANDBOX": "false",
            "PAYWARE_SANDBOX_PRIVATE_KEY_PATH": "sandbox.pem",
            "PAYWARE_PRODUCTION_PRIVATE_KEY_PATH": "production.pem",
            "PAYWARE_CONTENT_DIGEST": "md5",
        }
    )

    assert config.base_url == "https://api.payware.eu/api"
    assert config.private_key_path == "production.pem"
    assert config.digest_algorithm is DigestAlgorithm.MD5


@pytest.mark.parametrize(
    "values, message",
    [
        ({}, "PAYWARE_PARTNER_ID"),
        ({"PAYWARE_PARTNER_ID": "P", "PAYWARE_PARTNER_TYPE": "bank"}, "Invalid partner type"),
        ({"PAYWARE_PARTNER_ID": "P", "PAYWARE_USE_SANDBOX": "maybe"}, "boolean"),
        ({"PAYWARE_PARTNER_ID": "P", "PAYWARE_CONTENT_DIGEST": "sha1"}, "sha1"),
        ({"PAYWARE_PARTNER_ID": "P", "PAYWARE_TIMEOUT_SECONDS": "soon"}, "integer"),
        ({"PAYWARE_PARTNER_ID": "P", "PAYWARE_TIMEOUT_SECONDS": "0"}, "greater than zero"),
    ],
)
def test_invalid_configuration(values, message):
    with pytest.raises(ConfigError, match=message):
        PaywareConfig.from_mapping(values)


def test_env_file_and_overrides(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# payware sandbox\n"
        "PAYWARE_PARTNER_ID=FROMFILE\n"
        "export PAYWARE_PARTNER_TYPE='payment_institution'\n"
        'PAYWARE_SANDBOX_URL="https://sandbox.example/api/"\n'
    )

    config = PaywareConfig.from_env(
        env_file=str(env_file),
        base={},
        overrides={"PAYWARE_PARTNER_ID": "OVERRIDE"},
    )

    assert config.partner_id == "OVERRIDE"
    assert config.partner_type is PartnerType.PAYMENT_INSTITUTION
    assert config.base_url == "https://sandbox.example/api"


def test_base_environment_wins_over_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("PAYWARE_PARTNER_ID=FROMFILE\n")

    environment = build_environment(env_file=str(env_file), base={"PAYWARE_PARTNER_ID": "FROMENV"})

    assert environment.get("PAYWARE_PARTNER_ID") == "FROMENV"


def test_load_env_file_preserves_existing(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("PAYWARE_PARTNER_ID=FROMFILE\nPAYWARE_API_VERSION=2\n")
    environ = {"PAYWARE_PARTNER_ID": "EXISTING"}

    merged = load_env_file(str(env_file), environ=environ)

    assert merged["PAYWARE_PARTNER_ID"] == "EXISTING"
    assert environ["PAYWARE_API_VERSION"] == "2"


def test_load_config_keyword_parameters(tmp_path):
    config = load_config(
        env_file=None,
        base={},
        parameters=ConfigParameters(partner_id="PARAMS", sandbox=False),
        partner_id="EXPLICIT",
        partner_type=PartnerType.ISV,
        timeout_seconds=5,
    )

    assert config.partner_id == "EXPLICIT"
    assert config.partner_type is PartnerType.ISV
    assert not config.sandbox
    assert config.timeout_seconds == 5


def test_load_config_rejects_unknown_parameters():
    with pytest.raises(TypeError):
        load_config(env_file=None, base={}, partner="P")


def test_read_private_key(key_file, private_pem):
    config = load_config(
        env_file=None,
        base={},
        partner_id="P",
        sandbox_private_key_path=str(key_file),
    )

    assert config.read_private_key() == private_pem


def test_read_private_key_errors(tmp_path):
    missing = load_config(env_file=None, base={}, partner_id="P")
    with pytest.raises(ConfigError, match="PAYWARE_SANDBOX_PRIVATE_KEY_PATH"):
        missing.read_private_key()

    unreadable = load_config(
        env_file=None,
        base={},
        partner_id="P",
        sandbox_private_key_path=str(tmp_path / "absent.pem"),
    )
    with pytest.raises(ConfigError, match="Cannot read private key"):
        unreadable.read_private_key()
