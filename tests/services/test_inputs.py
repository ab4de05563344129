import pytest

from playpromote.errors import ConfigurationError
from playpromote.services.inputs import build_config, parse_update_priority, parse_user_fraction


def _inputs(**overrides):
    values = {
        "package_name": "com.example.app",
        "service_account_json_raw": '{"type": "service_account"}',
        "from_track": "beta",
        "to_track": "production",
    }
    values.update(overrides)
    return values


def test_build_config_parses_rollout_values():
    config = build_config(**_inputs(user_fraction="0.2", update_priority="3"))

    assert config.user_fraction == 0.2
    assert config.update_priority == 3
    assert config.from_track == "beta"


def test_build_config_treats_empty_inputs_as_unset():
    config = build_config(**_inputs(user_fraction="", update_priority="  "))

    assert config.user_fraction is None
    assert config.update_priority is None


@pytest.mark.parametrize("missing", ["package_name", "service_account_json_raw", "from_track", "to_track"])
def test_build_config_requires_inputs(missing):
    with pytest.raises(ConfigurationError, match="Missing required input"):
        build_config(**_inputs(**{missing: ""}))


def test_out_of_range_values_are_left_to_the_api():
    assert parse_user_fraction("1.5") == 1.5
    assert parse_update_priority("9") == 9


def test_unparseable_values_are_configuration_errors():
    with pytest.raises(ConfigurationError, match="user-fraction"):
        parse_user_fraction("half")
    with pytest.raises(ConfigurationError, match="inapp-update-priority"):
        parse_update_priority("2.5")


def test_config_repr_hides_credentials():
    config = build_config(**_inputs(service_account_json_raw='{"private_key": "secret"}'))

    assert "secret" not in repr(config)
