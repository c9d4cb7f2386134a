import pytest

from aiden.config import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT, LogLevel, load_config


def test_load_config_reads_environment() -> None:
    env = {
        "AIDEN_API_KEY": "env-key",
        "AIDEN_BASE_URL": "https://env.example.com",
        "AIDEN_USER_ID": "user-7",
        "AIDEN_TIMEOUT": "12.5",
        "AIDEN_MAX_RETRIES": "1",
    }

    config = load_config(env=env)

    assert config.api_key == "env-key"
    assert config.base_url == "https://env.example.com"
    assert config.user_id == "user-7"
    assert config.timeout == 12.5
    assert config.max_retries == 1


def test_overrides_win_over_environment() -> None:
    env = {"AIDEN_API_KEY": "env-key", "AIDEN_BASE_URL": "https://env.example.com", "AIDEN_TIMEOUT": "9"}

    config = load_config({"api_key": "flag-key", "timeout": 3.0, "base_url": None}, env=env)

    assert config.api_key == "flag-key"
    assert config.base_url == "https://env.example.com"
    assert config.timeout == 3.0


def test_defaults_apply_when_unset() -> None:
    config = load_config(env={"AIDEN_API_KEY": "k", "AIDEN_BASE_URL": "https://x", "AIDEN_USER_ID": "  "})

    assert config.timeout == DEFAULT_TIMEOUT
    assert config.max_retries == DEFAULT_MAX_RETRIES
    assert config.user_id is None


def test_missing_api_key_exits() -> None:
    with pytest.raises(SystemExit, match="AIDEN_API_KEY"):
        load_config(env={"AIDEN_BASE_URL": "https://x"})


def test_missing_base_url_exits() -> None:
    with pytest.raises(SystemExit, match="AIDEN_BASE_URL"):
        load_config(env={"AIDEN_API_KEY": "k", "AIDEN_BASE_URL": " "})


def test_invalid_numeric_setting_exits() -> None:
    with pytest.raises(SystemExit, match="invalid numeric setting"):
        load_config(env={"AIDEN_API_KEY": "k", "AIDEN_BASE_URL": "https://x", "AIDEN_MAX_RETRIES": "many"})


def test_load_config_defaults_to_process_environment(mocker) -> None:
    mocker.patch.dict(
        "os.environ",
        {"AIDEN_API_KEY": "proc-key", "AIDEN_BASE_URL": "https://proc.example.com"},
        clear=True,
    )

    config = load_config()

    assert config.api_key == "proc-key"
    assert config.base_url == "https://proc.example.com"


def test_log_level_values() -> None:
    assert [level.value for level in LogLevel] == ["debug", "info", "warning", "error"]
