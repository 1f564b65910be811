from src.common.settings import DEFAULT_BALANCE_TYPES, load_settings


def test_defaults_when_file_is_missing(tmp_path, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FILE", raising=False)

    settings = load_settings(tmp_path / "missing.yaml")

    assert settings.log_level == "INFO"
    assert settings.log_file is None
    assert settings.preferred_balance_types == DEFAULT_BALANCE_TYPES


def test_yaml_values(tmp_path, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FILE", raising=False)
    path = tmp_path / "settings.yaml"
    path.write_text(
        "logging:\n"
        "  level: WARNING\n"
        "balances:\n"
        "  preferred_types: [expected, closingBooked]\n"
        "errors:\n"
        "  rate_limit_header_prefixes: [X-RateLimit]\n",
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.log_level == "WARNING"
    assert settings.preferred_balance_types == ("expected", "closingBooked")
    assert settings.rate_limit_header_prefixes == ("x-ratelimit",)


def test_environment_overrides(tmp_path, monkeypatch):
    path = tmp_path / "settings.yaml"
    path.write_text("logging:\n  level: WARNING\n", encoding="utf-8")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_FILE", "logs/sync.log")

    settings = load_settings(path)

    assert settings.log_level == "DEBUG"
    assert settings.log_file == "logs/sync.log"


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "other.yaml"
    path.write_text("balances:\n  preferred_types: [interimBooked]\n", encoding="utf-8")
    monkeypatch.setenv("BANK_SYNC_CONFIG", str(path))

    assert load_settings().preferred_balance_types == ("interimBooked",)


def test_repository_config_loads():
    from src.common.settings import DEFAULT_CONFIG_PATH

    settings = load_settings(DEFAULT_CONFIG_PATH)

    assert settings.preferred_balance_types[0] == "interimAvailable"
