from expense_tracker.config import DEFAULT_CONFIG, load_config, save_config


def test_defaults_without_file_or_environment():
    config = load_config(environ={})

    assert config == DEFAULT_CONFIG
    assert config["token_ttl_hours"] == 24
    assert config["bcrypt_rounds"] == 10
    assert config["api_prefix"] == "/api/v1"


def test_yaml_file_merged_over_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    save_config({"db_path": "data/tracker.db", "bcrypt_rounds": "12", "log_level": "debug"}, path)

    config = load_config(path, environ={})

    assert config["db_path"] == "data/tracker.db"
    assert config["bcrypt_rounds"] == 12
    assert config["log_level"] == "DEBUG"
    assert config["upload_dir"] == DEFAULT_CONFIG["upload_dir"]


def test_environment_overrides_file(tmp_path):
    path = tmp_path / "config.yaml"
    save_config({"db_path": "from-file.db", "jwt_secret": "file-secret"}, path)

    config = load_config(
        path,
        environ={"EXPENSE_TRACKER_DB": "from-env.db", "JWT_SECRET": "env-secret", "LOG_LEVEL": ""},
    )

    assert config["db_path"] == "from-env.db"
    assert config["jwt_secret"] == "env-secret"
    assert config["log_level"] == "INFO"


def test_missing_file_uses_defaults(tmp_path):
    config = load_config(tmp_path / "missing.yaml", environ={})
    assert config["db_path"] == DEFAULT_CONFIG["db_path"]


def test_defaults_are_not_shared_between_loads():
    first = load_config(environ={})
    first["cors_origins"].append("http://example.com")

    assert load_config(environ={})["cors_origins"] == ["*"]
