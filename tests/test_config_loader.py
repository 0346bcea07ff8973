from practiceops.config.loader import load_config


def test_load_config_no_file(tmp_path):
    # Should return a default dict if no file exists
    config = load_config(tmp_path / "nonexistent.yaml")
    assert config == {}


def test_load_config_basic(tmp_path):
    config_file = tmp_path / "practiceops.yaml"
    content = """
practiceops:
  log_level: "DEBUG"
server:
  storage_path: "./data"
  port: 4000
dependencies:
  - name: database
    service: postgres
    port: 5432
"""
    config_file.write_text(content)

    config = load_config(config_file)
    assert config["practiceops"]["log_level"] == "DEBUG"
    assert config["server"]["storage_path"] == "./data"
    assert config["server"]["port"] == 4000
    assert config["dependencies"][0]["service"] == "postgres"


def test_load_config_interpolation(tmp_path, monkeypatch):
    monkeypatch.setenv("OPS_STORAGE", "/srv/mdj-data")
    monkeypatch.setenv("COMPOSE_BIN", "docker")
    monkeypatch.delenv("MISSING_VAR", raising=False)

    config_file = tmp_path / "practiceops.yaml"
    content = """
server:
  storage_path: "${OPS_STORAGE}"
orchestration:
  container_command: "${COMPOSE_BIN}"
  compose_command: ["${COMPOSE_CLI:docker-compose}"]
practiceops:
  app_name: "${MISSING_VAR}"
"""
    config_file.write_text(content)

    config = load_config(config_file)
    assert config["server"]["storage_path"] == "/srv/mdj-data"
    assert config["orchestration"]["container_command"] == "docker"
    assert config["orchestration"]["compose_command"] == ["docker-compose"]
    assert config["practiceops"]["app_name"] == ""


def test_load_config_invalid_keys(tmp_path):
    config_file = tmp_path / "practiceops.yaml"
    content = """
unknown_key: true
snapshots:
  retention: 5
"""
    config_file.write_text(content)

    config = load_config(config_file)
    assert "unknown_key" not in config
    assert config["snapshots"]["retention"] == 5


def test_load_config_invalid_yaml_returns_empty(tmp_path):
    config_file = tmp_path / "practiceops.yaml"
    config_file.write_text("server: [unclosed\n")

    assert load_config(config_file) == {}


def test_load_config_non_mapping_returns_empty(tmp_path):
    config_file = tmp_path / "practiceops.yaml"
    config_file.write_text("- just\n- a list\n")

    assert load_config(config_file) == {}
