import os

import pytest
import yaml

from headless_renderer.core.config import (
    CONFIG_DIR,
    ConfigurationManager,
    ConfigFileNotFoundError,
    InvalidYamlError,
    config_manager as global_config_manager,
    get_config,
)


@pytest.fixture
def temp_config_files(tmp_path, monkeypatch):
    """
    Writes environment YAML files to a temporary directory and points the
    singleton at it. The singleton's loaded state is restored afterwards so
    other tests keep seeing the packaged configuration.
    """
    manager = ConfigurationManager()
    saved_config, saved_env = manager._config, manager._current_env
    monkeypatch.setattr(ConfigurationManager, "CONFIG_DIR", str(tmp_path))
    monkeypatch.delenv("APP_ENV", raising=False)

    dev_config_content = {
        "renderer": {
            "launch_options": {"args": ["--lang=en-US"], "timeout": 30000},
            "animation": {"poll_interval": 0.1},
        },
        "logging": {"level": "DEBUG"},
    }
    prod_config_content = {
        "renderer": {"launch_options": {"args": [], "timeout": 60000}},
        "logging": {"level": "INFO"},
    }
    (tmp_path / "development.yaml").write_text(yaml.dump(dev_config_content))
    (tmp_path / "production.yaml").write_text(yaml.dump(prod_config_content))
    (tmp_path / "invalid.yaml").write_text("renderer: {launch_options: {timeout: 1000")
    (tmp_path / "not_dict.yaml").write_text(yaml.dump(["list", "instead", "of", "dict"]))

    yield tmp_path

    manager._config, manager._current_env = saved_config, saved_env


def test_load_development_config_default(temp_config_files):
    manager = ConfigurationManager()
    manager.load_config()

    assert manager.current_environment == "development"
    assert manager.get("renderer.launch_options.timeout") == 30000
    assert manager.get("renderer.launch_options.args") == ["--lang=en-US"]
    assert manager.get("non_existent_key") is None
    assert manager.get("non_existent_key", "default_val") == "default_val"


def test_load_production_config_env_var(temp_config_files, monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")

    manager = ConfigurationManager()
    manager.load_config()

    assert manager.current_environment == "production"
    assert manager.get("renderer.launch_options.timeout") == 60000
    assert manager.get("renderer.animation.poll_interval", 0.1) == 0.1


def test_load_config_explicit_env_param(temp_config_files):
    manager = ConfigurationManager()
    manager.load_config(env="production")

    assert manager.current_environment == "production"
    assert manager.get("logging.level") == "INFO"


def test_get_through_non_mapping_returns_default(temp_config_files):
    manager = ConfigurationManager()
    manager.load_config("development")

    assert manager.get("renderer.launch_options.args.first", "fallback") == "fallback"
    assert manager.get("logging.level.name") is None
    assert manager.get("completely.made.up.path", "fallback") == "fallback"


def test_reload_config(temp_config_files, monkeypatch):
    monkeypatch.setenv("APP_ENV", "development")
    manager = ConfigurationManager()
    manager.load_config()
    assert manager.get("renderer.launch_options.timeout") == 30000

    (temp_config_files / "development.yaml").write_text(yaml.dump({"renderer": {"launch_options": {"timeout": 5}}}))

    manager.reload_config()
    assert manager.get("renderer.launch_options.timeout") == 5

    manager.reload_config(env="production")
    assert manager.current_environment == "production"
    assert manager.get("renderer.launch_options.timeout") == 60000


def test_config_file_not_found_error(temp_config_files, monkeypatch):
    monkeypatch.setenv("APP_ENV", "staging")
    manager = ConfigurationManager()

    with pytest.raises(ConfigFileNotFoundError) as excinfo:
        manager.load_config()
    assert "Configuration file not found for environment 'staging'" in str(excinfo.value)
    assert "staging.yaml" in str(excinfo.value)


def test_invalid_yaml_error(temp_config_files):
    manager = ConfigurationManager()

    with pytest.raises(InvalidYamlError) as excinfo:
        manager.load_config("invalid")
    assert "Error parsing YAML" in str(excinfo.value)
    assert "invalid.yaml" in str(excinfo.value)


def test_yaml_not_dict_error(temp_config_files):
    manager = ConfigurationManager()
    manager.load_config("development")

    with pytest.raises(InvalidYamlError) as excinfo:
        manager.load_config("not_dict")
    assert "does not contain a valid YAML dictionary" in str(excinfo.value)
    # The previously loaded configuration is kept.
    assert manager.get("logging.level") == "DEBUG"


def test_singleton_behavior(temp_config_files):
    manager1 = ConfigurationManager()
    manager1.load_config("development")
    manager2 = ConfigurationManager()

    assert manager1 is manager2
    assert manager1 is global_config_manager
    manager2.load_config("production")
    assert manager1.current_environment == "production"
    assert get_config("renderer.launch_options.timeout") == 60000


@pytest.mark.parametrize("env", ["development", "production"])
def test_packaged_configuration_files(env):
    with open(os.path.join(CONFIG_DIR, f"{env}.yaml")) as f:
        settings = yaml.safe_load(f)

    launch_options = settings["renderer"]["launch_options"]
    assert isinstance(launch_options["args"], list)
    assert settings["renderer"]["animation"]["poll_interval"] > 0
    assert settings["logging"]["level"] in {"DEBUG", "INFO", "WARNING", "ERROR"}
