import pytest

from bundler import ConfigError, collect_modules, load_modules_from_file


def test_duplicate_drivers_are_collapsed():
    config = {
        "all": {
            "doctrine": {"class": "sfDoctrineDatabase", "param": {"dsn": "mysql:host=a"}},
            "replica": {"class": "sfDoctrineDatabase", "param": {"dsn": "mysql:host=b"}},
        }
    }

    assert collect_modules(config) == ["mysql"]


def test_first_seen_order_across_environments():
    config = {
        "prod": {"main": {"param": {"dsn": "pgsql:host=db;dbname=app"}}},
        "dev": {"main": {"param": {"dsn": "sqlite:%SF_DATA_DIR%/app.db"}}},
        "all": {
            "main": {"param": {"dsn": "mysql:host=localhost"}},
            "legacy": {"param": {"dsn": "pgsql:host=old"}},
        },
    }

    assert collect_modules(config) == ["pgsql", "sqlite", "mysql"]


def test_profiles_without_dsn_are_skipped():
    config = {
        "all": {
            "no_param": {"class": "sfDoctrineDatabase"},
            "no_dsn": {"param": {"username": "root"}},
            "empty_driver": {"param": {"dsn": ":host=a"}},
            "not_a_mapping": "oops",
            "ok": {"param": {"dsn": "mssql:host=x"}},
        },
        "weird": ["list", "values"],
    }

    assert collect_modules(config) == ["mssql"]


def test_load_from_yaml_file(tmp_path):
    path = tmp_path / "databases.yml"
    path.write_text(
        "all:\n"
        "  doctrine:\n"
        "    class: sfDoctrineDatabase\n"
        "    param:\n"
        "      dsn: 'mysql:host=localhost;dbname=app'\n"
        "      username: root\n"
        "test:\n"
        "  doctrine:\n"
        "    param:\n"
        "      dsn: 'sqlite::memory:'\n"
    )

    assert load_modules_from_file(path) == ["mysql", "sqlite"]


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_modules_from_file(tmp_path / "databases.yml")


def test_empty_file_has_no_modules(tmp_path):
    path = tmp_path / "databases.yml"
    path.write_text("")

    assert load_modules_from_file(path) == []


def test_non_mapping_document_raises(tmp_path):
    path = tmp_path / "databases.yml"
    path.write_text("- mysql\n- sqlite\n")

    with pytest.raises(ConfigError, match="mapping"):
        load_modules_from_file(path)


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "databases.yml"
    path.write_text("all: [unclosed\n")

    with pytest.raises(ConfigError, match="Could not parse"):
        load_modules_from_file(path)
