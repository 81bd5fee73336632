"""Tests for the `comment` CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from src.cli import app

runner = CliRunner()

CONFIG = """
config:
  database:
    host: localhost
    username: admin
    password: secret
  comments:
    - object_type: database
      object_name: my_database
      comment: my database comment
    - object_type: role
      object_name: demo
      comment: my role comment
    - database: my_database
      object_type: table
      object_name: table1
      comment: my table comment
"""


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG)
    return path


def _invoke(*args: str):
    return runner.invoke(app, ["comment", *args])


def test_apply_sets_all_declared_comments(config_path, fake_postgres):
    result = _invoke("apply", "--config", str(config_path))

    assert result.exit_code == 0, result.output
    assert fake_postgres.get_comment("DATABASE", "my_database") == "my database comment"
    assert fake_postgres.get_comment("ROLE", "demo") == "my role comment"
    assert fake_postgres.get_comment("TABLE", "table1", "my_database") == "my table comment"
    assert "3 comment(s) changed" in result.output


def test_apply_is_idempotent(config_path, fake_postgres):
    _invoke("apply", "--config", str(config_path))
    statements_before = len(fake_postgres.statements())

    result = _invoke("apply", "--config", str(config_path))

    assert result.exit_code == 0, result.output
    assert len(fake_postgres.statements()) == statements_before
    assert "0 comment(s) changed" in result.output


def test_apply_corrects_drift(config_path, fake_postgres):
    _invoke("apply", "--config", str(config_path))
    fake_postgres.set_comment("ROLE", "demo", "edited by hand")

    result = _invoke("apply", "--config", str(config_path))

    assert result.exit_code == 0, result.output
    assert fake_postgres.get_comment("ROLE", "demo") == "my role comment"
    assert "1 comment(s) changed" in result.output


def test_plan_makes_no_changes(config_path, fake_postgres):
    result = _invoke("plan", "--config", str(config_path))

    assert result.exit_code == 0, result.output
    assert fake_postgres.statements() == []
    assert "create" in result.output


def test_destroy_clears_comments(config_path, fake_postgres):
    _invoke("apply", "--config", str(config_path))

    result = _invoke("destroy", "--config", str(config_path), "--force")

    assert result.exit_code == 0, result.output
    assert fake_postgres.comments == {}


def test_destroy_cancelled_without_confirmation(config_path, fake_postgres):
    _invoke("apply", "--config", str(config_path))

    result = runner.invoke(
        app, ["comment", "destroy", "--config", str(config_path)], input="n\n"
    )

    assert result.exit_code == 0
    assert fake_postgres.get_comment("ROLE", "demo") == "my role comment"


def test_show_imports_existing_comment(config_path, fake_postgres):
    fake_postgres.set_comment("TABLE", "table1", "hello", dbname="my_database")

    result = _invoke(
        "show", "my_database.table1", "--type", "table", "--config", str(config_path)
    )

    assert result.exit_code == 0, result.output
    assert "hello" in result.output


def test_show_rejects_malformed_id(config_path, fake_postgres):
    result = _invoke("show", "table1", "--type", "table", "--config", str(config_path))

    assert result.exit_code == 1


def test_status_reports_feature_support(config_path, fake_postgres):
    result = _invoke("status", "--config", str(config_path))

    assert result.exit_code == 0, result.output
    assert "15.2" in result.output


def test_old_server_fails_with_error_exit(config_path, fake_postgres):
    fake_postgres.server_version = 70400

    result = _invoke("apply", "--config", str(config_path))

    assert result.exit_code == 1
    assert fake_postgres.statements() == []


def test_unsupported_object_type_in_config(tmp_path, fake_postgres):
    path = tmp_path / "config.yaml"
    path.write_text(
        "config:\n  comments:\n    - object_type: index\n      object_name: idx\n"
    )

    result = _invoke("apply", "--config", str(path))

    assert result.exit_code == 1
    assert fake_postgres.connections == []


def test_missing_config_file(tmp_path):
    result = _invoke("plan", "--config", str(tmp_path / "nope.yaml"))

    assert result.exit_code == 1


def test_load_returns_host_state_for_declared_comments(config_path):
    from src.cli.commands.comment import _load, _resources
    from src.infra.postgres import ResourceData

    _, states = _load(config_path)

    assert all(isinstance(state, ResourceData) for state in states)
    assert [state.id for state in states] == ["", "", ""]
    assert states[2].attributes == {
        "object_type": "table",
        "object_name": "table1",
        "database": "my_database",
        "comment": "my table comment",
    }
    assert [r.resource_id for r in _resources(states)] == [
        "postgres.my_database",
        "postgres.demo",
        "my_database.table1",
    ]


def test_apply_reports_stored_ids(config_path, fake_postgres):
    result = _invoke("apply", "--config", str(config_path))

    assert result.exit_code == 0, result.output
    assert "Created comment on role postgres.demo" in result.output
    assert "Created comment on table my_database.table1" in result.output


def test_show_prints_imported_state(config_path, fake_postgres):
    fake_postgres.set_comment("ROLE", "demo", "imported")

    result = _invoke("show", "postgres.demo", "--type", "role", "--config", str(config_path))

    assert result.exit_code == 0, result.output
    assert "Comment postgres.demo" in result.output
    assert "object_name" in result.output
    assert "imported" in result.output
