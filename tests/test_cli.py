from __future__ import annotations

import json
import sys

import pytest
from loguru import logger

from voice_browser_agent.cli import _parse_params, build_parser, main
from voice_browser_agent.storage.bootstrap import SCRAPING_TEMPLATE_ID, WORDPRESS_TEMPLATE_ID


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ("AGENT_CONFIG_FILE", "OPENAI_API_KEY", "AGENT_STEP_DELAY_SECONDS", "AGENT_DEFAULT_USER_ID"):
        monkeypatch.delenv(name, raising=False)
    yield
    logger.remove()
    logger.add(sys.__stderr__, level="INFO")


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_templates_json(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["templates", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert {t["id"] for t in payload["templates"]} == {WORDPRESS_TEMPLATE_ID, SCRAPING_TEMPLATE_ID}


def test_templates_table(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["templates"]) == 0
    out = capsys.readouterr().out
    assert "Data Extraction" in out


def test_execute_runs_template_to_completion(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["execute", SCRAPING_TEMPLATE_ID, "--step-delay", "0", "--param", "target_url=https://shop.test"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "33%" in out
    assert "100%" in out
    assert '"status": "completed"' in out


def test_execute_unknown_template(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["execute", "nope", "--step-delay", "0"]) == 1
    assert "Template not found: nope" in capsys.readouterr().err


def test_execute_rejects_malformed_param(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["execute", SCRAPING_TEMPLATE_ID, "--param", "novalue"]) == 2


def test_parse_params_decodes_json_values() -> None:
    assert _parse_params(["n=3", "flag=true", "name=shop", "sel={\"a\": 1}"]) == {
        "n": 3,
        "flag": True,
        "name": "shop",
        "sel": {"a": 1},
    }


def test_config_command_redacts(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-secret")
    assert main(["config"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["openai_api_key"] == "***"


def test_config_file_with_null_values(tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "agent.yaml"
    path.write_text("log_level: ~\nopenai_model: ~\ndefault_user_id: ~\n", encoding="utf-8")
    assert main(["--config-file", str(path), "config"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["log_level"] == "INFO"
    assert payload["openai_model"]
    assert payload["default_user_id"]
