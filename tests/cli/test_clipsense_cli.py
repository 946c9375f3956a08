import base64
import json
import time

from typer.testing import CliRunner

from clipsense import __version__
from clipsense.main import app

runner = CliRunner()


def _expired_jwt() -> str:
    def _seg(data: dict) -> str:
        raw = json.dumps(data).encode()
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()

    header = _seg({"alg": "HS256", "typ": "JWT"})
    payload = _seg({"sub": "42", "exp": int(time.time()) - 86_400})
    return f"{header}.{payload}.signature123"


# --- detect ---

def test_detect_json_output():
    result = runner.invoke(app, ["detect", "--json"], input='{"b":1,"a":2}')
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["detector_id"] == "json-yaml"
    assert payload["suggested_language"] == "json"
    assert {"id": "sort-keys", "label": "Sort Keys"} in payload["actions"]


def test_detect_reads_file(tmp_path):
    source = tmp_path / "data.csv"
    source.write_text("a,b\n1,2\n3,4\n", encoding="utf-8")
    result = runner.invoke(app, ["detect", "--json", str(source)])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["detector_id"] == "csv-tsv"


def test_detect_short_input_json_null():
    result = runner.invoke(app, ["detect", "--json"], input="abc")
    assert result.exit_code == 0
    assert json.loads(result.stdout) is None


def test_detect_table_output():
    result = runner.invoke(app, ["detect"], input="select id from users where id = 1")
    assert result.exit_code == 0
    assert "SQL query detected" in result.stdout
    assert "format-sql" in result.stdout


def test_detect_suggestions_disabled(monkeypatch):
    monkeypatch.setenv("CLIPSENSE_SHOW_INTELLIGENT_SUGGESTIONS", "0")
    result = runner.invoke(app, ["detect"], input='{"a": 1}')
    assert result.exit_code == 0
    assert "disabled" in result.stdout


def test_detect_missing_file(tmp_path):
    result = runner.invoke(app, ["detect", str(tmp_path / "nope.txt")])
    assert result.exit_code == 1


# --- apply ---

def test_apply_sort_keys():
    result = runner.invoke(app, ["apply", "sort-keys"], input='{"b":1,"a":2}')
    assert result.exit_code == 0
    assert result.stdout == '{\n  "a": 2,\n  "b": 1\n}\n'


def test_apply_redact_secret():
    result = runner.invoke(app, ["apply", "redact-secrets"], input="API_KEY=abcd1234")
    assert result.exit_code == 0
    assert result.stdout.strip() == "API_KEY=[REDACTED]"


def test_apply_unknown_action():
    result = runner.invoke(app, ["apply", "to-rgb"], input='{"a": 1}')
    assert result.exit_code == 1
    assert "unknown action" in result.output


def test_apply_validation_error_exits_nonzero():
    result = runner.invoke(app, ["apply", "check-expiration"], input=_expired_jwt())
    assert result.exit_code == 1
    assert "Expired" in result.output


def test_apply_validation_success():
    result = runner.invoke(app, ["apply", "validate-json"], input='{"a": 1}')
    assert result.exit_code == 0
    assert "Valid JSON" in result.output


# --- detectors / callback ---

def test_detectors_lists_registry():
    result = runner.invoke(app, ["detectors"])
    assert result.exit_code == 0
    assert "jwt" in result.stdout
    assert "Detectors" in result.stdout


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"clipsense v{__version__}" in result.stdout


def test_verbose_flag_accepted():
    result = runner.invoke(app, ["-vv", "detect", "--json"], input='{"a": 1}')
    assert result.exit_code == 0
    assert json.loads(result.stdout)["detector_id"] == "json-yaml"
