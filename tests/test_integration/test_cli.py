"""End-to-end CLI tests through Typer's CliRunner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cmdschemas import __version__
from cmdschemas.app import main
from cmdschemas.cache import ModelCache
from cmdschemas.config import get_cache_dir, get_config_dir, load_global_config
from cmdschemas.exceptions import InvalidUsageError
from cmdschemas.models import CacheConfig

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
BOTOCORE_DATA = FIXTURES_DIR / "botocore_data"
WIDGETS_MODEL = BOTOCORE_DATA / "widgets" / "2021-06-15" / "service-2.json"
GADGETS_MODEL = BOTOCORE_DATA / "gadgets" / "2019-05-05" / "service-2.json"


@pytest.fixture
def run(cli_runner, cli_app, isolated_config):
    """Invoke the CLI with colour disabled so diagnostics are plain text."""

    def _run(*args: str, input: str | None = None):
        return cli_runner.invoke(cli_app, ["--no-color", *args], input=input)

    return _run


@pytest.fixture
def corpus(run, isolated_config: Path) -> Path:
    out = isolated_config / "schemas"
    result = run("extract", "--data-path", str(BOTOCORE_DATA), "--output-dir", str(out))
    assert result.exit_code == 0, result.output
    return out


class TestRoot:
    def test_version(self, run) -> None:
        result = run("--version")
        assert result.exit_code == 0
        assert f"cmdschemas {__version__}" in result.output

    def test_no_args_shows_help(self, cli_runner, cli_app, isolated_config) -> None:
        result = cli_runner.invoke(cli_app, [])
        assert "extract" in result.output
        assert "validate" in result.output


class TestExtract:
    def test_writes_corpus(self, corpus: Path) -> None:
        index = json.loads((corpus / "index.json").read_text(encoding="utf-8"))
        assert index["stats"]["totalServices"] == 2
        assert index["stats"]["successfulExtractions"] == 5
        assert index["stats"]["failedExtractions"] == 1
        assert set(index["services"]) == {"gadgets", "widgets"}
        assert (corpus / "widgets" / "CreateWidgetCommand.json").is_file()
        assert (corpus / "README.md").is_file()

    def test_reports_failures(self, run, isolated_config: Path) -> None:
        result = run(
            "extract", "--data-path", str(BOTOCORE_DATA), "--output-dir", str(isolated_config / "o")
        )
        assert result.exit_code == 0
        assert "BrokenOperation" in result.output
        assert "skipped parameter Spec" in result.output

    def test_service_filter(self, run, isolated_config: Path) -> None:
        out = isolated_config / "only-widgets"
        result = run(
            "extract", "-d", str(BOTOCORE_DATA), "-o", str(out), "--service", "widgets"
        )
        assert result.exit_code == 0, result.output
        assert (out / "widgets").is_dir()
        assert not (out / "gadgets").exists()

    def test_data_path_from_env(self, run, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv("BOTOCORE_DATA_PATH", str(BOTOCORE_DATA))
        monkeypatch.setenv("SCHEMAS_PATH", str(isolated_config / "env-out"))
        result = run("extract", "--workers", "2")
        assert result.exit_code == 0, result.output
        assert (isolated_config / "env-out" / "index.json").is_file()

    def test_missing_data_path(self, run, isolated_config: Path) -> None:
        result = run("extract", "--data-path", str(isolated_config / "absent"))
        assert result.exit_code == 4
        assert "botocore data directory not found" in result.output
        assert "git clone https://github.com/boto/botocore.git" in result.output


class TestValidate:
    def test_clean_corpus(self, run, corpus: Path) -> None:
        result = run("validate", "--output-dir", str(corpus))
        assert result.exit_code == 0, result.output
        assert "All schemas valid" in result.output

    def test_corrupt_corpus_fails(self, run, corpus: Path) -> None:
        (corpus / "widgets" / "ListWidgetsCommand.json").write_text("{nope", encoding="utf-8")
        result = run("validate", "--output-dir", str(corpus))
        assert result.exit_code == 1
        assert "widgets/ListWidgetsCommand invalid JSON" in result.output

    def test_warnings_do_not_fail(self, run, corpus: Path) -> None:
        path = corpus / "widgets" / "ListWidgetsCommand.json"
        doc = json.loads(path.read_text(encoding="utf-8"))
        doc["optionalParameters"] = ["MaxResults"]
        path.write_text(json.dumps(doc), encoding="utf-8")
        result = run("validate", "--output-dir", str(corpus))
        assert result.exit_code == 0
        assert "defines parameter NextToken" in result.output

    def test_json_report(self, run, corpus: Path) -> None:
        result = run("--json", "--quiet", "validate", "--output-dir", str(corpus))
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["ok"] is True
        assert report["stats"]["totalCommands"] == 5

    def test_missing_corpus(self, run, isolated_config: Path) -> None:
        result = run("validate", "--output-dir", str(isolated_config / "absent"))
        assert result.exit_code == 1
        assert "Schemas directory not found" in result.output


class TestPreview:
    def test_prints_all_schemas(self, run) -> None:
        result = run("--json", "--quiet", "preview", str(WIDGETS_MODEL))
        assert result.exit_code == 0, result.output
        schemas = json.loads(result.stdout)
        assert list(schemas) == [
            "CreateWidgetCommand",
            "ListWidgetsCommand",
            "DescribeServiceCommand",
        ]
        assert schemas["CreateWidgetCommand"]["service"] == "widgets"
        assert schemas["CreateWidgetCommand"]["requiredParameters"] == ["Name", "Size"]
        assert schemas["DescribeServiceCommand"]["parameters"] == {}

    def test_single_operation(self, run) -> None:
        result = run(
            "--json", "--quiet", "preview", str(WIDGETS_MODEL), "--operation", "ListWidgets",
            "--service", "gizmos",
        )
        assert result.exit_code == 0, result.output
        schema = json.loads(result.stdout)
        assert schema["service"] == "gizmos"
        assert schema["operation"] == "ListWidgets"
        assert schema["optionalParameters"] == ["MaxResults", "NextToken"]

    def test_unknown_operation(self, run) -> None:
        result = run("preview", str(WIDGETS_MODEL), "--operation", "Nope")
        assert result.exit_code == 4
        assert "Operation 'Nope' not found" in result.output

    def test_failing_operation(self, run) -> None:
        result = run("preview", str(GADGETS_MODEL), "--operation", "BrokenOperation")
        assert result.exit_code == 1
        assert "MissingInputShape" in result.output

    def test_missing_file(self, run, isolated_config: Path) -> None:
        result = run("preview", str(isolated_config / "absent.json"))
        assert result.exit_code == 7
        assert "not found" in result.output

    def test_stdin(self, run) -> None:
        result = run(
            "--json", "--quiet", "preview", "-", "--service", "widgets",
            input=WIDGETS_MODEL.read_text(encoding="utf-8"),
        )
        assert result.exit_code == 0, result.output
        assert "CreateWidgetCommand" in json.loads(result.stdout)


class TestInspect:
    def test_services(self, run, corpus: Path) -> None:
        result = run("inspect", "services", "--output-dir", str(corpus))
        assert result.exit_code == 0, result.output
        assert "gadgets\t2" in result.stdout
        assert "widgets\t3" in result.stdout

    def test_commands(self, run, corpus: Path) -> None:
        result = run("inspect", "commands", "widgets", "-o", str(corpus))
        assert result.exit_code == 0, result.output
        assert "CreateWidgetCommand\t2\t7" in result.stdout

    def test_command_json(self, run, corpus: Path) -> None:
        result = run(
            "--json", "--quiet", "inspect", "command", "PutGadgetCommand", "--service", "gadgets",
            "-o", str(corpus),
        )
        assert result.exit_code == 0, result.output
        doc = json.loads(result.stdout)
        assert doc["summary"]["required"] == ["Id (string)"]

    def test_command_searches_all_services(self, run, corpus: Path) -> None:
        result = run("inspect", "command", "ListWidgetsCommand", "-o", str(corpus))
        assert result.exit_code == 0, result.output
        assert "MaxResults\tnumber" in result.stdout

    def test_command_not_found(self, run, corpus: Path) -> None:
        result = run("inspect", "command", "NopeCommand", "-o", str(corpus))
        assert result.exit_code == 4

    def test_search(self, run, corpus: Path) -> None:
        result = run("inspect", "search", "widget", "-o", str(corpus))
        assert result.exit_code == 0
        assert "widgets\tCreateWidgetCommand" in result.stdout
        assert "widgets\tListWidgetsCommand" in result.stdout
        assert "gadgets" not in result.stdout

    def test_without_corpus(self, run, isolated_config: Path) -> None:
        result = run("inspect", "services", "-o", str(isolated_config / "absent"))
        assert result.exit_code == 4


class TestConfig:
    def test_show(self, run) -> None:
        result = run("--json", "--quiet", "config", "show")
        assert result.exit_code == 0
        assert json.loads(result.stdout)["output_dir"] == "aws-schemas"

    def test_show_effective(self, run, monkeypatch) -> None:
        monkeypatch.setenv("CMDSCHEMAS_OUTPUT_DIR", "/env/out")
        result = run("--json", "--quiet", "config", "show", "--effective")
        assert json.loads(result.stdout)["output_dir"] == "/env/out"

    def test_set_coerces_types(self, run) -> None:
        assert run("config", "set", "workers", "8").exit_code == 0
        assert run("config", "set", "cache.enabled", "false").exit_code == 0
        config = load_global_config()
        assert config.workers == 8
        assert config.cache.enabled is False

    def test_set_unknown_key(self, run) -> None:
        result = run("config", "set", "nope", "1")
        assert result.exit_code == 2
        assert "Unknown config key" in result.output

    def test_set_invalid_value(self, run) -> None:
        result = run("config", "set", "workers", "0")
        assert result.exit_code == 2
        assert load_global_config().workers == 4

    def test_reset_with_force(self, run) -> None:
        run("config", "set", "workers", "8")
        result = run("--force", "config", "reset")
        assert result.exit_code == 0
        assert load_global_config().workers == 4

    def test_reset_declined(self, run) -> None:
        run("config", "set", "workers", "8")
        result = run("config", "reset", input="n\n")
        assert result.exit_code == 0
        assert load_global_config().workers == 8


class TestOutputFormatSetting:
    def test_configured_format_applies(self, run) -> None:
        assert run("config", "set", "output.format", "json").exit_code == 0
        result = run("--quiet", "config", "show")
        assert result.exit_code == 0
        assert json.loads(result.stdout)["output"]["format"] == "json"

    def test_flag_overrides_configured_format(self, run) -> None:
        run("config", "set", "output.format", "json")
        result = run("--plain", "--quiet", "config", "show")
        assert "output_dir\taws-schemas" in result.stdout.splitlines()

    def test_project_config_format(self, run, corpus: Path, isolated_config: Path) -> None:
        (isolated_config / "cmdschemas.json").write_text(
            json.dumps({"output": {"format": "json"}}), encoding="utf-8"
        )
        result = run("inspect", "services", "-o", str(corpus))
        assert result.exit_code == 0, result.output
        assert {"Service": "widgets", "Commands": "3"} in json.loads(result.stdout)

    def test_unsupported_format_rejected(self, run) -> None:
        result = run("config", "set", "output.format", "yaml")
        assert result.exit_code == 2
        assert load_global_config().output.format == "auto"

    def test_broken_config_stops_commands(self, run, corpus: Path) -> None:
        (get_config_dir() / "config.json").write_text("{broken", encoding="utf-8")
        result = run("validate", "--output-dir", str(corpus))
        assert result.exit_code == 1
        assert "Invalid global config" in result.output

    def test_broken_config_can_be_reset(self, run) -> None:
        (get_config_dir() / "config.json").write_text("{broken", encoding="utf-8")
        result = run("--force", "config", "reset")
        assert result.exit_code == 0, result.output
        assert load_global_config().output.format == "auto"

    def test_json_and_plain_conflict(self, run) -> None:
        result = run("--json", "--plain", "config", "show")
        assert isinstance(result.exception, InvalidUsageError)
        assert result.exception.exit_code == 2

    def test_conflict_exits_with_usage_code(
        self, isolated_config, monkeypatch: pytest.MonkeyPatch, capfd
    ) -> None:
        monkeypatch.setattr("cmdschemas.app._setup_signal_handlers", lambda: None)
        monkeypatch.setattr(
            "sys.argv", ["cmdschemas", "--json", "--plain", "config", "show"]
        )
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 2
        assert "--json and --plain cannot be used together" in capfd.readouterr().err


class TestCache:
    def _seed(self) -> None:
        with ModelCache(get_cache_dir(), CacheConfig()) as cache:
            cache.set("https://example.com/s3/service-2.json", {"operations": {}})

    def test_stats(self, run) -> None:
        self._seed()
        result = run("--json", "--quiet", "cache", "stats")
        assert result.exit_code == 0, result.output
        stats = json.loads(result.stdout)
        assert stats["enabled"] is True
        assert stats["size"] == 1
        assert stats["ttl_seconds"] == 86400

    def test_stats_when_disabled(self, run) -> None:
        run("config", "set", "cache.enabled", "false")
        result = run("--json", "--quiet", "cache", "stats")
        assert json.loads(result.stdout) == {"enabled": False}

    def test_clear_with_force(self, run) -> None:
        self._seed()
        result = run("--force", "cache", "clear")
        assert result.exit_code == 0
        assert "Removed 1 cached models." in result.output
        with ModelCache(get_cache_dir(), CacheConfig()) as cache:
            assert cache.stats()["size"] == 0

    def test_clear_declined(self, run) -> None:
        self._seed()
        result = run("cache", "clear", input="n\n")
        assert result.exit_code == 0
        with ModelCache(get_cache_dir(), CacheConfig()) as cache:
            assert cache.stats()["size"] == 1
