"""Integration tests for CLI commands."""

from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from tea_rank_badge.cli import app
from tea_rank_badge.client import RegistryClient
from tea_rank_badge.readme import END_MARKER, START_MARKER

runner = CliRunner()

INFO = {"teaRank": 75.5432, "projectId": "123456", "projectName": "curl"}
SEARCH = {"projects": [{"projectId": "123456", "name": "curl"}], "totalCount": 1}


class FakeRegistry:
    """Answers with fresh (status, json) responses and remembers requests."""

    def __init__(self) -> None:
        self.search = (200, SEARCH)
        self.info = (200, INFO)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/projects/search"):
            status, body = self.search
        else:
            status, body = self.info
        return httpx.Response(status, json=body)


@pytest.fixture()
def registry(monkeypatch) -> FakeRegistry:
    fake = FakeRegistry()

    def make_client(config, log):
        return RegistryClient(config, log, transport=httpx.MockTransport(fake), sleep=lambda _: None)

    monkeypatch.setattr("tea_rank_badge.cli.RegistryClient", make_client)
    return fake


@pytest.fixture()
def paths(tmp_path: Path) -> list[str]:
    return [
        "--svg-path", str(tmp_path / ".github" / "tea-rank-badge.svg"),
        "--readme-path", str(tmp_path / "README.md"),
    ]


class TestUpdate:
    def test_writes_badge_and_readme(self, tmp_path: Path, registry, paths) -> None:
        (tmp_path / "README.md").write_text("# Demo\n", encoding="utf-8")
        result = runner.invoke(app, ["update", "--project-id", "123456", *paths])
        assert result.exit_code == 0, result.output
        svg = (tmp_path / ".github" / "tea-rank-badge.svg").read_text(encoding="utf-8")
        assert ">76<" in svg
        readme = (tmp_path / "README.md").read_text(encoding="utf-8")
        assert START_MARKER in readme and END_MARKER in readme
        assert "Badge updated successfully" in result.output

    def test_update_is_default_command(self, tmp_path: Path, registry, paths) -> None:
        result = runner.invoke(app, ["--project-id", "123456", *paths])
        assert result.exit_code == 0, result.output
        assert (tmp_path / ".github" / "tea-rank-badge.svg").exists()

    def test_second_run_is_noop(self, tmp_path: Path, registry, paths) -> None:
        runner.invoke(app, ["--project-id", "123456", *paths])
        result = runner.invoke(app, ["--project-id", "123456", *paths])
        assert result.exit_code == 0
        assert "Badge already up to date" in result.output

    def test_search_by_name(self, tmp_path: Path, registry, paths) -> None:
        result = runner.invoke(app, ["--name", "curl", "--no-readme", *paths])
        assert result.exit_code == 0, result.output
        assert registry.requests[0].url.params["text"] == "curl"
        assert not (tmp_path / "README.md").exists()

    def test_style_precision_label_color(self, tmp_path: Path, registry, paths) -> None:
        result = runner.invoke(app, [
            "--project-id", "123456", "--no-readme", *paths,
            "--style", "flat-square", "--precision", "2", "--label", "rank", "--color", "blue",
        ])
        assert result.exit_code == 0, result.output
        svg = (tmp_path / ".github" / "tea-rank-badge.svg").read_text(encoding="utf-8")
        assert ">75.54<" in svg
        assert ">rank<" in svg
        assert "#007ec6" in svg
        assert 'rx="0"' in svg

    def test_missing_project(self, registry, paths) -> None:
        result = runner.invoke(app, ["update", *paths])
        assert result.exit_code == 1
        assert "--project-id or --name" in result.output
        assert registry.requests == []

    def test_bad_flag_value_exits_1(self, registry, paths) -> None:
        result = runner.invoke(app, ["--project-id", "1", "--style", "round", *paths])
        assert result.exit_code == 1
        assert registry.requests == []

    def test_out_of_range_precision_exits_1(self, registry, paths) -> None:
        result = runner.invoke(app, ["--project-id", "1", "--precision", "-1", *paths])
        assert result.exit_code == 1
        assert registry.requests == []

    def test_no_args_reports_missing_project(self, registry) -> None:
        result = runner.invoke(app, [])
        assert result.exit_code == 1

    def test_search_without_results(self, registry, paths) -> None:
        registry.search = (200, {"projects": [], "totalCount": 0})
        result = runner.invoke(app, ["--name", "nope", *paths])
        assert result.exit_code == 1
        assert "Project not found" in result.output

    def test_http_error_exits_1(self, tmp_path: Path, registry, paths) -> None:
        registry.info = (500, None)
        result = runner.invoke(app, ["--project-id", "123456", "--retries", "1", *paths])
        assert result.exit_code == 1
        assert "HTTP 500" in result.output
        assert len(registry.requests) == 2
        assert not (tmp_path / ".github").exists()

    def test_retries_from_environment(self, registry, paths, monkeypatch) -> None:
        monkeypatch.setenv("TEA_RETRIES", "0")
        registry.info = (503, None)
        result = runner.invoke(app, ["--project-id", "123456", *paths])
        assert result.exit_code == 1
        assert len(registry.requests) == 1

    def test_base_url_flag(self, registry, paths) -> None:
        result = runner.invoke(app, [
            "--project-id", "123456", "--base-url", "https://registry.example/api", *paths,
        ])
        assert result.exit_code == 0, result.output
        assert str(registry.requests[0].url) == "https://registry.example/api/projects/info?id=123456"

    def test_no_insert_without_markers_warns(self, tmp_path: Path, registry, paths) -> None:
        (tmp_path / "README.md").write_text("# Demo\n", encoding="utf-8")
        result = runner.invoke(app, ["--project-id", "123456", "--no-insert", *paths])
        assert result.exit_code == 0, result.output
        assert "Badge markers not found" in result.output
        assert (tmp_path / "README.md").read_text(encoding="utf-8") == "# Demo\n"

    def test_no_insert_without_readme_fails(self, registry, paths) -> None:
        result = runner.invoke(app, ["--project-id", "123456", "--no-insert", *paths])
        assert result.exit_code == 1
        assert "README not found" in result.output

    def test_quiet_hides_progress(self, registry, paths) -> None:
        result = runner.invoke(app, ["--project-id", "123456", "--quiet", *paths])
        assert result.exit_code == 0
        assert result.output == ""


class TestDryRun:
    def test_pending_changes_exit_2(self, tmp_path: Path, registry, paths) -> None:
        result = runner.invoke(app, ["--project-id", "123456", "--dry-run", *paths])
        assert result.exit_code == 2
        assert "[DRY RUN] Changes would be made" in result.output
        assert list(tmp_path.iterdir()) == []

    def test_no_pending_changes_exit_0(self, registry, paths) -> None:
        runner.invoke(app, ["--project-id", "123456", *paths])
        result = runner.invoke(app, ["--project-id", "123456", "--dry-run", *paths])
        assert result.exit_code == 0
        assert "[DRY RUN] No changes needed" in result.output


class TestPrint:
    def test_prints_name_and_rank(self, registry) -> None:
        result = runner.invoke(app, ["print", "--project-id", "123456"])
        assert result.exit_code == 0, result.output
        assert "curl: 75.5432" in result.output

    def test_quiet_prints_only_rank(self, registry) -> None:
        result = runner.invoke(app, ["print", "--name", "curl", "--quiet"])
        assert result.exit_code == 0, result.output
        assert result.output == "75.5432\n"

    def test_whole_rank_has_no_decimal(self, registry) -> None:
        registry.info = (200, {**INFO, "teaRank": 80})
        result = runner.invoke(app, ["print", "--project-id", "123456", "--quiet"])
        assert result.output == "80\n"

    def test_requires_project(self, registry) -> None:
        result = runner.invoke(app, ["print"])
        assert result.exit_code == 1

    def test_schema_error_exits_1(self, registry) -> None:
        registry.info = (200, {"projectId": "123456"})
        result = runner.invoke(app, ["print", "--project-id", "123456", "--quiet"])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestVersion:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "tea-rank-badge" in result.output
