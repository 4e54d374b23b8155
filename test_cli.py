import runpy
import sys
from pathlib import Path

import pytest

from hashcode_upload import cli
from hashcode_upload.errors import TransportError


@pytest.fixture
def judge_calls(monkeypatch, fake_judge):
    """Replace the HTTP client with a recording fake; returns the list of created clients."""
    created = []

    class FakeClient(fake_judge):
        def __init__(self, config, fail_submit=()):
            super().__init__(fail_submit=fail_submit)
            self.config = config
            created.append(self)

        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc_info):
            return None

    monkeypatch.setattr(cli, "JudgeClient", FakeClient)
    return created


@pytest.fixture
def workspace(clean_env, monkeypatch):
    monkeypatch.setenv("HASH_CODE_JUDGE_AUTH_TOKEN", "secret-token")
    monkeypatch.setenv("HASH_CODE_INPUT1_NAME", "A")
    monkeypatch.setenv("HASH_CODE_INPUT1_ID", "ds-A-id")
    monkeypatch.setenv("HASH_CODE_INPUT2_NAME", "B")
    monkeypatch.setenv("HASH_CODE_INPUT2_ID", "ds-B-id")
    (clean_env / "A.out.txt").write_text("1\n")
    (clean_env / "B.out.txt").write_text("2\n")
    builds = clean_env / ".builds"
    builds.mkdir()
    (builds / "build122").write_text("old")
    (builds / "build123").write_text("new")
    return clean_env


def test_missing_token_exits_without_requests(clean_env, judge_calls, capsys):
    assert cli.main([]) == 1
    assert "HASH_CODE_JUDGE_AUTH_TOKEN not defined" in capsys.readouterr().err
    assert judge_calls == []


def test_no_data_sets_exits_without_requests(clean_env, monkeypatch, judge_calls, capsys):
    monkeypatch.setenv("HASH_CODE_JUDGE_AUTH_TOKEN", "secret-token")
    assert cli.main([]) == 1
    assert "data set ids not initialized" in capsys.readouterr().err
    assert judge_calls == []


def test_missing_builds_dir(workspace, judge_calls, capsys):
    assert cli.main(["--builds-dir", str(workspace / "nowhere")]) == 1
    assert "builds directory not found" in capsys.readouterr().err
    assert judge_calls == []


def test_upload_and_submit(workspace, judge_calls, capsys):
    assert cli.main([]) == 0

    (client,) = judge_calls
    sources = str(workspace.resolve() / ".builds" / "build123")
    assert sorted(client.uploads) == sorted(["A.out.txt", "B.out.txt", sources])
    assert sorted(client.submissions) == [
        ("ds-A-id", "key-A.out.txt", f"key-{sources}"),
        ("ds-B-id", "key-B.out.txt", f"key-{sources}"),
    ]
    out = capsys.readouterr().out
    assert "A: submitted" in out
    assert "B: submitted" in out


def test_dry_run_sends_nothing(workspace, judge_calls, capsys):
    assert cli.main(["--dry-run"]) == 0
    out = capsys.readouterr().out
    assert "DRY-RUN" in out
    assert "build123" in out
    assert judge_calls == []


def test_command_line_overrides(workspace, judge_calls):
    assert cli.main(["--base-url", "http://localhost:9000/api", "--timeout", "3"]) == 0
    config = judge_calls[0].config
    assert config.base_url == "http://localhost:9000/api"
    assert config.timeout == 3.0


def test_request_failure_exits_1(workspace, monkeypatch, judge_calls, capsys):
    async def failing_submit(self, data_set, submission_blob_key, sources_blob_key):
        raise TransportError("POST https://hashcode-jud... returned HTTP 500: boom", 500)

    monkeypatch.setattr(cli.JudgeClient, "submit", failing_submit)
    assert cli.main([]) == 1
    assert "HTTP 500" in capsys.readouterr().err


def test_negative_timeout_is_rejected(workspace, judge_calls, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--timeout", "-1"])
    assert excinfo.value.code == 2
    assert "must not be negative" in capsys.readouterr().err
    assert judge_calls == []


def test_client_is_closed_after_failure(workspace, monkeypatch, judge_calls):
    closed = []

    async def failing_submit(self, data_set, submission_blob_key, sources_blob_key):
        raise TransportError("submission failed", 500)

    async def record_exit(self, *exc_info):
        closed.append(self)

    monkeypatch.setattr(cli.JudgeClient, "submit", failing_submit)
    monkeypatch.setattr(cli.JudgeClient, "__aexit__", record_exit)
    assert cli.main([]) == 1
    assert closed == judge_calls


def test_script_runs_cli(workspace, monkeypatch, judge_calls, capsys):
    script = Path(__file__).resolve().parent / "scripts" / "upload_solution.py"
    monkeypatch.setattr(sys, "argv", [str(script), "--dry-run"])
    with pytest.raises(SystemExit) as excinfo:
        runpy.run_path(str(script), run_name="__main__")
    assert excinfo.value.code == 0
    assert "DRY-RUN" in capsys.readouterr().out
