"""CLI のテスト（aws CLI は実行しない）。"""

from pathlib import Path

from typer.testing import CliRunner

import aws_mfa.cli as cli
from aws_mfa.credentials import CredentialsFile, credentials_path
from aws_mfa.logging_setup import setup_logging
from aws_mfa.session_token import SessionTokens, StsClient

runner = CliRunner()


def _fake_sts(monkeypatch, response: str, calls: list) -> None:
    def fake_get_session_token(self, **kwargs):  # noqa: ANN001
        calls.append(kwargs)
        return SessionTokens.from_json(response)

    monkeypatch.setattr(StsClient, "get_session_token", fake_get_session_token)


def test_writes_mfa_profile(monkeypatch, aws_dir: Path, sts_response: str) -> None:
    calls: list = []
    _fake_sts(monkeypatch, sts_response, calls)
    original = credentials_path(aws_dir).read_text(encoding="utf-8")

    result = runner.invoke(cli.app, ["123456", "--config-dir", str(aws_dir)])
    assert result.exit_code == 0, result.output

    assert calls == [
        {
            "device_arn": "arn:aws:iam::012345678901:mfa/tanaka",
            "code": "123456",
            "duration": 900,
            "profile": None,
        }
    ]
    cf = CredentialsFile.from_path(credentials_path(aws_dir))
    assert cf.profiles() == ["tanaka", "suzuki", "mfa"]
    assert cf.get("mfa").lines[0] == "aws_access_key_id=ASIAEXAMPLE"
    assert (aws_dir / "credentials_bk").read_text(encoding="utf-8") == original


def test_replaces_existing_mfa_profile(monkeypatch, aws_dir: Path, sts_response: str) -> None:
    calls: list = []
    _fake_sts(monkeypatch, sts_response, calls)
    p = credentials_path(aws_dir)
    p.write_text("[session]\nold=1\n\n[tanaka]\nk=v\n", encoding="utf-8")

    result = runner.invoke(
        cli.app,
        ["654321", "-p", "suzuki", "-m", "session", "-d", "1800", "-b", "bk", "--config-dir", str(aws_dir)],
    )
    assert result.exit_code == 0, result.output

    assert calls[0]["profile"] == "suzuki"
    assert calls[0]["duration"] == 1800
    assert calls[0]["device_arn"].endswith("mfa/suzuki")
    cf = CredentialsFile.from_path(p)
    assert cf.profiles() == ["tanaka", "session"]
    assert "old=1" not in p.read_text(encoding="utf-8")
    assert (aws_dir / "bk").exists()


def test_unknown_device_fails(monkeypatch, aws_dir: Path, sts_response: str) -> None:
    calls: list = []
    _fake_sts(monkeypatch, sts_response, calls)
    before = credentials_path(aws_dir).read_text(encoding="utf-8")

    result = runner.invoke(cli.app, ["123456", "-p", "satoh", "--config-dir", str(aws_dir)])
    assert result.exit_code == 1
    assert calls == []
    assert credentials_path(aws_dir).read_text(encoding="utf-8") == before


def test_invalid_duration_fails(monkeypatch, aws_dir: Path, sts_response: str) -> None:
    calls: list = []
    _fake_sts(monkeypatch, sts_response, calls)
    result = runner.invoke(cli.app, ["123456", "-d", "abc", "--config-dir", str(aws_dir)])
    assert result.exit_code == 1
    assert calls == []


def test_first_run_without_credentials(monkeypatch, aws_dir: Path, sts_response: str) -> None:
    calls: list = []
    _fake_sts(monkeypatch, sts_response, calls)
    credentials_path(aws_dir).unlink()

    result = runner.invoke(cli.app, ["123456", "--config-dir", str(aws_dir)])
    assert result.exit_code == 0, result.output
    assert CredentialsFile.from_path(credentials_path(aws_dir)).profiles() == ["mfa"]
    assert not (aws_dir / "credentials_bk").exists()


def test_success_message_on_stdout(monkeypatch, aws_dir: Path, sts_response: str) -> None:
    _fake_sts(monkeypatch, sts_response, [])
    result = runner.invoke(cli.app, ["123456", "--config-dir", str(aws_dir)])
    assert result.exit_code == 0, result.output
    assert "updated [mfa]" in result.stdout


def test_unusable_log_file_exits_cleanly(monkeypatch, aws_dir: Path, sts_response: str) -> None:
    calls: list = []
    _fake_sts(monkeypatch, sts_response, calls)
    monkeypatch.setattr(setup_logging, "_configured", False, raising=False)
    not_a_dir = aws_dir / "credentials"

    result = runner.invoke(
        cli.app,
        ["123456", "--config-dir", str(aws_dir), "--log-file", str(not_a_dir / "aws-mfa.log")],
    )
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert calls == []


def test_log_file_is_opt_in(monkeypatch, aws_dir: Path, sts_response: str) -> None:
    _fake_sts(monkeypatch, sts_response, [])
    result = runner.invoke(cli.app, ["123456", "--config-dir", str(aws_dir)])
    assert result.exit_code == 0, result.output
    assert not (aws_dir / "logs").exists()
