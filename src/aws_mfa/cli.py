"""aws-mfa CLI エントリポイント。"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console

from aws_mfa.credentials import CredentialsFile, backup_credentials, credentials_path
from aws_mfa.errors import AwsMfaError
from aws_mfa.logging_setup import setup_logging
from aws_mfa.mfa_config import MfaConfig, config_path
from aws_mfa.options import (
    DEFAULT_BACKUP_FILE,
    DEFAULT_DURATION,
    DEFAULT_MFA_PROFILE,
    Options,
    resolve_options,
)
from aws_mfa.session_token import SessionTokens, StsClient

APP_HELP = "MFA one time pass code から一時認証情報を取得して AWS CLI credentials に書き込む"

app = typer.Typer(add_completion=False, help=APP_HELP)
console = Console()
log = logging.getLogger(__name__)


def default_config_dir() -> Path:
    return Path.home() / ".aws"


def write_mfa_credentials(
    config_dir: Path, options: Options, tokens: SessionTokens
) -> CredentialsFile:
    """credentials をバックアップし、mfa プロファイルを差し替えて書き込む。"""
    path = credentials_path(config_dir)
    backup_credentials(config_dir, options.backup_file)

    cred = tokens.to_credential(options.mfa_profile)
    updated = (
        CredentialsFile.from_path_or_empty(path)
        .remove_credential(options.mfa_profile)
        .set_credential(cred)
    )
    updated.write(path)
    return updated


def run_mfa(
    *,
    code: str,
    config_dir: Path,
    sts: StsClient,
    profile: str | None = None,
    duration: str | None = None,
    mfa_profile: str | None = None,
    backup_file: str | None = None,
) -> Options:
    config = MfaConfig.load(config_path(config_dir))
    options = resolve_options(
        config,
        profile=profile,
        duration=duration,
        mfa_profile=mfa_profile,
        backup_file=backup_file,
    )
    device_arn = config.device_arn(options.profile)

    tokens = sts.get_session_token(
        device_arn=device_arn,
        code=code,
        duration=options.duration,
        profile=options.profile if options.use_profile else None,
    )
    write_mfa_credentials(config_dir, options, tokens)
    return options


@app.command()
def main_command(
    mfa_code: str = typer.Argument(..., metavar="MFA_CODE", help="MFA one time pass code"),
    profile: str | None = typer.Option(
        None, "--profile", "-p", metavar="PROFILE", help="profile name in AWS CLI credentials"
    ),
    duration: str | None = typer.Option(
        None,
        "--duration-seconds",
        "-d",
        metavar="DURATION",
        help=f"expiration duration(in seconds) [default: {DEFAULT_DURATION}]",
    ),
    mfa_profile: str | None = typer.Option(
        None,
        "--mfa-profile",
        "-m",
        metavar="MFA_PROFILE",
        help=f"profile name for mfa credentials [default: {DEFAULT_MFA_PROFILE}]",
    ),
    backup_file: str | None = typer.Option(
        None,
        "--backup",
        "-b",
        metavar="BACKUP FILE",
        help=f"filename for credentials backup [default: {DEFAULT_BACKUP_FILE}]",
    ),
    config_dir: Path | None = typer.Option(
        None, "--config-dir", help="AWS CLI 設定ディレクトリ [default: ~/.aws]"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="詳細ログの出力先（省略時は stderr に警告のみ）"
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="ログレベル"),
) -> None:
    """MFAコードで一時認証情報を取得し、mfa プロファイルに書き込む。"""
    base = config_dir or default_config_dir()

    try:
        setup_logging(level=log_level, log_file=log_file)
        options = run_mfa(
            code=mfa_code,
            config_dir=base,
            sts=StsClient(),
            profile=profile,
            duration=duration,
            mfa_profile=mfa_profile,
            backup_file=backup_file,
        )
    except (AwsMfaError, OSError) as e:
        log.info("aws-mfa failed: %s", e)
        console.print(str(e), style="red", markup=False)
        raise typer.Exit(code=1) from e

    console.print(
        f"updated [{options.mfa_profile}] in {credentials_path(base)}",
        style="green",
        markup=False,
    )


def main() -> None:
    app()
