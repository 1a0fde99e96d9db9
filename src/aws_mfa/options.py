"""CLI オプションの解決。

優先順位: コマンドライン > mfa-config > 既定値
"""

from __future__ import annotations

from dataclasses import dataclass

from aws_mfa.errors import ConfigError
from aws_mfa.mfa_config import MfaConfig

DEFAULT_MFA_PROFILE = "mfa"
DEFAULT_DURATION = "900"
DEFAULT_BACKUP_FILE = "credentials_bk"
DEFAULT_PROFILE = "default"


@dataclass(frozen=True)
class Options:
    mfa_profile: str
    duration: int
    backup_file: str
    profile: str
    use_profile: bool  # --profile を aws CLI に渡すか


def resolve_options(
    config: MfaConfig,
    *,
    profile: str | None = None,
    duration: str | None = None,
    mfa_profile: str | None = None,
    backup_file: str | None = None,
) -> Options:
    # root user: 900 <= duration <= 3600, other: 900 <= duration <= 129600
    raw_duration = duration or config.duration or DEFAULT_DURATION
    try:
        seconds = int(raw_duration)
    except ValueError as e:
        raise ConfigError(
            f"Parse error: cannot parse duration (in seconds): {raw_duration}"
        ) from e
    if seconds <= 0:
        raise ConfigError(f"Parse error: duration must be positive: {raw_duration}")

    return Options(
        mfa_profile=mfa_profile or config.mfa_profile or DEFAULT_MFA_PROFILE,
        duration=seconds,
        backup_file=backup_file or config.backup_file or DEFAULT_BACKUP_FILE,
        profile=profile or DEFAULT_PROFILE,
        use_profile=bool(profile),
    )
