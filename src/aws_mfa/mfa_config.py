"""mfa-config（~/.aws/mfa-config）のロード。

プロファイルごとの MFA デバイス ARN と、CLI オプションの既定値を置く。

```yaml
mfa_profile: mfa
duration: 900
backup_file: credentials_bk
devices:
  default: arn:aws:iam::012345678901:mfa/tanaka
  suzuki: arn:aws:iam::012345678901:mfa/suzuki
```

プロファイル名が `no` / `on` / `01` のように YAML で真偽値や数値になる場合は
`"no": ...` のようにクォートする（クォートしないと ConfigError）。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from aws_mfa.errors import ConfigError

log = logging.getLogger(__name__)

CONFIG_FILENAME = "mfa-config"


@dataclass
class MfaConfig:
    mfa_profile: str | None = None
    duration: str | None = None
    backup_file: str | None = None
    devices: dict[str, str] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> MfaConfig:
        """設定ファイルを読み込む。なければデフォルト。"""
        if not path.exists():
            log.info("mfa-config not found: %s", path)
            return cls()

        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Parse error: {path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"Parse error: {path}: top level must be a mapping")

        devices = raw.get("devices") or {}
        if not isinstance(devices, dict):
            raise ConfigError(f"Parse error: {path}: devices must be a mapping")
        bad = [k for k in devices if not isinstance(k, str)]
        if bad:
            raise ConfigError(
                f"Parse error: {path}: device profile names must be strings, quote them: {bad!r}"
            )

        return cls(
            mfa_profile=_opt_str(raw.get("mfa_profile")),
            duration=_opt_str(raw.get("duration")),
            backup_file=_opt_str(raw.get("backup_file")),
            devices={k: str(v) for k, v in devices.items() if v},
        )

    def device_arn(self, profile: str) -> str:
        arn = self.devices.get(profile)
        if not arn:
            raise ConfigError(f"Not Found mfa device arn for profile: {profile}")
        return arn


def _opt_str(v: object) -> str | None:
    if v is None or v == "":
        return None
    return str(v)


def config_path(config_dir: Path) -> Path:
    return config_dir / CONFIG_FILENAME
