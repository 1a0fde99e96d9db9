"""aws sts get-session-token の呼び出し。

aws CLI を subprocess で呼び、JSON 応答を読む。
"""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass, field

from aws_mfa.credentials import Credential
from aws_mfa.errors import StsError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionTokens:
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str = field(repr=False)
    expiration: str = ""

    @classmethod
    def from_json(cls, text: str) -> SessionTokens:
        try:
            raw = json.loads(text)
            c = raw["Credentials"]
            return cls(
                access_key_id=c["AccessKeyId"],
                secret_access_key=c["SecretAccessKey"],
                session_token=c["SessionToken"],
                expiration=c.get("Expiration", ""),
            )
        except json.JSONDecodeError as e:
            raise StsError(f"invalid response from aws sts: {e}") from e
        except (KeyError, TypeError) as e:
            raise StsError(f"unexpected response from aws sts: missing {e}") from e

    def to_credential(self, profile: str) -> Credential:
        return Credential(
            profile=profile,
            lines=(
                f"aws_access_key_id={self.access_key_id}",
                f"aws_secret_access_key={self.secret_access_key}",
                f"aws_session_token={self.session_token}",
            ),
        )


@dataclass
class StsClient:
    command: list[str] = field(default_factory=lambda: ["aws"])
    timeout_seconds: int = 60

    def build_args(
        self,
        *,
        device_arn: str,
        code: str,
        duration: int,
        profile: str | None = None,
    ) -> list[str]:
        args = [
            *self.command,
            "sts",
            "get-session-token",
            "--serial-number",
            device_arn,
            "--token-code",
            code,
            "--duration-seconds",
            str(duration),
        ]
        if profile:
            args += ["--profile", profile]
        return args

    def get_session_token(
        self,
        *,
        device_arn: str,
        code: str,
        duration: int,
        profile: str | None = None,
    ) -> SessionTokens:
        args = self.build_args(
            device_arn=device_arn, code=code, duration=duration, profile=profile
        )
        # token code は出さない
        log.info(
            "aws sts get-session-token: serial=%s duration=%s profile=%s",
            device_arn,
            duration,
            profile or "(default)",
        )
        try:
            proc = subprocess.run(
                args,
                text=True,
                capture_output=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except FileNotFoundError as e:
            raise StsError(f"CLI not found: {self.command[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise StsError(f"CLI timed out after {self.timeout_seconds}s") from e

        if proc.returncode != 0:
            msg = proc.stderr.strip() or f"CLI failed: {' '.join(self.command)}"
            raise StsError(msg)
        return SessionTokens.from_json(proc.stdout)
