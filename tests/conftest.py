from __future__ import annotations

from pathlib import Path

import pytest

CREDENTIALS_TEXT = """[tanaka]
aws_access_key_id=ABCDEFGHIJKLMNOPQRST
aws_secret_access_key=abcdefghijklmnopqrstuvwxyz+-#$1234567890
[suzuki]
xxxxxxxxxxxxxxxx
yyyyyyyyyyyy
"""


@pytest.fixture()
def aws_dir(tmp_path: Path) -> Path:
    """credentials と mfa-config を置いた ~/.aws 相当のディレクトリ。"""
    d = tmp_path / ".aws"
    d.mkdir()
    (d / "credentials").write_text(CREDENTIALS_TEXT, encoding="utf-8")
    (d / "mfa-config").write_text(
        """
backup_file: credentials_bk
devices:
  default: arn:aws:iam::012345678901:mfa/tanaka
  suzuki: arn:aws:iam::012345678901:mfa/suzuki
""",
        encoding="utf-8",
    )
    return d


@pytest.fixture()
def sts_response() -> str:
    return """{
    "Credentials": {
        "AccessKeyId": "ASIAEXAMPLE",
        "SecretAccessKey": "secret/key+1",
        "SessionToken": "token==",
        "Expiration": "2026-10-18T12:00:00+00:00"
    }
}"""
