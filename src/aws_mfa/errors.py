"""aws-mfa の例外。

I/O の失敗は OSError のまま呼び出し元へ伝える。
"""

from __future__ import annotations


class AwsMfaError(RuntimeError):
    """aws-mfa 固有エラーの基底。"""


class ConfigError(AwsMfaError):
    """mfa-config やオプション値の不備。"""


class StsError(AwsMfaError):
    """aws sts get-session-token の呼び出し失敗。"""
