"""logging の初期化。

- 既定: stderr に WARNING 以上（rich で整形）
- `--log-file` 指定時: そのファイルにローテーション付きで詳細ログ

認証情報（キー/トークン/MFAコード）はログに出さない。
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


def _file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=2_000_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return handler


def setup_logging(*, level: str | None = None, log_file: Path | None = None) -> None:
    """ルートロガーを設定する。level 省略時はファイルなら INFO、stderr なら WARNING。"""
    if getattr(setup_logging, "_configured", False):
        return

    if log_file is not None:
        handler = _file_handler(log_file)
        default_level = logging.INFO
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        default_level = logging.WARNING

    numeric_level = getattr(logging, level.upper(), default_level) if level else default_level

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.addHandler(handler)

    setup_logging._configured = True  # type: ignore[attr-defined]
