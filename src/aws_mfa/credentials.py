"""~/.aws/credentials の読み書き。

セクション単位（`[profile]` + 本文行）で扱う。本文行の中身は解釈しない。

```
[tanaka]
aws_access_key_id=...
aws_secret_access_key=...

[mfa]
aws_access_key_id=...
aws_session_token=...
```

注意:
- 空行は読み込み時に捨てる（書き出し時はセクション間に1行だけ入る）
- ヘッダ判定は行内の最初の `[` から最後の `]` までを取る（行頭/行末に固定しない）。
  本文に `[` と `]` を両方含む行はヘッダとして扱われる。
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)

_RE_PROFILE = re.compile(r"\[(.+)\]")


def capture_profile(line: str) -> str | None:
    """ヘッダ行ならプロファイル名を返す。"""
    m = _RE_PROFILE.search(line)
    if m is None:
        return None
    return m.group(1)


@dataclass(frozen=True)
class Credential:
    """1つのプロファイルセクション。"""

    profile: str
    lines: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(self.lines))

    def to_text(self) -> str:
        return f"[{self.profile}]\n" + "\n".join(self.lines)

    def __str__(self) -> str:
        return self.to_text()


def parse_credentials(lines: Iterable[str]) -> list[Credential]:
    """行の並びをセクションに分ける。

    最初のヘッダより前の行は捨てる。不正な内容でも例外は出さない。
    """
    credentials: list[Credential] = []
    profile = ""
    body: list[str] = []

    for raw in lines:
        line = raw.rstrip("\r\n")
        p = capture_profile(line)
        if p is not None:
            if profile:
                credentials.append(Credential(profile=profile, lines=tuple(body)))
            profile = p
            body = []
        elif line and profile:
            body.append(line)

    if profile:
        credentials.append(Credential(profile=profile, lines=tuple(body)))
    return credentials


@dataclass(frozen=True)
class CredentialsFile:
    """credentials ファイル全体。変更系は新しいインスタンスを返す。"""

    credentials: tuple[Credential, ...] = ()

    @classmethod
    def from_credentials(cls, credentials: Iterable[Credential]) -> CredentialsFile:
        return cls(credentials=tuple(credentials))

    @classmethod
    def from_path(cls, path: Path) -> CredentialsFile:
        """ファイルを読み込む。

        読めない/デコードできない場合は OSError。途中まで読めた分も返さない。
        """
        try:
            with path.open(encoding="utf-8") as f:
                credentials = parse_credentials(f)
        except UnicodeDecodeError as e:
            raise OSError(f"cannot decode {path}: {e}") from e
        log.debug("loaded %d profile(s) from %s", len(credentials), path)
        return cls.from_credentials(credentials)

    @classmethod
    def from_path_or_empty(cls, path: Path) -> CredentialsFile:
        if not path.exists():
            log.info("credentials not found, starting empty: %s", path)
            return cls()
        return cls.from_path(path)

    def __iter__(self) -> Iterator[Credential]:
        return iter(self.credentials)

    def __len__(self) -> int:
        return len(self.credentials)

    def profiles(self) -> list[str]:
        return [c.profile for c in self.credentials]

    def get(self, profile: str) -> Credential | None:
        for c in self.credentials:
            if c.profile == profile:
                return c
        return None

    def remove_credential(self, profile: str) -> CredentialsFile:
        return CredentialsFile.from_credentials(
            c for c in self.credentials if c.profile != profile
        )

    def set_credential(self, cred: Credential) -> CredentialsFile:
        """末尾に追加する。同名があっても消さない（置換は remove_credential と併用）。"""
        return CredentialsFile(credentials=(*self.credentials, cred))

    def replace_credential(self, cred: Credential) -> CredentialsFile:
        return self.remove_credential(cred.profile).set_credential(cred)

    def to_text(self) -> str:
        return "\n\n".join(c.to_text() for c in self.credentials)

    def __str__(self) -> str:
        return self.to_text()

    def write(self, path: Path, *, atomic: bool = False) -> None:
        """ファイルへ書き出す（上書き）。

        atomic=True なら同じディレクトリの一時ファイルに書いてから置き換える。
        """
        text = self.to_text()
        if atomic:
            _write_atomic(path, text)
        else:
            path.write_text(text, encoding="utf-8")
        log.info("wrote %d profile(s) to %s", len(self), path)


def _write_atomic(path: Path, text: str) -> None:
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        if path.exists():
            shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except OSError:
        Path(tmp).unlink(missing_ok=True)
        raise


def credentials_path(config_dir: Path) -> Path:
    return config_dir / "credentials"


def backup_credentials(config_dir: Path, backup_name: str) -> Path | None:
    """書き換え前の credentials を config_dir/backup_name にコピーする。

    credentials がまだ無ければ何もしない。
    """
    src = credentials_path(config_dir)
    if not src.exists():
        log.info("no credentials to back up: %s", src)
        return None
    dst = config_dir / backup_name
    shutil.copyfile(src, dst)
    log.info("backed up %s -> %s", src, dst)
    return dst
