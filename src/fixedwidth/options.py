#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
parse / stringify の呼び出しごとのオプション（不変）
"""

from dataclasses import dataclass

from .encodings import normalize_encoding
from .errors import OptionsError
from .values import TrimPolicy


def _check_pad(pad: str) -> None:
    if not isinstance(pad, str) or len(pad) != 1:
        raise OptionsError(f"埋め文字は1文字で指定してください: {pad!r}")


def _coerce_trim(trim) -> TrimPolicy:
    # 旧形式の真偽値も受け付ける（True=両端, False=なし）
    if trim is True:
        return TrimPolicy.BOTH
    if trim is False:
        return TrimPolicy.NONE
    try:
        return TrimPolicy(str(trim.value if isinstance(trim, TrimPolicy) else trim).lower())
    except ValueError:
        names = ", ".join(t.value for t in TrimPolicy)
        raise OptionsError(f"未知の trim 指定です: {trim!r}（候補: {names}）")


@dataclass(frozen=True)
class ParseOptions:
    """固定長テキスト → レコード"""
    encoding: str = "utf8"
    line_terminator: str = "\n"
    trim: TrimPolicy = TrimPolicy.BOTH
    pad: str = " "
    relaxed: bool = False
    max_records: int = 0  # 0 = 全件

    def __post_init__(self):
        _check_pad(self.pad)
        if not isinstance(self.line_terminator, str):
            raise OptionsError(f"行区切りは文字列で指定してください: {self.line_terminator!r}")
        if self.max_records < 0:
            raise OptionsError(f"max_records が負です: {self.max_records}")
        object.__setattr__(self, "encoding", normalize_encoding(self.encoding))
        object.__setattr__(self, "trim", _coerce_trim(self.trim))


@dataclass(frozen=True)
class StringifyOptions:
    """レコード → 固定長テキスト（trim は読み込みとの対称性のためだけに受け付ける）"""
    encoding: str = "utf8"
    line_terminator: str = "\n"
    pad: str = " "
    trim: TrimPolicy = TrimPolicy.BOTH
    append_trailing_terminator: bool = True

    def __post_init__(self):
        _check_pad(self.pad)
        if not isinstance(self.line_terminator, str):
            raise OptionsError(f"行区切りは文字列で指定してください: {self.line_terminator!r}")
        object.__setattr__(self, "encoding", normalize_encoding(self.encoding))
        object.__setattr__(self, "trim", _coerce_trim(self.trim))
