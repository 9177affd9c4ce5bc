#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
固定長テキスト → レコード（入れ子の dict）

  1. バイト列を文字コードに従ってデコード
  2. 行区切りで分割（末尾の区切り1つは「閉じ」とみなして空行を作らない）
  3. 各行をフィールド幅で切り出し → trim → 型変換 → パスへ書き込み

厳密モードでは行長の不一致で全体を失敗させる（途中までの結果は返さない）。
relaxed モードでは短い行を埋め文字で補い、長い行は末尾を捨てる。
"""

import logging
from typing import Any, Dict, List, Optional

from .encodings import decode
from .errors import LengthMismatchError, OptionsError
from .options import ParseOptions
from .schema import Schema
from .values import cast_string, set_path, trim

logger = logging.getLogger(__name__)


def split_lines(text: str, terminator: str, width: int) -> List[str]:
    """
    テキストを行へ分割する。
      - 区切りが空文字なら、width 文字ごとに連続したレコードとして切る
        （最後の塊は短いことがある）
      - 末尾がちょうど区切りで終わる場合のみ、最後の空行を1つ落とす
    """
    if text == "":
        return []
    if terminator == "":
        if width <= 0:
            raise OptionsError("行区切りなしの場合はフィールド長合計が1以上必要です")
        return [text[pos:pos + width] for pos in range(0, len(text), width)]
    lines = text.split(terminator)
    if lines[-1] == "":
        lines.pop()
    return lines


def slice_line(line: str, schema: Schema) -> List[str]:
    """1行をスキーマの順・幅で切り出す（trim / 変換はしない）。"""
    out = []
    pos = 0
    for f in schema.fields:
        out.append(line[pos:pos + f.width])
        pos += f.width
    return out


def fit_line(line: str, width: int, pad: str) -> str:
    """relaxed モード用: 短ければ右側を pad で埋め、長ければ末尾を捨てる。"""
    if len(line) < width:
        return line + pad * (width - len(line))
    return line[:width]


def parse_line(line: str, schema: Schema, options: ParseOptions) -> Dict[str, Any]:
    record: Dict[str, Any] = {}
    for f, raw in zip(schema.fields, slice_line(line, schema)):
        text = trim(raw, options.pad, options.trim)
        cast = f.cast or cast_string
        set_path(record, f.segments, cast(text))
    return record


def parse(data: bytes, schema: Schema, options: Optional[ParseOptions] = None) -> List[Dict[str, Any]]:
    """
    バイト列をレコードの配列へ変換する。

    例外:
      EncodingError       デコード失敗
      LengthMismatchError 厳密モードで行長がフィールド長合計と異なる
    """
    options = options or ParseOptions()
    expected = schema.total_width
    logger.debug("parse: %d bytes, fields=%d, width=%d, options=%r",
                 len(data), len(schema), expected, options)

    text = decode(data, options.encoding)
    lines = split_lines(text, options.line_terminator, expected)
    if options.max_records:
        lines = lines[:options.max_records]

    records = []
    for index, line in enumerate(lines):
        if len(line) != expected:
            if not options.relaxed:
                raise LengthMismatchError(index, expected, len(line))
            logger.warning("行長の不一致を補正します（行 %d）: 期待 %d 文字, 実際 %d 文字",
                           index + 1, expected, len(line))
            line = fit_line(line, expected, options.pad)
        records.append(parse_line(line, schema, options))

    logger.debug("parse: %d records", len(records))
    return records
