#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
レコード → 固定長テキスト
"""

import logging
from typing import Any, Mapping, Optional, Sequence

from .encodings import encode
from .options import StringifyOptions
from .schema import Schema
from .values import Alignment, get_path, pad, render, truncate

logger = logging.getLogger(__name__)


def format_record(record: Mapping[str, Any], schema: Schema, pad_char: str = " ") -> str:
    """
    1レコードを1行へ。各フィールドは幅を超えれば末尾を切り捨て、
    足りなければ寄せと反対側を pad_char で埋める。
    """
    parts = []
    for f in schema.fields:
        text = truncate(render(get_path(record, f.segments, "")), f.width)
        parts.append(pad(text, f.width, pad_char, f.alignment or Alignment.LEFT))
    return "".join(parts)


def stringify(records: Sequence[Mapping[str, Any]], schema: Schema,
              options: Optional[StringifyOptions] = None) -> bytes:
    """
    レコード列を固定長テキストにしてエンコードする。
    append_trailing_terminator が真なら最終行の後にも行区切りを付ける
    （レコードが無い場合は行区切りのみ）。
    """
    options = options or StringifyOptions()
    records = list(records)
    logger.debug("stringify: %d records, fields=%d, width=%d, options=%r",
                 len(records), len(schema), schema.total_width, options)

    term = options.line_terminator
    text = term.join(format_record(r, schema, options.pad) for r in records)
    if options.append_trailing_terminator:
        text += term
    return encode(text, options.encoding)
