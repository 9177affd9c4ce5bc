#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
値まわりの共通部品（スキーマ非依存）

- プロパティパス（a.b[0].c）の解析と、入れ子の dict / list への読み書き
- 任意の 1 文字による埋め（pad）・除去（trim）・切り詰め
- 型タグ → 変換関数 の対応表（寛容な数値変換: 失敗時は NaN）
- 出力時のスカラー値の既定の文字列表現
"""

import json
import math
import re
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Tuple, Union

Segment = Union[str, int]

NAN = float("nan")


class DataType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"


class Alignment(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class TrimPolicy(str, Enum):
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"


# パスの字句:  [0] / ["key"] / ['key'] / .key / key
PATH_TOKEN_RE = re.compile(
    r"""
    \[\s*(\d+)\s*\]                        # 1: 配列添字
    | \[\s*(["'])(.*?)\2\s*\]              # 3: 引用符付きキー
    | (\.?)([^.\[\]]+)                     # 4: 先頭ドット, 5: キー
    """,
    re.VERBOSE
)


def parse_path(path: str) -> Tuple[Segment, ...]:
    """
    プロパティパスをセグメント列へ分解する。
      "data.person[0].name" → ("data", "person", 0, "name")
    文字列キーは str、配列添字は int。構文不正は ValueError。
    """
    if not isinstance(path, str) or not path.strip():
        raise ValueError("プロパティパスが空です")

    segments: List[Segment] = []
    pos = 0
    while pos < len(path):
        m = PATH_TOKEN_RE.match(path, pos)
        if m is None:
            raise ValueError(f"プロパティパスを解析できません: {path!r} (位置 {pos})")
        if m.group(1) is not None:
            segments.append(int(m.group(1)))
        elif m.group(2) is not None:
            segments.append(m.group(3))
        else:
            # 先頭のキーはドット無し、2つ目以降は ".key"（"[0]key" も許容）
            if m.group(4) and pos == 0:
                raise ValueError(f"プロパティパスがドットで始まっています: {path!r}")
            segments.append(m.group(5))
        pos = m.end()
    return tuple(segments)


def get_path(tree: Any, segments: Tuple[Segment, ...], default: Any = "") -> Any:
    """パス上の値を返す。途中で辿れなければ default。"""
    node = tree
    for seg in segments:
        if isinstance(node, (list, tuple)) and isinstance(seg, int):
            if seg >= len(node):
                return default
            node = node[seg]
        elif isinstance(node, Mapping):
            key = seg if seg in node else str(seg)
            if key not in node:
                return default
            node = node[key]
        else:
            return default
    return node


def _child(node: Any, seg: Segment) -> Any:
    if isinstance(node, list):
        return node[seg] if isinstance(seg, int) and seg < len(node) else None
    return node.get(seg if isinstance(seg, str) else str(seg))


def _assign(node: Any, seg: Segment, value: Any) -> None:
    if isinstance(node, list):
        if not isinstance(seg, int):
            raise ValueError(f"配列に文字列キー {seg!r} は設定できません")
        if seg >= len(node):
            node.extend([None] * (seg + 1 - len(node)))
        node[seg] = value
    else:
        node[seg if isinstance(seg, str) else str(seg)] = value


def set_path(tree: Dict[str, Any], segments: Tuple[Segment, ...], value: Any) -> Dict[str, Any]:
    """
    パス上に値を書き込む。途中のコンテナが無ければ作成する
    （次が添字なら list、キーなら dict）。既存のコンテナは再利用し、
    型の合わない値が途中にあれば置き換える。
    """
    node = tree
    for seg, nxt in zip(segments, segments[1:]):
        child = _child(node, seg)
        want = list if isinstance(nxt, int) else dict
        if not isinstance(child, want):
            child = want()
            _assign(node, seg, child)
        node = child
    _assign(node, segments[-1], value)
    return tree


def pad(text: str, width: int, char: str = " ", alignment: Alignment = Alignment.LEFT) -> str:
    """width に満たない分を char で埋める。左寄せは右側、右寄せは左側を埋める。"""
    if alignment is Alignment.RIGHT:
        return text.rjust(width, char)
    return text.ljust(width, char)


def trim(text: str, char: str = " ", policy: TrimPolicy = TrimPolicy.BOTH) -> str:
    """指定側の char の連続を取り除く（空白に限らない）。"""
    if policy is TrimPolicy.LEFT:
        return text.lstrip(char)
    if policy is TrimPolicy.RIGHT:
        return text.rstrip(char)
    if policy is TrimPolicy.BOTH:
        return text.strip(char)
    return text


def truncate(text: str, width: int) -> str:
    """末尾側を捨てて width 文字に収める。"""
    return text[:width]


# 数値の字句
DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
INFINITY_RE = re.compile(r"[+-]?Infinity", re.ASCII)
INTEGER_RE = re.compile(r"\s*([+-]?\d+)", re.ASCII)


def cast_string(text: str) -> str:
    return text


def cast_number(text: str) -> float:
    """文字列全体を数値として解釈。空（空白のみ）は 0.0、解釈できなければ NaN。"""
    s = text.strip()
    if not s:
        return 0.0
    if DECIMAL_RE.fullmatch(s) or INFINITY_RE.fullmatch(s):
        return float(s)
    return NAN


def cast_float(text: str) -> float:
    """先頭の数値部分だけを解釈（"12.5kg" → 12.5）。無ければ NaN。"""
    s = text.lstrip()
    m = INFINITY_RE.match(s) or DECIMAL_RE.match(s)
    if m is None:
        return NAN
    return float(m.group(0))


def cast_integer(text: str) -> Union[int, float]:
    """先頭の10進整数部分を解釈（"0042" → 42, "7.9" → 7）。無ければ NaN。"""
    m = INTEGER_RE.match(text)
    if m is None:
        return NAN
    try:
        return int(m.group(1))
    except ValueError:
        # int の桁数上限（sys.set_int_max_str_digits）を超える場合は float で近似
        return float(m.group(1))


def cast_boolean(text: str) -> bool:
    return text != ""


CASTS: Dict[DataType, Callable[[str], Any]] = {
    DataType.STRING: cast_string,
    DataType.NUMBER: cast_number,
    DataType.INTEGER: cast_integer,
    DataType.FLOAT: cast_float,
    DataType.BOOLEAN: cast_boolean,
}


def render(value: Any) -> str:
    """
    出力用の既定の文字列表現。
      None → ""、真偽値 → "true"/"false"、整数値の float → 小数点なし、
      NaN → "NaN"、無限大 → "Infinity"、dict / list → 詰めた JSON
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)
