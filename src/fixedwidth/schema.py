#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
フィールド定義（スキーマ）の構築

設定（dict の並び）から FieldSpec の列を作る。並び順がそのまま桁位置になる。
  - parse モード    : データ型に応じた変換関数を付与
  - stringify モード: 寄せ（既定は左寄せ）を付与
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import SchemaError
from .values import CASTS, Alignment, DataType, Segment, parse_path

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    PARSE = "parse"
    STRINGIFY = "stringify"


@dataclass(frozen=True)
class FieldSpec:
    """1フィールド分の定義"""
    property: str
    width: int
    data_type: DataType = DataType.STRING
    alignment: Optional[Alignment] = None
    segments: Tuple[Segment, ...] = ()
    cast: Optional[Callable[[str], Any]] = None


@dataclass(frozen=True)
class Schema:
    fields: Tuple[FieldSpec, ...]
    mode: Mode

    @property
    def total_width(self) -> int:
        return sum(f.width for f in self.fields)

    def offsets(self) -> List[int]:
        """各フィールドの開始位置（左から幅を累積）"""
        out = []
        pos = 0
        for f in self.fields:
            out.append(pos)
            pos += f.width
        return out

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self):
        return iter(self.fields)


def _first(cfg: Mapping, *keys: str) -> Any:
    for k in keys:
        if k in cfg and cfg[k] is not None:
            return cfg[k]
    return None


def _coerce_width(raw: Any, where: str) -> int:
    if isinstance(raw, bool):
        raise SchemaError(f"フィールド幅が不正です: {where} = {raw!r}")
    if isinstance(raw, str) and raw.strip().lstrip("+-").isdigit():
        raw = int(raw.strip())
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    if not isinstance(raw, int):
        raise SchemaError(f"フィールド幅が不正です: {where} = {raw!r}")
    if raw < 0:
        raise SchemaError(f"フィールド幅が負です: {where} = {raw}")
    return raw


def _coerce_choice(enum_cls, raw: Any, default, what: str, where: str):
    if raw is None or raw == "":
        return default
    try:
        return enum_cls(str(raw.value if isinstance(raw, Enum) else raw).lower())
    except ValueError:
        names = ", ".join(e.value for e in enum_cls)
        raise SchemaError(f"未知の{what}です: {where} = {raw!r}（候補: {names}）")


def build_schema(raw_field_configs: Union[Iterable[Mapping], Mapping],
                 mode: Union[Mode, str]) -> Schema:
    """
    設定から Schema を作る。
      - 各要素のキー: property(path/name), width, dataType(data_type/type), align(alignment)
      - {"field": [...]} の形も受け付ける
    幅が負・パスが空・型や寄せが未知 → SchemaError（レコード処理の前に失敗させる）
    """
    mode = _coerce_choice(Mode, mode, None, "モード", "mode")
    if mode is None:
        raise SchemaError("モード（parse / stringify）が指定されていません")

    if isinstance(raw_field_configs, Mapping):
        raw_field_configs = raw_field_configs.get("field") or []

    fields: List[FieldSpec] = []
    for i, cfg in enumerate(raw_field_configs or []):
        if not isinstance(cfg, Mapping):
            raise SchemaError(f"フィールド定義が不正です: #{i + 1} = {cfg!r}")

        prop = _first(cfg, "property", "path", "name")
        where = f"#{i + 1}({prop})" if prop else f"#{i + 1}"
        if not isinstance(prop, str) or not prop.strip():
            raise SchemaError(f"プロパティパスが空です: {where}")
        try:
            segments = parse_path(prop)
        except ValueError as e:
            raise SchemaError(f"{where}: {e}") from e

        width = _coerce_width(_first(cfg, "width"), where)
        data_type = _coerce_choice(
            DataType, _first(cfg, "dataType", "data_type", "type"), DataType.STRING, "データ型", where)
        alignment = _coerce_choice(
            Alignment, _first(cfg, "align", "alignment"), Alignment.LEFT, "寄せ", where)

        if mode is Mode.PARSE:
            fields.append(FieldSpec(prop, width, data_type, None, segments, CASTS[data_type]))
        else:
            fields.append(FieldSpec(prop, width, data_type, alignment, segments, None))

    schema = Schema(fields=tuple(fields), mode=mode)
    logger.debug("schema built: mode=%s fields=%d total_width=%d",
                 mode.value, len(schema), schema.total_width)
    return schema
