#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
レイアウト定義ファイルのパーサー

struct 書式:
    struct Name {
        INTEGER id[4];
        STRING  name[6] LEFT;
        NUMBER  balance[10] RIGHT;
        STRING  address.city[12];     // パスは a.b[0].c 形式可
    } ext1, ext2;

  - 型: STRING / NUMBER / INTEGER / FLOAT / BOOLEAN / BYTE（= STRING）
  - 末尾の [n] が幅、その後ろに任意で LEFT / RIGHT
  - // と /* ... */ コメント可

JSON 書式（先頭が [ か {）:
    [ {"property": "id", "width": 4, "dataType": "integer"}, ... ]
    {"name": "Customer", "exts": ["dat"], "fields": [...]}
    [ {"name": ..., "fields": [...]}, ... ]
"""

import json
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from .errors import SchemaError
from .schema import Mode, Schema, build_schema

# 構造体内のフィールド宣言:  TYPE path[width] [LEFT|RIGHT];
FIELD_DECL_RE = re.compile(
    r"""
    \b(STRING|NUMBER|INTEGER|FLOAT|BOOLEAN|BYTE)\s+          # 1: type
    ([A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*|\[\s*\d+\s*\])*)   # 2: property path
    \s*\[\s*(-?\d+)\s*\]                                     # 3: width
    (?:\s+(LEFT|RIGHT))?                                     # 4: align (optional)
    \s*;
    """,
    re.IGNORECASE | re.VERBOSE
)

# 複数struct抽出: struct <Name?> { ... } <ext list>?;
#   - Name は必須とする（無名は1定義のみの時だけ許容）
#   - 後続の拡張子列は省略可（その場合は自動選択不可。--struct が必要）
STRUCT_BLOCK_RE = re.compile(
    r"""
    \bstruct
    \s+([A-Za-z_]\w*)                      # 1: name
    \s*\{(.*?)\}                           # 2: body (non-greedy)
    \s*([^;{}]*)?;?                        # 3: trailing ext list (optional, up to ';')
    """,
    re.IGNORECASE | re.DOTALL | re.VERBOSE
)

ANONYMOUS = "_anonymous_"


@dataclass
class StructDef:
    """レイアウト定義（フィールド設定は build_schema にそのまま渡せる形）"""
    name: str
    fields: List[Dict[str, Any]]
    exts: List[str]  # lowercased, without leading dot

    def schema(self, mode: Union[Mode, str]) -> Schema:
        return build_schema(self.fields, mode)


def strip_block_and_line_comments(text: str) -> str:
    """/* ... */ を先に除去し、その後で // 行末コメントを除去。"""
    text = re.sub(r"/\*.*?\*/", "", text, flags=re.DOTALL)
    lines = []
    for raw in text.splitlines():
        lines.append(raw.split("//", 1)[0])
    return "\n".join(lines)


def parse_ext_list(exts_raw: Optional[str]) -> List[str]:
    """カンマ区切りの拡張子列を正規化して返す（小文字、先頭ドットは除去）。"""
    if not exts_raw:
        return []
    norm = []
    for tok in exts_raw.split(","):
        t = tok.strip().strip(" ;\t\r\n")
        if t.startswith("."):
            t = t[1:]
        t = t.lower()
        if t:
            norm.append(t)
    return norm


def parse_field_decls(name: str, body: str) -> List[Dict[str, Any]]:
    fields = []
    for mm in FIELD_DECL_RE.finditer(body):
        ftype, prop, width, align = mm.groups()
        ftype = ftype.lower()
        cfg = {
            "property": prop,
            "width": int(width),
            "dataType": "string" if ftype == "byte" else ftype,
        }
        if align:
            cfg["align"] = align.lower()
        fields.append(cfg)
    if not fields:
        raise SchemaError(f"struct '{name}' にフィールド宣言が見つかりません。")
    return fields


def validate_struct(sd: StructDef) -> StructDef:
    """フィールド設定を両モードで検査し、誤りは struct 名付きで報告する。"""
    for mode in Mode:
        try:
            build_schema(sd.fields, mode)
        except SchemaError as e:
            raise SchemaError(f"struct '{sd.name}': {e}") from e
    return sd


def _struct_from_json(obj: Any) -> StructDef:
    if isinstance(obj, list):
        return StructDef(name=ANONYMOUS, fields=obj, exts=[])
    if not isinstance(obj, dict) or not isinstance(obj.get("fields"), list):
        raise SchemaError(f"JSON レイアウトの形式が不正です: {obj!r}")
    exts = obj.get("exts") or []
    if isinstance(exts, list):
        exts = ",".join(str(e) for e in exts)
    return StructDef(name=obj.get("name") or ANONYMOUS,
                     fields=obj["fields"], exts=parse_ext_list(exts))


def parse_json_layout(text: str) -> List[StructDef]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaError(f"JSON レイアウトを解析できません: {e}") from e
    if isinstance(data, list) and data and all(isinstance(x, dict) and "fields" in x for x in data):
        structs = [_struct_from_json(x) for x in data]
    else:
        structs = [_struct_from_json(data)]
    for sd in structs:
        if not sd.fields:
            raise SchemaError(f"struct '{sd.name}': JSON レイアウトにフィールドがありません。")
    return [validate_struct(sd) for sd in structs]


def parse_structs_config(text: str) -> List[StructDef]:
    """
    レイアウト文字列から複数structを抽出し、StructDefの配列として返す。
    - 先頭が [ / { なら JSON として解釈
    - /* ... */ と // コメントに対応
    - struct Name { ... } ext1, ext2; という拡張子マッピングを取り込む
    """
    if text.lstrip().startswith(("[", "{")):
        return parse_json_layout(text)

    cleaned = strip_block_and_line_comments(text)
    structs: List[StructDef] = []

    for m in STRUCT_BLOCK_RE.finditer(cleaned):
        name = m.group(1)
        fields = parse_field_decls(name, m.group(2) or "")
        structs.append(StructDef(name=name, fields=fields, exts=parse_ext_list(m.group(3))))

    if not structs:
        # 無名structの簡易対応（単一定義のみ許可）: struct { INTEGER a[1]; } txt;
        anon = re.search(
            r"\bstruct\s*\{(.*?)\}\s*([^;{}]*)?;?", cleaned, flags=re.DOTALL | re.IGNORECASE)
        if not anon:
            raise SchemaError("struct 定義が見つかりません。")
        fields = parse_field_decls(ANONYMOUS, anon.group(1) or "")
        structs.append(StructDef(name=ANONYMOUS, fields=fields, exts=parse_ext_list(anon.group(2))))

    return [validate_struct(sd) for sd in structs]


def choose_struct(structs: Sequence[StructDef], want_name: Optional[str], file_path: str) -> StructDef:
    """名前の明示 or ファイル拡張子で構造体を選択。一意に決まらなければエラー。"""
    if want_name:
        for s in structs:
            if s.name == want_name:
                return s
        names = ", ".join(sd.name for sd in structs)
        raise SchemaError(f"struct '{want_name}' が見つかりません。候補: {names}")

    # 自動選択：拡張子（小文字、ドット無し）
    _, ext = os.path.splitext(os.path.basename(file_path))
    ext = ext.lower().lstrip(".")
    if not ext:
        if len(structs) == 1:
            return structs[0]
        raise SchemaError("ファイルに拡張子がありません。--struct で明示指定してください。")

    cand = [sd for sd in structs if ext in sd.exts]
    if len(cand) == 1:
        return cand[0]
    if len(cand) == 0:
        # 拡張子マッピングが無いstructが1つだけならそれを許容
        no_map = [sd for sd in structs if not sd.exts]
        if len(no_map) == 1:
            return no_map[0]
        names = ", ".join(sd.name for sd in structs)
        raise SchemaError(f"拡張子 '.{ext}' に対応する struct が見つかりません。--struct で明示指定するか、"
                          f"定義に拡張子マッピングを追加してください。候補: {names}")
    names = ", ".join(sd.name for sd in cand)
    raise SchemaError(
        f"拡張子 '.{ext}' に複数の struct がマッチしました: {names}。--struct で明示指定してください。")
