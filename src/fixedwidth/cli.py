#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
固定長ファイル ⇔ JSON レコード 変換ツール
（レイアウト定義ファイル駆動・ブロックコメント対応・複数struct/拡張子マッピング対応）

◆ サブコマンド
  parse     : 固定長ファイル → JSON 配列（--jsonl で1行1レコード）
  stringify : JSON 配列 / JSON lines → 固定長ファイル

◆ レイアウト書式（詳細は fixedwidth.layout）
      struct Name {
        INTEGER id[4];
        STRING  name[6] LEFT;
        NUMBER  amount[10] RIGHT;
      } ext1, ext2, ...;

◆ 例
  python -m fixedwidth parse -i input.dat -o out.json -c layout.struct
  python -m fixedwidth parse -i input.dat -o out.json -c layout.struct --eol lf --relaxed
  python -m fixedwidth stringify -i in.json -o out.dat -c layout.struct --pad 0 --no-eof
  python -m fixedwidth parse -i input.bin -o out.jsonl -c layout.struct --struct FIX47 --jsonl
"""

import argparse
import codecs
import json
import logging
import sys
from typing import Any, Dict, List

from .errors import CodecError, LengthMismatchError
from .layout import StructDef, choose_struct, parse_structs_config
from .options import ParseOptions, StringifyOptions
from .parser import parse
from .schema import Mode, Schema
from .stringifier import stringify
from .values import TrimPolicy

# 便利な定数
CRLF = "\r\n"
LF = "\n"
CR = "\r"


def parse_text_from_arg(arg: str) -> str:
    """
    引数の文字列を実際の文字列へ。
      - "hex:1f" のような16進列（偶数桁）→ 各バイトを1文字（latin-1）として
      - バックスラッシュエスケープ "\\t", "\\x1f", "\\n" 等（Python互換）
      - 上記以外 → そのまま
    """
    if arg.startswith("hex:"):
        hexpart = arg[4:].strip()
        if len(hexpart) == 0 or (len(hexpart) % 2) != 0:
            raise ValueError(f"hex 指定は偶数桁の16進で与えてください: {arg!r}")
        try:
            return bytes.fromhex(hexpart).decode("latin-1")
        except ValueError:
            raise ValueError(f"hex 指定を変換できません: {arg!r}")

    # バックスラッシュエスケープが含まれる場合のみ unicode_escape で処理
    if '\\' in arg:
        try:
            return codecs.decode(arg, "unicode_escape")  # "\\t" → "\t" 等
        except (UnicodeError, ValueError):
            # エスケープ処理に失敗した場合はそのまま
            pass

    return arg


def parse_term(term: str) -> str:
    """行区切りをプリセット or 任意文字列へ。"""
    t = term.lower()
    if t == "crlf":
        return CRLF
    if t == "lf":
        return LF
    if t == "cr":
        return CR
    if t == "none":
        return ""
    return parse_text_from_arg(term)


def read_config_file(path: str) -> str:
    """設定ファイルを文字列として読む（utf-8-sig → utf-8 → cp932 の順にフォールバック）。"""
    for encoding in ["utf-8-sig", "utf-8", "cp932"]:
        try:
            with open(path, "r", encoding=encoding) as f:
                return f.read()
        except UnicodeDecodeError:
            if encoding == "cp932":
                raise
            continue


def load_records(path: str, jsonl: bool) -> List[Dict[str, Any]]:
    """JSON 配列（jsonl=True なら1行1レコード）を読む。要素は object のみ。"""
    with open(path, "r", encoding="utf-8-sig") as f:
        if jsonl:
            records = [json.loads(line) for line in f if line.strip()]
        else:
            records = json.load(f)
    if isinstance(records, dict):
        records = [records]
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ValueError("レコードは JSON object の配列で与えてください。")
    return records


def dump_records(records: List[Dict[str, Any]], path: str, jsonl: bool) -> None:
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        if jsonl:
            for r in records:
                f.write(json.dumps(r, ensure_ascii=False) + "\n")
        else:
            json.dump(records, f, ensure_ascii=False, indent=2)
            f.write("\n")


def print_layout(sd: StructDef, schema: Schema, term: str, encoding: str) -> None:
    print("# Layout")
    print(f"- Using struct             : {sd.name}")
    for f, pos in zip(schema.fields, schema.offsets()):
        align = f" {f.alignment.value}" if f.alignment else ""
        print(f"  * {f.property}: {f.width} chars @ {pos} ({f.data_type.value}{align})")
    print(f"- Line terminator          : {term!r} (len={len(term)})")
    print(f"- Encoding                 : {encoding}")
    print(f"=> 1 record                : {schema.total_width} + {len(term)} chars")


def load_struct(args, file_path: str):
    """レイアウト読込と struct 選択。失敗時は (None, 終了コード)。"""
    try:
        structs = parse_structs_config(read_config_file(args.config))
    except (OSError, UnicodeError, CodecError) as e:
        print(f"[ERR] 設定ファイルエラー: {e}", file=sys.stderr)
        return None, 2

    try:
        return choose_struct(structs, args.struct_name, file_path), 0
    except CodecError as e:
        print(f"[ERR] 構造体選択エラー: {e}", file=sys.stderr)
        # 利便のため候補一覧を表示
        print("# 定義一覧:", file=sys.stderr)
        for x in structs:
            ex = (", ".join("." + e for e in x.exts)) if x.exts else "(拡張子マッピングなし)"
            print(f"  - {x.name}: fields={len(x.fields)}, exts={ex}", file=sys.stderr)
        return None, 2


def cmd_parse(args) -> int:
    sd, rc = load_struct(args, args.input)
    if sd is None:
        return rc

    try:
        options = ParseOptions(
            encoding=args.encoding,
            line_terminator=parse_term(args.eol),
            trim=args.trim,
            pad=parse_text_from_arg(args.pad),
            relaxed=args.relaxed,
            max_records=args.max_rows,
        )
        schema = sd.schema(Mode.PARSE)
    except (ValueError, CodecError) as e:
        print(f"[ERR] 引数の解釈に失敗: {e}", file=sys.stderr)
        return 2

    if args.dump_layout:
        print_layout(sd, schema, options.line_terminator, options.encoding)
        return 0

    try:
        with open(args.input, "rb") as rf:
            data = rf.read()
    except OSError as e:
        print(f"[ERR] 入力ファイルにアクセスできません: {args.input} ({e})", file=sys.stderr)
        return 2
    if not data:
        print("[ERR] 入力ファイルが空です。", file=sys.stderr)
        return 1

    try:
        records = parse(data, schema, options)
    except LengthMismatchError as e:
        print(f"[ERR] {e}（--relaxed で補正して継続できます）", file=sys.stderr)
        return 2
    except CodecError as e:
        print(f"[ERR] 変換に失敗しました: {e}", file=sys.stderr)
        return 2

    try:
        dump_records(records, args.output, args.jsonl)
    except OSError as e:
        print(f"[ERR] 出力ファイルに書き込めません: {args.output} ({e})", file=sys.stderr)
        return 2

    if args.summary:
        print(f"records_out={len(records)}, record_width={schema.total_width}, "
              f"eol={options.line_terminator!r}, encoding={options.encoding}, "
              f"relaxed={options.relaxed}, struct={sd.name}")
    else:
        print(f"完了: {len(records)} 行 → {args.output} (struct={sd.name})")
    return 0


def cmd_stringify(args) -> int:
    sd, rc = load_struct(args, args.output)
    if sd is None:
        return rc

    try:
        options = StringifyOptions(
            encoding=args.encoding,
            line_terminator=parse_term(args.eol),
            pad=parse_text_from_arg(args.pad),
            append_trailing_terminator=not args.no_eof,
        )
        schema = sd.schema(Mode.STRINGIFY)
    except (ValueError, CodecError) as e:
        print(f"[ERR] 引数の解釈に失敗: {e}", file=sys.stderr)
        return 2

    if args.dump_layout:
        print_layout(sd, schema, options.line_terminator, options.encoding)
        return 0

    try:
        records = load_records(args.input, args.jsonl)
    except OSError as e:
        print(f"[ERR] 入力ファイルにアクセスできません: {args.input} ({e})", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"[ERR] 入力 JSON が不正です: {e}", file=sys.stderr)
        return 2

    try:
        data = stringify(records, schema, options)
    except CodecError as e:
        print(f"[ERR] 変換に失敗しました: {e}", file=sys.stderr)
        return 2

    try:
        with open(args.output, "wb") as wf:
            wf.write(data)
    except OSError as e:
        print(f"[ERR] 出力ファイルに書き込めません: {args.output} ({e})", file=sys.stderr)
        return 2

    if args.summary:
        print(f"records_in={len(records)}, record_width={schema.total_width}, "
              f"bytes_out={len(data)}, eol={options.line_terminator!r}, "
              f"encoding={options.encoding}, struct={sd.name}")
    else:
        print(f"完了: {len(records)} 行 → {args.output} (struct={sd.name})")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="fixedwidth",
        description="固定長ファイル ⇔ JSON レコード変換（struct複数/拡張子対応・ブロックコメント対応）")
    ap.add_argument("-v", "--verbose", action="store_true", help="デバッグログを表示")
    sub = ap.add_subparsers(dest="command")

    def common(p, in_help, out_help):
        p.add_argument("-i", "--input", required=True, help=in_help)
        p.add_argument("-o", "--output", required=True, help=out_help)
        p.add_argument("-c", "--config", required=True,
                       help="レイアウト定義ファイル（UTF-8/UTF-8(BOM)/CP932 対応）")
        p.add_argument("--struct", dest="struct_name", default=None,
                       help="使用する struct 名（省略時は拡張子で自動選択）")
        p.add_argument("--encoding", default="utf8",
                       help="文字コード（ascii|utf8|utf16le|latin1|base64|hex, 既定=utf8）")
        p.add_argument("--eol", default="crlf",
                       help="行区切り（crlf|lf|cr|none|hex:..|'\\n' 等, 既定=crlf）")
        p.add_argument("--pad", default=" ",
                       help="埋め文字（1文字。読込時は trim 対象, 既定=空白）")
        p.add_argument("--jsonl", action="store_true", help="JSON lines（1行1レコード）で入出力")
        p.add_argument("--dump-layout", action="store_true", help="レイアウトを表示して終了")
        p.add_argument("--summary", action="store_true", help="処理サマリのみ簡潔に表示")

    p_parse = sub.add_parser("parse", help="固定長ファイル → JSON")
    common(p_parse, "入力の固定長ファイル", "出力 JSON ファイル")
    p_parse.add_argument("--trim", choices=[t.value for t in TrimPolicy], default="both",
                         help="フィールド両端の埋め文字除去（既定=both）")
    p_parse.add_argument("--relaxed", action="store_true",
                         help="行長の不一致を補正して継続（既定は厳密チェックで即エラー）")
    p_parse.add_argument("--max-rows", type=int, default=0,
                         help="先頭Nレコードのみ処理（0=全件）")
    p_parse.set_defaults(func=cmd_parse)

    p_str = sub.add_parser("stringify", help="JSON → 固定長ファイル")
    common(p_str, "入力 JSON ファイル", "出力の固定長ファイル")
    p_str.add_argument("--no-eof", action="store_true",
                       help="最終行の後に行区切りを付けない")
    p_str.set_defaults(func=cmd_stringify)
    return ap


def main(argv=None) -> int:
    ap = build_arg_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
    )

    if not getattr(args, "func", None):
        ap.print_help(sys.stderr)
        return 2

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
