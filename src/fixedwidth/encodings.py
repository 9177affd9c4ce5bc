#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
バイト列 ⇔ テキスト の変換

対応: ascii, utf8, utf16le, latin1, base64, hex
  - base64 / hex はバッファの表現形式として扱う
    （デコード = バイト列を base64/hex 文字列で表す、エンコード = その逆）
  - 変換はすべて厳密（置換文字での握りつぶしはしない）
"""

import base64
import binascii

from .errors import EncodingError

# 正規化名 → Python の codec 名（base64 / hex は別処理）
TEXT_CODECS = {
    "ascii": "ascii",
    "utf8": "utf-8",
    "utf16le": "utf-16-le",
    "latin1": "latin-1",
}

ALIASES = {
    "usascii": "ascii",
    "ucs2": "utf16le",
    "binary": "latin1",
    "iso88591": "latin1",
}

ENCODINGS = tuple(TEXT_CODECS) + ("base64", "hex")


def normalize_encoding(name: str) -> str:
    """大文字小文字・'-'・'_' を無視して正規化名を返す。"""
    key = (name or "").lower().replace("-", "").replace("_", "").strip()
    key = ALIASES.get(key, key)
    if key not in ENCODINGS:
        raise EncodingError(
            f"未対応の文字コードです: {name!r}（対応: {', '.join(ENCODINGS)}）")
    return key


def decode(data: bytes, encoding: str) -> str:
    enc = normalize_encoding(encoding)
    if enc == "base64":
        return base64.b64encode(data).decode("ascii")
    if enc == "hex":
        return bytes(data).hex()
    try:
        return bytes(data).decode(TEXT_CODECS[enc])
    except UnicodeDecodeError as e:
        raise EncodingError(f"{enc} としてデコードできません: {e}") from e


def encode(text: str, encoding: str) -> bytes:
    enc = normalize_encoding(encoding)
    if enc == "base64":
        try:
            return base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as e:
            raise EncodingError(f"base64 として解釈できません: {e}") from e
    if enc == "hex":
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise EncodingError(f"hex として解釈できません: {e}") from e
    try:
        return text.encode(TEXT_CODECS[enc])
    except UnicodeEncodeError as e:
        raise EncodingError(f"{enc} でエンコードできません: {e}") from e
