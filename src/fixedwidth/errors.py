#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
固定長コーデックの例外定義
"""


class CodecError(ValueError):
    """固定長変換で発生するエラーの基底クラス"""


class SchemaError(CodecError):
    """フィールド定義（幅・プロパティパス・型・寄せ）の不正"""


class OptionsError(CodecError):
    """呼び出しごとのオプション（埋め文字・行区切り）の不正"""


class EncodingError(CodecError):
    """文字コードの変換失敗、または未知の文字コード名"""


class LengthMismatchError(CodecError):
    """厳密モードで行長がフィールド長合計と一致しない。

    line_index は 0 始まりの行番号。
    """

    def __init__(self, line_index: int, expected: int, actual: int):
        self.line_index = line_index
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"行長が不正です（行 {line_index + 1}）: 期待 {expected} 文字, 実際 {actual} 文字")
