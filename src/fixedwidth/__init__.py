"""
fixedwidth - 固定長レコード ⇔ 構造化データ 変換ライブラリ
"""

from .errors import CodecError, EncodingError, LengthMismatchError, OptionsError, SchemaError
from .layout import StructDef, choose_struct, parse_structs_config
from .options import ParseOptions, StringifyOptions
from .parser import parse
from .schema import FieldSpec, Mode, Schema, build_schema
from .stringifier import stringify
from .values import Alignment, DataType, TrimPolicy

__version__ = "1.0.0"
__all__ = [
    "Alignment",
    "CodecError",
    "DataType",
    "EncodingError",
    "FieldSpec",
    "LengthMismatchError",
    "Mode",
    "OptionsError",
    "ParseOptions",
    "Schema",
    "SchemaError",
    "StringifyOptions",
    "StructDef",
    "TrimPolicy",
    "build_schema",
    "choose_struct",
    "parse",
    "parse_structs_config",
    "stringify",
]
