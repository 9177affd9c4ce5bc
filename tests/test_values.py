#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
値まわりの共通部品のテスト
"""

import math
import unittest

from fixedwidth.values import (
    Alignment,
    TrimPolicy,
    cast_boolean,
    cast_float,
    cast_integer,
    cast_number,
    get_path,
    pad,
    parse_path,
    render,
    set_path,
    trim,
    truncate,
)


class TestParsePath(unittest.TestCase):
    """プロパティパス解析のテスト"""

    def test_simple_key(self):
        self.assertEqual(parse_path("name"), ("name",))

    def test_dotted_and_index(self):
        """ドットと添字の混在"""
        self.assertEqual(parse_path("data.person[0].name"), ("data", "person", 0, "name"))

    def test_nested_indexes(self):
        self.assertEqual(parse_path("m[1][2]"), ("m", 1, 2))

    def test_quoted_key(self):
        """引用符付きキー（ドットを含むキー）"""
        self.assertEqual(parse_path('a["b.c"]'), ("a", "b.c"))

    def test_empty(self):
        with self.assertRaises(ValueError):
            parse_path("")
        with self.assertRaises(ValueError):
            parse_path("   ")

    def test_malformed(self):
        for bad in ["a..b", "a.", ".a", "a[0", "a[x]"]:
            with self.subTest(path=bad):
                with self.assertRaises(ValueError):
                    parse_path(bad)


class TestGetSetPath(unittest.TestCase):
    """入れ子構造への読み書きのテスト"""

    def test_set_creates_containers(self):
        """途中の dict / list を作成する"""
        rec = {}
        set_path(rec, parse_path("a.b[1].c"), 5)
        self.assertEqual(rec, {"a": {"b": [None, {"c": 5}]}})

    def test_set_reuses_existing(self):
        """既存のコンテナは再利用する"""
        rec = {}
        set_path(rec, parse_path("p[0].first"), "A")
        set_path(rec, parse_path("p[0].last"), "B")
        set_path(rec, parse_path("p[1].first"), "C")
        self.assertEqual(rec, {"p": [{"first": "A", "last": "B"}, {"first": "C"}]})

    def test_set_replaces_scalar(self):
        """途中にスカラーがあれば置き換える"""
        rec = {"a": 1}
        set_path(rec, parse_path("a.b"), 2)
        self.assertEqual(rec, {"a": {"b": 2}})

    def test_get_existing(self):
        rec = {"a": {"b": [{"c": "x"}]}}
        self.assertEqual(get_path(rec, parse_path("a.b[0].c")), "x")

    def test_get_missing(self):
        """辿れない場合は既定値"""
        rec = {"a": {"b": []}}
        self.assertEqual(get_path(rec, parse_path("a.b[0].c")), "")
        self.assertEqual(get_path(rec, parse_path("x.y")), "")
        self.assertIsNone(get_path(rec, parse_path("a.b.c"), None))

    def test_get_falsy_values(self):
        """0 や False はそのまま返る"""
        rec = {"n": 0, "f": False}
        self.assertEqual(get_path(rec, ("n",)), 0)
        self.assertIs(get_path(rec, ("f",)), False)


class TestPadTrim(unittest.TestCase):
    """埋め・除去・切り詰めのテスト"""

    def test_pad_left_alignment(self):
        """左寄せは右側を埋める"""
        self.assertEqual(pad("Al", 6, " ", Alignment.LEFT), "Al    ")

    def test_pad_right_alignment(self):
        """右寄せは左側を埋める"""
        self.assertEqual(pad("42", 5, "0", Alignment.RIGHT), "00042")

    def test_pad_no_change(self):
        self.assertEqual(pad("abc", 3, "*"), "abc")

    def test_trim_policies(self):
        self.assertEqual(trim("**ab**", "*", TrimPolicy.NONE), "**ab**")
        self.assertEqual(trim("**ab**", "*", TrimPolicy.LEFT), "ab**")
        self.assertEqual(trim("**ab**", "*", TrimPolicy.RIGHT), "**ab")
        self.assertEqual(trim("**ab**", "*", TrimPolicy.BOTH), "ab")

    def test_trim_only_pad_char(self):
        """除去対象は埋め文字のみ（空白に限らない）"""
        self.assertEqual(trim(" 0042 ", "0", TrimPolicy.BOTH), " 0042 ")
        self.assertEqual(trim("0042", "0", TrimPolicy.LEFT), "42")

    def test_truncate(self):
        self.assertEqual(truncate("abcdef", 4), "abcd")
        self.assertEqual(truncate("ab", 4), "ab")
        self.assertEqual(truncate("ab", 0), "")


class TestCasts(unittest.TestCase):
    """型変換のテスト（寛容: 失敗は NaN）"""

    def test_number(self):
        self.assertEqual(cast_number("12.5"), 12.5)
        self.assertEqual(cast_number("-3e2"), -300.0)
        self.assertEqual(cast_number(""), 0.0)
        self.assertTrue(math.isnan(cast_number("12abc")))
        self.assertTrue(math.isnan(cast_number("abc")))

    def test_float(self):
        """先頭の数値部分のみ解釈"""
        self.assertEqual(cast_float("12.5kg"), 12.5)
        self.assertEqual(cast_float(".5"), 0.5)
        self.assertTrue(math.isinf(cast_float("Infinity")))
        self.assertTrue(math.isnan(cast_float("")))
        self.assertTrue(math.isnan(cast_float("kg")))

    def test_integer(self):
        self.assertEqual(cast_integer("0042"), 42)
        self.assertEqual(cast_integer("-7"), -7)
        self.assertEqual(cast_integer("7.9"), 7)
        self.assertIsInstance(cast_integer("0042"), int)
        self.assertTrue(math.isnan(cast_integer("")))
        self.assertTrue(math.isnan(cast_integer("x1")))

    def test_integer_huge_digits(self):
        """桁数上限を超える整数も例外にせず近似値（無限大）"""
        self.assertTrue(math.isinf(cast_integer("1" * 5000)))
        self.assertTrue(math.isinf(cast_integer("-" + "9" * 5000)))

    def test_non_ascii_digits(self):
        """10進数は ASCII の数字のみ（全角・アラビア数字は NaN）"""
        self.assertTrue(math.isnan(cast_integer("٤٢")))
        self.assertTrue(math.isnan(cast_integer("４２")))
        self.assertTrue(math.isnan(cast_number("٤٢")))
        self.assertTrue(math.isnan(cast_float("٤٢")))

    def test_boolean(self):
        self.assertIs(cast_boolean("N"), True)
        self.assertIs(cast_boolean("0"), True)
        self.assertIs(cast_boolean(""), False)


class TestRender(unittest.TestCase):
    """出力用文字列表現のテスト"""

    def test_scalars(self):
        self.assertEqual(render(None), "")
        self.assertEqual(render("abc"), "abc")
        self.assertEqual(render(True), "true")
        self.assertEqual(render(False), "false")
        self.assertEqual(render(42), "42")
        self.assertEqual(render(1.0), "1")
        self.assertEqual(render(1.25), "1.25")
        self.assertEqual(render(float("nan")), "NaN")
        self.assertEqual(render(float("-inf")), "-Infinity")

    def test_containers(self):
        self.assertEqual(render({"a": 1}), '{"a":1}')
        self.assertEqual(render([1, 2]), "[1,2]")


if __name__ == "__main__":
    unittest.main(verbosity=2)
