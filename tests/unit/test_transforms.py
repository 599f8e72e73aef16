"""转换器归一化测试"""

import pytest

from autopager.common.exceptions import TransformError
from autopager.extraction import normalize_transform


class Upper:
    def transform(self, value):
        return value.upper()


class Price:
    def __init__(self, currency="$"):
        self.currency = currency

    def transform(self, value):
        return float(value.replace(self.currency, "").replace(",", ""))


class TestNormalizeTransform:
    def test_none_is_identity(self):
        assert normalize_transform(None)("x") == "x"

    def test_plain_function(self):
        assert normalize_transform(str.strip)("  a ") == "a"

    def test_object_with_transform_method(self):
        assert normalize_transform(Price("¥"))("¥1,200") == 1200.0

    def test_class_is_instantiated(self):
        assert normalize_transform(Upper)("abc") == "ABC"

    def test_list_is_chained_in_order(self):
        chained = normalize_transform([str.strip, Upper, lambda v: v + "!"])
        assert chained("  hi ") == "HI!"

    def test_nested_lists(self):
        assert normalize_transform([[str.strip], [len]])(" abc ") == 3

    def test_unknown_definition(self):
        with pytest.raises(TransformError):
            normalize_transform(42)

    def test_class_without_transform(self):
        class Nothing:
            pass

        with pytest.raises(TransformError):
            normalize_transform(Nothing)
