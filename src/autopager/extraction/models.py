"""字段提取规则"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class FieldRule(BaseModel):
    """单个字段的提取规则

    Example:
        >>> FieldRule(selector="a.title", attribute="href")
        >>> FieldRule(selector="//span[@class='tag']", type="xpath", multiple=True)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    selector: str = Field(..., description="CSS 选择器或 XPath 表达式")
    type: Literal["css", "xpath", "evaluate"] = Field(default="css", description="选择器类型")
    attribute: str | None = Field(default=None, description="提取的属性，默认提取文本")
    multiple: bool = Field(default=False, description="是否提取全部匹配（返回列表）")
    raw: bool = Field(default=False, description="返回元素的 outer HTML")
    transform: Any = Field(default=None, description="转换器：函数、带 transform 方法的对象/类或其列表")

    @property
    def empty_value(self):
        return [] if self.multiple else None


ExtractionSchema = dict[str, FieldRule]


def coerce_schema(schema: dict[str, Any]) -> ExtractionSchema:
    """把 dict 形式的规则统一转换为 FieldRule"""
    return {
        name: rule if isinstance(rule, FieldRule) else FieldRule.model_validate(rule)
        for name, rule in schema.items()
    }
