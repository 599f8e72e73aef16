"""转换器归一化

调用方可以给字段提供多种形式的转换器，在使用前统一归一化为一个
``Callable[[Any], Any]``：

- 普通函数 / lambda
- 带 ``transform`` 方法的对象
- 带 ``transform`` 方法的类（无参实例化）
- 以上任意形式组成的列表（按顺序串联）
"""

from __future__ import annotations

import inspect
from functools import reduce
from typing import Any, Callable

from ..common.exceptions import TransformError


def _identity(value: Any) -> Any:
    return value


def normalize_transform(transform: Any) -> Callable[[Any], Any]:
    """把转换器定义归一化为单个可调用对象

    Raises:
        TransformError: 无法识别的转换器定义
    """
    if transform is None:
        return _identity

    if isinstance(transform, (list, tuple)):
        steps = [normalize_transform(t) for t in transform]
        return lambda value: reduce(lambda acc, step: step(acc), steps, value)

    if inspect.isclass(transform):
        if not callable(getattr(transform, "transform", None)):
            raise TransformError(f"转换器类缺少 transform 方法: {transform.__name__}")
        return transform().transform

    method = getattr(transform, "transform", None)
    if callable(method):
        return method

    if callable(transform):
        return transform

    raise TransformError(f"无法识别的转换器: {transform!r}")
