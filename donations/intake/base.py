"""
BaseIntakeAdapter: 所有请求体 Adapter 的抽象基类。

每种请求体只需：
1. 继承 BaseIntakeAdapter
2. 实现 transform() 和 validate()
3. 在 factory.py 的 _build_registry 注册一行

View 层不关心 JSON 长什么样。
"""

import json
from abc import ABC, abstractmethod
from datetime import datetime, time
from typing import Any

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from ..exceptions import ValidationError
from ..validators import raise_for_violations


def parse_day(value):
    """
    ISO 日期或日期时间字符串 → date；无法解析返回 None。

    前端表单提交的是 JS Date 的 JSON 形式（"2024-05-01T09:30:00.000Z"），
    也接受纯日期 "2024-05-01"。
    """
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()
    try:
        parsed = parse_datetime(value)
        if parsed is not None:
            return parsed.date()
        return parse_date(value)
    except ValueError:
        return None


def parse_moment(value):
    """ISO 日期 / 日期时间字符串 → aware datetime；无法解析返回 None。"""
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()
    try:
        parsed = parse_datetime(value)
        if parsed is None:
            day = parse_date(value)
            if day is None:
                return None
            parsed = datetime.combine(day, time.min)
    except ValueError:
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def clean_str(value) -> str:
    return value.strip() if isinstance(value, str) else ""


class BaseIntakeAdapter(ABC):
    """
    三步流水线：parse → transform → validate

    parse() 提供默认 JSON 实现；子类实现 transform() 和 validate()。
    """

    # 子类声明自己对应的请求类型（与 factory 注册键一致）
    kind: str = ""

    def __init__(self, raw_body: bytes | str | dict):
        self._raw_body = raw_body
        self._parsed: dict = {}

    def parse(self) -> Any:
        """原始请求体 → dict。非 JSON 对象直接 ValidationError。"""
        raw = self._raw_body
        if isinstance(raw, (bytes, str)):
            try:
                raw = json.loads(raw or "{}")
            except ValueError:
                raise ValidationError(
                    message="Request body is not valid JSON.",
                    code="INVALID_JSON",
                )
        if not isinstance(raw, dict):
            raise ValidationError(
                message="Request body must be a JSON object.",
                code="INVALID_JSON",
            )
        self._parsed = raw
        return raw

    @abstractmethod
    def transform(self) -> Any:
        """self._parsed → 对应的 input dataclass。"""

    @abstractmethod
    def validate(self, data: Any) -> list[dict]:
        """返回字段级错误列表，空列表表示通过。"""

    def process(self) -> Any:
        """parse → transform → validate，返回校验通过的 input dataclass。"""
        self.parse()
        data = self.transform()
        raise_for_violations(self.validate(data))
        return data
