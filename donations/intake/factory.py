"""
工厂函数：根据请求类型返回对应 Adapter。

新增请求类型只需：
  1. 在 adapters.py 新建 Adapter 类
  2. 在此处 _build_registry 加一行
"""

from ..exceptions import ValidationError
from .base import BaseIntakeAdapter


def _build_registry() -> dict[str, type[BaseIntakeAdapter]]:
    # 延迟导入，避免循环依赖
    from .adapters import (
        BloodCenterAdapter,
        CenterUpdateAdapter,
        DonorCardAdapter,
        RecordDonationAdapter,
        StatusUpdateAdapter,
    )

    return {
        "record_donation": RecordDonationAdapter,
        "status_update":   StatusUpdateAdapter,
        "blood_center":    BloodCenterAdapter,
        "center_update":   CenterUpdateAdapter,
        "donor_card":      DonorCardAdapter,
    }


def get_adapter(kind: str, raw_body: bytes | str | dict) -> BaseIntakeAdapter:
    """
    根据 kind 返回已实例化的 Adapter。

    Raises:
        ValidationError: 未知的 kind
    """
    registry = _build_registry()
    adapter_cls = registry.get(kind)

    if adapter_cls is None:
        raise ValidationError(
            message=f"Unknown request kind: {kind!r}.",
            code="UNKNOWN_REQUEST_KIND",
            detail={"known_kinds": list(registry.keys())},
        )

    return adapter_cls(raw_body=raw_body)
