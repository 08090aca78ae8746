"""
请求体解析后的标准输入结构。

所有 Adapter 的 transform() 必须返回这里的某个 dataclass。
业务层（services.py）只消费这些结构，永远不碰原始 JSON。
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional


@dataclass
class DonationInput:
    """POST donations/record"""

    donor_id: str
    blood_group: str
    donation_date: Optional[date]
    medical_notes: str = ""
    raw_payload: Any = field(default=None, repr=False)


@dataclass
class StatusUpdateInput:
    """PUT donations/update/<donationId>。medical_notes 为空表示保留原值。"""

    status: str
    medical_notes: str = ""
    raw_payload: Any = field(default=None, repr=False)


@dataclass
class BloodCenterInput:
    center_name: str
    center_type: str
    location: str
    contact_number: str
    blood_types_needed: list[str] = field(default_factory=list)
    raw_payload: Any = field(default=None, repr=False)


@dataclass
class CenterUpdateInput:
    """
    PATCH centers/<centerId>。

    changes 只包含请求里出现的字段（snake_case 键），service 层合并后整体校验。
    """

    changes: dict[str, Any] = field(default_factory=dict)
    raw_payload: Any = field(default=None, repr=False)


@dataclass
class DonorCardInput:
    donor_id: str
    card_type: str
    issue_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    raw_payload: Any = field(default=None, repr=False)
