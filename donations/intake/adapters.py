"""
具体 Adapter 实现。

已注册请求类型：
  record_donation: RecordDonationAdapter  (POST donations/record)
  status_update:   StatusUpdateAdapter    (PUT donations/update/<donationId>)
  blood_center:    BloodCenterAdapter     (POST centers)
  center_update:   CenterUpdateAdapter    (PATCH centers/<centerId>)
  donor_card:      DonorCardAdapter       (POST cards)
"""

from ..validators import (
    validate_blood_center,
    validate_donation_record,
    validate_donor_card,
    validate_status_update,
)
from .base import BaseIntakeAdapter, clean_str, parse_day, parse_moment
from .types import (
    BloodCenterInput,
    CenterUpdateInput,
    DonationInput,
    DonorCardInput,
    StatusUpdateInput,
)


def _dedupe(values):
    if not isinstance(values, list):
        return values
    unique = []
    for value in values:
        if value not in unique:
            unique.append(value)
    return unique


# ── RecordDonationAdapter ──────────────────────────────────────────────────
#
# {
#   "donorId":      "6f1c…",
#   "bloodGroup":   "O+",
#   "donationDate": "2024-05-01T09:30:00.000Z",
#   "medicalNotes": "Hb 14.2",
#   "status":       "Pending"        ← 前端表单会带上，忽略；初始状态由 settings 决定
# }

class RecordDonationAdapter(BaseIntakeAdapter):
    kind = "record_donation"

    def transform(self) -> DonationInput:
        raw = self._parsed
        return DonationInput(
            raw_payload=raw,
            donor_id=str(raw.get("donorId") or "").strip(),
            blood_group=clean_str(raw.get("bloodGroup")),
            donation_date=parse_day(raw.get("donationDate")),
            medical_notes=clean_str(raw.get("medicalNotes")),
        )

    def validate(self, data: DonationInput) -> list[dict]:
        return validate_donation_record({
            "donor_id": data.donor_id,
            "blood_group": data.blood_group,
            "donation_date": data.donation_date,
            "medical_notes": data.medical_notes,
        })


class StatusUpdateAdapter(BaseIntakeAdapter):
    kind = "status_update"

    def transform(self) -> StatusUpdateInput:
        raw = self._parsed
        return StatusUpdateInput(
            raw_payload=raw,
            status=clean_str(raw.get("status")),
            medical_notes=clean_str(raw.get("medicalNotes")),
        )

    def validate(self, data: StatusUpdateInput) -> list[dict]:
        return validate_status_update({
            "status": data.status,
            "medical_notes": data.medical_notes,
        })


# ── BloodCenterAdapter ─────────────────────────────────────────────────────
#
# {
#   "centerName":       "City General",
#   "centerType":       "Hospital",            ← Hospital | BloodBank
#   "location":         "12 Main St",
#   "contactNumber":    "+1 555-010-0199",
#   "bloodTypesNeeded": ["O-", "A+"]
# }

class BloodCenterAdapter(BaseIntakeAdapter):
    kind = "blood_center"

    def transform(self) -> BloodCenterInput:
        raw = self._parsed
        blood_types = raw.get("bloodTypesNeeded")
        return BloodCenterInput(
            raw_payload=raw,
            center_name=clean_str(raw.get("centerName")),
            center_type=clean_str(raw.get("centerType")),
            location=clean_str(raw.get("location")),
            contact_number=clean_str(raw.get("contactNumber")),
            blood_types_needed=_dedupe(blood_types) if blood_types is not None else [],
        )

    def validate(self, data: BloodCenterInput) -> list[dict]:
        return validate_blood_center({
            "center_name": data.center_name,
            "center_type": data.center_type,
            "location": data.location,
            "contact_number": data.contact_number,
            "blood_types_needed": data.blood_types_needed,
        })


class CenterUpdateAdapter(BaseIntakeAdapter):
    kind = "center_update"

    # wire name → model attribute
    UPDATABLE_FIELDS = {
        "centerName": "center_name",
        "location": "location",
        "contactNumber": "contact_number",
        "bloodTypesNeeded": "blood_types_needed",
        "isActive": "is_active",
    }

    def transform(self) -> CenterUpdateInput:
        raw = self._parsed
        changes = {}
        for wire_name, attr in self.UPDATABLE_FIELDS.items():
            if wire_name not in raw:
                continue
            value = raw[wire_name]
            if isinstance(value, str):
                value = value.strip()
            if attr == "blood_types_needed":
                value = _dedupe(value)
            changes[attr] = value
        return CenterUpdateInput(raw_payload=raw, changes=changes)

    def validate(self, data: CenterUpdateInput) -> list[dict]:
        # 字段值的校验要和现有记录合并后才能做，见 services.update_blood_center
        if not data.changes:
            return [{
                "field": "body",
                "message": f"Nothing to update. Updatable fields: {', '.join(self.UPDATABLE_FIELDS)}",
            }]
        return []


class DonorCardAdapter(BaseIntakeAdapter):
    kind = "donor_card"

    def transform(self) -> DonorCardInput:
        raw = self._parsed
        return DonorCardInput(
            raw_payload=raw,
            donor_id=str(raw.get("donorId") or "").strip(),
            card_type=clean_str(raw.get("cardType")),
            issue_date=parse_moment(raw.get("issueDate")),
            expiry_date=parse_moment(raw.get("expiryDate")),
        )

    def validate(self, data: DonorCardInput) -> list[dict]:
        errors = validate_donor_card({
            "donor_id": data.donor_id,
            "card_type": data.card_type,
            "issue_date": data.issue_date,
            "expiry_date": data.expiry_date,
        })
        raw = self._parsed
        # 给了值但解析失败 → 单独报错，不要静默当成“未提供”
        for wire_name, value in (("issueDate", data.issue_date), ("expiryDate", data.expiry_date)):
            if raw.get(wire_name) not in (None, "") and value is None:
                errors.append({"field": wire_name, "message": f"{wire_name} must be an ISO 8601 date."})
        return errors
