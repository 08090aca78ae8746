"""
Entity validators.

两层：
1. 字段谓词 validate_xxx(value) → None 或错误描述字符串
2. 实体校验 validate_<entity>(candidate) → [{'field': ..., 'message': ...}, ...]

实体校验接收完整候选对象（dict），跨字段规则（expiry > issue）在这里做，
不依赖 ORM 的 save hook。任何写操作前调用 raise_for_violations()，
有错就整体失败，不会出现部分写入。
"""

import re
from datetime import date, datetime

from .exceptions import ValidationError
from .models import BLOOD_GROUPS, BloodCenter, DonationRecord, DonorCard

NAME_RE = re.compile(r"^[A-Za-z0-9\s]+$")
CONTACT_NUMBER_RE = re.compile(r"^\+?[\d\s-]{10,}$", re.ASCII)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 100
MEDICAL_NOTES_MAX_LENGTH = 500
# 与数据库列宽一致
LOCATION_MAX_LENGTH = BloodCenter._meta.get_field("location").max_length
CONTACT_NUMBER_MAX_LENGTH = BloodCenter._meta.get_field("contact_number").max_length

CENTER_TYPES = [value for value, _ in BloodCenter.CENTER_TYPE_CHOICES]
DONATION_STATUSES = [value for value, _ in DonationRecord.STATUS_CHOICES]
CARD_TYPES = [value for value, _ in DonorCard.CARD_TYPE_CHOICES]


# ── 字段谓词 ──────────────────────────────────────────────────────────────

def validate_name(value):
    if not isinstance(value, str) or not NAME_RE.match(value):
        return "Invalid name format. Only letters, digits and spaces are allowed."
    if not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH:
        return (
            f"Invalid name format. Center name should be between "
            f"{NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters."
        )
    return None


def validate_contact_number(value):
    if not isinstance(value, str) or not CONTACT_NUMBER_RE.match(value):
        return "Invalid contact number format."
    if len(value) > CONTACT_NUMBER_MAX_LENGTH:
        return f"Contact number cannot exceed {CONTACT_NUMBER_MAX_LENGTH} characters."
    return None


def validate_blood_group(value):
    if value not in BLOOD_GROUPS:
        return f"Invalid blood group. Must be one of: {', '.join(BLOOD_GROUPS)}"
    return None


def validate_medical_notes(value):
    if value is not None and len(value) > MEDICAL_NOTES_MAX_LENGTH:
        return f"Medical notes cannot exceed {MEDICAL_NOTES_MAX_LENGTH} characters."
    return None


def validate_expiry_after_issue(issue_date, expiry_date):
    if issue_date is None or expiry_date is None:
        return None
    if not expiry_date > issue_date:
        return "Expiry date must be after issue date."
    return None


def _validate_choice(value, allowed, label):
    if value not in allowed:
        return f"Invalid {label}: {value!r}. Allowed: {', '.join(allowed)}"
    return None


def _is_date(value):
    return isinstance(value, (date, datetime))


# ── 实体校验 ──────────────────────────────────────────────────────────────

def validate_blood_center(candidate):
    """
    candidate keys: center_name, center_type, location, contact_number,
    blood_types_needed, is_active (optional).
    """
    errors = []

    message = validate_name(candidate.get('center_name'))
    if message:
        errors.append({'field': 'centerName', 'message': message})

    message = _validate_choice(candidate.get('center_type'), CENTER_TYPES, 'center type')
    if message:
        errors.append({'field': 'centerType', 'message': message})

    location = candidate.get('location')
    if not isinstance(location, str) or not location.strip():
        errors.append({'field': 'location', 'message': 'Location is required.'})
    elif len(location) > LOCATION_MAX_LENGTH:
        errors.append({
            'field': 'location',
            'message': f"Location cannot exceed {LOCATION_MAX_LENGTH} characters.",
        })

    message = validate_contact_number(candidate.get('contact_number'))
    if message:
        errors.append({'field': 'contactNumber', 'message': message})

    # None 不是合法值，列是 NOT NULL
    blood_types = candidate.get('blood_types_needed', [])
    if not isinstance(blood_types, list):
        errors.append({'field': 'bloodTypesNeeded', 'message': 'Blood types needed must be a list.'})
    else:
        for i, group in enumerate(blood_types):
            message = validate_blood_group(group)
            if message:
                errors.append({'field': f'bloodTypesNeeded[{i}]', 'message': message})

    if 'is_active' in candidate and not isinstance(candidate['is_active'], bool):
        errors.append({'field': 'isActive', 'message': 'isActive must be a boolean.'})

    return errors


def validate_donation_record(candidate):
    """
    candidate keys: donor_id, blood_group, donation_date, medical_notes, status (optional).
    """
    errors = []

    if not candidate.get('donor_id'):
        errors.append({'field': 'donorId', 'message': 'Donor ID is required.'})

    message = validate_blood_group(candidate.get('blood_group'))
    if message:
        errors.append({'field': 'bloodGroup', 'message': message})

    if not _is_date(candidate.get('donation_date')):
        errors.append({'field': 'donationDate', 'message': 'Donation date is required (YYYY-MM-DD).'})

    message = validate_medical_notes(candidate.get('medical_notes'))
    if message:
        errors.append({'field': 'medicalNotes', 'message': message})

    if 'status' in candidate:
        message = _validate_choice(candidate['status'], DONATION_STATUSES, 'status')
        if message:
            errors.append({'field': 'status', 'message': message})

    return errors


def validate_status_update(candidate):
    """candidate keys: status, medical_notes."""
    errors = []

    message = _validate_choice(candidate.get('status'), DONATION_STATUSES, 'status')
    if message:
        errors.append({'field': 'status', 'message': message})

    message = validate_medical_notes(candidate.get('medical_notes'))
    if message:
        errors.append({'field': 'medicalNotes', 'message': message})

    return errors


def validate_donor_card(candidate):
    """
    candidate keys: donor_id, card_type, issue_date, expiry_date.

    expiry_date 为空时由 service 层补默认值（issue + 2 年），这里只检查已给出的值。
    """
    errors = []

    if not candidate.get('donor_id'):
        errors.append({'field': 'donorId', 'message': 'Donor ID is required.'})

    message = _validate_choice(candidate.get('card_type'), CARD_TYPES, 'card type')
    if message:
        errors.append({'field': 'cardType', 'message': message})

    issue_date = candidate.get('issue_date')
    expiry_date = candidate.get('expiry_date')
    if issue_date is not None and not _is_date(issue_date):
        errors.append({'field': 'issueDate', 'message': 'Issue date must be an ISO 8601 date.'})
    if expiry_date is not None and not _is_date(expiry_date):
        errors.append({'field': 'expiryDate', 'message': 'Expiry date must be an ISO 8601 date.'})
    elif _is_date(issue_date):
        message = validate_expiry_after_issue(issue_date, expiry_date)
        if message:
            errors.append({'field': 'expiryDate', 'message': message})

    return errors


def raise_for_violations(errors):
    """Raise a single ValidationError carrying every violation."""
    if errors:
        raise ValidationError(
            message="Request validation failed.",
            code="VALIDATION_ERROR",
            detail={"errors": errors},
        )
