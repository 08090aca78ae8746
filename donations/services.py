import logging
import uuid

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError, transaction
from django.utils import timezone

from .exceptions import BlockError, InternalError, NotFoundError
from .identifiers import save_with_unique_identifier
from .models import BloodCenter, DonationRecord, Donor, DonorCard
from .validators import (
    raise_for_violations,
    validate_blood_center,
    validate_blood_group,
    validate_donor_card,
)

logger = logging.getLogger(__name__)

INITIAL_STATUS_CHOICES = ('Pending', 'Completed')

# 严格模式下允许的状态流转；同状态重复提交总是允许
STATUS_TRANSITIONS = {
    'Pending': {'Completed', 'Rejected', 'Cancelled'},
    'Completed': {'Cancelled'},
    'Rejected': set(),
    'Cancelled': set(),
}

CARD_VALIDITY_YEARS = 2


def _internal_error(message, exc):
    logger.exception("[services] %s: %s", message, exc)
    return InternalError(message=message, detail={'error': str(exc)})


def get_initial_status():
    """settings.DONATION_INITIAL_STATUS，默认 Completed（与现有前端行为一致）。"""
    status = getattr(settings, 'DONATION_INITIAL_STATUS', 'Completed')
    if status not in INITIAL_STATUS_CHOICES:
        raise ImproperlyConfigured(
            f"DONATION_INITIAL_STATUS must be one of {INITIAL_STATUS_CHOICES}, got {status!r}"
        )
    return status


def check_status_transition(current, new):
    """
    DONATION_STRICT_TRANSITIONS=False（默认）时任意流转都允许。
    严格模式下不在 STATUS_TRANSITIONS 里的流转 → BlockError(409)。
    """
    if not getattr(settings, 'DONATION_STRICT_TRANSITIONS', False):
        return
    if new == current or new in STATUS_TRANSITIONS.get(current, set()):
        return
    raise BlockError(
        message=f"Cannot change donation status from {current} to {new}.",
        code='INVALID_STATUS_TRANSITION',
        detail={
            'current_status': current,
            'requested_status': new,
            'allowed': sorted(STATUS_TRANSITIONS.get(current, set())),
        },
    )


def _donor_not_found(donor_id):
    return NotFoundError(
        message='Donor not found',
        code='DONOR_NOT_FOUND',
        detail={'donorId': str(donor_id)},
    )


def parse_donor_id(donor_id):
    """donorId 是 UUID；格式不对的一律当作不存在（404），不要让 ORM 抛 500。"""
    try:
        return uuid.UUID(str(donor_id))
    except ValueError:
        logger.warning("[parse_donor_id] malformed donor id %r", donor_id)
        raise _donor_not_found(donor_id)


def get_donor(donor_id):
    """Get donor by UUID. Raises NotFoundError if missing or malformed."""
    try:
        return Donor.objects.get(id=parse_donor_id(donor_id))
    except Donor.DoesNotExist:
        logger.warning("[get_donor] donor %s not found", donor_id)
        raise _donor_not_found(donor_id)


# ── Donation workflow ─────────────────────────────────────────────────────

def record_donation(data, center):
    """
    记录一次献血。

    1. 查 donor，不存在 → NotFoundError，不写库
    2. 创建 DonationRecord（状态取 DONATION_INITIAL_STATUS，可读 ID 撞车会自动重试）
    3. 更新 donor.last_donation_date

    2、3 在同一个事务里，任一步失败都整体回滚。
    """
    try:
        donor = get_donor(data.donor_id)
        record = DonationRecord(
            donor=donor,
            hospital=center,
            blood_group=data.blood_group,
            status=get_initial_status(),
            donation_date=data.donation_date,
            medical_notes=data.medical_notes,
        )
        with transaction.atomic():
            save_with_unique_identifier(record, 'donation_id')
            donor.last_donation_date = data.donation_date
            donor.save(update_fields=['last_donation_date'])
    except DatabaseError as exc:
        raise _internal_error('Error recording donation', exc)

    logger.info(
        "[record_donation] %s recorded for donor %s at %s (status=%s)",
        record.donation_id, donor.id, center.center_id, record.status,
    )
    return record


def list_center_donations(center_id):
    """All donations received by a center, newest donation date first."""
    try:
        return list(
            DonationRecord.objects
            .filter(hospital__center_id=center_id)
            .select_related('donor', 'hospital')
            .order_by('-donation_date', '-created_at')
        )
    except DatabaseError as exc:
        raise _internal_error('Error fetching donations', exc)


def list_donor_donations(donor_id):
    """A donor's donation history, newest donation date first."""
    try:
        return list(
            DonationRecord.objects
            .filter(donor_id=parse_donor_id(donor_id))
            .select_related('donor', 'hospital')
            .order_by('-donation_date', '-created_at')
        )
    except DatabaseError as exc:
        raise _internal_error('Error fetching donor donations', exc)


def update_donation_status(donation_id, center, data):
    """
    更新状态。记录必须同时匹配 donation_id 和当前 center，否则 404
    （防止跨 center 修改）。medical_notes 为空时保留原值。
    """
    try:
        try:
            donation = (
                DonationRecord.objects
                .select_related('donor', 'hospital')
                .get(donation_id=donation_id, hospital=center)
            )
        except DonationRecord.DoesNotExist:
            logger.warning(
                "[update_donation_status] %s not found for center %s", donation_id, center.center_id
            )
            raise NotFoundError(
                message='Donation record not found',
                code='DONATION_NOT_FOUND',
                detail={'donationId': donation_id},
            )

        check_status_transition(donation.status, data.status)

        previous = donation.status
        donation.status = data.status
        if data.medical_notes:
            donation.medical_notes = data.medical_notes
        donation.save(update_fields=['status', 'medical_notes', 'updated_at'])
    except DatabaseError as exc:
        raise _internal_error('Error updating donation status', exc)

    logger.info("[update_donation_status] %s: %s -> %s", donation_id, previous, donation.status)
    return donation


# ── Blood centers ─────────────────────────────────────────────────────────

def register_blood_center(data):
    center = BloodCenter(
        center_name=data.center_name,
        center_type=data.center_type,
        location=data.location,
        contact_number=data.contact_number,
        blood_types_needed=data.blood_types_needed,
    )
    try:
        save_with_unique_identifier(center, 'center_id')
    except DatabaseError as exc:
        raise _internal_error('Error registering blood center', exc)

    logger.info("[register_blood_center] %s registered (%s)", center.center_id, center.center_name)
    return center


def get_blood_center(center_id):
    """Get center by its public centerId. Raises NotFoundError."""
    try:
        return BloodCenter.objects.get(center_id=center_id)
    except BloodCenter.DoesNotExist:
        raise NotFoundError(
            message='Blood center not found',
            code='CENTER_NOT_FOUND',
            detail={'centerId': center_id},
        )


def update_blood_center(center_id, center, data):
    """
    Partial update. 只有 center 自己能改自己；合并后的完整候选对象整体校验。
    """
    if center.center_id != center_id:
        raise NotFoundError(
            message='Blood center not found',
            code='CENTER_NOT_FOUND',
            detail={'centerId': center_id},
        )

    candidate = {
        'center_name': center.center_name,
        'center_type': center.center_type,
        'location': center.location,
        'contact_number': center.contact_number,
        'blood_types_needed': center.blood_types_needed,
        'is_active': center.is_active,
    }
    candidate.update(data.changes)
    raise_for_violations(validate_blood_center(candidate))

    for attr, value in data.changes.items():
        setattr(center, attr, value)
    try:
        center.save(update_fields=list(data.changes))
    except DatabaseError as exc:
        raise _internal_error('Error updating blood center', exc)

    logger.info("[update_blood_center] %s updated: %s", center_id, ', '.join(data.changes))
    return center


def list_blood_centers(include_inactive=False, blood_group=None):
    """Centers ordered by name; optionally only those needing ``blood_group``."""
    if blood_group is not None:
        message = validate_blood_group(blood_group)
        if message:
            raise_for_violations([{'field': 'bloodGroup', 'message': message}])

    centers = BloodCenter.objects.order_by('center_name')
    if not include_inactive:
        centers = centers.filter(is_active=True)

    try:
        centers = list(centers)
    except DatabaseError as exc:
        raise _internal_error('Error fetching blood centers', exc)

    if blood_group is not None:
        centers = [c for c in centers if blood_group in (c.blood_types_needed or [])]
    return centers


# ── Donor ID cards ────────────────────────────────────────────────────────

def default_expiry(issue_date):
    """issue_date + 2 年；2 月 29 日落到 2 月 28 日。"""
    try:
        return issue_date.replace(year=issue_date.year + CARD_VALIDITY_YEARS)
    except ValueError:
        return issue_date.replace(year=issue_date.year + CARD_VALIDITY_YEARS, day=28)


def issue_donor_card(data):
    donor = get_donor(data.donor_id)

    issue_date = data.issue_date or timezone.now()
    expiry_date = data.expiry_date or default_expiry(issue_date)
    raise_for_violations(validate_donor_card({
        'donor_id': data.donor_id,
        'card_type': data.card_type,
        'issue_date': issue_date,
        'expiry_date': expiry_date,
    }))

    card = DonorCard(
        donor=donor,
        card_type=data.card_type,
        issue_date=issue_date,
        expiry_date=expiry_date,
    )
    try:
        save_with_unique_identifier(card, 'card_id')
    except DatabaseError as exc:
        raise _internal_error('Error issuing donor card', exc)

    logger.info("[issue_donor_card] %s issued to donor %s, expires %s", card.card_id, donor.id, expiry_date)
    return card


def list_donor_cards(donor_id):
    try:
        return list(
            DonorCard.objects
            .filter(donor_id=parse_donor_id(donor_id))
            .select_related('donor')
            .order_by('-issue_date')
        )
    except DatabaseError as exc:
        raise _internal_error('Error fetching donor cards', exc)


def deactivate_donor_card(card_id):
    try:
        card = DonorCard.objects.select_related('donor').get(card_id=card_id)
    except DonorCard.DoesNotExist:
        raise NotFoundError(
            message='Donor card not found',
            code='CARD_NOT_FOUND',
            detail={'cardId': card_id},
        )

    card.is_active = False
    try:
        card.save(update_fields=['is_active'])
    except DatabaseError as exc:
        raise _internal_error('Error deactivating donor card', exc)

    logger.info("[deactivate_donor_card] %s deactivated", card_id)
    return card
