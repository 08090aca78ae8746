"""
Response serializers: ORM 对象 → JSON-able dict。

只负责「输出格式化」，字段名保持 camelCase（与前端 / 旧接口兼容），
不做任何解析或校验。输入解析和校验在 donations/intake/。
"""


def _iso(value):
    return value.isoformat() if value is not None else None


def serialize_center(center):
    return {
        'centerId': center.center_id,
        'centerName': center.center_name,
        'centerType': center.center_type,
        'location': center.location,
        'contactNumber': center.contact_number,
        'bloodTypesNeeded': list(center.blood_types_needed or []),
        'isActive': center.is_active,
        'createdAt': _iso(center.created_at),
    }


def serialize_donation(donation):
    """Donation record with plain references (donorId / hospitalId as ids)."""
    return {
        'donationId': donation.donation_id,
        'donorId': str(donation.donor_id),
        'hospitalId': donation.hospital.center_id,
        'bloodGroup': donation.blood_group,
        'status': donation.status,
        'donationDate': _iso(donation.donation_date),
        'medicalNotes': donation.medical_notes,
        'createdAt': _iso(donation.created_at),
    }


def serialize_center_donations(donations):
    """Center view: donorId populated with the donor's name and blood group."""
    results = []
    for donation in donations:
        item = serialize_donation(donation)
        item['donorId'] = {
            'id': str(donation.donor.id),
            'donorName': donation.donor.donor_name,
            'bloodGroup': donation.donor.blood_group,
        }
        results.append(item)
    return results


def serialize_donor_donations(donations):
    """Donor view: hospitalId populated with the center's name."""
    results = []
    for donation in donations:
        item = serialize_donation(donation)
        item['hospitalId'] = {
            'centerId': donation.hospital.center_id,
            'centerName': donation.hospital.center_name,
        }
        results.append(item)
    return results


def serialize_donation_recorded(donation):
    """201 body for POST donations/record."""
    return {
        'message': 'Donation recorded successfully',
        'donationId': donation.donation_id,
    }


def serialize_status_updated(donation):
    return {
        'message': 'Donation status updated successfully',
        'donation': serialize_donation(donation),
    }


def serialize_card(card):
    return {
        'cardId': card.card_id,
        'donorId': str(card.donor_id),
        'cardType': card.card_type,
        'issueDate': _iso(card.issue_date),
        'expiryDate': _iso(card.expiry_date),
        'isActive': card.is_active,
        'createdAt': _iso(card.created_at),
    }
