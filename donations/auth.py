"""
Auth gates.

Token 是 django.core.signing 签名的 {"kind": "center"|"donor", "id": ...}，
请求头带 `Authorization: Bearer <token>`。

  IsBloodCenter  : 只放行 center；request.user.center 是当前 BloodCenter
  CanAccessDonor : donor 本人，或与该 donor 有过献血记录的 center
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.core import signing
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import BasePermission

from .models import BloodCenter, DonationRecord, Donor
from .services import parse_donor_id

logger = logging.getLogger(__name__)

TOKEN_SALT = 'donations.auth'
KIND_CENTER = 'center'
KIND_DONOR = 'donor'
DEFAULT_TOKEN_MAX_AGE = 60 * 60 * 24


@dataclass
class Principal:
    kind: str
    id: str
    center: Optional[BloodCenter] = None

    is_authenticated = True

    @property
    def is_center(self):
        return self.kind == KIND_CENTER


def issue_token(kind: str, principal_id) -> str:
    if kind not in (KIND_CENTER, KIND_DONOR):
        raise ValueError(f"Unknown principal kind: {kind!r}")
    return signing.dumps({'kind': kind, 'id': str(principal_id)}, salt=TOKEN_SALT)


def read_token(token: str) -> dict:
    max_age = getattr(settings, 'AUTH_TOKEN_MAX_AGE', DEFAULT_TOKEN_MAX_AGE)
    try:
        payload = signing.loads(token, salt=TOKEN_SALT, max_age=max_age)
    except signing.SignatureExpired:
        logger.warning("Expired token used")
        raise AuthenticationFailed('Token expired')
    except signing.BadSignature:
        logger.warning("Invalid token used")
        raise AuthenticationFailed('Invalid token')
    if not isinstance(payload, dict) or payload.get('kind') not in (KIND_CENTER, KIND_DONOR):
        raise AuthenticationFailed('Invalid token')
    return payload


class PrincipalAuthentication(BaseAuthentication):
    keyword = 'Bearer'

    def authenticate(self, request):
        auth = get_authorization_header(request).split()
        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None
        if len(auth) != 2:
            raise AuthenticationFailed('Invalid Authorization header')

        try:
            token = auth[1].decode()
        except UnicodeError:
            raise AuthenticationFailed('Invalid token')

        payload = read_token(token)
        if payload['kind'] == KIND_CENTER:
            center = BloodCenter.objects.filter(center_id=payload['id'], is_active=True).first()
            if center is None:
                raise AuthenticationFailed('Blood center not found or inactive')
            return Principal(kind=KIND_CENTER, id=center.center_id, center=center), token

        try:
            donor_id = uuid.UUID(payload['id'])
        except ValueError:
            raise AuthenticationFailed('Invalid token')
        if not Donor.objects.filter(id=donor_id).exists():
            raise AuthenticationFailed('Donor not found')
        return Principal(kind=KIND_DONOR, id=str(donor_id)), token

    def authenticate_header(self, request):
        return self.keyword


class IsBloodCenter(BasePermission):
    message = 'Blood center access required'

    def has_permission(self, request, view):
        user = request.user
        return isinstance(user, Principal) and user.is_center


class CanAccessDonor(BasePermission):
    """Reads ``donor_id`` from the URL kwargs. 格式不对的 id 直接 404（DONOR_NOT_FOUND）。"""

    message = 'Access to this donor is not allowed'

    def has_permission(self, request, view):
        user = request.user
        if not isinstance(user, Principal):
            return False

        donor_id = str(parse_donor_id(view.kwargs.get('donor_id')))
        if user.kind == KIND_DONOR:
            return user.id == donor_id
        return DonationRecord.objects.filter(hospital=user.center, donor_id=donor_id).exists()
