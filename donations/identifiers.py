"""
可读 ID 生成。

格式：<PREFIX><0-999>-<tenant tag>-<3 个大写字母>，例如 CTR417-33-QXB。
  CTR: BloodCenter.center_id
  DON: DonationRecord.donation_id
  CRD: DonorCard.card_id

每个前缀只有 1000 × 26³ 种组合，不保证全局唯一；唯一性由数据库唯一约束兜底，
撞车时由 save_with_unique_identifier() 重新生成并重试。
"""

import logging
import random
import re
import string

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import IntegrityError, transaction

from .exceptions import DuplicateIdentifierError, InternalError

logger = logging.getLogger(__name__)

CENTER_PREFIX = 'CTR'
DONATION_PREFIX = 'DON'
CARD_PREFIX = 'CRD'

DEFAULT_TENANT_TAG = '33'
DEFAULT_MAX_ATTEMPTS = 5

# center_id / donation_id / card_id 的列宽
IDENTIFIER_MAX_LENGTH = 20
# <PREFIX> + 3 位数字 + 两个 "-" + 3 个字母
_FIXED_PARTS_LENGTH = 3 + 3 + 2 + 3


def _tenant_tag():
    tag = str(getattr(settings, 'ID_TENANT_TAG', DEFAULT_TENANT_TAG))
    if len(tag) > IDENTIFIER_MAX_LENGTH - _FIXED_PARTS_LENGTH:
        raise ImproperlyConfigured(
            f"ID_TENANT_TAG {tag!r} is too long: identifiers are limited to "
            f"{IDENTIFIER_MAX_LENGTH} characters, leaving at most "
            f"{IDENTIFIER_MAX_LENGTH - _FIXED_PARTS_LENGTH} for the tag."
        )
    return tag


def generate_identifier(prefix: str) -> str:
    digits = random.randint(0, 999)
    letters = ''.join(random.choice(string.ascii_uppercase) for _ in range(3))
    return f"{prefix}{digits}-{_tenant_tag()}-{letters}"


def generate_center_id() -> str:
    return generate_identifier(CENTER_PREFIX)


def generate_donation_id() -> str:
    return generate_identifier(DONATION_PREFIX)


def generate_card_id() -> str:
    return generate_identifier(CARD_PREFIX)


def identifier_pattern(prefix: str) -> re.Pattern:
    """Regex a generated identifier for ``prefix`` must match."""
    return re.compile(rf"^{re.escape(prefix)}\d{{1,3}}-{re.escape(_tenant_tag())}-[A-Z]{{3}}$")


def _insert_once(instance, field: str) -> None:
    """
    在 savepoint 里插入一次。

    IntegrityError 且库里已有相同 ID → DuplicateIdentifierError；
    其他 IntegrityError（例如外键缺失）原样抛出。
    """
    value = getattr(instance, field)
    try:
        with transaction.atomic():
            instance.save(force_insert=True)
    except IntegrityError:
        if type(instance).objects.filter(**{field: value}).exists():
            raise DuplicateIdentifierError(
                message=f"Generated {field} {value!r} already exists",
                detail={'field': field, 'value': value},
            )
        raise


def save_with_unique_identifier(instance, field: str, generator=None, max_attempts=None):
    """
    Insert ``instance``, regenerating ``field`` on identifier collisions.

    ``generator`` defaults to the model field's default callable. After
    ``max_attempts`` collisions (ID_MAX_ATTEMPTS, default 5) gives up with
    InternalError.
    """
    if generator is None:
        generator = instance._meta.get_field(field).default
    if max_attempts is None:
        max_attempts = getattr(settings, 'ID_MAX_ATTEMPTS', DEFAULT_MAX_ATTEMPTS)

    if not getattr(instance, field):
        setattr(instance, field, generator())

    for attempt in range(1, max_attempts + 1):
        try:
            _insert_once(instance, field)
            return instance
        except DuplicateIdentifierError as exc:
            logger.warning(
                "%s collision on %s (attempt %d/%d): %s",
                type(instance).__name__, field, attempt, max_attempts, exc.message,
            )
            setattr(instance, field, generator())

    logger.error("Gave up generating a unique %s after %d attempts", field, max_attempts)
    raise InternalError(
        message=f"Could not generate a unique {field}",
        code='IDENTIFIER_EXHAUSTED',
        detail={'field': field, 'attempts': max_attempts},
    )
