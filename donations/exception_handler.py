"""
统一异常处理器。

挂到 DRF 的 EXCEPTION_HANDLER setting 上。
前端统一判断：
  response.type 存在  → 出问题了
  没有 type 字段      → 成功

统一错误响应格式：
{
    "type":    "validation_error" | "not_found" | "block" | "duplicate_identifier" | "error",
    "code":    "DONOR_NOT_FOUND",
    "message": "Donor not found",
    "detail":  { ... }  // 可选
}

500 响应的 detail.error 默认带上底层异常信息；EXPOSE_ERROR_DETAILS=False 时去掉。
"""

import logging

from django.conf import settings
from django.http import JsonResponse
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.views import exception_handler as drf_default_handler

from .exceptions import BaseAppException

logger = logging.getLogger(__name__)


def _expose_details():
    return getattr(settings, 'EXPOSE_ERROR_DETAILS', True)


def unified_exception_handler(exc, context):
    """
    DRF exception handler entry point.

    优先级：
    1. BaseAppException 及其子类 → 统一格式
    2. DRF 自带的 ValidationError → 转成统一格式
    3. 其他 DRF 异常（401 / 403 / 405 / ParseError）→ 交给 DRF 默认处理
    4. 剩下的都是意外异常 → 500
    """

    # --- 1. 我们自己的异常体系 ---
    if isinstance(exc, BaseAppException):
        body = {
            'type': exc.type,
            'code': exc.code,
            'message': exc.message,
        }
        if exc.detail is not None and (exc.http_status < 500 or _expose_details()):
            body['detail'] = exc.detail
        return JsonResponse(body, status=exc.http_status)

    # --- 2. DRF 自带的 ValidationError ---
    if isinstance(exc, DRFValidationError):
        body = {
            'type': 'validation_error',
            'code': 'VALIDATION_ERROR',
            'message': 'Request validation failed',
            'detail': exc.detail,
        }
        return JsonResponse(body, status=400)

    # --- 3. 其他 DRF 异常 ---
    response = drf_default_handler(exc, context)
    if response is not None:
        return response

    # --- 4. 兜底 ---
    view = context.get('view')
    logger.exception("Unhandled exception in %s", type(view).__name__ if view else 'unknown view')
    body = {
        'type': 'error',
        'code': 'INTERNAL_ERROR',
        'message': 'Internal server error',
    }
    if _expose_details():
        body['detail'] = {'error': str(exc)}
    return JsonResponse(body, status=500)
