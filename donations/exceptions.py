"""
统一异常体系。

所有业务异常继承 BaseAppException，包含：
- type:        错误类型标识（validation_error / not_found / block / duplicate_identifier / error）
- code:        业务错误码（DONOR_NOT_FOUND / INVALID_STATUS_TRANSITION / ...）
- message:     人类可读的描述
- detail:      可选的附加信息（dict / list / None）
- http_status: HTTP 状态码

Service 层只需 raise，exception_handler 统一捕获并格式化响应。
"""


class BaseAppException(Exception):
    """所有业务异常的基类。"""

    type = 'error'
    code = 'UNKNOWN_ERROR'
    http_status = 500

    def __init__(self, message, code=None, detail=None, http_status=None):
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status
        self.detail = detail
        super().__init__(message)


class ValidationError(BaseAppException):
    """输入验证失败。intake / validators 抛出，400。detail['errors'] 是字段级错误列表。"""

    type = 'validation_error'
    code = 'VALIDATION_ERROR'
    http_status = 400


class NotFoundError(BaseAppException):
    """引用的 donor / center / donation / card 不存在，或不属于当前 center。404。"""

    type = 'not_found'
    code = 'NOT_FOUND'
    http_status = 404


class BlockError(BaseAppException):
    """业务规则阻止操作（例如非法的状态流转）。409。"""

    type = 'block'
    code = 'BUSINESS_BLOCK'
    http_status = 409


class DuplicateIdentifierError(BaseAppException):
    """
    生成的可读 ID 撞上了唯一约束。

    调用方（identifiers.save_with_unique_identifier）负责重新生成并重试，
    workflow 层不重试。
    """

    type = 'duplicate_identifier'
    code = 'DUPLICATE_IDENTIFIER'
    http_status = 409
    retryable = True


class InternalError(BaseAppException):
    """数据库 / 传输层的意外失败。500。"""

    type = 'error'
    code = 'INTERNAL_ERROR'
    http_status = 500
