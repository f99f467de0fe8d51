"""批量写入器异常定义模块."""

from typing import Any

from ..exceptions import ElasticStreamError
from .response import format_error_message


class BulkWriterError(ElasticStreamError):
    """批量写入器基础异常类."""

    pass


class WriterConfigError(BulkWriterError):
    """写入器配置校验异常.

    当 batch_threshold 小于 1 或 flush_timeout 不为正数时抛出。
    """

    pass


class WriterClosedError(BulkWriterError):
    """写入器已关闭后仍提交记录时抛出."""

    pass


class ValidationError(BulkWriterError):
    """记录校验异常.

    记录缺少必需字段或字段取值非法时抛出，记录不会进入队列也不会发送到 ES。

    Attributes:
        field: 校验失败的字段名，例如 ``index``、``body.script``
    """

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"{field} 不能为空")


class RecordTransformError(BulkWriterError):
    """记录转换为 bulk 请求体时违反约束."""

    pass


class BulkDispatchError(BulkWriterError):
    """bulk 请求本身失败（传输或协议错误）.

    Attributes:
        batch: 本次尝试发送的完整 bulk 请求体，调用方可据此检查或重新提交
    """

    def __init__(self, message: str, batch: list[dict[str, Any]]):
        super().__init__(message)
        self.batch = batch


class BulkPartialFailureError(BulkWriterError):
    """bulk 请求被接受，但部分操作失败.

    异常消息为去重后的错误描述，按首次出现顺序以逗号连接。

    Attributes:
        descriptions: 去重后的错误描述列表
        batch: 本次发送的 bulk 请求体
        response: ES 原始响应
    """

    def __init__(
        self,
        descriptions: list[str],
        batch: list[dict[str, Any]],
        response: Any = None,
    ):
        super().__init__(format_error_message(descriptions))
        self.descriptions = descriptions
        self.batch = batch
        self.response = response


class UpdateByQueryDispatchError(BulkWriterError):
    """update_by_query 请求本身失败.

    Attributes:
        operation: 本次尝试发送的 update_by_query 操作
    """

    def __init__(self, message: str, operation: dict[str, Any]):
        super().__init__(message)
        self.operation = operation


class PartialUpdateFailureError(BulkWriterError):
    """update_by_query 返回了一个或多个文档级失败.

    Attributes:
        operation: 本次发送的 update_by_query 操作
        failures: ES 返回的失败详情列表
    """

    def __init__(
        self,
        operation: dict[str, Any],
        failures: list[Any] | None = None,
    ):
        super().__init__("One or more failures occurred during update_by_query")
        self.operation = operation
        self.failures = failures or []
