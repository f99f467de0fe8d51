"""批量写入器模块.

该模块提供面向持续写入场景的 Elasticsearch 批量写入功能，包括：
- 内存队列缓存，按数量阈值自动 flush
- 空闲超时自动 flush
- index / update / delete 操作合并为一次 bulk 请求
- update_by_query 操作单独发送
- bulk 部分失败时汇总错误描述并抛出异常

示例用法:
    >>> from elasticstream.writer import BulkWriter
    >>> async with BulkWriter(backend, batch_threshold=100) as writer:
    ...     await writer.submit({"index": "users", "id": "1", "body": {"name": "Alice"}})
    >>> print(f"写入: {writer.written_records}")
"""

from .exceptions import (
    BulkDispatchError,
    BulkPartialFailureError,
    BulkWriterError,
    PartialUpdateFailureError,
    RecordTransformError,
    UpdateByQueryDispatchError,
    ValidationError,
    WriterClosedError,
    WriterConfigError,
)
from .models import (
    BulkBackend,
    BulkFlushResult,
    Record,
    RecordAction,
    WriterConfig,
    WriterState,
)
from .tool import BulkWriter
from .transform import transform_records, transform_update, validate_record

__all__ = [
    # 写入器
    "BulkWriter",
    # 模型
    "BulkBackend",
    "BulkFlushResult",
    "Record",
    "RecordAction",
    "WriterConfig",
    "WriterState",
    # 转换
    "transform_records",
    "transform_update",
    "validate_record",
    # 异常
    "BulkWriterError",
    "WriterConfigError",
    "WriterClosedError",
    "ValidationError",
    "RecordTransformError",
    "BulkDispatchError",
    "BulkPartialFailureError",
    "UpdateByQueryDispatchError",
    "PartialUpdateFailureError",
]
