"""Elastic Stream - Elasticsearch 批量写入适配器.

这是一个位于业务记录流与 Elasticsearch bulk API 之间的缓冲批量写入库。

主要功能:
    - BulkWriter: 缓存写入记录，按数量阈值或空闲超时合并为 bulk 请求
    - ElasticsearchBackend: 基于 AsyncElasticsearch 的写入后端

使用示例:
    from elasticstream import BulkWriter, ClientConfig, ElasticsearchBackend

    backend = ElasticsearchBackend.from_config(
        ClientConfig(hosts=["http://localhost:9200"])
    )
    async with BulkWriter(backend, batch_threshold=100, flush_timeout=1.0) as writer:
        await writer.submit({"index": "users", "id": "1", "body": {"name": "Alice"}})
"""

__version__ = "0.1.0"

# 导出连接组件
from elasticstream.connection import (
    ClientConfig,
    ClientConfigError,
    ElasticsearchBackend,
    create_async_client,
)

# 导出异常
from elasticstream.exceptions import ElasticStreamError

# 导出写入器
from elasticstream.writer import (
    BulkDispatchError,
    BulkFlushResult,
    BulkPartialFailureError,
    BulkWriter,
    BulkWriterError,
    PartialUpdateFailureError,
    Record,
    RecordAction,
    RecordTransformError,
    UpdateByQueryDispatchError,
    ValidationError,
    WriterClosedError,
    WriterConfig,
    WriterConfigError,
    WriterState,
)

__all__ = [
    # 版本
    "__version__",
    # 写入器
    "BulkWriter",
    "WriterConfig",
    "WriterState",
    "Record",
    "RecordAction",
    "BulkFlushResult",
    # 连接
    "ClientConfig",
    "ElasticsearchBackend",
    "create_async_client",
    # 异常
    "ElasticStreamError",
    "ClientConfigError",
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
