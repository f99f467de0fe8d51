"""批量写入器数据模型定义模块."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from .exceptions import ValidationError, WriterConfigError


class RecordAction(Enum):
    """记录操作类型枚举.

    Attributes:
        INDEX: 索引文档（默认）
        UPDATE: 局部更新文档
        DELETE: 删除文档，不携带 body
        UPDATE_BY_QUERY: 按查询脚本更新，不走 bulk 协议，单独发送
    """

    INDEX = "index"
    UPDATE = "update"
    DELETE = "delete"
    UPDATE_BY_QUERY = "update_by_query"


class WriterState(Enum):
    """写入器状态枚举."""

    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class BulkBackend(Protocol):
    """写入器依赖的后端接口.

    ElasticsearchBackend 基于 AsyncElasticsearch 实现了该接口，
    测试中可直接使用 AsyncMock 替代。
    """

    async def bulk(self, operations: list[dict[str, Any]]) -> Mapping[str, Any]: ...

    async def update_by_query(self, operation: dict[str, Any]) -> Mapping[str, Any]: ...


# Record.from_dict 中文档类型字段的可选键名，按优先级排列
_DOCUMENT_TYPE_KEYS = ("document_type", "documentType", "type")


@dataclass
class Record:
    """写入记录数据类.

    Attributes:
        index: 目标索引名称
        body: 文档内容；UPDATE_BY_QUERY 时为包含 script 与 query 的字典
        action: 操作类型，默认 INDEX
        id: 文档ID（可选，不指定时由 ES 自动生成）
        document_type: 文档类型（可选，仅旧版带类型的集群需要），在 bulk header
            中以 ``_type`` 发送
        parent: 父文档引用（可选，用于 join 类型文档），在 bulk header 中以
            ``routing`` 发送
    """

    index: str | None
    body: dict[str, Any] | None = None
    action: RecordAction = RecordAction.INDEX
    id: str | None = None
    document_type: str | None = None
    parent: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Record":
        """从普通字典构建记录.

        文档类型可以使用 ``document_type``、``documentType`` 或 ``type`` 键，
        action 可以是 RecordAction 或其字符串值。

        Raises:
            ValidationError: action 取值无法识别时抛出
        """
        document_type = None
        for key in _DOCUMENT_TYPE_KEYS:
            if data.get(key) is not None:
                document_type = data[key]
                break

        return cls(
            index=data.get("index"),
            body=data.get("body"),
            action=parse_action(data.get("action")),
            id=data.get("id"),
            document_type=document_type,
            parent=data.get("parent"),
        )


def parse_action(value: RecordAction | str | None) -> RecordAction:
    """将 action 取值解析为 RecordAction，None 视为 INDEX."""
    if value is None:
        return RecordAction.INDEX
    if isinstance(value, RecordAction):
        return value
    try:
        return RecordAction(value)
    except ValueError:
        raise ValidationError("action", f"不支持的 action: {value!r}") from None


@dataclass
class WriterConfig:
    """写入器配置模型.

    Attributes:
        batch_threshold: 队列达到该数量时强制 flush，默认 16，必须 >= 1
        flush_timeout: 队列空闲多少秒后自动 flush，默认 None（不启用）。
            单位为秒而不是毫秒，1000 毫秒应写作 1.0
        require_document_type: 是否要求记录必须提供 document_type，默认 False
        max_background_errors: 最多保留的定时 flush 异常数，默认 100，必须 >= 1，
            超出后丢弃最早的异常

    Raises:
        WriterConfigError: 当参数不合法时抛出

    Examples:
        >>> config = WriterConfig(batch_threshold=100, flush_timeout=1.0)
    """

    batch_threshold: int = 16
    flush_timeout: float | None = None
    require_document_type: bool = False
    max_background_errors: int = 100

    def __post_init__(self) -> None:
        """校验写入器配置参数合法性."""
        if self.batch_threshold < 1:
            raise WriterConfigError(
                f"batch_threshold 必须 >= 1，当前值: {self.batch_threshold}"
            )
        if self.flush_timeout is not None and self.flush_timeout <= 0:
            raise WriterConfigError(
                f"flush_timeout 必须 > 0，当前值: {self.flush_timeout}"
            )
        if self.max_background_errors < 1:
            raise WriterConfigError(
                f"max_background_errors 必须 >= 1，当前值: {self.max_background_errors}"
            )


@dataclass
class BulkFlushResult:
    """单次 flush 结果数据类.

    Attributes:
        records: 本次写入的源记录数
        operations: bulk 请求体中的条目数（header 与 body 分别计数）
        took: 耗时（秒）
        response: ES 原始响应
    """

    records: int = 0
    operations: int = 0
    took: float = 0.0
    response: Mapping[str, Any] | None = field(default=None, repr=False)
