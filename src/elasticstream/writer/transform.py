"""记录校验与 bulk 请求体转换模块.

将 Record 序列展开为 Elasticsearch bulk API 所需的扁平操作列表：
每条记录先输出一个 header，随后（删除操作除外）输出文档 body。
"""

from collections.abc import Mapping
from typing import Any

from .exceptions import RecordTransformError, ValidationError
from .models import Record, RecordAction

# action 到 bulk header 键名的映射，新增操作类型时在此登记
BULK_HEADER_KEYS: dict[RecordAction, str] = {
    RecordAction.INDEX: "index",
    RecordAction.UPDATE: "update",
    RecordAction.DELETE: "delete",
}

# 不携带 body 的操作类型
BODYLESS_ACTIONS = frozenset({RecordAction.DELETE})

# header 中文档类型与父文档引用的键名。父文档按 join 字段的路由键发送，
# 文档类型仅在记录提供时输出，供旧版带类型的集群使用
DOCUMENT_TYPE_HEADER_KEY = "_type"
PARENT_HEADER_KEY = "routing"


def validate_record(record: Record, require_document_type: bool = False) -> None:
    """校验记录是否满足写入约束.

    Args:
        record: 待校验记录
        require_document_type: 是否要求提供 document_type

    Raises:
        ValidationError: 第一个不满足约束的字段
    """
    if not record.index:
        raise ValidationError("index")

    if require_document_type and not record.document_type:
        raise ValidationError("document_type")

    if record.action not in BODYLESS_ACTIONS and record.body is None:
        raise ValidationError("body")

    if record.action == RecordAction.UPDATE_BY_QUERY:
        if not isinstance(record.body, Mapping):
            raise ValidationError("body", "update_by_query 的 body 必须是字典")
        if not record.body.get("script"):
            raise ValidationError("body.script")
        if not record.body.get("query"):
            raise ValidationError("body.query")


def _build_header(record: Record) -> dict[str, Any]:
    """构建单条记录的 bulk header."""
    try:
        header_key = BULK_HEADER_KEYS[record.action]
    except KeyError:
        raise RecordTransformError(
            f"操作类型 {record.action.value} 不支持 bulk 协议"
        ) from None

    meta: dict[str, Any] = {"_index": record.index}

    if record.document_type is not None:
        meta[DOCUMENT_TYPE_HEADER_KEY] = record.document_type

    if record.id is not None:
        meta["_id"] = record.id

    if record.parent is not None:
        meta[PARENT_HEADER_KEY] = record.parent

    return {header_key: meta}


def transform_records(records: list[Record]) -> list[dict[str, Any]]:
    """将记录序列转换为 bulk 请求体.

    Args:
        records: 已通过校验的记录列表，按队列顺序

    Returns:
        扁平的 bulk 操作列表

    Raises:
        RecordTransformError: 记录在校验之后被修改而违反约束时抛出

    Example:
        >>> transform_records([Record(index="users", id="1", body={"name": "Alice"})])
        [{'index': {'_index': 'users', '_id': '1'}}, {'name': 'Alice'}]
    """
    operations: list[dict[str, Any]] = []

    for record in records:
        if not record.index:
            raise RecordTransformError("index 不能为空")

        operations.append(_build_header(record))

        if record.action in BODYLESS_ACTIONS:
            continue

        if record.body is None:
            raise RecordTransformError(
                f"操作类型 {record.action.value} 需要提供 body 数据"
            )
        operations.append(record.body)

    return operations


def transform_update(record: Record) -> dict[str, Any]:
    """将 UPDATE_BY_QUERY 记录转换为 update_by_query 操作.

    action 字段被剥离，只保留 script 与 query。

    Returns:
        ``{"index", ["document_type"], "body": {"script", "query"}}``
    """
    operation: dict[str, Any] = {"index": record.index}

    if record.document_type is not None:
        operation["document_type"] = record.document_type

    operation["body"] = {
        "script": record.body["script"],
        "query": record.body["query"],
    }
    return operation
