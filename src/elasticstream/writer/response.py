"""bulk 与 update_by_query 响应解析模块."""

from collections.abc import Mapping
from typing import Any

# 错误描述的连接符
ERROR_SEPARATOR = ","


def describe_error(error: Any) -> str | None:
    """将单个操作的错误转换为描述字符串.

    ES 返回结构化错误时组合为 ``type[reason]``，否则直接使用原始字符串。

    Args:
        error: 操作结果中的 error 字段

    Returns:
        错误描述，无错误时返回 None

    Example:
        >>> describe_error({"type": "mapper_parsing_exception", "reason": "bad"})
        'mapper_parsing_exception[bad]'
    """
    if not error:
        return None

    if isinstance(error, Mapping):
        error_type = error.get("type")
        reason = error.get("reason")
        if error_type and reason:
            return f"{error_type}[{reason}]"
        if error_type or reason:
            return str(error_type or reason)

    return str(error)


def collect_bulk_errors(response: Mapping[str, Any]) -> list[str]:
    """收集 bulk 响应中所有操作的错误描述.

    描述按首次出现的顺序去重。结果为空即视为成功，不依赖 ``errors`` 标记。

    Args:
        response: bulk 响应，格式 ``{"errors": bool, "items": [...]}``

    Returns:
        去重后的错误描述列表
    """
    descriptions: dict[str, None] = {}

    for item in response.get("items") or []:
        # 每个 item 形如 {"index": {"_id": ..., "status": ..., "error": ...}}
        for result in item.values():
            if not isinstance(result, Mapping):
                continue
            description = describe_error(result.get("error"))
            if description is not None:
                descriptions.setdefault(description, None)

    return list(descriptions)


def format_error_message(descriptions: list[str]) -> str:
    """将错误描述连接为异常消息."""
    return ERROR_SEPARATOR.join(descriptions)


def collect_update_failures(response: Mapping[str, Any]) -> list[Any]:
    """获取 update_by_query 响应中的失败列表."""
    return list(response.get("failures") or [])
