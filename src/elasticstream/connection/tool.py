"""ES 客户端连接工具模块.

提供 AsyncElasticsearch 客户端的创建函数，以及把客户端适配为
BulkWriter 后端接口的 ElasticsearchBackend。

使用示例:
    from elasticstream.connection import ClientConfig, ElasticsearchBackend, create_async_client

    client = create_async_client(ClientConfig(hosts=["http://localhost:9200"]))
    backend = ElasticsearchBackend(client)
"""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import AsyncElasticsearch

from .models import ClientConfig

logger = logging.getLogger(__name__)


def create_async_client(config: ClientConfig) -> AsyncElasticsearch:
    """根据客户端配置创建 AsyncElasticsearch 实例.

    Args:
        config: 客户端配置

    Returns:
        AsyncElasticsearch 客户端实例
    """
    kwargs: dict[str, Any] = {
        "hosts": config.hosts,
        "request_timeout": config.request_timeout,
        "verify_certs": config.verify_certs,
    }

    # Basic Auth 认证
    if config.username and config.password:
        kwargs["basic_auth"] = (config.username, config.password)

    # API Key 认证
    if config.api_key:
        kwargs["api_key"] = config.api_key

    if config.ca_certs:
        kwargs["ca_certs"] = config.ca_certs

    logger.info(f"创建 AsyncElasticsearch 客户端: hosts={config.hosts}")
    return AsyncElasticsearch(**kwargs)


class ElasticsearchBackend:
    """基于 AsyncElasticsearch 的写入后端.

    把 BulkWriter 使用的 ``bulk`` 与 ``update_by_query`` 调用转发给客户端，
    返回响应体字典。当前集群不再支持文档类型，update_by_query 操作中的
    document_type 不会发送。

    Args:
        client: AsyncElasticsearch 客户端实例

    Examples:
        >>> backend = ElasticsearchBackend(AsyncElasticsearch("http://localhost:9200"))
        >>> response = await backend.bulk(
        ...     [{"index": {"_index": "users", "_id": "1"}}, {"name": "Alice"}]
        ... )
    """

    def __init__(self, client: AsyncElasticsearch) -> None:
        if client is None:
            raise ValueError("client 不能为 None")
        self.client = client

    @classmethod
    def from_config(cls, config: ClientConfig) -> ElasticsearchBackend:
        """根据客户端配置创建后端."""
        return cls(create_async_client(config))

    async def bulk(self, operations: list[dict[str, Any]]) -> dict[str, Any]:
        """发送 bulk 请求.

        Args:
            operations: 扁平的 bulk 操作列表

        Returns:
            响应体，格式 ``{"errors": bool, "items": [...]}``
        """
        response = await self.client.bulk(operations=operations)
        return response.body

    async def update_by_query(self, operation: dict[str, Any]) -> dict[str, Any]:
        """发送 update_by_query 请求.

        Args:
            operation: ``{"index", ["document_type"], "body": {"script", "query"}}``

        Returns:
            响应体，包含 ``updated`` 与 ``failures``
        """
        body = operation["body"]
        response = await self.client.update_by_query(
            index=operation["index"],
            script=body["script"],
            query=body["query"],
        )
        return response.body

    async def close(self) -> None:
        """关闭底层客户端连接."""
        await self.client.close()
