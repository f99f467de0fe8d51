"""批量写入器使用示例.

本文件展示了如何使用 BulkWriter 将持续产生的记录批量写入 Elasticsearch。
"""

import asyncio
import logging

from elasticstream import BulkWriter, ClientConfig, ElasticsearchBackend

logging.basicConfig(level=logging.INFO)


# ==================== 示例1：上下文管理器 ====================
async def example_context_manager(backend: ElasticsearchBackend) -> None:
    """逐条提交记录，退出上下文时写入剩余记录."""
    async with BulkWriter(backend, batch_threshold=100, flush_timeout=1.0) as writer:
        await writer.submit({"index": "users", "id": "1", "body": {"name": "张三"}})
        await writer.submit(
            {
                "index": "users",
                "id": "1",
                "action": "update",
                "body": {"doc": {"city": "北京"}},
            }
        )
        await writer.submit({"index": "users", "id": "2", "action": "delete"})

    print(f"累计写入: {writer.written_records}")


# ==================== 示例2：流式写入 ====================
async def example_write_stream(backend: ElasticsearchBackend) -> None:
    """从异步迭代器读取记录并写入."""

    async def read_records():
        for i in range(1000):
            yield {"index": "events", "id": str(i), "body": {"seq": i}}

    writer = BulkWriter(
        backend,
        batch_threshold=200,
        error_callback=lambda error: print(f"定时 flush 失败: {error}"),
    )
    written = await writer.write_stream(read_records())
    print(f"流式写入完成: {written}")


# ==================== 示例3：按查询更新 ====================
async def example_update_by_query(backend: ElasticsearchBackend) -> None:
    """update_by_query 记录不进入队列，直接发送."""
    async with BulkWriter(backend) as writer:
        await writer.submit(
            {
                "index": "users",
                "action": "update_by_query",
                "body": {
                    "script": {"source": "ctx._source.login_count++"},
                    "query": {"term": {"city": "北京"}},
                },
            }
        )


async def main() -> None:
    backend = ElasticsearchBackend.from_config(
        ClientConfig(hosts=["http://localhost:9200"])
    )
    try:
        await example_context_manager(backend)
        await example_write_stream(backend)
        await example_update_by_query(backend)
    finally:
        await backend.close()


if __name__ == "__main__":
    asyncio.run(main())
