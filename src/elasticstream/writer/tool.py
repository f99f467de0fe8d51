"""批量写入器核心工具类."""

import asyncio
import dataclasses
import logging
import time
from collections import deque
from collections.abc import AsyncIterable, Callable, Iterable, Mapping
from typing import Any

from .exceptions import (
    BulkDispatchError,
    BulkPartialFailureError,
    PartialUpdateFailureError,
    UpdateByQueryDispatchError,
    WriterClosedError,
)
from .models import (
    BulkBackend,
    BulkFlushResult,
    Record,
    RecordAction,
    WriterConfig,
    WriterState,
)
from .response import collect_bulk_errors, collect_update_failures
from .transform import transform_records, transform_update, validate_record

RecordLike = Record | Mapping[str, Any]


class BulkWriter:
    """批量写入器核心类.

    将持续提交的写入记录缓存在内存队列中，按数量阈值或空闲超时触发 flush，
    每次 flush 通过一次 bulk 请求写入 Elasticsearch，并将部分失败的响应
    转换为异常。UPDATE_BY_QUERY 记录不进入队列，直接单独发送。

    所有方法都应在同一个事件循环中调用。同一时刻最多只有一个 flush 在执行，
    flush 期间提交的记录进入新的队列，等待下一批次。

    flush_timeout 以秒为单位（浮点数），例如 1000 毫秒写作 ``flush_timeout=1.0``。

    Args:
        backend: 提供异步 bulk 与 update_by_query 方法的后端，
            通常为 ElasticsearchBackend
        config: 写入器配置，默认使用 WriterConfig 的默认值
        logger: 日志记录器，默认使用模块日志记录器
        error_callback: 定时 flush 失败时的回调，参数为异常实例；回调自身抛出的
            异常只记录日志
        **options: 覆盖 config 中的同名配置项

    Example:
        >>> backend = ElasticsearchBackend(AsyncElasticsearch("http://localhost:9200"))
        >>> async with BulkWriter(backend, batch_threshold=100, flush_timeout=1.0) as writer:
        ...     await writer.submit({"index": "users", "id": "1", "body": {"name": "Alice"}})
        >>> writer.written_records
        1
    """

    def __init__(
        self,
        backend: BulkBackend,
        config: WriterConfig | None = None,
        logger: logging.Logger | None = None,
        error_callback: Callable[[Exception], None] | None = None,
        **options: Any,
    ):
        if backend is None:
            raise ValueError("backend 不能为 None")

        if config is None:
            config = WriterConfig(**options)
        elif options:
            config = dataclasses.replace(config, **options)

        self.backend = backend
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.error_callback = error_callback

        self._state = WriterState.OPEN
        self._queue: list[Record] = []
        self._written_records = 0
        self._flush_lock = asyncio.Lock()
        self._flush_timer: asyncio.TimerHandle | None = None
        self._timer_tasks: set[asyncio.Task] = set()
        self._background_errors: deque[Exception] = deque(
            maxlen=config.max_background_errors
        )

        self.logger.info(
            f"初始化批量写入器: batch_threshold={config.batch_threshold}, "
            f"flush_timeout={config.flush_timeout}"
        )

    @property
    def written_records(self) -> int:
        """累计成功写入的记录数."""
        return self._written_records

    @property
    def state(self) -> WriterState:
        return self._state

    @property
    def queue_size(self) -> int:
        return len(self._queue)

    @property
    def background_errors(self) -> list[Exception]:
        """最近的定时 flush 异常列表（副本），最多保留 max_background_errors 个."""
        return list(self._background_errors)

    def pop_background_errors(self) -> list[Exception]:
        """取出并清空已保留的定时 flush 异常."""
        errors = list(self._background_errors)
        self._background_errors.clear()
        return errors

    def set_config(self, **options: Any) -> None:
        """更新写入器配置.

        只影响之后的提交，不会触发 flush。

        Args:
            **options: WriterConfig 的字段，例如 batch_threshold、flush_timeout

        Raises:
            WriterConfigError: 新配置不合法时抛出，原配置保持不变
        """
        self.config = dataclasses.replace(self.config, **options)
        if self._background_errors.maxlen != self.config.max_background_errors:
            self._background_errors = deque(
                self._background_errors, maxlen=self.config.max_background_errors
            )
        self.logger.info(
            f"更新配置: batch_threshold={self.config.batch_threshold}, "
            f"flush_timeout={self.config.flush_timeout}, "
            f"require_document_type={self.config.require_document_type}"
        )

    # ============================================================
    # 提交与 flush
    # ============================================================

    async def submit(self, record: RecordLike) -> None:
        """提交一条写入记录.

        记录校验通过后进入队列；队列达到 batch_threshold 时立即 flush，
        并在 flush 完成后返回。未达到阈值且配置了 flush_timeout 时，
        重新计时空闲超时。

        Args:
            record: Record 实例或等价的字典

        Raises:
            WriterClosedError: 写入器已关闭
            ValidationError: 记录不满足约束，记录不会入队
            BulkDispatchError: 触发的 flush 请求失败
            BulkPartialFailureError: 触发的 flush 部分失败
            UpdateByQueryDispatchError: update_by_query 请求失败
            PartialUpdateFailureError: update_by_query 部分失败
        """
        if self._state is not WriterState.OPEN:
            raise WriterClosedError(f"写入器已关闭，当前状态: {self._state.value}")

        if not isinstance(record, Record):
            record = Record.from_dict(record)
        validate_record(record, self.config.require_document_type)

        # update_by_query 不支持 bulk 协议，单独发送
        if record.action == RecordAction.UPDATE_BY_QUERY:
            await self.partial_update(record)
            return

        self.logger.debug(f"加入写入队列: {record}")
        self._queue.append(record)

        if len(self._queue) >= self.config.batch_threshold:
            await self.flush()
        elif self.config.flush_timeout is not None:
            self._arm_flush_timer()

    async def flush(self) -> BulkFlushResult:
        """将当前队列通过一次 bulk 请求写入.

        队列为空时不发送请求。队列在发送前被整体取出并清空，
        即使写入失败也不会放回队列。

        Returns:
            本次 flush 的结果

        Raises:
            RecordTransformError: 记录转换失败
            BulkDispatchError: bulk 请求失败，异常携带完整请求体
            BulkPartialFailureError: 部分操作失败，异常携带去重后的错误描述
        """
        self._cancel_flush_timer()

        async with self._flush_lock:
            if not self._queue:
                return BulkFlushResult()

            records = self._queue
            self._queue = []
            return await self._write_batch(records)

    async def _write_batch(self, records: list[Record]) -> BulkFlushResult:
        """转换并发送一个批次."""
        start_time = time.time()
        operations = transform_records(records)

        self.logger.debug(f"向 Elasticsearch 写入 {len(records)} 条记录")

        try:
            response = await self.backend.bulk(operations)
        except Exception as e:
            raise BulkDispatchError(f"bulk 请求失败: {e}", operations) from e

        descriptions = collect_bulk_errors(response)
        if descriptions:
            for description in descriptions:
                self.logger.error(description)
            raise BulkPartialFailureError(descriptions, operations, response)

        self._written_records += len(records)
        self.logger.info(f"已写入 {len(records)} 条记录到 Elasticsearch")

        return BulkFlushResult(
            records=len(records),
            operations=len(operations),
            took=time.time() - start_time,
            response=response,
        )

    async def partial_update(self, record: RecordLike) -> Mapping[str, Any]:
        """通过 update_by_query 执行按查询更新.

        记录的 action 字段被忽略，按 UPDATE_BY_QUERY 校验与发送。

        Args:
            record: body 中包含 script 与 query 的记录

        Returns:
            update_by_query 响应

        Raises:
            ValidationError: 缺少 index、body.script 或 body.query
            UpdateByQueryDispatchError: 请求失败，异常携带请求操作
            PartialUpdateFailureError: 存在文档级失败，异常携带请求操作
        """
        if not isinstance(record, Record):
            record = Record.from_dict(record)
        record = dataclasses.replace(record, action=RecordAction.UPDATE_BY_QUERY)
        validate_record(record, self.config.require_document_type)

        operation = transform_update(record)

        try:
            response = await self.backend.update_by_query(operation)
        except Exception as e:
            raise UpdateByQueryDispatchError(
                f"update_by_query 请求失败: {e}", operation
            ) from e

        failures = collect_update_failures(response)
        if failures:
            for failure in failures:
                self.logger.error(failure)
            raise PartialUpdateFailureError(operation, failures)

        updated = response.get("updated", 0)
        self._written_records += updated
        self.logger.info(f"update_by_query 已更新 {updated} 条记录")

        return response

    # ============================================================
    # 定时 flush
    # ============================================================

    def _arm_flush_timer(self) -> None:
        """取消旧的定时器并重新计时."""
        self._cancel_flush_timer()
        loop = asyncio.get_running_loop()
        self._flush_timer = loop.call_later(
            self.config.flush_timeout, self._on_flush_timer
        )

    def _cancel_flush_timer(self) -> None:
        if self._flush_timer is not None:
            self._flush_timer.cancel()
            self._flush_timer = None

    def _on_flush_timer(self) -> None:
        self._flush_timer = None
        task = asyncio.ensure_future(self._timed_flush())
        self._timer_tasks.add(task)
        task.add_done_callback(self._timer_tasks.discard)

    async def _timed_flush(self) -> None:
        """定时触发的 flush，没有调用方等待结果，失败通过回调上报."""
        try:
            await self.flush()
        except Exception as e:
            self._report_background_error(e)

    def _report_background_error(self, error: Exception) -> None:
        self.logger.error(f"定时 flush 失败: {error}")
        self._background_errors.append(error)
        if self.error_callback is not None:
            try:
                self.error_callback(error)
            except Exception:
                self.logger.exception("定时 flush 错误回调执行失败")

    # ============================================================
    # 生命周期管理
    # ============================================================

    async def close(self) -> None:
        """结束输入并关闭写入器.

        执行最后一次 flush，无论结果如何都会取消定时器并进入 CLOSED 状态。
        已关闭的写入器再次调用时直接返回。

        Raises:
            BulkDispatchError: 最后一次 flush 请求失败
            BulkPartialFailureError: 最后一次 flush 部分失败
        """
        if self._state is not WriterState.OPEN:
            return

        self._state = WriterState.CLOSING
        try:
            await self.flush()
        finally:
            self._cancel_flush_timer()
            if self._timer_tasks:
                await asyncio.gather(*self._timer_tasks)
            self._state = WriterState.CLOSED
            self.logger.info(f"写入器已关闭，累计写入 {self._written_records} 条记录")

    async def write_stream(
        self,
        records: Iterable[RecordLike] | AsyncIterable[RecordLike],
    ) -> int:
        """流式写入全部记录并关闭写入器.

        任一记录提交失败时异常直接抛出，写入器保持打开状态。

        Args:
            records: 记录的同步或异步迭代器

        Returns:
            累计写入的记录数

        Example:
            >>> async def read_records():
            ...     for i in range(1000):
            ...         yield {"index": "users", "id": str(i), "body": {"n": i}}
            >>> written = await writer.write_stream(read_records())
        """
        if isinstance(records, AsyncIterable):
            async for record in records:
                await self.submit(record)
        else:
            for record in records:
                await self.submit(record)

        await self.close()
        return self._written_records

    async def __aenter__(self) -> "BulkWriter":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """退出上下文时关闭写入器."""
        await self.close()
