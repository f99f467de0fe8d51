"""批量写入器数据模型单元测试."""

import pytest

from elasticstream.writer.exceptions import ValidationError, WriterConfigError
from elasticstream.writer.models import Record, RecordAction, WriterConfig


class TestWriterConfig:
    """WriterConfig 测试."""

    def test_defaults(self) -> None:
        """测试默认值."""
        config = WriterConfig()
        assert config.batch_threshold == 16
        assert config.flush_timeout is None
        assert config.require_document_type is False
        assert config.max_background_errors == 100

    @pytest.mark.parametrize("batch_threshold", [0, -1])
    def test_invalid_batch_threshold(self, batch_threshold) -> None:
        """测试 batch_threshold 小于 1."""
        with pytest.raises(WriterConfigError, match="batch_threshold 必须 >= 1"):
            WriterConfig(batch_threshold=batch_threshold)

    @pytest.mark.parametrize("flush_timeout", [0, -0.5])
    def test_invalid_flush_timeout(self, flush_timeout) -> None:
        """测试 flush_timeout 不为正数."""
        with pytest.raises(WriterConfigError, match="flush_timeout 必须 > 0"):
            WriterConfig(flush_timeout=flush_timeout)

    @pytest.mark.parametrize("max_background_errors", [0, -1])
    def test_invalid_max_background_errors(self, max_background_errors) -> None:
        """测试 max_background_errors 小于 1."""
        with pytest.raises(WriterConfigError, match="max_background_errors 必须 >= 1"):
            WriterConfig(max_background_errors=max_background_errors)


class TestRecordFromDict:
    """Record.from_dict 测试."""

    def test_full_record(self) -> None:
        """测试包含全部字段的字典."""
        record = Record.from_dict(
            {
                "index": "indexName",
                "document_type": "recordType",
                "id": "recordId",
                "parent": "parentId",
                "action": "update",
                "body": {"doc": {"foo": "bar"}},
            }
        )

        assert record == Record(
            index="indexName",
            body={"doc": {"foo": "bar"}},
            action=RecordAction.UPDATE,
            id="recordId",
            document_type="recordType",
            parent="parentId",
        )

    def test_default_action(self) -> None:
        """测试 action 默认为 INDEX."""
        record = Record.from_dict({"index": "indexName", "body": {"foo": "bar"}})
        assert record.action is RecordAction.INDEX

    @pytest.mark.parametrize("key", ["document_type", "documentType", "type"])
    def test_document_type_keys(self, key) -> None:
        """测试文档类型的多种键名."""
        record = Record.from_dict({"index": "indexName", key: "recordType"})
        assert record.document_type == "recordType"

    def test_action_enum(self) -> None:
        """测试 action 为枚举值."""
        record = Record.from_dict({"index": "indexName", "action": RecordAction.DELETE})
        assert record.action is RecordAction.DELETE

    def test_invalid_action(self) -> None:
        """测试无法识别的 action."""
        with pytest.raises(ValidationError) as exc_info:
            Record.from_dict({"index": "indexName", "action": "create"})
        assert exc_info.value.field == "action"
