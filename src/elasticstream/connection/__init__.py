"""ES 客户端连接模块 - 创建 AsyncElasticsearch 客户端并适配为写入后端.

主要组件:
    - ClientConfig: 客户端配置模型
    - create_async_client: 根据配置创建 AsyncElasticsearch 客户端
    - ElasticsearchBackend: BulkWriter 使用的后端适配器

使用示例:
    from elasticstream.connection import ClientConfig, ElasticsearchBackend

    backend = ElasticsearchBackend.from_config(
        ClientConfig(hosts=["http://localhost:9200"])
    )
"""

from .exceptions import ClientConfigError
from .models import ClientConfig
from .tool import ElasticsearchBackend, create_async_client

__all__ = [
    # 后端
    "ElasticsearchBackend",
    "create_async_client",
    # 模型
    "ClientConfig",
    # 异常
    "ClientConfigError",
]
