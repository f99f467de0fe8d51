"""ES 客户端连接数据模型定义模块."""

from dataclasses import dataclass, field

from .exceptions import ClientConfigError


@dataclass
class ClientConfig:
    """客户端配置模型.

    定义创建 AsyncElasticsearch 客户端所需的连接信息。

    Attributes:
        hosts: ES 节点地址列表（必需，不可为空）
        username: Basic Auth 用户名
        password: Basic Auth 密码
        api_key: API Key 认证（字符串或元组）
        request_timeout: 请求超时时间（秒），默认 30，必须 >= 0
        ca_certs: CA 证书文件路径
        verify_certs: 是否验证 SSL 证书，默认 True

    Raises:
        ClientConfigError: 当参数不合法时抛出

    Examples:
        >>> config = ClientConfig(
        ...     hosts=["http://localhost:9200"],
        ...     username="elastic",
        ...     password="changeme",
        ... )
    """

    hosts: list[str] = field(default_factory=list)
    username: str | None = None
    password: str | None = None
    api_key: str | tuple[str, str] | None = None
    request_timeout: float = 30
    ca_certs: str | None = None
    verify_certs: bool = True

    def __post_init__(self) -> None:
        """校验客户端配置参数合法性."""
        if not self.hosts:
            raise ClientConfigError("hosts 不能为空，请提供至少一个 ES 节点地址")
        if self.request_timeout < 0:
            raise ClientConfigError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )
