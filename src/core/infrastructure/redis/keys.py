"""缓存 Key 命名规范。

缓存用于：
- 频道目录: 整表缓存，key 由配置 CATALOG_CACHE_KEY 决定，1 小时过期
- 波形数据: 按条目存储，不过期
- 速率限制: 按客户端与时间窗口计数
"""


class CacheKeys:
    """缓存 Key 命名空间管理。"""

    # 波形数据
    # waveform:{item_id}
    WAVEFORM_PREFIX = "waveform"

    # 速率限制
    # rate_limit:{resource}:{identifier}:{window}
    RATE_LIMIT_PREFIX = "rate_limit"

    @classmethod
    def catalog(cls, configured_key: str) -> str:
        """频道目录 key。

        频道是进程级配置而不是请求参数，因此只有一个 key，取自配置。
        """
        return configured_key

    @classmethod
    def waveform(cls, item_id: str) -> str:
        """生成波形数据 key。

        Args:
            item_id: 条目 ID（外部视频 ID 或上传内容 ID）

        Returns:
            格式化的缓存 key
        """
        return f"{cls.WAVEFORM_PREFIX}:{item_id}"

    @classmethod
    def rate_limit(cls, resource: str, identifier: str, window: str) -> str:
        """生成速率限制 key。

        Args:
            resource: 资源类型（如 api）
            identifier: 标识符（客户端 IP）
            window: 时间窗口编号

        Returns:
            格式化的缓存 key
        """
        return f"{cls.RATE_LIMIT_PREFIX}:{resource}:{identifier}:{window}"
