from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode


class UrlBuilder:
    """
    查询串构造器，参数按添加顺序输出，值为 None 或空字符串的参数被忽略。

    使用示例:
        >>> UrlBuilder.from_base_url("https://example.com/auth").query_param("a", "1").query_param("b", "").build()
        'https://example.com/auth?a=1'
    """

    def __init__(self, base_url: str):
        if not base_url:
            raise ValueError("base_url cannot be empty")
        self.base_url = base_url
        self._params: dict[str, str] = {}

    @classmethod
    def from_base_url(cls, base_url: str) -> "UrlBuilder":
        return cls(base_url)

    def query_param(self, key: str, value: Any) -> "UrlBuilder":
        if not key:
            raise ValueError("query param key cannot be empty")
        if value is None:
            return self
        if isinstance(value, bool):
            value = "true" if value else "false"
        value = str(value)
        if value:
            self._params[key] = value
        return self

    def query_params(self, params: Mapping[str, Any]) -> "UrlBuilder":
        for key, value in params.items():
            self.query_param(key, value)
        return self

    def build(self, encode: bool = True) -> str:
        """
        :param encode: 是否对参数值做 URL 编码
        """
        if not self._params:
            return self.base_url

        if encode:
            query = urlencode(self._params)
        else:
            query = "&".join(f"{k}={v}" for k, v in self._params.items())

        if self.base_url.endswith(("?", "&")):
            sep = ""
        elif "?" in self.base_url:
            sep = "&"
        else:
            sep = "?"
        return f"{self.base_url}{sep}{query}"
