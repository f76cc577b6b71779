from dataclasses import dataclass, field
from typing import Any

import httpx

from authkit.logger import logger
from authkit.toolkit.json import orjson_loads


@dataclass
class RequestResult:
    status_code: int | None = None
    response: httpx.Response | None = None
    error: str | None = None
    _json: Any = field(init=False, default=None)

    @property
    def success(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300

    @property
    def reached_server(self) -> bool:
        """是否拿到了服务端响应（网络错误/超时时为 False）"""
        return self.response is not None

    def json(self) -> Any:
        if self._json is not None:
            return self._json
        if not self.response:
            return {}
        try:
            # 部分平台（如微信）以 text/plain 返回 JSON，不依赖 Content-Type
            self._json = orjson_loads(self.response.content)
            return self._json
        except Exception as e:
            raise RuntimeError(f"Failed to parse JSON: {e}") from e


class AsyncHttpClient:
    """
    基于 httpx 封装的长连接客户端。

    不做自动重试，失败通过 RequestResult.error 返回给调用方。
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30,
        headers: dict[str, str] | None = None,
        verify: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.default_headers = headers or {"Accept": "application/json"}
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=self.default_headers,
            verify=verify,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self.client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | str | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> RequestResult:
        url = url.strip()
        req_headers = headers or {}
        # 授权相关 URL 带有 secret/code，只记录不含查询串的部分
        logger.info(f"Req: {method} {url.split('?', 1)[0]}")

        try:
            response = await self.client.request(
                method=method.upper(),
                url=url,
                params=params,
                data=data,
                json=json,
                headers=req_headers,
                timeout=timeout or self.timeout,
            )

            err_msg = None
            if response.is_error:
                try:
                    err_msg = response.text
                except Exception as e:
                    logger.warning(f"Failed to get error message: {e}")
                    err_msg = f"HTTP {response.status_code}"

            return RequestResult(status_code=response.status_code, response=response, error=err_msg)

        except httpx.RequestError as exc:
            logger.error(f"RequestError to {url.split('?', 1)[0]}: {exc!r}")
            return RequestResult(status_code=0, error=f"Network Error: {exc!r}")

    async def get(self, url: str, **kwargs) -> RequestResult:
        return await self._request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> RequestResult:
        return await self._request("POST", url, **kwargs)
