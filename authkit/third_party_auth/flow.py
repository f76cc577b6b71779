"""授权码登录流程控制器"""

import uuid
from collections.abc import Callable
from enum import StrEnum

from authkit.cache import DEFAULT_STATE_TTL_SECONDS, BaseStateCache, MemoryStateCache, StateCacheError
from authkit.logger import logger
from authkit.toolkit import context

from .base import BaseThirdPartyAuthStrategy
from .exception import AuthException, AuthResponseStatus
from .models import AuthCallback, AuthResponse, AuthToken, AuthUser
from .source import ThirdPartyPlatform

RedirectUriProcessor = Callable[[str], str]


class FlowPhase(StrEnum):
    """单次登录尝试所处的阶段"""

    INIT = "init"
    AWAITING_CALLBACK = "awaiting_callback"
    TOKEN_EXCHANGED = "token_exchanged"
    PROFILE_FETCHED = "profile_fetched"
    FAILED = "failed"


def _identity(uri: str) -> str:
    return uri


class AuthFlow:
    """授权码登录流程

    authorize -> (用户在平台授权) -> login -> [refresh]

    流程固定，平台差异全部由持有的策略提供。
    同一个实例可被多个并发登录共享，单次登录的状态只存在于调用栈和 state 缓存中。

    使用示例:
        ```python
        flow = AuthFlow(
            WeChatMpAuthStrategy(AuthConfig(client_id="appid", client_secret="secret", redirect_uri="https://x/cb")),
            state_cache=MemoryStateCache(),
        )
        url = await flow.authorize()
        # ... 用户授权后回调 ...
        resp = await flow.login(AuthCallback.from_query(request.query_params))
        if resp.ok:
            user = resp.data
        ```
    """

    def __init__(
        self,
        strategy: BaseThirdPartyAuthStrategy,
        state_cache: BaseStateCache | None = None,
        *,
        state_ttl: int = DEFAULT_STATE_TTL_SECONDS,
    ):
        """
        Args:
            strategy: 平台策略
            state_cache: state 缓存；None 时使用独立的进程内缓存，传入 NullStateCache 可关闭校验
            state_ttl: state 有效期（秒）
        """
        self.strategy = strategy
        self.state_cache = state_cache if state_cache is not None else MemoryStateCache(default_ttl=state_ttl)
        self.state_ttl = state_ttl

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def platform(self) -> ThirdPartyPlatform:
        return self.strategy.platform

    @property
    def check_state(self) -> bool:
        return self.state_cache.enabled and not self.strategy.config.ignore_check_state

    async def authorize(self, state: str | None = None, redirect_uri_processor: RedirectUriProcessor | None = None) -> str:
        """
        生成授权地址

        Args:
            state: 调用方指定的 state，不传则随机生成
            redirect_uri_processor: 对配置中的回调地址做转换（如按请求替换域名），默认原样使用

        Returns:
            授权地址
        """
        real_state = state or uuid.uuid4().hex
        if self.check_state:
            await self.state_cache.put(self._state_key(real_state), real_state, self.state_ttl)

        processor = redirect_uri_processor or _identity
        url = self.strategy.build_authorize_url(real_state, processor(self.strategy.config.redirect_uri))
        logger.info(f"[{self.platform.value}] authorize url built, phase -> {FlowPhase.AWAITING_CALLBACK}")
        return url

    async def login(self, callback: AuthCallback) -> AuthResponse[AuthUser]:
        """
        处理回调：校验 state -> 换取 token -> 获取用户信息 -> 转换为 AuthUser

        state 在校验时即被作废，之后的步骤失败也不会恢复。
        """
        trace_token = context.set_trace_id(context.new_trace_id())
        phase = FlowPhase.AWAITING_CALLBACK
        try:
            self._check_code(callback)
            await self._verify_state(callback.state)

            token = await self.strategy.exchange_token(callback)
            phase = FlowPhase.TOKEN_EXCHANGED
            logger.info(f"[{self.platform.value}] phase -> {phase}")

            raw = await self.strategy.fetch_profile(token)
            self.strategy.check_response(raw)
            user = self.strategy.map_profile(raw, token)
            if not user.uuid:
                raise AuthException(AuthResponseStatus.MALFORMED_RESPONSE, msg="User identifier missing in response")

            phase = FlowPhase.PROFILE_FETCHED
            logger.info(f"[{self.platform.value}] phase -> {phase}, uuid={user.uuid}")
            return AuthResponse.success(user)

        except AuthException as e:
            logger.error(f"[{self.platform.value}] login failed at {phase}, phase -> {FlowPhase.FAILED}: {e}")
            return AuthResponse.from_exception(e)
        except StateCacheError as e:
            logger.error(f"[{self.platform.value}] state cache unavailable, phase -> {FlowPhase.FAILED}: {e}")
            return AuthResponse.failure(AuthResponseStatus.TRANSPORT_ERROR, msg=str(e))
        finally:
            context.reset_trace_id(trace_token)

    async def refresh(self, old_token: AuthToken) -> AuthResponse[AuthToken]:
        """
        刷新 token，响应解析与首次换取共用同一逻辑
        """
        try:
            if not self.strategy.source.refresh:
                raise AuthException(
                    AuthResponseStatus.NOT_IMPLEMENTED, msg=f"{self.platform.value} does not support refresh"
                )
            # 未标明来源的 token 视为当前平台签发
            if old_token.source and old_token.source != self.platform.value:
                raise AuthException(
                    AuthResponseStatus.ILLEGAL_TOKEN,
                    msg=f"Token issued by '{old_token.source}' cannot be used with {self.platform.value}",
                )
            if not old_token.refresh_token:
                raise AuthException(AuthResponseStatus.PARAMETER_INCOMPLETE, msg="refresh_token is required")

            token = await self.strategy.refresh_token(old_token)
            logger.info(f"[{self.platform.value}] token refreshed, expires_in={token.expires_in}")
            return AuthResponse.success(token)

        except AuthException as e:
            logger.error(f"[{self.platform.value}] refresh failed: {e}")
            return AuthResponse.from_exception(e)

    async def close(self) -> None:
        await self.strategy.close()

    def _state_key(self, state: str) -> str:
        # 多个平台可能共享同一个缓存，key 按平台隔离
        return f"{self.platform.value}:{state}"

    def _check_code(self, callback: AuthCallback) -> None:
        if not callback.code:
            raise AuthException(AuthResponseStatus.PARAMETER_INCOMPLETE, msg="Authorization code is required")

    async def _verify_state(self, state: str) -> None:
        if not self.check_state:
            return
        if not state or not await self.state_cache.consume(self._state_key(state)):
            raise AuthException(AuthResponseStatus.STATE_MISMATCH)
