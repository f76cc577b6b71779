"""请求级上下文 - 基于 contextvars，每个登录尝试拥有独立的 trace_id"""

import secrets
from contextvars import ContextVar, Token

_trace_id: ContextVar[str | None] = ContextVar("trace_id", default=None)


def new_trace_id() -> str:
    return secrets.token_hex(8)


def set_trace_id(trace_id: str) -> Token:
    if not trace_id:
        raise ValueError("trace_id is mandatory and cannot be empty or None")

    if not isinstance(trace_id, str):
        raise ValueError("trace_id must be a string")

    return _trace_id.set(trace_id)


def reset_trace_id(token: Token) -> None:
    _trace_id.reset(token)


def get_trace_id() -> str:
    """未设置时返回 "-"，日志格式化器直接使用"""
    return _trace_id.get() or "-"
