import datetime
import math
from decimal import Decimal
from enum import Enum
from typing import Any

import orjson

# === Configuration ===
# 1. OPT_SERIALIZE_UUID: 原生支持 UUID
# 2. OPT_NON_STR_KEYS: 允许非字符串键 (兼容性)
# 3. OPT_UTC_Z / OPT_NAIVE_UTC: 强制 UTC 时区，统一时间标准
# 4. OPT_OMIT_MICROSECONDS: 减少输出体积
DEFAULT_ORJSON_OPTIONS = (
    orjson.OPT_SERIALIZE_UUID
    | orjson.OPT_NAIVE_UTC
    | orjson.OPT_UTC_Z
    | orjson.OPT_OMIT_MICROSECONDS
    | orjson.OPT_NON_STR_KEYS
)

type JsonInputType = str | bytes | bytearray | memoryview


def _enhanced_default_handler(obj: Any) -> Any:
    """
    Fallback 处理函数。
    集中处理 orjson 原生不支持的类型，确保日志与缓存的序列化行为一致。
    """
    if isinstance(obj, Decimal):
        # 前端 JSON.parse 无法处理 NaN/Infinity，强制转为 null
        if obj.is_nan() or obj.is_infinite():
            return None
        if -1e15 < obj < 1e15 and obj.as_tuple().exponent >= -6:
            return float(obj)
        return str(obj)

    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return None
        return obj

    if isinstance(obj, bytes):
        return obj.decode("utf-8", "ignore")

    if isinstance(obj, datetime.timedelta):
        return obj.total_seconds()

    if isinstance(obj, (set, frozenset)):
        return list(obj)

    if isinstance(obj, Enum):
        return obj.value

    # 必须显式抛出异常
    raise TypeError(f"Type {type(obj)} is not JSON serializable")


def orjson_dumps_bytes(obj: Any, *, default: Any = None, option: int | None = None) -> bytes:
    """
    高性能 JSON 序列化（直接返回 bytes）。

    最佳场景：
    - HTTP Response (Starlette/FastAPI)
    - 写入 Redis
    """
    handler = default if default is not None else _enhanced_default_handler
    final_option = option if option is not None else DEFAULT_ORJSON_OPTIONS

    try:
        return orjson.dumps(obj, default=handler, option=final_option)
    except Exception as e:
        raise ValueError(f"JSON Serialization Failed: {str(e)} - Type: {type(obj)}") from e


def orjson_dumps(obj: Any, *, default: Any = None, option: int | None = None) -> str:
    """高性能 JSON 序列化（返回 str），主要用于日志记录"""
    return orjson_dumps_bytes(obj, default=default, option=option).decode("utf-8")


def orjson_loads(obj: JsonInputType) -> Any:
    """
    高性能 JSON 反序列化。
    """
    try:
        return orjson.loads(obj)
    except Exception as e:
        raise ValueError(f"JSON Deserialization Failed: {str(e)}") from e
