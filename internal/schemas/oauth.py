from pydantic import BaseModel, Field


class RefreshTokenReqSchema(BaseModel):
    refresh_token: str = Field(..., min_length=1, description="登录时获取的 refresh_token")
    access_token: str = Field("", description="旧的 access_token")
    open_id: str | None = Field(None, description="平台用户标识，刷新响应未返回时沿用")
    union_id: str | None = None
    source: str | None = Field(None, description="签发 token 的平台，缺省为当前平台")


class AuthorizeRespSchema(BaseModel):
    url: str
