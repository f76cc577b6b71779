"""第三方登录相关 API 接口"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from authkit.third_party_auth import AuthCallback, AuthResponse, AuthResponseStatus, AuthToken
from internal.core.response import response_factory, success_response
from internal.schemas.oauth import AuthorizeRespSchema, RefreshTokenReqSchema
from internal.services.oauth import OAuthService, new_oauth_service

router = APIRouter(prefix="/oauth", tags=["OAuth"])

OAuthServiceDep = Annotated[OAuthService, Depends(new_oauth_service)]

# 登录流程错误类别 -> HTTP 状态码
_HTTP_STATUS = {
    AuthResponseStatus.STATE_MISMATCH: 400,
    AuthResponseStatus.PARAMETER_INCOMPLETE: 400,
    AuthResponseStatus.ILLEGAL_TOKEN: 400,
    AuthResponseStatus.PROVIDER_ERROR: 502,
    AuthResponseStatus.MALFORMED_RESPONSE: 502,
    AuthResponseStatus.TRANSPORT_ERROR: 504,
    AuthResponseStatus.NOT_IMPLEMENTED: 501,
}


def _render(resp: AuthResponse):
    if resp.ok:
        return success_response(resp.data.to_dict())
    return response_factory.auth_failure(
        code=resp.code,
        message=resp.msg,
        data={"status": resp.status.value},
        http_status=_HTTP_STATUS.get(resp.status, 400),
    )


@router.get("/platforms", summary="可用的第三方登录平台")
async def list_platforms(oauth_service: OAuthServiceDep):
    return success_response({"platforms": oauth_service.available_platforms()})


@router.get("/{platform}/authorize", summary="跳转第三方授权页面")
async def authorize(
    platform: str,
    oauth_service: OAuthServiceDep,
    state: str | None = None,
    redirect: bool = True,
):
    """
    生成授权地址

    - 默认 307 跳转到授权页面
    - redirect=false 时以 JSON 返回授权地址（前端自行跳转）
    """
    flow = oauth_service.get_flow(platform)
    url = await flow.authorize(state)
    if redirect:
        return RedirectResponse(url)
    return success_response(AuthorizeRespSchema(url=url))


@router.get("/{platform}/callback", summary="第三方授权回调")
async def callback(platform: str, request: Request, oauth_service: OAuthServiceDep):
    """
    授权回调

    - 校验 state（一次性）
    - 换取 token 并获取用户信息
    """
    flow = oauth_service.get_flow(platform)
    resp = await flow.login(AuthCallback.from_query(request.query_params))
    return _render(resp)


@router.post("/{platform}/refresh", summary="刷新第三方 token")
async def refresh(platform: str, req: RefreshTokenReqSchema, oauth_service: OAuthServiceDep):
    flow = oauth_service.get_flow(platform)
    old_token = AuthToken(
        access_token=req.access_token,
        refresh_token=req.refresh_token,
        open_id=req.open_id,
        union_id=req.union_id,
        source=req.source or flow.platform.value,
    )
    resp = await flow.refresh(old_token)
    return _render(resp)
