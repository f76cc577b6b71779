from fastapi import APIRouter

from internal.controllers.api import oauth

router = APIRouter(prefix="/v1")

routers = [
    oauth.router,
]

for r in routers:
    router.include_router(router=r)
