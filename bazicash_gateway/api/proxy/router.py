"""App Proxy router: every route sits behind signature verification"""

from fastapi import APIRouter, Depends

from bazicash_gateway.api.dependencies import verify_proxy_signature
from bazicash_gateway.api.proxy import balance, history, redeem


def build_proxy_router() -> APIRouter:
    router = APIRouter(dependencies=[Depends(verify_proxy_signature)])
    router.include_router(balance.router)
    router.include_router(history.router)
    router.include_router(redeem.router)
    return router
