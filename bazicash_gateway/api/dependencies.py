"""Dependency injection for FastAPI endpoints"""

import logging
from fastapi import Request
from bazicash_gateway.config import settings
from bazicash_gateway.domain.exceptions import InvalidSignatureError
from bazicash_gateway.domain.signature import verify_signature
from bazicash_gateway.infrastructure.clients.admin import ShopifyAdminClient
from bazicash_gateway.infrastructure.observability.metrics import signature_failures_counter

UNAUTHORIZED_MESSAGE = "Requisição não autorizada"


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_admin_client() -> ShopifyAdminClient:
    """Provide Shopify Admin API client instance"""
    return ShopifyAdminClient()


async def verify_proxy_signature(request: Request) -> None:
    """
    Reject App Proxy requests that Shopify did not sign.

    Runs before any endpoint parameter or business logic. The 401 response
    never says which check failed.
    """
    request_id = get_request_id(request)
    try:
        valid = verify_signature(
            request.query_params.multi_items(),
            settings.shopify_api_secret,
            settings.signature_tolerance_seconds,
        )
    except Exception:
        logging.exception("Signature verification error", extra={"request_id": request_id})
        valid = False

    if not valid:
        signature_failures_counter.inc()
        logging.warning(
            "Invalid App Proxy signature",
            extra={
                "request_id": request_id,
                "path": request.url.path,
                "shop": request.query_params.get("shop"),
                "params": sorted(request.query_params.keys()),
            },
        )
        raise InvalidSignatureError(UNAUTHORIZED_MESSAGE)
