"""POST /proxy/redeem - Manual store credit redemption"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from bazicash_gateway.api.proxy.schemas import RedeemResponse
from bazicash_gateway.api.dependencies import get_admin_client, get_request_id
from bazicash_gateway.infrastructure.clients.admin import ShopifyAdminClient
from bazicash_gateway.domain.redeem import NOT_SUPPORTED_INFO, validate_redeem_request
from bazicash_gateway.domain.exceptions import AdminAPIError, InvalidRequestError, RedeemNotSupportedError
from bazicash_gateway.infrastructure.observability.metrics import record_proxy_request
from bazicash_gateway.infrastructure.observability.logging import log_proxy_request, log_upstream_failure

router = APIRouter()


async def _read_json_object(request: Request) -> dict:
    try:
        payload = await request.json()
    except ValueError:
        raise InvalidRequestError("Corpo da requisição inválido")
    if not isinstance(payload, dict):
        raise InvalidRequestError("Corpo da requisição inválido")
    return payload


@router.post("/redeem", response_model=RedeemResponse)
async def redeem(
    request: Request,
    admin_client: ShopifyAdminClient = Depends(get_admin_client),
):
    """
    Redeem store credit.

    Input is validated before anything reaches the Admin API. The Admin API
    has no manual debit mutation (store credit is spent at checkout), so a
    valid request currently ends in 501.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        payload = await _read_json_object(request)
        redeem_request = validate_redeem_request(payload.get("customer_email"), payload.get("amount"))
        balance = await admin_client.debit_store_credit(redeem_request.customer_email, redeem_request.amount)

    except InvalidRequestError as e:
        record_proxy_request("redeem", "bad_request")
        raise HTTPException(status_code=400, detail=str(e))

    except RedeemNotSupportedError as e:
        record_proxy_request("redeem", "not_supported")
        logging.info(f"Manual redeem not supported: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=501, detail={"message": str(e), "info": NOT_SUPPORTED_INFO})

    except AdminAPIError as e:
        record_proxy_request("redeem", "upstream_error")
        log_upstream_failure(request_id, "redeem", e)
        raise HTTPException(status_code=500, detail="Erro ao processar resgate")

    duration_ms = (time.time() - start_time) * 1000
    record_proxy_request("redeem", "success")
    log_proxy_request(request_id, "redeem", redeem_request.customer_email, "success", duration_ms)

    return RedeemResponse(
        message="Resgate realizado com sucesso!",
        balance=float(balance.amount),
        currency=balance.currency,
    )
