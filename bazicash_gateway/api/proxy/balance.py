"""GET /proxy/balance - Store credit balance of a customer"""

import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from bazicash_gateway.api.proxy.schemas import BalanceResponse
from bazicash_gateway.api.dependencies import get_admin_client, get_request_id
from bazicash_gateway.infrastructure.clients.admin import ShopifyAdminClient
from bazicash_gateway.domain.identity import resolve_customer
from bazicash_gateway.domain.exceptions import AdminAPIError, CustomerNotFoundError, InvalidRequestError
from bazicash_gateway.infrastructure.observability.metrics import record_proxy_request
from bazicash_gateway.infrastructure.observability.logging import log_proxy_request, log_upstream_failure

router = APIRouter()


@router.get("/balance", response_model=BalanceResponse)
async def get_balance(
    request: Request,
    customer_email: Optional[str] = Query(None, description="Customer email"),
    admin_client: ShopifyAdminClient = Depends(get_admin_client),
):
    """
    Return the customer's redeemable store credit.

    Flow:
    1. Resolve customer by email (404 if unknown)
    2. Read the first store credit account balance (0 if none)
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        customer = await resolve_customer(admin_client, customer_email)
        balance = await admin_client.get_store_credit_balance(customer.id)

    except InvalidRequestError as e:
        record_proxy_request("balance", "bad_request")
        raise HTTPException(status_code=400, detail=str(e))

    except CustomerNotFoundError as e:
        record_proxy_request("balance", "not_found")
        logging.info(f"Customer not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))

    except AdminAPIError as e:
        record_proxy_request("balance", "upstream_error")
        log_upstream_failure(request_id, "balance", e)
        raise HTTPException(status_code=500, detail="Erro ao buscar saldo")

    duration_ms = (time.time() - start_time) * 1000
    record_proxy_request("balance", "success")
    log_proxy_request(request_id, "balance", customer.email, "success", duration_ms)

    return BalanceResponse.build(balance, customer)
