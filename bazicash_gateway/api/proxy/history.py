"""GET /proxy/history - Store credit transaction history"""

import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from bazicash_gateway.api.proxy.schemas import HistoryResponse
from bazicash_gateway.api.dependencies import get_admin_client, get_request_id
from bazicash_gateway.infrastructure.clients.admin import ShopifyAdminClient
from bazicash_gateway.domain.identity import resolve_customer
from bazicash_gateway.domain.history import build_history, normalize_transaction, parse_filter
from bazicash_gateway.domain.statistics import compute_statistics
from bazicash_gateway.domain.exceptions import AdminAPIError, CustomerNotFoundError, InvalidRequestError
from bazicash_gateway.infrastructure.observability.metrics import record_proxy_request
from bazicash_gateway.infrastructure.observability.logging import log_proxy_request, log_upstream_failure

router = APIRouter()


@router.get("/history", response_model=HistoryResponse)
async def get_history(
    request: Request,
    customer_email: Optional[str] = Query(None, description="Customer email"),
    filter: Optional[str] = Query(None, description="all | credits-only | debits-only"),
    admin_client: ShopifyAdminClient = Depends(get_admin_client),
):
    """
    Return normalized store credit transactions, most recent first.

    Statistics are computed over the whole page, before filtering. An empty
    list carries ``empty``: ``no_transactions`` when the customer has none at
    all, ``no_match`` when only the filter excluded them.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        history_filter = parse_filter(filter)
        customer = await resolve_customer(admin_client, customer_email)
        transactions = await admin_client.get_store_credit_transactions(customer.id)

    except InvalidRequestError as e:
        record_proxy_request("history", "bad_request")
        raise HTTPException(status_code=400, detail=str(e))

    except CustomerNotFoundError as e:
        record_proxy_request("history", "not_found")
        logging.info(f"Customer not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))

    except AdminAPIError as e:
        record_proxy_request("history", "upstream_error")
        log_upstream_failure(request_id, "history", e)
        raise HTTPException(status_code=500, detail="Erro ao buscar histórico")

    entries = [normalize_transaction(txn) for txn in transactions]
    result = build_history(entries, history_filter)
    summary = compute_statistics(entries)

    duration_ms = (time.time() - start_time) * 1000
    record_proxy_request("history", "success")
    log_proxy_request(request_id, "history", customer.email, "success", duration_ms)

    return HistoryResponse.build(result, summary)
