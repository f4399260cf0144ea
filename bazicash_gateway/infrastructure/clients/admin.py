"""Shopify Admin GraphQL client for customer and store credit lookups"""

import httpx
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional
from bazicash_gateway.domain.models import Account, Balance, StoreCreditTransaction
from bazicash_gateway.domain.exceptions import AdminAPIError, RedeemNotSupportedError
from bazicash_gateway.domain.redeem import NOT_SUPPORTED_MESSAGE
from bazicash_gateway.config import settings
from bazicash_gateway.infrastructure.observability.metrics import (
    admin_api_latency_histogram,
    admin_api_failures_counter,
)

CUSTOMER_BY_EMAIL_QUERY = """
query getCustomer($query: String!) {
  customers(first: 1, query: $query) {
    edges {
      node {
        id
        email
        displayName
      }
    }
  }
}
"""

STORE_CREDIT_BALANCE_QUERY = """
query getStoreCredit($customerId: ID!, $first: Int!) {
  customer(id: $customerId) {
    id
    storeCreditAccounts(first: $first) {
      edges {
        node {
          id
          balance {
            amount
            currencyCode
          }
        }
      }
    }
  }
}
"""

STORE_CREDIT_HISTORY_QUERY = """
query getStoreCreditHistory($customerId: ID!, $first: Int!) {
  customer(id: $customerId) {
    id
    storeCreditAccounts(first: 1) {
      edges {
        node {
          id
          transactions(first: $first) {
            edges {
              node {
                __typename
                id
                amount {
                  amount
                  currencyCode
                }
                createdAt
              }
            }
          }
        }
      }
    }
  }
}
"""

APP_PROXY_QUERY = """
query getAppProxy {
  app {
    proxy {
      url
      subPath
      subPathPrefix
    }
  }
}
"""

APP_PROXY_SET_MUTATION = """
mutation appProxySet($input: AppProxySetInput!) {
  appProxySet(input: $input) {
    appProxy {
      url
      subPath
      subPathPrefix
    }
    userErrors {
      field
      message
    }
  }
}
"""


def _nodes(connection: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Unwrap a GraphQL connection into its node list"""
    if not connection:
        return []
    return [edge["node"] for edge in connection.get("edges") or [] if edge and edge.get("node")]


def _parse_decimal(value: Any) -> Decimal:
    """Decimal from an API money string; unusable values count as zero"""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")


def _parse_datetime(value: str) -> datetime:
    """ISO timestamp as an aware datetime; timestamps without an offset are UTC"""
    moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


class ShopifyAdminClient:
    """Client for the Shopify Admin GraphQL API"""

    def __init__(
        self,
        graphql_url: str | None = None,
        access_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.graphql_url = graphql_url or settings.admin_graphql_url
        self.access_token = access_token if access_token is not None else settings.shopify_access_token
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def execute(self, operation: str, query: str, variables: Dict[str, Any] | None = None) -> Dict[str, Any]:
        """
        Run a GraphQL operation and return its ``data`` object.

        Raises:
            AdminAPIError: On timeout, HTTP errors, GraphQL errors or invalid response
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                with admin_api_latency_histogram.labels(operation=operation).time():
                    response = await client.post(
                        self.graphql_url,
                        json={"operationName": operation, "query": query, "variables": variables or {}},
                        headers={
                            "X-Shopify-Access-Token": self.access_token,
                            "Content-Type": "application/json",
                        },
                    )
                response.raise_for_status()
                payload = response.json()

        except httpx.TimeoutException as e:
            admin_api_failures_counter.labels(operation=operation).inc()
            raise AdminAPIError(f"Admin API timeout after {self.timeout}s ({operation})") from e
        except httpx.HTTPStatusError as e:
            admin_api_failures_counter.labels(operation=operation).inc()
            raise AdminAPIError(f"Admin API error: {e.response.status_code} ({operation})") from e
        except httpx.RequestError as e:
            admin_api_failures_counter.labels(operation=operation).inc()
            raise AdminAPIError(f"Admin API unreachable: {e} ({operation})") from e
        except ValueError as e:
            admin_api_failures_counter.labels(operation=operation).inc()
            raise AdminAPIError(f"Admin API returned invalid JSON ({operation})") from e

        if not isinstance(payload, dict) or payload.get("errors"):
            admin_api_failures_counter.labels(operation=operation).inc()
            errors = payload.get("errors") if isinstance(payload, dict) else payload
            raise AdminAPIError(f"Admin API GraphQL errors ({operation}): {errors}")

        data = payload.get("data")
        if not isinstance(data, dict):
            admin_api_failures_counter.labels(operation=operation).inc()
            raise AdminAPIError(f"Admin API response missing data ({operation})")
        return data

    async def find_customer_by_email(self, email: str) -> Optional[Account]:
        """
        Resolve a customer by exact email match, first result only.

        Returns:
            Account, or None when no customer has this email
        """
        data = await self.execute("getCustomer", CUSTOMER_BY_EMAIL_QUERY, {"query": f"email:{email}"})
        try:
            customers = _nodes(data.get("customers"))
            if not customers:
                return None
            node = customers[0]
            return Account(
                id=node["id"],
                email=node.get("email") or email,
                display_name=node.get("displayName") or "",
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise AdminAPIError(f"Invalid customer data from Admin API: {e}") from e

    async def get_store_credit_balance(self, customer_id: str) -> Balance:
        """
        Balance of the customer's first store credit account.

        No account means a zero balance; a missing or unparsable amount also
        counts as zero instead of failing the request.
        """
        data = await self.execute(
            "getStoreCredit",
            STORE_CREDIT_BALANCE_QUERY,
            {"customerId": customer_id, "first": settings.store_credit_accounts_page_size},
        )
        try:
            customer = data.get("customer") or {}
            accounts = _nodes(customer.get("storeCreditAccounts"))
        except (TypeError, AttributeError) as e:
            raise AdminAPIError(f"Invalid store credit data from Admin API: {e}") from e

        if not accounts:
            return Balance(amount=Decimal("0"), currency=settings.default_currency, account_id=None)

        account = accounts[0] if isinstance(accounts[0], dict) else {}
        money = account.get("balance")
        if not isinstance(money, dict):
            money = {}
        amount = _parse_decimal(money.get("amount"))
        return Balance(
            amount=max(amount, Decimal("0")),
            currency=money.get("currencyCode") or settings.default_currency,
            account_id=account.get("id"),
        )

    async def get_store_credit_transactions(
        self, customer_id: str, first: int | None = None
    ) -> List[StoreCreditTransaction]:
        """
        Up to ``first`` transactions of the first store credit account, in
        whatever order the API returns them.

        Raises:
            AdminAPIError: On transport failure or malformed transaction data
        """
        data = await self.execute(
            "getStoreCreditHistory",
            STORE_CREDIT_HISTORY_QUERY,
            {"customerId": customer_id, "first": first or settings.history_page_size},
        )
        try:
            customer = data.get("customer") or {}
            accounts = _nodes(customer.get("storeCreditAccounts"))
            if not accounts:
                return []

            return [
                StoreCreditTransaction(
                    id=node["id"],
                    amount=Decimal(str(node["amount"]["amount"])),
                    currency=node["amount"].get("currencyCode") or settings.default_currency,
                    created_at=_parse_datetime(node["createdAt"]),
                    typename=node.get("__typename") or "",
                )
                for node in _nodes(accounts[0].get("transactions"))
            ]
        except (KeyError, ValueError, TypeError, AttributeError, InvalidOperation) as e:
            raise AdminAPIError(f"Invalid transaction data from Admin API: {e}") from e

    async def debit_store_credit(self, customer_email: str, amount: Decimal) -> Balance:
        """
        Debit store credit from the customer's account.

        The Admin API has no mutation for manual store credit debits; credit
        is spent at checkout. Raises until such a mutation exists.
        """
        raise RedeemNotSupportedError(NOT_SUPPORTED_MESSAGE)

    async def get_app_proxy(self) -> Optional[Dict[str, Any]]:
        """Current App Proxy configuration, or None if not configured"""
        data = await self.execute("getAppProxy", APP_PROXY_QUERY)
        return (data.get("app") or {}).get("proxy")

    async def set_app_proxy(self, url: str, sub_path: str, sub_path_prefix: str) -> Dict[str, Any]:
        """
        Register the App Proxy.

        Returns:
            The ``appProxySet`` payload (``appProxy`` and ``userErrors``)
        """
        data = await self.execute(
            "appProxySet",
            APP_PROXY_SET_MUTATION,
            {"input": {"url": url, "subPath": sub_path, "subPathPrefix": sub_path_prefix}},
        )
        return data.get("appProxySet") or {"appProxy": None, "userErrors": []}
