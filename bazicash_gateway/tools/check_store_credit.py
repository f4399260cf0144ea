"""
Smoke test against a live store: customer lookup, balance and history.

Usage:
  bazicash-check-credit cliente@example.com
"""

import argparse
import asyncio
import sys
from typing import Optional

from bazicash_gateway.config import settings
from bazicash_gateway.domain.exceptions import AdminAPIError
from bazicash_gateway.domain.history import build_history, normalize_transaction
from bazicash_gateway.domain.statistics import compute_statistics
from bazicash_gateway.infrastructure.clients.admin import ShopifyAdminClient
from bazicash_gateway.widget.render import format_date, format_money, format_percent


async def check_store_credit(client: ShopifyAdminClient, email: str) -> int:
    """Returns a process exit code"""
    print(f"Loja: {settings.shopify_store_domain}  API: {settings.shopify_api_version}")

    try:
        customer = await client.find_customer_by_email(email)
        if customer is None:
            print(f"Customer não encontrado: {email}")
            return 1
        print(f"Customer: {customer.display_name} <{customer.email}> ({customer.id})")

        balance = await client.get_store_credit_balance(customer.id)
        if balance.account_id is None:
            print("Customer não possui Store Credit Account")
            return 0
        print(f"Saldo: {format_money(balance.amount, balance.currency)} ({balance.account_id})")

        entries = [normalize_transaction(t) for t in await client.get_store_credit_transactions(customer.id)]
    except AdminAPIError as e:
        print(f"Erro na Admin API: {e}")
        return 1

    history = build_history(entries)
    print(f"{len(history.entries)} transações")
    for entry in history.entries:
        sign = "+" if entry.kind.value == "credit" else "-"
        print(f"  {format_date(entry.date)}  {sign}{format_money(entry.amount, balance.currency)}  {entry.description}")

    stats = compute_statistics(entries)
    print(
        f"Créditos: {format_money(stats.total_credits, balance.currency)}  "
        f"Resgates: {format_money(stats.total_debits, balance.currency)}  "
        f"Economia: {format_percent(stats.savings_percent)}"
    )
    return 0


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Check a customer's store credit")
    parser.add_argument("email", help="Customer email")
    args = parser.parse_args(argv)
    return asyncio.run(check_store_credit(ShopifyAdminClient(), args.email))


if __name__ == "__main__":
    sys.exit(main())
