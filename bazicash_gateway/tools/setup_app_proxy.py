"""
Register the BaziCash App Proxy with the store.

Shows the current configuration, then points /{prefix}/{subpath} at
{BACKEND_URL}/proxy.

Usage:
  BACKEND_URL=https://seu-backend.com bazicash-setup-proxy
"""

import argparse
import asyncio
import sys
from typing import Optional

from bazicash_gateway.config import settings
from bazicash_gateway.domain.exceptions import AdminAPIError
from bazicash_gateway.infrastructure.clients.admin import ShopifyAdminClient

OVERWRITE_GRACE_SECONDS = 5.0


def _describe(proxy: dict) -> str:
    return f"URL: {proxy.get('url')}  Subpath: /{proxy.get('subPathPrefix')}/{proxy.get('subPath')}"


async def setup_app_proxy(
    client: ShopifyAdminClient,
    backend_url: str,
    sub_path: str,
    sub_path_prefix: str,
    grace_seconds: float = OVERWRITE_GRACE_SECONDS,
) -> int:
    """Returns a process exit code"""
    proxy_url = f"{backend_url.rstrip('/')}/proxy"
    print(f"Configurando App Proxy: {proxy_url} -> /{sub_path_prefix}/{sub_path}")

    try:
        current: Optional[dict] = await client.get_app_proxy()
    except AdminAPIError as e:
        print(f"Não foi possível ler a configuração atual: {e}")
        current = None

    if current:
        print(f"Configuração atual: {_describe(current)}")
        print(f"Sobrescrevendo em {grace_seconds:.0f}s (Ctrl+C para cancelar)")
        await asyncio.sleep(grace_seconds)
    else:
        print("App Proxy ainda não configurado")

    try:
        result = await client.set_app_proxy(proxy_url, sub_path, sub_path_prefix)
    except AdminAPIError as e:
        print(f"Erro ao executar mutation: {e}")
        return 1

    user_errors = result.get("userErrors") or []
    if user_errors:
        print("Erro ao configurar App Proxy:")
        for error in user_errors:
            print(f"  - {error.get('field')}: {error.get('message')}")
        return 1

    proxy = result.get("appProxy") or {}
    print(f"App Proxy configurado: {_describe(proxy)}")
    for endpoint in ("balance", "history", "redeem"):
        print(f"  https://{settings.shopify_store_domain}/{sub_path_prefix}/{sub_path}/{endpoint}")
    return 0


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Register the BaziCash App Proxy")
    parser.add_argument("--backend-url", default=settings.backend_url, help="Public backend URL")
    parser.add_argument("--subpath", default=settings.app_proxy_subpath)
    parser.add_argument("--prefix", default=settings.app_proxy_prefix)
    parser.add_argument("--no-wait", action="store_true", help="Overwrite without the grace period")
    args = parser.parse_args(argv)

    try:
        return asyncio.run(
            setup_app_proxy(
                ShopifyAdminClient(),
                args.backend_url,
                args.subpath,
                args.prefix,
                grace_seconds=0 if args.no_wait else OVERWRITE_GRACE_SECONDS,
            )
        )
    except KeyboardInterrupt:
        print("\nOperação cancelada")
        return 130


if __name__ == "__main__":
    sys.exit(main())
