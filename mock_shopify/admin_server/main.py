from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse
from pathlib import Path
import json
import os

app = FastAPI(title="Mock Shopify Admin API", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/admin_stub") if os.path.exists("/admin_stub") else Path(__file__).resolve().parents[1] / "admin_stub"

# Emails that make the mock answer with GraphQL errors
FAILING_EMAILS = {"boom@example.com"}


def load_customers() -> list:
    return json.loads((DATA_DIR / "customers.json").read_text(encoding="utf-8"))


def connection(nodes: list) -> dict:
    return {"edges": [{"node": node} for node in nodes]}


def customer_by_id(customer_id: str):
    return next((c for c in load_customers() if c["id"] == customer_id), None)


@app.get("/health")
def health(): return {"status": "ok"}


@app.post("/admin/api/{version}/graphql.json")
def graphql(version: str, body: dict = Body(...)):
    operation = body.get("operationName")
    variables = body.get("variables") or {}

    if operation == "getCustomer":
        email = variables.get("query", "").removeprefix("email:")
        if email in FAILING_EMAILS:
            return JSONResponse(content={"errors": [{"message": "Internal error"}]})
        matches = [
            {"id": c["id"], "email": c["email"], "displayName": c["displayName"]}
            for c in load_customers() if c["email"] == email
        ]
        return {"data": {"customers": connection(matches[:1])}}

    if operation in ("getStoreCredit", "getStoreCreditHistory"):
        customer = customer_by_id(variables.get("customerId"))
        if customer is None:
            return {"data": {"customer": None}}
        limit = variables.get("first", 10) if operation == "getStoreCredit" else 1
        accounts = []
        for account in customer["storeCreditAccounts"][:limit]:
            node = {"id": account["id"], "balance": account["balance"]}
            if operation == "getStoreCreditHistory":
                node["transactions"] = connection(account["transactions"][: variables.get("first", 50)])
            accounts.append(node)
        return {"data": {"customer": {"id": customer["id"], "storeCreditAccounts": connection(accounts)}}}

    if operation == "getAppProxy":
        return {"data": {"app": {"proxy": None}}}

    if operation == "appProxySet":
        proxy = variables.get("input") or {}
        return {"data": {"appProxySet": {"appProxy": proxy, "userErrors": []}}}

    return JSONResponse(status_code=400, content={"errors": [{"message": f"unknown operation {operation}"}]})
