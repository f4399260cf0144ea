"""Customer identity resolution"""

from typing import Optional, Protocol

from bazicash_gateway.domain.exceptions import CustomerNotFoundError, InvalidRequestError
from bazicash_gateway.domain.models import Account

MISSING_EMAIL_MESSAGE = "Email do customer é obrigatório"
NOT_FOUND_MESSAGE = "Customer não encontrado"


class CustomerDirectory(Protocol):
    async def find_customer_by_email(self, email: str) -> Optional[Account]: ...


def require_customer_email(value: Optional[str]) -> str:
    """Trimmed email, or InvalidRequestError when absent"""
    email = (value or "").strip()
    if not email:
        raise InvalidRequestError(MISSING_EMAIL_MESSAGE, field="customer_email")
    return email


async def resolve_customer(directory: CustomerDirectory, email: Optional[str]) -> Account:
    """
    Map a customer email to its platform account.

    Raises:
        InvalidRequestError: Email missing or blank
        CustomerNotFoundError: No account for this email
        AdminAPIError: Upstream lookup failed (propagated from the directory)
    """
    address = require_customer_email(email)
    account = await directory.find_customer_by_email(address)
    if account is None:
        raise CustomerNotFoundError(NOT_FOUND_MESSAGE)
    return account
