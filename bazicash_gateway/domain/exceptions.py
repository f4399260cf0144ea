"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidSignatureError(DomainException):
    """App Proxy request failed signature verification"""

    pass


class InvalidRequestError(DomainException):
    """Client input is missing or malformed"""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class CustomerNotFoundError(DomainException):
    """No customer account matches the supplied email"""

    pass


class AdminAPIError(DomainException):
    """Shopify Admin API returned an error or is unavailable"""

    pass


class RedeemNotSupportedError(DomainException):
    """Manual store credit debit is not available upstream"""

    pass


class InsufficientBalanceError(DomainException):
    """Requested redemption exceeds the last known balance"""

    pass


class WalletSourceError(DomainException):
    """Widget data source could not complete a request"""

    pass
