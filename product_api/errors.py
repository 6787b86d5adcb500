"""Error taxonomy for the product API.

Handlers raise these; the exception handlers installed by
``product_api.main.create_app`` render them as the JSON error envelope.
"""
from typing import Any, Dict, List, Optional


class ProductAPIError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None):
        self.message = message or self.message
        self.detail = detail
        super().__init__(self.message)

    def to_dict(self, debug: bool = False) -> Dict[str, Any]:
        body: Dict[str, Any] = {"status": "error", "message": self.message}
        if debug and self.detail:
            body["error"] = self.detail
        return body


class ProductValidationError(ProductAPIError):
    """One or more product fields violate the schema."""

    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    def to_dict(self, debug: bool = False) -> Dict[str, Any]:
        body = super().to_dict(debug)
        body["errors"] = self.errors
        return body


class InvalidProductIdError(ProductAPIError):
    """The identifier cannot be cast to a record id."""

    status_code = 400

    def __init__(self, product_id: str):
        super().__init__(f"Invalid product id: {product_id}")
        self.product_id = product_id


class InvalidQueryError(ProductAPIError):
    status_code = 400

    def __init__(self, param: str, value: str, reason: str = "must be a number"):
        super().__init__(f"Invalid query parameter '{param}': {reason}")
        self.param = param
        self.value = value


class ProductNotFoundError(ProductAPIError):
    status_code = 404
    message = "Product not found"


class StoreError(ProductAPIError):
    """The document store failed; ``detail`` carries the driver's text."""

    status_code = 500
    message = "Database error"
