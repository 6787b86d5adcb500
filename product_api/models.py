# product_api/models.py
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .errors import ProductValidationError

# Field names travel camelCased on the wire and in the store ("inStock", "createdAt").
_schema_config = ConfigDict(
    alias_generator=to_camel,
    str_strip_whitespace=True,
    extra="ignore",
)


class ProductIn(BaseModel):
    model_config = _schema_config

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0, allow_inf_nan=False)
    category: str = Field(..., min_length=1)
    in_stock: bool = True
    quantity: int = Field(0, ge=0)


class ProductPatch(BaseModel):
    # every field optional, but an explicit null still fails the type check
    model_config = _schema_config

    name: str = Field(None, min_length=1, max_length=100)
    description: str = Field(None, min_length=1)
    price: float = Field(None, ge=0, allow_inf_nan=False)
    category: str = Field(None, min_length=1)
    in_stock: bool = None
    quantity: int = Field(None, ge=0)


class Product(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    name: str
    description: str
    price: float
    category: str
    in_stock: bool
    quantity: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Product":
        return cls.model_validate({**doc, "id": str(doc["_id"])})

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------
# Validation messages
# ---------------------------
_REQUIRED_MESSAGES = {
    "name": "Product name is required",
    "description": "Product description is required",
    "price": "Product price is required",
    "category": "Product category is required",
    "quantity": "Product quantity is required",
}

_CONSTRAINT_MESSAGES = {
    ("name", "string_too_long"): "Product name cannot be more than 100 characters",
    ("price", "greater_than_equal"): "Price cannot be negative",
    ("quantity", "greater_than_equal"): "Quantity cannot be negative",
}


def _field_error(err: Dict[str, Any]) -> Dict[str, str]:
    field = ".".join(str(part) for part in err["loc"]) or "body"
    kind = err["type"]
    missing = kind in ("missing", "string_too_short") or err.get("input", "") is None
    if missing and field in _REQUIRED_MESSAGES:
        message = _REQUIRED_MESSAGES[field]
    else:
        message = _CONSTRAINT_MESSAGES.get((field, kind), err["msg"])
    return {"field": field, "message": message}


def _run_schema(candidate: Any, partial: bool) -> Tuple[Optional[BaseModel], List[Dict[str, str]]]:
    if not isinstance(candidate, Mapping):
        return None, [{"field": "body", "message": "Request body must be a JSON object"}]
    schema = ProductPatch if partial else ProductIn
    try:
        return schema.model_validate(dict(candidate)), []
    except ValidationError as exc:
        return None, [_field_error(err) for err in exc.errors()]


def validate_product(candidate: Any, partial: bool = False) -> List[Dict[str, str]]:
    """
    Check a candidate product without touching the store.

    Returns a list of {"field", "message"} dicts; empty when the candidate is
    valid. With partial=True absent fields are allowed (update semantics).
    """
    _, errors = _run_schema(candidate, partial)
    return errors


def clean_product(candidate: Any, partial: bool = False) -> Dict[str, Any]:
    """
    Validate and normalise a candidate into store fields (camelCase keys,
    strings trimmed, defaults applied unless partial). Raises
    ProductValidationError with the per-field messages.
    """
    model, errors = _run_schema(candidate, partial)
    if errors:
        raise ProductValidationError(errors)
    return model.model_dump(by_alias=True, exclude_unset=partial)
