# product_api/filters.py
"""
Translate listing query parameters into a ProductQuery.

All parameters arrive as optional strings. The resulting query renders
itself as a MongoDB filter/sort (for MongoProductStore) and can also test
a plain document (for MemoryProductStore), so both backends agree on
which records match.
"""
import math
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel

from .errors import InvalidQueryError

SORTABLE_FIELDS = (
    "name",
    "description",
    "price",
    "category",
    "inStock",
    "quantity",
    "createdAt",
    "updatedAt",
)
DEFAULT_SORT_FIELD = "createdAt"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# BSON encodes skip as int64
MAX_SKIP = 2 ** 63 - 1


class Bounds(BaseModel):
    """Inclusive numeric range; either end may be open."""

    gte: Optional[float] = None
    lte: Optional[float] = None

    def to_mongo(self) -> Dict[str, float]:
        out = {}
        if self.gte is not None:
            out["$gte"] = self.gte
        if self.lte is not None:
            out["$lte"] = self.lte
        return out

    def contains(self, value: float) -> bool:
        if self.gte is not None and value < self.gte:
            return False
        if self.lte is not None and value > self.lte:
            return False
        return True


class ProductQuery(BaseModel):
    category: Optional[str] = None
    in_stock: Optional[bool] = None
    price: Optional[Bounds] = None
    quantity: Optional[Bounds] = None
    name: Optional[str] = None
    description: Optional[str] = None
    sort_by: str = DEFAULT_SORT_FIELD
    descending: bool = True
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def direction(self) -> int:
        return -1 if self.descending else 1

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)

    def to_mongo(self) -> Dict[str, Any]:
        filter_doc: Dict[str, Any] = {}
        if self.category is not None:
            filter_doc["category"] = self.category
        if self.in_stock is not None:
            filter_doc["inStock"] = self.in_stock
        if self.price is not None:
            filter_doc["price"] = self.price.to_mongo()
        if self.quantity is not None:
            filter_doc["quantity"] = self.quantity.to_mongo()
        if self.name is not None:
            filter_doc["name"] = {"$regex": re.escape(self.name), "$options": "i"}
        if self.description is not None:
            filter_doc["description"] = {"$regex": re.escape(self.description), "$options": "i"}
        return filter_doc

    def sort_spec(self) -> List[Tuple[str, int]]:
        # _id breaks ties so consecutive pages never overlap
        return [(self.sort_by, self.direction), ("_id", self.direction)]

    def matches(self, doc: Mapping[str, Any]) -> bool:
        if self.category is not None and doc.get("category") != self.category:
            return False
        if self.in_stock is not None and doc.get("inStock") != self.in_stock:
            return False
        if self.price is not None and not self.price.contains(doc.get("price", 0)):
            return False
        if self.quantity is not None and not self.quantity.contains(doc.get("quantity", 0)):
            return False
        if self.name is not None and self.name.lower() not in doc.get("name", "").lower():
            return False
        if self.description is not None and self.description.lower() not in doc.get("description", "").lower():
            return False
        return True


# ---------------------------
# Parameter parsing
# ---------------------------
def _param(params: Mapping[str, Optional[str]], key: str) -> Optional[str]:
    value = params.get(key)
    if value is None or value == "":
        return None
    return value


def _number(params: Mapping[str, Optional[str]], key: str) -> Optional[float]:
    raw = _param(params, key)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise InvalidQueryError(key, raw)
    if not math.isfinite(value):
        raise InvalidQueryError(key, raw)
    return value


def _bounds(params: Mapping[str, Optional[str]], low_key: str, high_key: str) -> Optional[Bounds]:
    low = _number(params, low_key)
    high = _number(params, high_key)
    if low is None and high is None:
        return None
    return Bounds(gte=low, lte=high)


def _positive_int(raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= 1 else default


def build_product_query(params: Mapping[str, Optional[str]]) -> ProductQuery:
    """
    Build the listing query from raw query-string values.

    Empty strings count as absent. Numeric range bounds must parse as finite
    numbers and sortBy must name a product field (InvalidQueryError otherwise);
    page and limit fall back to their defaults instead of failing, as does a
    page whose offset cannot be encoded.
    """
    in_stock = _param(params, "inStock")

    sort_by = _param(params, "sortBy") or DEFAULT_SORT_FIELD
    if sort_by not in SORTABLE_FIELDS:
        raise InvalidQueryError("sortBy", sort_by, reason=f"must be one of {', '.join(SORTABLE_FIELDS)}")

    limit = min(_positive_int(_param(params, "limit"), DEFAULT_LIMIT), MAX_LIMIT)
    page = _positive_int(_param(params, "page"), DEFAULT_PAGE)
    if (page - 1) * limit > MAX_SKIP:
        page = DEFAULT_PAGE

    return ProductQuery(
        category=_param(params, "category"),
        in_stock=None if in_stock is None else in_stock == "true",
        price=_bounds(params, "minPrice", "maxPrice"),
        quantity=_bounds(params, "minQuantity", "maxQuantity"),
        name=_param(params, "name"),
        description=_param(params, "description"),
        sort_by=sort_by,
        descending=_param(params, "sortOrder") != "asc",
        page=page,
        limit=limit,
    )
