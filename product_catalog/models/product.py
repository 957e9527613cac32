from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pymongo import ASCENDING, DESCENDING

PRODUCTS_COLLECTION = "products"

# (keys, options) pairs passed to create_index on startup
PRODUCT_INDEXES = [
    ([("createdAt", DESCENDING)], {"name": "createdAt_desc"}),
    ([("category", ASCENDING)], {"name": "category_asc"}),
]

# Newest first; _id breaks ties between documents created in the same millisecond
LIST_SORT = [("createdAt", DESCENDING), ("_id", DESCENDING)]


def utcnow() -> datetime:
    # BSON dates carry milliseconds only
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def new_product_document(fields: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Build the document stored for a newly created product.

    A product document has the following keys:
        _id: ObjectId assigned by MongoDB on insert
        name: Product name
        description: Optional free text
        price: Product price (positive)
        category: Product category
        stock: Available quantity (non-negative, defaults to 0)
        releaseDate: Optional release timestamp
        createdAt: Timestamp when the product was created
        updatedAt: Timestamp when the product was last updated

    Args:
        fields: Validated product fields keyed by their stored names
        now: Creation timestamp (defaults to the current UTC time)

    Returns:
        Document ready for insert_one
    """
    now = now or utcnow()
    document = dict(fields)
    document.setdefault("stock", 0)
    document["createdAt"] = now
    document["updatedAt"] = now
    return document


def update_document(fields: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Build the $set update for a partial product update."""
    changes = dict(fields)
    changes["updatedAt"] = now or utcnow()
    return {"$set": changes}
