import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument

from product_catalog.models.product import (
    LIST_SORT,
    PRODUCT_INDEXES,
    new_product_document,
    update_document,
)
from product_catalog.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service class for Product CRUD operations against a MongoDB collection.

    Every method is a single driver call: no retries, no transactions and
    no optimistic concurrency check. Concurrent updates of the same product
    are last-write-wins.
    """

    def __init__(self, collection):
        self.collection = collection

    async def ensure_indexes(self) -> None:
        """Create the indexes used for listing and category lookups."""
        for keys, options in PRODUCT_INDEXES:
            await self.collection.create_index(keys, **options)

    async def list_all(self) -> List[Dict[str, Any]]:
        """
        Get every product, newest first.

        Returns:
            List of product documents (empty if there are none)
        """
        cursor = self.collection.find({}, sort=LIST_SORT)
        return [doc async for doc in cursor]

    async def create(self, product_data: ProductCreate) -> Dict[str, Any]:
        """
        Create a new product.

        Args:
            product_data: Validated product creation data

        Returns:
            The document as read back from the store, including its generated
            _id and timestamps
        """
        fields = product_data.model_dump(by_alias=True, exclude_none=True)
        document = new_product_document(fields)
        result = await self.collection.insert_one(document)
        logger.info(f"Product {result.inserted_id} created")
        return await self.collection.find_one({"_id": result.inserted_id})

    async def get_by_id(self, product_id: str) -> Optional[Dict[str, Any]]:
        """Get a product by ID, or None if it does not exist."""
        return await self.collection.find_one({"_id": ObjectId(product_id)})

    async def update(self, product_id: str, product_data: ProductUpdate) -> Optional[Dict[str, Any]]:
        """
        Update an existing product.

        Only the fields present in the payload are written; everything else
        on the stored document is left as it was.

        Args:
            product_id: ID of product to update
            product_data: Update data (unset fields are left alone)

        Returns:
            Updated document or None if not found
        """
        fields = product_data.model_dump(by_alias=True, exclude_unset=True)
        product = await self.collection.find_one_and_update(
            {"_id": ObjectId(product_id)},
            update_document(fields),
            return_document=ReturnDocument.AFTER,
        )
        if product is not None:
            logger.info(f"Product {product_id} updated ({', '.join(sorted(fields)) or 'no fields'})")
        return product

    async def delete(self, product_id: str) -> bool:
        """
        Delete a product.

        Args:
            product_id: ID of product to delete

        Returns:
            True if deleted, False if not found
        """
        product = await self.collection.find_one_and_delete({"_id": ObjectId(product_id)})
        if product is None:
            return False
        logger.info(f"Product {product_id} deleted")
        return True
