"""
MongoDB implementation of product persistence.

Documents are stored with camelCase keys matching the API; ``categoryId`` is
kept as an ObjectId so that it can be joined against ``categories``.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from service.dal.documents import optional_object_id, serialize_document, serialize_documents, utc_now
from service.handlers.utils.observability import logger, tracer

PRODUCTS_COLLECTION = 'products'


class ProductRepository:
    """Data access for the ``products`` collection."""

    def __init__(self, database: Database) -> None:
        self.collection = database[PRODUCTS_COLLECTION]

    @tracer.capture_method
    def create(self, product: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a product.

        Args:
            product: Validated product fields with wire names

        Returns:
            The stored product, serialized
        """
        now = utc_now()
        document = {
            **product,
            'categoryId': optional_object_id(product.get('categoryId')),
            'createdAt': now,
            'updatedAt': now,
        }
        result = self.collection.insert_one(document)
        document['_id'] = result.inserted_id
        logger.info('Product created', extra={'product_id': str(result.inserted_id)})
        return serialize_document(document)

    @tracer.capture_method
    def list(
        self,
        offset: int,
        limit: int,
        category_id: Optional[str] = None,
        is_active: Optional[bool] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> List[Dict[str, Any]]:
        """Products matching every given filter, newest first."""
        query: Dict[str, Any] = {}
        if category_id is not None:
            query['categoryId'] = ObjectId(category_id)
        if is_active is not None:
            query['isActive'] = is_active
        price_range: Dict[str, float] = {}
        if min_price is not None:
            price_range['$gte'] = min_price
        if max_price is not None:
            price_range['$lte'] = max_price
        if price_range:
            query['price'] = price_range

        cursor = self.collection.find(query).sort('createdAt', DESCENDING).skip(offset).limit(limit)
        return serialize_documents(cursor)

    @tracer.capture_method
    def get(self, product_id: ObjectId) -> Optional[Dict[str, Any]]:
        document = self.collection.find_one({'_id': product_id})
        return serialize_document(document) if document else None

    def get_many(self, product_ids: List[ObjectId]) -> List[Dict[str, Any]]:
        """Products with the given ids, in the order of ``product_ids``; missing ids are skipped."""
        if not product_ids:
            return []
        by_id = {document['_id']: document for document in self.collection.find({'_id': {'$in': product_ids}})}
        return [serialize_document(by_id[product_id]) for product_id in product_ids if product_id in by_id]

    @tracer.capture_method
    def update(self, product_id: ObjectId, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply a partial update; returns the updated product or None when it does not exist."""
        update_fields = dict(changes)
        if 'categoryId' in update_fields:
            update_fields['categoryId'] = optional_object_id(update_fields['categoryId'])
        update_fields['updatedAt'] = utc_now()

        document = self.collection.find_one_and_update(
            {'_id': product_id},
            {'$set': update_fields},
            return_document=ReturnDocument.AFTER,
        )
        return serialize_document(document) if document else None

    @tracer.capture_method
    def delete(self, product_id: ObjectId) -> Optional[Dict[str, Any]]:
        """Delete a product; returns the removed raw document or None when it did not exist."""
        return self.collection.find_one_and_delete({'_id': product_id})

    def clear_category(self, category_id: ObjectId) -> int:
        """Detach every product from a removed category; returns how many were touched."""
        result = self.collection.update_many(
            {'categoryId': category_id},
            {'$set': {'categoryId': None, 'updatedAt': utc_now()}},
        )
        return result.modified_count
