"""
MongoDB implementation of category persistence.

Categories form a tree: a child stores ``parentCategoryId`` and its parent
lists the child in ``subCategories``. Product membership is kept in the
category's ``products`` array.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.database import Database

from service.dal.documents import optional_object_id, serialize_document, serialize_documents, utc_now
from service.handlers.utils.observability import logger, tracer

CATEGORIES_COLLECTION = 'categories'


class CategoryRepository:
    """Data access for the ``categories`` collection."""

    def __init__(self, database: Database) -> None:
        self.collection = database[CATEGORIES_COLLECTION]

    @tracer.capture_method
    def create(self, category: Dict[str, Any]) -> Dict[str, Any]:
        now = utc_now()
        document = {
            **category,
            'parentCategoryId': optional_object_id(category.get('parentCategoryId')),
            'subCategories': [],
            'products': [],
            'createdAt': now,
            'updatedAt': now,
        }
        result = self.collection.insert_one(document)
        document['_id'] = result.inserted_id
        logger.info('Category created', extra={'category_id': str(result.inserted_id)})
        return serialize_document(document)

    @tracer.capture_method
    def list_roots(self, offset: int, limit: int) -> List[Dict[str, Any]]:
        """Root categories by display order, each with its direct sub-categories expanded."""
        roots = list(
            self.collection.find({'parentCategoryId': None})
            .sort('displayOrder', ASCENDING)
            .skip(offset)
            .limit(limit)
        )
        child_ids = [child_id for root in roots for child_id in root.get('subCategories', [])]
        children = {
            child['_id']: child
            for child in self.collection.find({'_id': {'$in': child_ids}})
        } if child_ids else {}

        for root in roots:
            root['subCategories'] = [
                children[child_id] for child_id in root.get('subCategories', []) if child_id in children
            ]
        return serialize_documents(roots)

    @tracer.capture_method
    def list_top(self, limit: int) -> List[Dict[str, Any]]:
        """Sub-categories with the highest display order."""
        cursor = (
            self.collection.find({'parentCategoryId': {'$ne': None}})
            .sort('displayOrder', DESCENDING)
            .limit(limit)
        )
        return serialize_documents(cursor)

    def find(self, category_id: ObjectId) -> Optional[Dict[str, Any]]:
        """Raw category document, ids left as ObjectIds."""
        return self.collection.find_one({'_id': category_id})

    def exists(self, category_id: ObjectId) -> bool:
        return self.collection.find_one({'_id': category_id}, {'_id': 1}) is not None

    @tracer.capture_method
    def update(self, category_id: ObjectId, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        document = self.collection.find_one_and_update(
            {'_id': category_id},
            {'$set': {**changes, 'updatedAt': utc_now()}},
            return_document=ReturnDocument.AFTER,
        )
        return serialize_document(document) if document else None

    @tracer.capture_method
    def delete(self, category_id: ObjectId) -> bool:
        return self.collection.delete_one({'_id': category_id}).deleted_count == 1

    def add_subcategory(self, parent_id: ObjectId, child_id: ObjectId) -> bool:
        return self._add_to_set(parent_id, 'subCategories', child_id)

    def remove_subcategory(self, parent_id: ObjectId, child_id: ObjectId) -> bool:
        return self._pull(parent_id, 'subCategories', child_id)

    def add_product(self, category_id: ObjectId, product_id: ObjectId) -> bool:
        return self._add_to_set(category_id, 'products', product_id)

    def remove_product(self, category_id: ObjectId, product_id: ObjectId) -> bool:
        return self._pull(category_id, 'products', product_id)

    def _add_to_set(self, category_id: ObjectId, field: str, item_id: ObjectId) -> bool:
        result = self.collection.update_one(
            {'_id': category_id},
            {'$addToSet': {field: item_id}, '$set': {'updatedAt': utc_now()}},
        )
        return result.matched_count == 1

    def _pull(self, category_id: ObjectId, field: str, item_id: ObjectId) -> bool:
        result = self.collection.update_one(
            {'_id': category_id},
            {'$pull': {field: item_id}, '$set': {'updatedAt': utc_now()}},
        )
        return result.matched_count == 1
