"""
Business logic for products.

A product may belong to one category; the category's ``products`` list is
kept in step whenever a product is created, re-categorized or deleted.
"""

from typing import Any, Dict, List

from bson import ObjectId

from service.dal.category_repository import CategoryRepository
from service.dal.documents import to_object_id
from service.dal.product_repository import ProductRepository
from service.handlers.utils.errors import NotFoundError
from service.handlers.utils.observability import logger, tracer
from service.models.input import CreateProductRequest, ProductListParams, UpdateProductRequest

PRODUCT_NOT_FOUND_MESSAGE = 'Producto no encontrado'
CATEGORY_NOT_FOUND_MESSAGE = 'Categoría no encontrada'


class ProductService:
    def __init__(self, products: ProductRepository, categories: CategoryRepository) -> None:
        self.products = products
        self.categories = categories

    @tracer.capture_method
    def list_products(self, params: ProductListParams) -> List[Dict[str, Any]]:
        return self.products.list(
            offset=params.offset,
            limit=params.page_size,
            category_id=params.category_id,
            is_active=params.is_active,
            min_price=params.min_price,
            max_price=params.max_price,
        )

    @tracer.capture_method
    def get_product(self, product_id: str) -> Dict[str, Any]:
        product = self.products.get(to_object_id(product_id, PRODUCT_NOT_FOUND_MESSAGE))
        if product is None:
            raise NotFoundError(PRODUCT_NOT_FOUND_MESSAGE)
        return product

    @tracer.capture_method
    def create_product(self, request: CreateProductRequest) -> Dict[str, Any]:
        """
        Create a product and register it in its category.

        Raises:
            NotFoundError: If the referenced category does not exist
        """
        category_id = self._existing_category(request.category_id)
        product = self.products.create(request.model_dump(by_alias=True))
        if category_id is not None:
            self.categories.add_product(category_id, ObjectId(product['id']))
        return product

    @tracer.capture_method
    def update_product(self, product_id: str, request: UpdateProductRequest) -> Dict[str, Any]:
        oid = to_object_id(product_id, PRODUCT_NOT_FOUND_MESSAGE)
        current = self.products.get(oid)
        if current is None:
            raise NotFoundError(PRODUCT_NOT_FOUND_MESSAGE)

        changes = request.changes()
        new_category = self._existing_category(changes.get('categoryId'))
        updated = self.products.update(oid, changes)
        if updated is None:
            # Deleted concurrently
            raise NotFoundError(PRODUCT_NOT_FOUND_MESSAGE)

        old_category = current.get('categoryId')
        if new_category is not None and str(new_category) != old_category:
            if old_category:
                self.categories.remove_product(ObjectId(old_category), oid)
            self.categories.add_product(new_category, oid)
            logger.info('Product moved to another category', extra={'product_id': product_id})
        return updated

    @tracer.capture_method
    def delete_product(self, product_id: str) -> None:
        oid = to_object_id(product_id, PRODUCT_NOT_FOUND_MESSAGE)
        deleted = self.products.delete(oid)
        if deleted is None:
            raise NotFoundError(PRODUCT_NOT_FOUND_MESSAGE)
        if deleted.get('categoryId') is not None:
            self.categories.remove_product(deleted['categoryId'], oid)

    def _existing_category(self, category_id: str | None) -> ObjectId | None:
        if category_id is None:
            return None
        oid = ObjectId(category_id)
        if not self.categories.exists(oid):
            raise NotFoundError(CATEGORY_NOT_FOUND_MESSAGE)
        return oid
