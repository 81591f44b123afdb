"""Business logic for the category tree and its product listings."""

from typing import Any, Dict, List

from bson import ObjectId

from service.dal.category_repository import CategoryRepository
from service.dal.documents import serialize_document, to_object_id
from service.dal.product_repository import ProductRepository
from service.handlers.utils.errors import ConflictError, NotFoundError
from service.handlers.utils.observability import logger, tracer
from service.models.constants import TOP_CATEGORIES_LIMIT
from service.models.input import CategoryListParams, CreateCategoryRequest, PaginationParams, UpdateCategoryRequest

CATEGORY_NOT_FOUND_MESSAGE = 'Categoría no encontrada'
PARENT_NOT_FOUND_MESSAGE = 'Categoría padre no encontrada'
HAS_SUBCATEGORIES_MESSAGE = 'La categoría tiene subcategorías y no puede eliminarse'


class CategoryService:
    def __init__(self, categories: CategoryRepository, products: ProductRepository) -> None:
        self.categories = categories
        self.products = products

    @tracer.capture_method
    def list_categories(self, params: CategoryListParams) -> List[Dict[str, Any]]:
        if params.type == 'top':
            return self.categories.list_top(TOP_CATEGORIES_LIMIT)
        return self.categories.list_roots(offset=params.offset, limit=params.page_size)

    @tracer.capture_method
    def get_category(self, category_id: str, pagination: PaginationParams) -> Dict[str, Any]:
        """
        Category with one page of its products expanded.

        ``totalProducts`` counts every product id the category lists.
        """
        category = self.categories.find(to_object_id(category_id, CATEGORY_NOT_FOUND_MESSAGE))
        if category is None:
            raise NotFoundError(CATEGORY_NOT_FOUND_MESSAGE)

        product_ids: List[ObjectId] = category.get('products', [])
        page_ids = product_ids[pagination.offset:pagination.offset + pagination.page_size]
        result = serialize_document(category)
        result['products'] = self.products.get_many(page_ids)
        result['totalProducts'] = len(product_ids)
        return result

    @tracer.capture_method
    def create_category(self, request: CreateCategoryRequest) -> Dict[str, Any]:
        """
        Create a category, linking it under its parent when one is given.

        Raises:
            NotFoundError: If the parent category does not exist
        """
        parent_id = ObjectId(request.parent_category_id) if request.parent_category_id else None
        if parent_id is not None and not self.categories.exists(parent_id):
            raise NotFoundError(PARENT_NOT_FOUND_MESSAGE)

        category = self.categories.create(request.model_dump(by_alias=True))
        if parent_id is not None:
            self.categories.add_subcategory(parent_id, ObjectId(category['id']))
        return category

    @tracer.capture_method
    def update_category(self, category_id: str, request: UpdateCategoryRequest) -> Dict[str, Any]:
        updated = self.categories.update(to_object_id(category_id, CATEGORY_NOT_FOUND_MESSAGE), request.changes())
        if updated is None:
            raise NotFoundError(CATEGORY_NOT_FOUND_MESSAGE)
        return updated

    @tracer.capture_method
    def delete_category(self, category_id: str) -> None:
        """
        Delete a leaf category.

        Raises:
            NotFoundError: If the category does not exist
            ConflictError: If the category still has sub-categories
        """
        oid = to_object_id(category_id, CATEGORY_NOT_FOUND_MESSAGE)
        category = self.categories.find(oid)
        if category is None:
            raise NotFoundError(CATEGORY_NOT_FOUND_MESSAGE)
        if category.get('subCategories'):
            raise ConflictError(HAS_SUBCATEGORIES_MESSAGE)

        if not self.categories.delete(oid):
            raise NotFoundError(CATEGORY_NOT_FOUND_MESSAGE)
        if category.get('parentCategoryId') is not None:
            self.categories.remove_subcategory(category['parentCategoryId'], oid)
        detached = self.products.clear_category(oid)
        logger.info('Category deleted', extra={'category_id': category_id, 'detached_products': detached})
