"""
Unit tests for Pydantic models.

This module tests the validation rules and wire-name serialization of the
request and response models used by the catalog and user services.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from service.models.input import (
    CategoryListParams,
    CreateCategoryRequest,
    CreateDealRequest,
    CreateProductRequest,
    CreateUserRequest,
    ImageUploadParams,
    ObjectIdPathParams,
    PaginationParams,
    ProductListParams,
    UpdateDealRequest,
    UpdateProductRequest,
    UpdateUserRequest,
    UserIdPathParams,
)
from service.models.output import HealthCheckOutput, PresignedUrlOutput, UserListOutput, UserOutput

CATEGORY_ID = "65f1c0ffee0ddba11deadbee"


class TestCreateProductRequest:
    """Test cases for CreateProductRequest model."""

    def test_valid_request_with_wire_names(self):
        request = CreateProductRequest.model_validate({
            "name": "  Wireless Mouse  ",
            "price": 19.999,
            "categoryId": CATEGORY_ID,
            "imageUrl": "https://cdn.example.com/mouse.png",
            "stock": 3,
        })

        assert request.name == "Wireless Mouse"
        assert request.price == 20.0
        assert request.category_id == CATEGORY_ID
        assert request.is_active is True

    def test_dump_uses_camel_case(self):
        request = CreateProductRequest(name="Keyboard", price=49.9)

        dumped = request.model_dump(by_alias=True)

        assert dumped["isActive"] is True
        assert dumped["categoryId"] is None
        assert "is_active" not in dumped

    @pytest.mark.parametrize("price", [0, -1, 1_000_000])
    def test_price_out_of_range(self, price):
        with pytest.raises(ValidationError) as exc_info:
            CreateProductRequest(name="Keyboard", price=price)

        assert "price" in str(exc_info.value)

    @pytest.mark.parametrize("price", [float("nan"), float("inf"), float("-inf")])
    def test_price_must_be_finite(self, price):
        with pytest.raises(ValidationError) as exc_info:
            CreateProductRequest.model_validate({"name": "Keyboard", "price": price})

        assert exc_info.value.errors()[0]["type"] == "finite_number"

    def test_name_too_short(self):
        with pytest.raises(ValidationError):
            CreateProductRequest(name="ab", price=1)

    def test_negative_stock(self):
        with pytest.raises(ValidationError):
            CreateProductRequest(name="Keyboard", price=1, stock=-1)

    def test_invalid_category_id(self):
        with pytest.raises(ValidationError):
            CreateProductRequest(name="Keyboard", price=1, category_id="123")

    def test_invalid_image_url(self):
        with pytest.raises(ValidationError):
            CreateProductRequest(name="Keyboard", price=1, image_url="ftp://example.com/a.png")


class TestUpdateProductRequest:
    """Test cases for partial product updates."""

    def test_changes_only_contain_sent_fields(self):
        request = UpdateProductRequest.model_validate({"price": 5, "isActive": False})

        assert request.changes() == {"price": 5.0, "isActive": False}

    def test_explicit_null_is_not_a_change(self):
        request = UpdateProductRequest.model_validate({"description": None, "stock": 0})

        assert request.changes() == {"stock": 0}

    def test_changes_by_attribute_name(self):
        request = UpdateProductRequest.model_validate({"imageUrl": "https://cdn.example.com/a.png"})

        assert request.changes(by_alias=False) == {"image_url": "https://cdn.example.com/a.png"}

    def test_price_rules_apply(self):
        with pytest.raises(ValidationError):
            UpdateProductRequest(price=0)

    def test_update_price_must_be_finite(self):
        with pytest.raises(ValidationError):
            UpdateProductRequest(price=float("nan"))


class TestCategoryModels:
    """Test cases for category request models."""

    def test_defaults(self):
        request = CreateCategoryRequest(name="Electronics")

        assert request.display_order == 0
        assert request.is_active is True
        assert request.parent_category_id is None

    def test_parent_must_be_object_id(self):
        with pytest.raises(ValidationError):
            CreateCategoryRequest(name="Phones", parent_category_id="parent")

    def test_list_type(self):
        assert CategoryListParams.model_validate({"type": "top"}).type == "top"
        assert CategoryListParams.model_validate({}).type == "all"
        with pytest.raises(ValidationError):
            CategoryListParams.model_validate({"type": "best"})


class TestDealModels:
    """Test cases for deal request models."""

    def test_valid_deal(self):
        request = CreateDealRequest.model_validate({
            "productId": CATEGORY_ID,
            "discount": 15,
            "startDate": "2024-01-01T00:00:00Z",
            "endDate": "2024-02-01T00:00:00Z",
        })

        assert request.discount == 15
        assert request.end_date > request.start_date

    def test_end_before_start(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateDealRequest(
                product_id=CATEGORY_ID,
                discount=10,
                start_date=datetime(2024, 2, 1, tzinfo=timezone.utc),
                end_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
            )

        assert "endDate must be after startDate" in str(exc_info.value)

    @pytest.mark.parametrize("discount", [-1, 101])
    def test_discount_out_of_range(self, discount):
        with pytest.raises(ValidationError):
            UpdateDealRequest(discount=discount)


class TestUserModels:
    """Test cases for user request models."""

    def test_email_normalization(self):
        request = CreateUserRequest.model_validate({
            "email": "JANE.DOE@EXAMPLE.COM",
            "firstName": "Jane",
            "lastName": "Doe",
        })

        assert request.email == "jane.doe@example.com"
        assert request.first_name == "Jane"

    def test_invalid_email_format(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateUserRequest(email="not-an-email", first_name="Jane", last_name="Doe")

        assert "Invalid email format" in str(exc_info.value)

    def test_empty_names_rejected(self):
        with pytest.raises(ValidationError):
            CreateUserRequest(email="jane@example.com", first_name="   ", last_name="Doe")

    def test_update_email_is_optional(self):
        assert UpdateUserRequest(last_name="Smith").changes() == {"lastName": "Smith"}


class TestParameterModels:
    """Test cases for query and path parameter models."""

    def test_pagination_offset(self):
        params = PaginationParams.model_validate({"page": "3", "pageSize": "10"})

        assert params.offset == 20

    @pytest.mark.parametrize("query", [{"page": "0"}, {"pageSize": "0"}, {"pageSize": "101"}])
    def test_pagination_bounds(self, query):
        with pytest.raises(ValidationError):
            PaginationParams.model_validate(query)

    def test_product_filters_from_query_strings(self):
        params = ProductListParams.model_validate({
            "categoryId": CATEGORY_ID,
            "isActive": "true",
            "minPrice": "10",
            "maxPrice": "20.5",
        })

        assert params.is_active is True
        assert params.min_price == 10.0
        assert params.max_price == 20.5

    def test_inverted_price_range(self):
        with pytest.raises(ValidationError) as exc_info:
            ProductListParams.model_validate({"minPrice": "30", "maxPrice": "10"})

        assert "minPrice cannot be greater than maxPrice" in str(exc_info.value)

    @pytest.mark.parametrize("field", ["minPrice", "maxPrice"])
    def test_price_filters_must_be_finite(self, field):
        with pytest.raises(ValidationError):
            ProductListParams.model_validate({field: "nan"})

    def test_object_id_path(self):
        assert ObjectIdPathParams(id=CATEGORY_ID).id == CATEGORY_ID
        with pytest.raises(ValidationError):
            ObjectIdPathParams(id="zzzzzzzzzzzzzzzzzzzzzzzz")

    def test_user_id_path(self):
        assert UserIdPathParams.model_validate({"id": "42"}).id == 42
        with pytest.raises(ValidationError):
            UserIdPathParams.model_validate({"id": "0"})

    @pytest.mark.parametrize("file_name", ["photo.JPG", "banner.webp", "icon.png"])
    def test_allowed_image_files(self, file_name):
        assert ImageUploadParams(file=file_name).file == file_name

    @pytest.mark.parametrize("file_name", ["archive.zip", "noextension", "../etc/passwd.png", "a\\b.png"])
    def test_rejected_image_files(self, file_name):
        with pytest.raises(ValidationError):
            ImageUploadParams(file=file_name)


class TestOutputModels:
    """Test cases for response models."""

    def test_user_output_from_attributes(self):
        class Row:
            id = 7
            email = "jane@example.com"
            first_name = "Jane"
            last_name = "Doe"
            password_hash = "secret"
            created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
            updated_at = datetime(2024, 1, 2, tzinfo=timezone.utc)

        data = UserOutput.model_validate(Row()).to_response()

        assert data["firstName"] == "Jane"
        assert data["createdAt"] == "2024-01-01T00:00:00Z"
        assert "passwordHash" not in data

    def test_user_list_output(self):
        data = UserListOutput(users=[], total=0, page=1, page_size=20).to_response()

        assert data == {"users": [], "total": 0, "page": 1, "pageSize": 20}

    def test_presigned_url_output(self):
        data = PresignedUrlOutput(file_name="k-a.png", url="https://s3/put", expires_in="24 hours").to_response()

        assert data == {"fileName": "k-a.png", "url": "https://s3/put", "expiresIn": "24 hours"}

    def test_health_check_output(self):
        data = HealthCheckOutput(
            service="catalog-services",
            status="healthy",
            version="1.0.0",
            environment="test",
            timestamp=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        ).to_response()

        assert data["status"] == "healthy"
        assert data["timestamp"] == "2024-01-01T12:00:00Z"
