"""
Unit tests for request validation helpers.
"""

import json

import pytest
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent

from service.handlers.utils.errors import RequestValidationError
from service.handlers.utils.responses import error_response
from service.handlers.utils.validation import (
    INVALID_JSON_MESSAGE,
    PATH_PARAMS_REQUIRED_MESSAGE,
    QUERY_PARAMS_REQUIRED_MESSAGE,
    parse_json_body,
    parse_or_raise,
    path_parameters,
    query_parameters,
    validate,
    validate_or_response,
    validate_path_params,
    validate_query_params,
)
from service.models.input import CreateProductRequest, ImageUploadParams, ObjectIdPathParams, PaginationParams


class TestValidate:
    """Test cases for return-style validation."""

    def test_valid_data(self):
        result = validate(PaginationParams, {"page": "2", "pageSize": "5"})

        assert result.is_valid
        assert result.data.page == 2
        assert result.data.page_size == 5
        assert result.errors == []

    def test_errors_are_flattened(self):
        result = validate(CreateProductRequest, {"name": "ab", "price": 10})

        assert not result.is_valid
        assert result.data is None
        assert result.errors[0]["field"] == "name"
        assert result.errors[0]["code"] == "string_too_short"
        assert set(result.errors[0]) == {"field", "message", "code"}

    def test_non_object_input_is_rejected(self):
        result = validate(PaginationParams, [])

        assert not result.is_valid
        assert result.errors[0]["code"] == "model_type"
        assert result.errors[0]["field"] == ""

    def test_validate_or_response_returns_none_when_valid(self):
        assert validate_or_response(ObjectIdPathParams, {"id": "65f1c0ffee0ddba11deadbee"}) is None

    def test_validate_or_response_returns_400(self):
        response = validate_or_response(ObjectIdPathParams, {"id": "not-an-id"})

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["data"]["errors"][0]["field"] == "id"


class TestParseOrRaise:
    """Test cases for raise-style validation."""

    def test_returns_model(self):
        params = parse_or_raise(ImageUploadParams, {"file": "phone.png"})

        assert params.file == "phone.png"

    def test_raises_with_errors(self):
        with pytest.raises(RequestValidationError) as exc_info:
            parse_or_raise(ImageUploadParams, {"file": "script.exe"})

        assert exc_info.value.errors[0]["field"] == "file"

    def test_missing_query_params_default_to_empty(self):
        params = validate_query_params(PaginationParams, None)

        assert params.page == 1
        assert params.page_size == 20

    def test_required_query_params(self):
        with pytest.raises(RequestValidationError) as exc_info:
            validate_query_params(ImageUploadParams, None, required=True)

        assert exc_info.value.message == QUERY_PARAMS_REQUIRED_MESSAGE

    def test_missing_path_params(self):
        with pytest.raises(RequestValidationError) as exc_info:
            validate_path_params(ObjectIdPathParams, None)

        assert exc_info.value.message == PATH_PARAMS_REQUIRED_MESSAGE


class TestValidationConventions:
    """Both validation conventions must render the same 400 response."""

    @pytest.mark.parametrize("data", [
        {"name": "", "price": -10},
        {"name": "Keyboard", "price": 1, "categoryId": "123", "stock": -1},
        [],
    ])
    def test_same_body_either_way(self, data):
        returned = validate_or_response(CreateProductRequest, data)
        with pytest.raises(RequestValidationError) as exc_info:
            parse_or_raise(CreateProductRequest, data)
        raised = error_response(exc_info.value)

        assert returned["statusCode"] == raised["statusCode"] == 400
        assert returned["body"] == raised["body"]

    def test_errors_keep_field_order(self):
        response = validate_or_response(CreateProductRequest, {"name": "", "price": -10})

        errors = json.loads(response["body"])["data"]["errors"]
        assert [error["field"] for error in errors] == ["name", "price"]
        assert all(set(error) == {"field", "message", "code"} for error in errors)


class TestEventAccessors:
    """Test cases for reading the body and parameters of a proxy event."""

    def test_parse_json_body(self, make_event):
        event = APIGatewayProxyEvent(make_event(body={"name": "Mouse"}))

        assert parse_json_body(event) == {"name": "Mouse"}

    @pytest.mark.parametrize("body", [None, ""])
    def test_empty_body_is_empty_object(self, make_event, body):
        event = APIGatewayProxyEvent(make_event(body=body))

        assert parse_json_body(event) == {}

    def test_malformed_body(self, make_event):
        event = APIGatewayProxyEvent(make_event(body="{not json"))

        with pytest.raises(RequestValidationError) as exc_info:
            parse_json_body(event)

        assert exc_info.value.errors == [
            {"field": "body", "message": INVALID_JSON_MESSAGE, "code": "invalid_json"},
        ]

    def test_absent_parameters_are_none(self, make_event):
        event = APIGatewayProxyEvent(make_event())

        assert path_parameters(event) is None
        assert query_parameters(event) is None

    def test_parameters_as_sent(self, make_event):
        event = APIGatewayProxyEvent(make_event(path_parameters={"id": "1"}, query={"page": "3"}))

        assert path_parameters(event) == {"id": "1"}
        assert query_parameters(event) == {"page": "3"}
