"""Tests for the auth dependencies, envelopes and storage failure handling."""

import json
import jwt
import pytest
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.exc import OperationalError

from middlewares.auth_middleware import auth_middleware
from middlewares.role_middleware import role_middleware
from services.resource import pagination
from services.resource.errors import (
    ForbiddenError,
    InvalidParametersError,
    ResourceNotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from services.resource.notifications import NotificationBag, info, warning
from services.resource.responses import code_for_status, error_envelope, error_response


def bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestAuthMiddleware:
    def test_missing_credentials(self):
        with pytest.raises(UnauthorizedError, match="Authentication required"):
            auth_middleware(None)

    def test_sub_claim_is_accepted(self, make_token):
        user = auth_middleware(bearer(make_token(id=None, sub="42", roles=None)))
        assert user == {"id": "42", "name": "Test User", "roles": []}

    def test_wrong_secret(self):
        token = jwt.encode({"id": 1}, "some-other-secret-entirely", algorithm="HS256")
        with pytest.raises(UnauthorizedError, match="Invalid token"):
            auth_middleware(bearer(token))


class TestRoleMiddleware:
    def test_no_required_roles(self):
        user = {"id": 1, "roles": []}
        assert role_middleware()(user) is user

    def test_matching_role(self):
        user = {"id": 1, "roles": ["editor"]}
        assert role_middleware(["admin", "editor"])(user) is user

    def test_missing_role(self):
        with pytest.raises(ForbiddenError) as excinfo:
            role_middleware(["admin"])({"id": 1, "roles": ["viewer"]})
        assert excinfo.value.details == {"required_roles": ["admin"]}


class TestEnvelopes:
    @pytest.mark.parametrize("error, status", [
        (ResourceNotFoundError(), 404),
        (ValidationFailedError(details={"name": ["required"]}), 422),
        (UnauthorizedError(), 401),
        (ForbiddenError(), 403),
        (InvalidParametersError(), 400),
    ])
    def test_status_mapping(self, error, status):
        response = error_response(error)
        body = json.loads(response.body)

        assert response.status_code == status
        assert body["success"] is False
        assert body["error"]["code"] == error.code
        assert body["error"]["message"] == body["message"]
        assert "data" not in body

    def test_details_are_always_a_container(self):
        assert error_envelope("NOT_FOUND", "gone", "text")["error"]["details"] == {}
        assert error_envelope("VALIDATION_FAILED", "bad", [{"x": 1}])["error"]["details"] == [{"x": 1}]

    def test_unknown_status_is_internal(self):
        assert code_for_status(418) == "INTERNAL_SERVER_ERROR"
        assert code_for_status(404) == "NOT_FOUND"

    def test_notification_bag_appends(self):
        bag = NotificationBag()
        assert bag.collect((5, [warning("first", field="page")])) == 5
        bag.add(info("second"))

        assert bag.to_list() == [
            {"type": "warning", "message": "first", "field": "page"},
            {"type": "info", "message": "second"},
        ]


def test_storage_failure_is_generic(client, auth_headers, make_products, monkeypatch, caplog):
    make_products(2)

    def failing_count(query):
        raise OperationalError("SELECT count(*) FROM products", {}, Exception("no such table: products_v2"))

    monkeypatch.setattr(pagination, "count_items", failing_count)

    response = client.get("/api/v1/products", headers=auth_headers)

    assert response.status_code == 500
    body = response.json()
    assert body["error"]["code"] == "INTERNAL_SERVER_ERROR"
    assert body["error"]["details"] == {}
    assert "products_v2" not in response.text
    assert "products_v2" in caplog.text
