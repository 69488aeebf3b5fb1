"""Tests for capability descriptors and resource registration."""

import pytest
from pydantic import ValidationError
from sqlalchemy import Column, Integer, String

from api.products.products_model import Product
from api.suppliers.suppliers_model import Supplier
from config.database import Base
from services.resource.capabilities import CapabilityDescriptor, ColumnSpec, FilterSpec
from services.resource.registry import ResourceRegistry, default_uri, pluralize, registry


class ProductCategory(Base):
    __tablename__ = "test_product_categories"

    id = Column(Integer, primary_key=True)
    title = Column(String(80), nullable=False)
    secret_password = Column(String(128))


def test_pluralize():
    assert pluralize("product") == "products"
    assert pluralize("category") == "categories"
    assert pluralize("day") == "days"
    assert pluralize("box") == "boxes"
    assert pluralize("branch") == "branches"


def test_default_uri():
    assert default_uri(Product) == "products"
    assert default_uri(ProductCategory) == "product-categories"


def test_sample_resources_are_registered():
    assert registry.get("products").model is Product
    assert registry.get("suppliers").model is Supplier
    assert registry.get("products").filter_parameters == frozenset({"publication_status", "type", "active"})


class TestDescriptorValidation:
    def test_reserved_parameter(self):
        with pytest.raises(ValidationError):
            CapabilityDescriptor(filterable={"status": FilterSpec(parameter="page")})

    def test_duplicate_parameter(self):
        with pytest.raises(ValidationError):
            CapabilityDescriptor(filterable={
                "status": FilterSpec(parameter="state"),
                "state": FilterSpec(),
            })

    def test_unknown_operator(self):
        with pytest.raises(ValidationError):
            FilterSpec(operator="regexp")

    def test_bad_default_sort_direction(self):
        with pytest.raises(ValidationError):
            CapabilityDescriptor(default_sort=("name", "sideways"))

    def test_schema_groups_need_fields(self):
        with pytest.raises(ValidationError):
            CapabilityDescriptor(schema_template=[{"group": "Main"}])

    def test_allowed_values_become_strings(self):
        spec = FilterSpec(allowed_values=[1, True])
        assert spec.allowed_values == ("1", "True")


class TestSortableColumns:
    fallback = ("id", "created_at", "updated_at")
    implicit = ("id", "created_at")

    def test_nothing_declared_uses_fallback(self):
        assert CapabilityDescriptor().sortable_columns(self.fallback, self.implicit) == frozenset(self.fallback)

    def test_declared_list_and_columns_merge(self):
        descriptor = CapabilityDescriptor(
            sortable=("name",),
            columns=(ColumnSpec(field="price", label="Price", sortable=True), ColumnSpec(field="sku", label="SKU")),
        )
        assert descriptor.sortable_columns(self.fallback, self.implicit) == frozenset({"name", "price", "id", "created_at"})

    def test_limited_to_mapped_columns(self):
        mapped = registry.get("suppliers").mapped_columns

        assert "updated_at" not in mapped
        assert CapabilityDescriptor().sortable_columns(self.fallback, self.implicit, mapped) == frozenset({"id", "created_at"})


def test_searchable_from_flagged_columns():
    descriptor = CapabilityDescriptor(columns=(
        ColumnSpec(field="name", label="Name", search=True),
        ColumnSpec(field="sku", label="SKU"),
    ))
    assert descriptor.declared_searchable() == ["name"]
    assert CapabilityDescriptor(searchable=("sku",)).declared_searchable() == ["sku"]
    assert CapabilityDescriptor().declared_searchable() is None


class TestRegister:
    def test_defaults(self):
        resource = ResourceRegistry().register(ProductCategory)

        assert resource.uri == "product-categories"
        assert resource.name == "ProductCategory"
        assert resource.hidden_fields == ("secret_password",)
        assert resource.create_schema.__name__ == "ProductCategoryCreate"
        assert resource.update_schema.__name__ == "ProductCategoryUpdate"

    def test_explicit_options(self):
        resource = ResourceRegistry().register(
            ProductCategory, uri="categories", required_roles=["admin"], hidden_fields=[]
        )

        assert resource.uri == "categories"
        assert resource.required_roles == ("admin",)
        assert resource.hidden_fields == ()

    def test_descriptor_names_must_be_columns(self):
        with pytest.raises(ValueError, match="not a mapped column"):
            ResourceRegistry().register(ProductCategory, CapabilityDescriptor(searchable=("description",)))

    def test_resolver_filters_skip_column_check(self):
        descriptor = CapabilityDescriptor(filterable={"keyword": FilterSpec(resolver=lambda q, v: q)})
        resource = ResourceRegistry().register(ProductCategory, descriptor)
        assert resource.filter_parameters == frozenset({"keyword"})

    def test_uri_collision(self):
        resources = ResourceRegistry()
        resources.register(ProductCategory, uri="things")
        with pytest.raises(ValueError, match="already registered"):
            resources.register(Product, uri="things")

    def test_iteration(self):
        resources = ResourceRegistry()
        resources.register(ProductCategory)
        resources.register(Supplier)
        assert len(resources) == 2
        assert [r.name for r in resources] == ["ProductCategory", "Supplier"]
