# products_resource.py
from services.resource.capabilities import CapabilityDescriptor, ColumnSpec, FilterSpec
from services.resource.registry import registry
from api.products.products_model import Product, ProductType, PublicationStatus

STATUS_VALUES = [status.value for status in PublicationStatus]
TYPE_VALUES = [product_type.value for product_type in ProductType]

product_descriptor = CapabilityDescriptor(
    filterable={
        "publication_status": FilterSpec(allowed_values=STATUS_VALUES, label="Status"),
        "type": FilterSpec(allowed_values=TYPE_VALUES, label="Type"),
        "active": FilterSpec(allowed_values=["true", "false"], label="Active"),
    },
    searchable=("name", "sku", "brand", "description"),
    sortable=("name", "sku", "price", "stock_quantity", "updated_at"),
    default_sort=("created_at", "desc"),
    columns=(
        ColumnSpec(field="id", label="ID", sortable=True, clickable=True),
        ColumnSpec(field="name", label="Name", sortable=True, clickable=True, search=True),
        ColumnSpec(field="sku", label="SKU", sortable=True, search=True),
        ColumnSpec(field="type", label="Type"),
        ColumnSpec(field="publication_status", label="Status"),
        ColumnSpec(field="price", label="Price", sortable=True, format="currency", align="right"),
        ColumnSpec(field="stock_quantity", label="Stock", sortable=True, format="number", align="right"),
        ColumnSpec(field="active", label="Active", format="boolean", align="center"),
    ),
    schema_template=[
        {
            "group": "Basic Information",
            "fields": [
                {"field": "name", "label": "Name", "type": "text", "required": True,
                 "placeholder": "Enter product name", "maxLength": 255},
                {"field": "sku", "label": "SKU", "type": "text", "required": True,
                 "placeholder": "Enter a unique SKU", "maxLength": 64},
                {"field": "brand", "label": "Brand", "type": "text", "required": False,
                 "placeholder": "Enter brand"},
                {"field": "description", "label": "Description", "type": "textarea", "required": False,
                 "placeholder": "Enter description"},
            ],
        },
        {
            "group": "Classification",
            "fields": [
                {"field": "type", "label": "Type", "type": "select", "required": True,
                 "options": [{"value": v, "label": v.capitalize()} for v in TYPE_VALUES]},
                {"field": "publication_status", "label": "Status", "type": "select", "required": True,
                 "options": [{"value": v, "label": v.capitalize()} for v in STATUS_VALUES]},
                {"field": "active", "label": "Active", "type": "checkbox", "required": False},
            ],
        },
        {
            "group": "Pricing & Inventory",
            "fields": [
                {"field": "price", "label": "Price", "type": "decimal", "required": True,
                 "prefix": "₹", "step": "0.01", "min": "0"},
                {"field": "cost", "label": "Cost", "type": "decimal", "required": False,
                 "prefix": "₹", "step": "0.01", "min": "0"},
                {"field": "stock_quantity", "label": "Stock Quantity", "type": "number", "required": True,
                 "min": "0"},
                {"field": "weight", "label": "Weight", "type": "decimal", "required": False,
                 "suffix": "kg", "step": "0.001", "min": "0"},
            ],
        },
    ],
)

products = registry.register(Product, product_descriptor)
