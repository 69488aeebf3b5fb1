# suppliers_resource.py
# No declarations: search, schema and sorting are all inferred from the model
from services.resource.registry import registry
from api.suppliers.suppliers_model import Supplier

suppliers = registry.register(Supplier)
