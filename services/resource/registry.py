"""
Resource registration.

Each model is registered once at import time together with its capability
descriptor; the registry is read-only while requests are being served.
"""
import logging
import re
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict
from sqlalchemy import inspect as sa_inspect

from services.resource.capabilities import CapabilityDescriptor
from services.resource.payloads import build_payload_model

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def pluralize(word: str) -> str:
    if re.search(r"[^aeiou]y$", word):
        return word[:-1] + "ies"
    if re.search(r"(s|x|z|ch|sh)$", word):
        return word + "es"
    return word + "s"


def default_uri(model) -> str:
    """``ProductCategory`` -> ``product-categories``"""
    kebab = _CAMEL_BOUNDARY.sub("-", model.__name__).lower()
    return pluralize(kebab)


class RegisteredResource(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    model: Any
    descriptor: CapabilityDescriptor
    uri: str
    required_roles: Tuple[str, ...] = ()
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    hidden_fields: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.model.__name__

    @property
    def mapped_columns(self) -> frozenset:
        return frozenset(sa_inspect(self.model).columns.keys())

    @property
    def filter_parameters(self) -> frozenset:
        return frozenset(
            self.descriptor.parameter_for(field) for field in (self.descriptor.filterable or {})
        )


def _check_descriptor(model, descriptor: CapabilityDescriptor) -> None:
    """Every name the descriptor hands to the query builder must be a mapped column"""
    mapped = set(sa_inspect(model).columns.keys())
    names: List[Tuple[str, str]] = []
    for field, spec in (descriptor.filterable or {}).items():
        if spec.resolver is None:
            names.append(("filterable", descriptor.column_for(field)))
    names.extend(("searchable", field) for field in (descriptor.declared_searchable() or ()))
    names.extend(("sortable", field) for field in (descriptor.sortable or ()))
    names.extend(("sortable column", c.field) for c in (descriptor.columns or ()) if c.sortable)
    if descriptor.default_sort:
        names.append(("default_sort", descriptor.default_sort[0]))

    for role, name in names:
        if name not in mapped:
            raise ValueError(f"{model.__name__}: {role} field {name!r} is not a mapped column")


class ResourceRegistry:
    def __init__(self):
        self._resources: Dict[str, RegisteredResource] = {}

    def register(
        self,
        model,
        descriptor: Optional[CapabilityDescriptor] = None,
        uri: Optional[str] = None,
        required_roles: Optional[List[str]] = None,
        create_schema: Optional[Type[BaseModel]] = None,
        update_schema: Optional[Type[BaseModel]] = None,
        hidden_fields: Optional[List[str]] = None,
    ) -> RegisteredResource:
        descriptor = descriptor or CapabilityDescriptor()
        _check_descriptor(model, descriptor)

        uri = uri or default_uri(model)
        if uri in self._resources and self._resources[uri].model is not model:
            raise ValueError(f"URI {uri!r} is already registered for {self._resources[uri].name}")

        if hidden_fields is None:
            hidden_fields = [key for key in sa_inspect(model).columns.keys() if "password" in key.lower()]

        resource = RegisteredResource(
            model=model,
            descriptor=descriptor,
            uri=uri,
            required_roles=tuple(required_roles or ()),
            create_schema=create_schema or build_payload_model(model),
            update_schema=update_schema or build_payload_model(model, partial=True),
            hidden_fields=tuple(hidden_fields),
        )
        self._resources[uri] = resource
        logger.debug("API resource registered: %s at /%s", resource.name, uri)
        return resource

    def get(self, uri: str) -> Optional[RegisteredResource]:
        return self._resources.get(uri)

    def __iter__(self) -> Iterator[RegisteredResource]:
        return iter(list(self._resources.values()))

    def __len__(self):
        return len(self._resources)


registry = ResourceRegistry()
