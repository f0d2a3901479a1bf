"""Per-category editable field registry."""

from __future__ import annotations

from pydantic import BaseModel

from flowise_core.schemas.parameters import ParameterSpec


class CategoryFields(BaseModel):
    category: str
    fields: list[ParameterSpec] = []
    # field name -> legacy data key read when the field itself is absent
    value_aliases: dict[str, str] = {}

    def get_field(self, name: str) -> ParameterSpec | None:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None


CATEGORY_FIELD_REGISTRY: dict[str, CategoryFields] = {}


def register_category_fields(entry: CategoryFields) -> CategoryFields:
    CATEGORY_FIELD_REGISTRY[entry.category] = entry
    return entry


def get_category_fields(category: str) -> CategoryFields | None:
    return CATEGORY_FIELD_REGISTRY.get(category)
