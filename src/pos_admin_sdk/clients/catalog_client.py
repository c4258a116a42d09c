from __future__ import annotations

from typing import Any, Mapping

from ..models import ApiModel
from ..models_catalog import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    ProductCreate,
    ProductRead,
    ProductUnitConversionCreate,
    ProductUnitConversionRead,
    ProductUnitConversionUpdate,
    ProductUpdate,
    UnitCreate,
    UnitRead,
    UnitUpdate,
)
from .base import ResourceClient, coerce_model


class _IdInBodyMixin:
    """PUT {base}/{dto.id} where the id also travels in the body."""

    update_model: type[ApiModel]

    def update_record(self, payload: ApiModel | Mapping[str, Any]):
        model = coerce_model(payload, self.update_model)
        return self.update(model.id, model)  # type: ignore[attr-defined]


class ProductsClient(_IdInBodyMixin, ResourceClient[ProductRead]):
    base_path = "/product"
    module = "products"
    read_model = ProductRead
    create_model = ProductCreate
    update_model = ProductUpdate
    related_paths = ("/InventoryTransaction",)


class CategoriesClient(_IdInBodyMixin, ResourceClient[CategoryRead]):
    base_path = "/category"
    module = "categories"
    read_model = CategoryRead
    create_model = CategoryCreate
    update_model = CategoryUpdate
    related_paths = ("/product",)


class UnitsClient(_IdInBodyMixin, ResourceClient[UnitRead]):
    base_path = "/units"
    module = "units"
    read_model = UnitRead
    create_model = UnitCreate
    update_model = UnitUpdate
    related_paths = ("/product",)


class ProductUnitConversionsClient(_IdInBodyMixin, ResourceClient[ProductUnitConversionRead]):
    base_path = "/ProductUnitConversion"
    module = "unit_conversions"
    read_model = ProductUnitConversionRead
    create_model = ProductUnitConversionCreate
    update_model = ProductUnitConversionUpdate

    def get_by_product_id(self, product_id: int) -> list[ProductUnitConversionRead]:
        data = self._request(
            "GET",
            f"{self.base_path}/by-product/{product_id}",
            module=self.module,
            operation="list_by_product",
        )
        return self._parse_list(data)
