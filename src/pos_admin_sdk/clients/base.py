from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Mapping, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ClientValidationError, ValidationIssue
from ..http_client import HttpClient
from ..models import ApiModel

ReadT = TypeVar("ReadT", bound=ApiModel)
ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class BaseClient:
    http: HttpClient
    access_token: str | None = None

    def _auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _request(self, method: str, path: str, **kwargs):
        headers = kwargs.pop("headers", {})
        merged = {**self._auth_headers(), **headers}
        return self.http.request(method, path, headers=merged, **kwargs)


def coerce_model(payload: ModelT | Mapping[str, Any], model_type: type[ModelT]) -> ModelT:
    if isinstance(payload, model_type):
        return payload
    try:
        return model_type.model_validate(payload)
    except PydanticValidationError as exc:
        issues = [
            ValidationIssue(
                row_index=None,
                field=".".join(str(part) for part in error.get("loc", ("payload",))),
                reason=error.get("msg", "Invalid value"),
            )
            for error in exc.errors()
        ]
        raise ClientValidationError(issues or [ValidationIssue(None, "payload", "Invalid payload")]) from exc


@dataclass
class ResourceClient(BaseClient, Generic[ReadT]):
    """CRUD wrapper over one backend collection.

    Subclasses declare the collection path and DTO types; every mutation drops
    cached GETs for ``base_path`` plus ``related_paths``.
    """

    base_path: ClassVar[str] = ""
    module: ClassVar[str] = "resource"
    read_model: ClassVar[type[ApiModel]] = ApiModel
    create_model: ClassVar[type[ApiModel] | None] = None
    update_model: ClassVar[type[ApiModel] | None] = None
    related_paths: ClassVar[tuple[str, ...]] = ()

    def get_all(self, params: dict[str, Any] | None = None) -> list[ReadT]:
        data = self._request(
            "GET",
            self.base_path,
            params=params or None,
            module=self.module,
            operation="list",
        )
        return self._parse_list(data)

    def get_by_id(self, resource_id: int | str) -> ReadT:
        data = self._request(
            "GET",
            f"{self.base_path}/{resource_id}",
            module=self.module,
            operation="get",
        )
        return self._parse_one(data)

    def create(self, payload: ApiModel | Mapping[str, Any]) -> ReadT | None:
        body = self._dump(payload, self.create_model)
        data = self._mutate("POST", self.base_path, body, operation="create")
        return self._parse_optional(data)

    def update(self, resource_id: int | str, payload: ApiModel | Mapping[str, Any]) -> ReadT | None:
        body = self._dump(payload, self.update_model)
        data = self._mutate("PUT", f"{self.base_path}/{resource_id}", body, operation="update")
        return self._parse_optional(data)

    def delete(self, resource_id: int | str) -> None:
        self._mutate("DELETE", f"{self.base_path}/{resource_id}", None, operation="delete")

    def deactivate(self, resource_id: int | str) -> None:
        self._mutate("PATCH", f"{self.base_path}/{resource_id}/deactivate", None, operation="deactivate")

    def set_active(self, resource_id: int | str, is_active: bool) -> None:
        self._mutate(
            "PATCH",
            f"{self.base_path}/{resource_id}/status",
            None,
            operation="set_active",
            params={"isActive": "true" if is_active else "false"},
        )

    def _invalidation_paths(self) -> list[str]:
        return [self.base_path, *self.related_paths]

    def _mutate(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None,
        *,
        operation: str,
        params: dict[str, Any] | None = None,
    ):
        return self._request(
            method,
            path,
            json_body=body,
            params=params,
            module=self.module,
            operation=operation,
            invalidate_paths=self._invalidation_paths(),
        )

    @staticmethod
    def _dump(payload: ApiModel | Mapping[str, Any], model_type: type[ApiModel] | None) -> dict[str, Any]:
        if model_type is not None:
            payload = coerce_model(payload, model_type)
        if isinstance(payload, ApiModel):
            return payload.to_payload()
        return dict(payload)

    def _parse_list(self, data: Any, model_type: type[ApiModel] | None = None) -> list[ReadT]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError(f"Expected {self.module} list response to be a JSON array")
        model = model_type or self.read_model
        return [model.model_validate(row) for row in data]

    def _parse_one(self, data: Any) -> ReadT:
        if not isinstance(data, dict):
            raise ValueError(f"Expected {self.module} response to be a JSON object")
        return self.read_model.model_validate(data)

    def _parse_optional(self, data: Any) -> ReadT | None:
        if isinstance(data, dict):
            return self.read_model.model_validate(data)
        return None
