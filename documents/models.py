from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from errors import InvalidRequest


class PathValueRequest(BaseModel):
    """
    Body of POST (append) and PATCH (set field):
      { "path": "weeks.0.event.comments", "value": <any JSON> }

    `value: null` is a real value; only an absent key counts as missing.
    """

    model_config = ConfigDict(extra="ignore")

    path: str | None = None
    value: Any = None

    def require(self) -> tuple[str, Any]:
        if not self.path or "value" not in self.model_fields_set:
            raise InvalidRequest("Missing path or value")
        return self.path, self.value


class RemoveByIdRequest(BaseModel):
    """
    Body of DELETE:
      { "path": "resources", "id": "r1" }
    """

    model_config = ConfigDict(extra="ignore")

    path: str | None = None
    id: str | int | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _reject_bool(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("id must be a string or an integer")
        return v

    def require(self) -> tuple[str, str | int]:
        if not self.path or self.id is None or self.id == "":
            raise InvalidRequest("Missing path or id")
        return self.path, self.id


class MutationResponse(BaseModel):
    success: bool = True
    data: Any = None


def parse_body(model: type[BaseModel], body: Any) -> Any:
    if not isinstance(body, Mapping):
        raise InvalidRequest("Request body must be a JSON object")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise InvalidRequest(f"Invalid request body: {e.errors()[0].get('msg', 'invalid')}") from e
