from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Backend DTOs are camelCase; attributes stay snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_backend(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
