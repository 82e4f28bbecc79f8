from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UpdateRequest(CamelModel):
    """Partial update; only fields the caller actually sent are applied."""

    def present_fields(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}


class OkResponse(BaseModel):
    ok: bool = True
