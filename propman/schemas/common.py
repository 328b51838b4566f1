from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    # Stored records and API payloads use camelCase keys (zipCode, rentAmount, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

FROZEN = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
