from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model for wire records.

    Python attributes are snake_case; JSON keys are camelCase, matching the
    payloads the frontend sends and stores.  Either form is accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
