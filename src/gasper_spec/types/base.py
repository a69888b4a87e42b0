"""Strict pydantic base models shared by every value in the specification."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base model that serializes field names in camel case.

    `current_justified_checkpoint` becomes `currentJustifiedCheckpoint` in JSON,
    which keeps dumped states and blocks readable as test vectors.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )


class StrictBaseModel(CamelModel):
    """
    Immutable, strictly validated model.

    Instances are frozen: every state change produces a new value.
    """

    model_config = CamelModel.model_config | {
        "extra": "forbid",
        "frozen": True,
        "strict": True,
    }
