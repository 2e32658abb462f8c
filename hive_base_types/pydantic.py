"""Base pydantic classes used to define the Engine API and eth models."""

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Model = TypeVar("Model", bound=BaseModel)


class SerializationMixin:
    """Serialization defaults shared by every model sent over the wire."""

    def serialize(
        self,
        mode: Literal["json", "python"],
        by_alias: bool,
        exclude_none: bool = True,
    ) -> Any:
        """
        Serialize the model to the specified format with the given parameters.

        :param mode: 'json' only produces JSON serializable types, 'python' may
            contain python objects.
        :param by_alias: Whether to use aliases for field names.
        :param exclude_none: Whether to exclude fields with None values, default is True.
        """
        if not hasattr(self, "model_dump"):
            raise NotImplementedError(
                f"{self.__class__.__name__} does not have 'model_dump' method."
                "Are you sure you are using a Pydantic model?"
            )
        return self.model_dump(mode=mode, by_alias=by_alias, exclude_none=exclude_none)


class HiveBaseModel(BaseModel, SerializationMixin):
    """Base model for all models exchanged with the client under test."""

    pass


class CamelModel(HiveBaseModel):
    """
    A base model that converts field names to camel case when serializing.

    For example, the field name `head_block_hash` in a Python model will be represented
    as `headBlockHash` when it is serialized to json.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        frozen=True,
    )

    def copy(self: Model, **kwargs) -> Model:
        """Create a copy of the model with the updated fields that are validated."""
        return self.__class__(**(self.model_dump(exclude_unset=True) | kwargs))
