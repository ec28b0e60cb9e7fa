from typing import ClassVar, FrozenSet

from pydantic import AliasChoices, AliasGenerator, BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


def _snake_or_camel(field_name: str) -> AliasChoices:
    return AliasChoices(field_name, to_camel(field_name))


def empty_as_none(v):
    # Empty form inputs are sent as empty strings
    if isinstance(v, str) and not v.strip():
        return None
    return v


class RecordSchema(BaseModel):
    """
    Base for every record schema

    Input accepts snake_case and the camelCase names the web forms send
    (customerName, engineerRemarks, ...). Output is always snake_case.
    Also reads straight from ORM rows, so the routes and the PDF service
    only ever see validated, typed records.
    """
    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=_snake_or_camel),
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class UpdateSchema(RecordSchema):
    """
    Base for partial updates

    Every field is optional so it can be left out, but an explicit null is
    only accepted for the fields listed in nullable_fields (nullable columns).
    """
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        nulls = sorted(
            name for name in self.model_fields_set
            if getattr(self, name) is None and name not in self.nullable_fields
        )
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self
