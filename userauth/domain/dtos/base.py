"""Base class for input DTOs.

Input DTOs are Pydantic models that accept both ``snake_case`` and
``camelCase`` keys (``repeat_password`` / ``repeatPassword``) and convert any
Pydantic validation failure into a `DTOValidationError` with one entry per
offending field.
"""

from typing import Any, Dict, List, Mapping, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from userauth.core.exceptions import DTOValidationError

DTO = TypeVar("DTO", bound="BaseDTO")


def format_validation_errors(exc: PydanticValidationError) -> List[Dict[str, str]]:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        message = error.get("msg", "Invalid value")
        # custom validators raise ValueError("...") which pydantic prefixes
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": ".".join(location) or "__root__", "message": message})
    return errors


class BaseDTO(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @classmethod
    def validate_data(cls: Type[DTO], data: Mapping[str, Any]) -> DTO:
        """Validates raw input and returns the DTO.

        Raises:
            DTOValidationError: If any field fails validation.
        """
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as exc:
            raise DTOValidationError(format_validation_errors(exc)) from exc
