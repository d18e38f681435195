"""Top-level settings model."""

from typing import ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field

from gitprompt.config._models._logging import LoggingConfig


class Settings(BaseModel):
    """gitprompt settings.

    Settings only influence diagnostics. The status line itself has no
    tunables so that prompt themes can rely on its exact shape.

    Attributes:
        logging: Logging configuration section.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Self:
        """Build settings from a nested dictionary.

        Args:
            data: Mapping shaped like the model, e.g. ``{"logging": {...}}``.

        Returns:
            Validated Settings instance.

        Raises:
            pydantic.ValidationError: If any value fails validation.
        """
        return cls.model_validate(data)
