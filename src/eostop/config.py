"""Configuration for the eostop view model.

Settings are read from EOSTOP_* environment variables via pydantic-settings;
keyword arguments take precedence over the environment.
"""

from enum import Enum

from babel import Locale, UnknownLocaleError
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

UNIT_LENGTHS = ("long", "short", "narrow")


class ErrorCategory(Enum):
    """User-displayable error categories, keyed by their message id."""

    VALIDATION_FAILED = "error.validationFailed"
    ACCOUNT_NOT_FOUND = "error.accountNotFound"
    CONNECTION_DOWN = "error.networkConnectionIsDown"
    GENERIC = "error.generic"


class ErrorMessages(BaseModel):
    """Message table for each error category.

    The defaults are English; a localization layer supplies its own table.
    """

    model_config = ConfigDict(frozen=True)

    validation_failed: str = "Please enter a valid account name."
    account_not_found: str = "Account not found."
    connection_down: str = "The network connection appears to be down."
    generic: str = "Something went wrong. Please try again."

    def for_category(self, category: ErrorCategory) -> str:
        """Get the message for an error category."""
        return {
            ErrorCategory.VALIDATION_FAILED: self.validation_failed,
            ErrorCategory.ACCOUNT_NOT_FOUND: self.account_not_found,
            ErrorCategory.CONNECTION_DOWN: self.connection_down,
            ErrorCategory.GENERIC: self.generic,
        }[category]


class ViewConfig(BaseSettings):
    """
    Settings for an AccountViewModel.

    Attributes:
        placeholder: Shown for every field with no data or after an error.
        locale: Locale identifier used for number and unit formatting.
        unit_length: CLDR unit style, one of "long", "short" or "narrow".
        discard_stale_results: Drop the results of lookups superseded by a
            newer search. The superseded request still runs to completion.
            When False, overlapping lookups race and whichever resolves last
            wins.
        messages: Error message table.
    """

    model_config = SettingsConfigDict(
        env_prefix="EOSTOP_",
        extra="ignore",
        frozen=True,
    )

    placeholder: str = "-"
    locale: str = "en_US"
    unit_length: str = "short"
    discard_stale_results: bool = False
    messages: ErrorMessages = Field(default_factory=ErrorMessages)

    @field_validator("unit_length", mode="before")
    @classmethod
    def validate_unit_length(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip().lower()
        if v not in UNIT_LENGTHS:
            raise ValueError(f"unit_length must be one of {', '.join(UNIT_LENGTHS)}, got {v!r}")
        return v

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        try:
            Locale.parse(v)
        except (UnknownLocaleError, ValueError) as exc:
            raise ValueError(f"Unknown locale: {v!r}") from exc
        return v
