"""Settings errors — one failure type, tagged by kind."""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """What went wrong while changing simulator settings."""

    INCOMPATIBLE_CONFIGURATION = "incompatible_configuration"
    TEMPLATE_UNAVAILABLE = "template_unavailable"
    DESTINATION_ALREADY_EXISTS = "destination_already_exists"
    CONVERTER_UNAVAILABLE = "converter_unavailable"
    CONVERSION_FAILED = "conversion_failed"
    COMMAND_EXECUTION_FAILED = "command_execution_failed"
    PREFERENCES_UNAVAILABLE = "preferences_unavailable"


class SettingsError(Exception):
    """
    Fatal failure of a single settings operation.

    ``kind`` tells callers which step failed; ``cause`` and ``exit_code`` are
    filled in when an underlying exception or converter exit status exists.
    """

    kind: ErrorKind = ErrorKind.COMMAND_EXECUTION_FAILED

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.exit_code = exit_code


class IncompatibleConfiguration(SettingsError):
    kind = ErrorKind.INCOMPATIBLE_CONFIGURATION

    def __init__(self, device: str, variation: str, target_version: str) -> None:
        super().__init__(
            f"{device} ({variation}) incompatible with SDK {target_version}"
        )
        self.device = device
        self.variation = variation
        self.target_version = target_version


class TemplateUnavailable(SettingsError):
    kind = ErrorKind.TEMPLATE_UNAVAILABLE


class DestinationAlreadyExists(SettingsError):
    kind = ErrorKind.DESTINATION_ALREADY_EXISTS


class ConverterUnavailable(SettingsError):
    kind = ErrorKind.CONVERTER_UNAVAILABLE


class ConversionFailed(SettingsError):
    kind = ErrorKind.CONVERSION_FAILED


class CommandExecutionFailed(SettingsError):
    kind = ErrorKind.COMMAND_EXECUTION_FAILED


class PreferencesUnavailable(SettingsError):
    kind = ErrorKind.PREFERENCES_UNAVAILABLE
