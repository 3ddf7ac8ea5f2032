"""Error taxonomy shared by the engine and the serving layer."""

from __future__ import annotations


class ContractProxyError(Exception):
    """Base class for every error raised by contract-proxy."""


class DirectoryUnavailable(ContractProxyError):
    def __init__(self, path: str, role: str = "external") -> None:
        self.path = path
        self.role = role
        super().__init__(f"{role.capitalize()} directory not found: {path}")


class ExtractionSkipped(ContractProxyError):
    """A single file could not be scanned for type shapes."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Skipped {path}: {reason}")


class TypeNotFound(ContractProxyError):
    def __init__(self, path: str, type_name: str) -> None:
        self.path = path
        self.type_name = type_name
        super().__init__(f"No TypeScript interface matches the URL: {path}")


class MockGenerationFailure(ContractProxyError):
    """The mock generator failed for a resolved type. The original error is kept as ``__cause__``."""

    def __init__(self, type_name: str, detail: str) -> None:
        self.type_name = type_name
        self.detail = detail
        super().__init__(f"Failed to generate mock for {type_name}: {detail}")


class UpstreamUnreachable(ContractProxyError):
    def __init__(self, target: str, detail: str) -> None:
        self.target = target
        self.detail = detail
        super().__init__(f"Failed to reach the target backend {target}: {detail}")


class InvalidConfiguration(ContractProxyError):
    def __init__(self, option: str, value: str, expected: str) -> None:
        self.option = option
        self.value = value
        self.expected = expected
        super().__init__(f"Invalid {option}: {value!r}. Expected {expected}")
