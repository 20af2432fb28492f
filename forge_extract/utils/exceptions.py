"""
Exception hierarchy for forge-extract

Every fatal condition in the pipeline has its own class and numeric code.
The pipeline driver catches ForgeExtractError at stage boundaries; anything
else is a bug and propagates.
"""

from typing import Any, Dict


class ErrorCodes:
    """Numeric error codes, grouped by pipeline stage"""

    # Toolchain (1xxx)
    TOOLCHAIN_MISSING = 1001
    TOOLCHAIN_INSTALL_FAILED = 1002
    BUILD_FAILED = 1003

    # Input (2xxx)
    DIRECTORY_NOT_FOUND = 2001
    CONTRACT_FILE_NOT_FOUND = 2002
    INPUT_MISSING = 2003

    # Artifact (3xxx)
    ARTIFACT_NOT_FOUND = 3001
    ARTIFACT_FIELDS_MISSING = 3002

    # Output (4xxx)
    OUTPUT_WRITE_FAILED = 4001

    # Configuration (5xxx)
    CONFIG_INVALID = 5001


class ForgeExtractError(Exception):
    """Base exception class for forge-extract"""

    default_code = 1000

    def __init__(self, message: str, code: int = None, **details):
        self.message = message
        self.code = code if code is not None else self.default_code
        self.details: Dict[str, Any] = dict(details)
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


class ToolchainMissingError(ForgeExtractError):
    """forge could not be found"""
    default_code = ErrorCodes.TOOLCHAIN_MISSING


class ToolchainInstallError(ForgeExtractError):
    """Automated Foundry install failed"""
    default_code = ErrorCodes.TOOLCHAIN_INSTALL_FAILED


class BuildFailedError(ForgeExtractError):
    """forge build exited non-zero"""
    default_code = ErrorCodes.BUILD_FAILED

    def __init__(self, message: str, returncode: int = None, **details):
        super().__init__(message, returncode=returncode, **details)
        self.returncode = returncode


class InputError(ForgeExtractError):
    """A required value was neither passed as a flag nor prompted for"""
    default_code = ErrorCodes.INPUT_MISSING


class DirectoryNotFoundError(ForgeExtractError):
    default_code = ErrorCodes.DIRECTORY_NOT_FOUND


class ContractFileNotFoundError(ForgeExtractError):
    default_code = ErrorCodes.CONTRACT_FILE_NOT_FOUND


class ArtifactNotFoundError(ForgeExtractError):
    default_code = ErrorCodes.ARTIFACT_NOT_FOUND


class ArtifactFieldsMissingError(ForgeExtractError):
    default_code = ErrorCodes.ARTIFACT_FIELDS_MISSING


class OutputWriteError(ForgeExtractError):
    default_code = ErrorCodes.OUTPUT_WRITE_FAILED


class ConfigurationError(ForgeExtractError):
    """Invalid configuration file or override"""
    default_code = ErrorCodes.CONFIG_INVALID

    def __init__(self, message: str, config_file: str = None, **details):
        if config_file is not None:
            details["config_file"] = config_file
        super().__init__(message, **details)
