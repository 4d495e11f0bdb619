class ModCompatError(Exception):
    """Base class for errors raised by modcompat."""


class InvalidVersionFormat(ModCompatError, ValueError):
    def __init__(self, text: object) -> None:
        super().__init__(f"Invalid version format: {text!r}")
        self.text = text


class VersionFileNotFound(ModCompatError):
    """None of the candidate version files exist."""


class VersionReadFailure(ModCompatError):
    """The version file exists but its first line is missing or unparsable."""
