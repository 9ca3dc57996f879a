"""Exception hierarchy for Shadowcast."""


class ShadowcastError(Exception):
    """Base exception for all Shadowcast errors."""

    pass


class AlphaGridError(ShadowcastError):
    """Alpha grid is missing, empty or does not match its declared size."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid alpha grid: {reason}")


class PoseError(ShadowcastError):
    """Sprite pose or contour parameters are out of range."""

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid value for '{field}': {value!r}")


class GeometryError(ShadowcastError):
    """Errors in geometric calculations."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
