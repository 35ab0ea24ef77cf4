from __future__ import annotations


class FactError(RuntimeError):
    """Base class for failures that are recorded in ``lastUpdateStatus``."""

    code: int = 500


class InputNotFound(FactError):
    code = 404


class ExtractionError(FactError):
    code = 422


class MarkerNotFound(ExtractionError):
    pass


class UnexpectedToken(ExtractionError):
    pass


class UnbalancedBraces(ExtractionError):
    pass


class ParseError(FactError):
    code = 422


class LiteralSyntaxError(ParseError):
    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at position {position}")
        self.position = position


class StructuralParseError(ParseError):
    pass


class InternalFault(FactError):
    code = 500
