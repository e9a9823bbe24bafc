"""Base error for failures that reach the user."""


class GasolinerasError(Exception):
    """Error carrying a message that can be shown to the user as-is."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
