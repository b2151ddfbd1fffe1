class BoardError(Exception):
    """Base error for drawing board operations."""


class AnalysisError(BoardError):
    """An analysis round-trip ended without a usable answer."""

    # Display heading used when this error is surfaced as a result
    title = "Analysis Error"
    message = "The drawing could not be analyzed."


class NetworkError(AnalysisError):
    title = "Network Error"
    message = "An error occurred while analyzing the image."


class InterpretationError(AnalysisError):
    # Service answered but returned zero usable items
    title = "Interpretation Error"
    message = "Could not interpret the drawing. Please try again."


class MalformedResponseError(AnalysisError):
    title = "Response Error"
    message = "The service returned a response that could not be read."
