import math
from typing import Optional
from pydantic import BaseModel
from .schema import AnalysisResult

RATING_MIN = 0.0
RATING_MAX = 10.0

ANALYZING = AnalysisResult(
    expr="Analyzing...",
    result="Please wait while the AI processes your drawing.",
)


class ResultView(BaseModel):
    expr: str
    result: str
    rating: Optional[float] = None
    is_error: bool = False
    severity: Optional[str] = None  # good / moderate / critical
    label: Optional[str] = None
    title: str
    subtitle: str
    seq: int = 0


def clamp_rating(rating: float) -> float:
    if isinstance(rating, bool) or not isinstance(rating, (int, float)):
        raise ValueError(f"rating must be a number, got {rating!r}")
    if math.isnan(rating):
        raise ValueError("rating is NaN")
    return min(RATING_MAX, max(RATING_MIN, float(rating)))


def severity(rating: float) -> str:
    r = clamp_rating(rating)
    if r >= 7:
        return "good"
    if r >= 5:
        return "moderate"
    return "critical"


def label(rating: float) -> str:
    r = clamp_rating(rating)
    if r >= 9:
        return "Excellent"
    if r >= 7:
        return "Good"
    if r >= 5:
        return "Moderate"
    if r >= 3:
        return "Poor"
    return "Critical"


def present(result: Optional[AnalysisResult]) -> Optional[ResultView]:
    """Derives the display record for the result panel; None when nothing is shown."""
    if result is None:
        return None
    view = ResultView(
        expr=result.expr,
        result=result.result,
        rating=result.rating,
        is_error=result.is_error,
        title="Analysis Error" if result.is_error else "AI Analysis Result",
        subtitle="Something went wrong" if result.is_error else "Your drawing has been analyzed",
        seq=result.seq,
    )
    if result.rating is not None and not result.is_error:
        view.severity = severity(result.rating)
        view.label = label(result.rating)
    return view
