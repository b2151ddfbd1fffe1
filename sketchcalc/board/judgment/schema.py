from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


class AnalysisRequest(BaseModel):
    image: str  # PNG data URL
    dict_of_vars: dict = {}


class AnalysisResponseItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    expr: str
    result: str
    assign: bool = False
    rating: Optional[float] = Field(default=None, alias="mental_health_rating", allow_inf_nan=False)


class AnalysisResponse(BaseModel):
    data: List[AnalysisResponseItem] = []


class AnalysisResult(BaseModel):
    """What the board currently shows for the last analysis."""
    expr: str
    result: str
    rating: Optional[float] = None
    is_error: bool = False
    seq: int = 0
