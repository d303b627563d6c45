from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ChatExchange(BaseModel):
    question: str
    answer: str
    timestamp: datetime = Field(default_factory=datetime.now)


class ChatReply(BaseModel):
    answer: str
    training_id: Optional[int] = None


class TrainingFeedback(BaseModel):
    feedback: Literal["helpful", "not_helpful", "partially_helpful"]
    accuracy: Optional[int] = Field(default=None, ge=1, le=5, description="1-5 rating of the answer")
    suggestions: Optional[str] = None
