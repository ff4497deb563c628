"""
app/schemas/chatbot.py

Purpose: Request bodies for /chatbot
"""

from typing import Any, Dict, Optional

from pydantic import Field

from app.schemas.common import ObjectIdStr, RequestModel


class ConversationCreate(RequestModel):
    user_id: ObjectIdStr
    message_text: str = Field(..., min_length=1)


class ConversationUpdate(RequestModel):
    message_text: str = Field(..., min_length=1)


class PredictionCreate(RequestModel):
    conversation_id: ObjectIdStr
    user_inputs: Dict[str, Any] = Field(default_factory=dict)
    prediction_result: Dict[str, Any] = Field(default_factory=dict)


class PredictionUpdate(RequestModel):
    user_inputs: Optional[Dict[str, Any]] = None
    prediction_result: Optional[Dict[str, Any]] = None


class ChatbotQuestion(RequestModel):
    question: str = Field(..., min_length=1, max_length=2000)
