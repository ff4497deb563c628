"""
app/repositories/chatbot_repository.py

Purpose: Persistence for chatbot conversations and price predictions
"""

from typing import Any, Dict, List, Optional

from app.db.mongo import CHATBOT_CONVERSATIONS, PREDICTIONS
from app.repositories.base import BaseRepository, to_object_id, with_error_handling


class ConversationRepository(BaseRepository):
    collection_name = CHATBOT_CONVERSATIONS
    reference_fields = ("user_id",)

    @with_error_handling
    async def find_by_user(self, user_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"user_id": to_object_id(user_id)})


class PredictionRepository(BaseRepository):
    collection_name = PREDICTIONS
    reference_fields = ("conversation_id",)

    @with_error_handling
    async def find_by_conversation(self, conversation_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"conversation_id": to_object_id(conversation_id)})
