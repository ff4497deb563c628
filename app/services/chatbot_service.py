"""
app/services/chatbot_service.py

Purpose: Sales assistant chatbot

- Conversation and prediction records (CRUD)
- get_response: answers questions about recent orders through Gemini
"""

import json
from typing import Any, Dict, List

from app.core.logging import get_logger
from app.models.enums import OrderStatus
from app.repositories.chatbot_repository import ConversationRepository, PredictionRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.user_repository import UserRepository
from app.services.cache_service import CacheService
from app.services.llm_service import LLMService

logger = get_logger(__name__)

NO_ORDER_DATA = "There is no order data in the database to analyze."
RECENT_ORDER_LIMIT = 50

PROMPT_TEMPLATE = """You are an expert sales analyst assistant. Analyze the data and answer questions clearly and concisely.

ORDER DATA:
{orders}

STATISTICS:
- Total Orders: {total_orders}
- Total Revenue: {total_revenue:.2f}
- Average Order Value: {avg_order_value:.2f}
- Confirmed Orders: {confirmed_orders}
- Pending Orders: {pending_orders}
- Cancelled Orders: {cancelled_orders}

USER QUESTION: {question}

INSTRUCTIONS:
- Provide specific numbers and insights
- Be concise but informative
- Use bullet points for lists
- Format currency values properly
- If the question cannot be answered with available data, say so clearly"""


def summarize_orders(orders: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Aggregate figures over a list of orders."""
    totals = [float(o.get("total_amount") or 0) for o in orders]
    statuses = [str(o.get("order_status") or "").lower() for o in orders]
    count = len(orders)
    revenue = sum(totals)
    return {
        "total_orders": count,
        "total_revenue": revenue,
        "avg_order_value": revenue / count if count else 0.0,
        "confirmed_orders": statuses.count(OrderStatus.CONFIRMED.value),
        "pending_orders": statuses.count(OrderStatus.PENDING.value),
        "cancelled_orders": statuses.count(OrderStatus.CANCELLED.value),
    }


def build_prompt(question: str, orders: List[Dict[str, Any]]) -> str:
    rows = [
        {
            "total": o.get("total_amount"),
            "date": o.get("order_date"),
            "status": o.get("order_status"),
        }
        for o in orders
    ]
    return PROMPT_TEMPLATE.format(
        orders=json.dumps(rows, indent=2, default=str),
        question=question,
        **summarize_orders(orders),
    )


class ChatbotService:

    def __init__(
        self,
        conversation_repo: ConversationRepository,
        prediction_repo: PredictionRepository,
        user_repo: UserRepository,
        order_repo: OrderRepository,
        llm: LLMService,
        cache: CacheService,
    ):
        self.conversation_repo = conversation_repo
        self.prediction_repo = prediction_repo
        self.user_repo = user_repo
        self.order_repo = order_repo
        self.llm = llm
        self.cache = cache

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    async def _invalidate_conversation(self, conversation: Dict[str, Any]):
        await self.cache.delete(f"conversation_{conversation['id']}")
        await self.cache.delete("conversations")
        if conversation.get("user_id"):
            await self.cache.delete(f"conversations_user_{conversation['user_id']}")

    async def find_conversation_by_id(self, id: str) -> Dict[str, Any]:
        conversation = await self.cache.get_or_set(
            f"conversation_{id}", lambda: self.conversation_repo.find_by_id(id)
        )
        if not conversation:
            return {"success": False, "error": "Conversation not found"}
        return {"success": True, "conversation": conversation}

    async def find_all_conversations(self) -> Dict[str, Any]:
        conversations = await self.cache.get_or_set(
            "conversations", lambda: self.conversation_repo.find_all()
        )
        if conversations is None:
            return {"success": False, "error": "Failed to fetch conversations"}
        return {"success": True, "conversations": conversations}

    async def find_conversations_by_user(self, user_id: str) -> Dict[str, Any]:
        conversations = await self.cache.get_or_set(
            f"conversations_user_{user_id}", lambda: self.conversation_repo.find_by_user(user_id)
        )
        if conversations is None:
            return {"success": False, "error": "Failed to fetch conversations"}
        return {"success": True, "conversations": conversations}

    async def create_conversation(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            user = await self.user_repo.find_by_id(data["user_id"])
            if not user:
                return {"success": False, "error": "User not found"}

            conversation = await self.conversation_repo.create(data)
            if not conversation:
                return {"success": False, "error": "Failed to create conversation"}

            await self._invalidate_conversation(conversation)
            return {"success": True, "conversation": conversation}
        except Exception as e:
            logger.error(f"Failed to create conversation: {e}", exc_info=True)
            return {"success": False, "error": "Failed to create conversation"}

    async def update_conversation(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            conversation = await self.conversation_repo.update(id, data)
            if not conversation:
                return {"success": False, "error": "Conversation not found"}
            await self._invalidate_conversation(conversation)
            return {"success": True, "conversation": conversation}
        except Exception as e:
            logger.error(f"Failed to update conversation: {e}", exc_info=True)
            return {"success": False, "error": "Failed to update conversation"}

    async def delete_conversation(self, id: str) -> Dict[str, Any]:
        try:
            conversation = await self.conversation_repo.find_by_id(id)
            if not conversation:
                return {"success": False, "error": "Conversation not found"}

            deleted = await self.conversation_repo.delete(id)
            if not deleted:
                return {"success": False, "error": "Conversation not found"}

            await self._invalidate_conversation(conversation)
            await self.cache.delete(f"predictions_conversation_{id}")
            return {"success": True}
        except Exception as e:
            logger.error(f"Failed to delete conversation: {e}", exc_info=True)
            return {"success": False, "error": "Failed to delete conversation"}

    # ------------------------------------------------------------------
    # Predictions
    # ------------------------------------------------------------------

    async def _invalidate_prediction(self, prediction: Dict[str, Any]):
        await self.cache.delete(f"prediction_{prediction['id']}")
        await self.cache.delete("predictions")
        if prediction.get("conversation_id"):
            await self.cache.delete(f"predictions_conversation_{prediction['conversation_id']}")

    async def find_all_predictions(self) -> Dict[str, Any]:
        predictions = await self.cache.get_or_set("predictions", lambda: self.prediction_repo.find_all())
        if predictions is None:
            return {"success": False, "error": "Failed to fetch predictions"}
        return {"success": True, "predictions": predictions}

    async def find_prediction_by_id(self, id: str) -> Dict[str, Any]:
        prediction = await self.cache.get_or_set(
            f"prediction_{id}", lambda: self.prediction_repo.find_by_id(id)
        )
        if not prediction:
            return {"success": False, "error": "Prediction not found"}
        return {"success": True, "prediction": prediction}

    async def find_predictions_by_conversation(self, conversation_id: str) -> Dict[str, Any]:
        predictions = await self.cache.get_or_set(
            f"predictions_conversation_{conversation_id}",
            lambda: self.prediction_repo.find_by_conversation(conversation_id),
        )
        if predictions is None:
            return {"success": False, "error": "Failed to fetch predictions"}
        return {"success": True, "predictions": predictions}

    async def create_prediction(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            conversation = await self.conversation_repo.find_by_id(data["conversation_id"])
            if not conversation:
                return {"success": False, "error": "Conversation not found"}

            prediction = await self.prediction_repo.create(data)
            if not prediction:
                return {"success": False, "error": "Failed to create prediction"}

            await self._invalidate_prediction(prediction)
            return {"success": True, "prediction": prediction}
        except Exception as e:
            logger.error(f"Failed to create prediction: {e}", exc_info=True)
            return {"success": False, "error": "Failed to create prediction"}

    async def update_prediction(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            prediction = await self.prediction_repo.update(id, data)
            if not prediction:
                return {"success": False, "error": "Prediction not found"}
            await self._invalidate_prediction(prediction)
            return {"success": True, "prediction": prediction}
        except Exception as e:
            logger.error(f"Failed to update prediction: {e}", exc_info=True)
            return {"success": False, "error": "Failed to update prediction"}

    async def delete_prediction(self, id: str) -> Dict[str, Any]:
        try:
            prediction = await self.prediction_repo.find_by_id(id)
            if not prediction:
                return {"success": False, "error": "Prediction not found"}
            deleted = await self.prediction_repo.delete(id)
            if not deleted:
                return {"success": False, "error": "Prediction not found"}
            await self._invalidate_prediction(prediction)
            return {"success": True}
        except Exception as e:
            logger.error(f"Failed to delete prediction: {e}", exc_info=True)
            return {"success": False, "error": "Failed to delete prediction"}

    # ------------------------------------------------------------------
    # Assistant
    # ------------------------------------------------------------------

    async def get_response(self, question: str) -> Dict[str, Any]:
        try:
            orders = await self.order_repo.find_recent(RECENT_ORDER_LIMIT)
            if orders is None:
                return {"success": False, "error": "Failed to get response"}
            if not orders:
                return {"success": True, "response": NO_ORDER_DATA}

            answer = await self.llm.generate(build_prompt(question, orders))
            return {"success": True, "response": answer}
        except Exception as e:
            logger.error(f"Chatbot error: {e}", exc_info=True)
            return {"success": False, "error": "Failed to get response"}
