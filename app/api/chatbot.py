"""
app/api/chatbot.py

Purpose: Chatbot endpoints

- /chatbot/ask: sales assistant answer over recent orders
- Conversation and prediction records
"""

from fastapi import APIRouter, Depends

from app.core.container import get_chatbot_service
from app.core.dependencies import get_current_user
from app.core.errors import handle_result
from app.schemas.chatbot import (
    ChatbotQuestion,
    ConversationCreate,
    ConversationUpdate,
    PredictionCreate,
    PredictionUpdate,
)
from app.services.chatbot_service import ChatbotService

router = APIRouter(prefix="/chatbot", tags=["Chatbot"], dependencies=[Depends(get_current_user)])


@router.post("/ask")
async def ask(body: ChatbotQuestion, service: ChatbotService = Depends(get_chatbot_service)):
    return handle_result(await service.get_response(body.question))


# Conversations

@router.get("/conversations")
async def list_conversations(service: ChatbotService = Depends(get_chatbot_service)):
    return handle_result(await service.find_all_conversations())


@router.post("/conversations", status_code=201)
async def create_conversation(body: ConversationCreate, service: ChatbotService = Depends(get_chatbot_service)):
    result = await service.create_conversation(body.model_dump())
    return handle_result(result, success_status=201)


@router.get("/conversations/user/{user_id}")
async def list_user_conversations(user_id: str, service: ChatbotService = Depends(get_chatbot_service)):
    return handle_result(await service.find_conversations_by_user(user_id))


@router.get("/conversations/{id}")
async def get_conversation(id: str, service: ChatbotService = Depends(get_chatbot_service)):
    return handle_result(await service.find_conversation_by_id(id))


@router.put("/conversations/{id}")
async def update_conversation(
    id: str,
    body: ConversationUpdate,
    service: ChatbotService = Depends(get_chatbot_service),
):
    return handle_result(await service.update_conversation(id, body.model_dump()))


@router.delete("/conversations/{id}")
async def delete_conversation(id: str, service: ChatbotService = Depends(get_chatbot_service)):
    return handle_result(await service.delete_conversation(id))


# Predictions

@router.get("/predictions")
async def list_predictions(service: ChatbotService = Depends(get_chatbot_service)):
    return handle_result(await service.find_all_predictions())


@router.post("/predictions", status_code=201)
async def create_prediction(body: PredictionCreate, service: ChatbotService = Depends(get_chatbot_service)):
    result = await service.create_prediction(body.model_dump())
    return handle_result(result, success_status=201)


@router.get("/predictions/conversation/{conversation_id}")
async def list_conversation_predictions(conversation_id: str, service: ChatbotService = Depends(get_chatbot_service)):
    return handle_result(await service.find_predictions_by_conversation(conversation_id))


@router.get("/predictions/{id}")
async def get_prediction(id: str, service: ChatbotService = Depends(get_chatbot_service)):
    return handle_result(await service.find_prediction_by_id(id))


@router.put("/predictions/{id}")
async def update_prediction(id: str, body: PredictionUpdate, service: ChatbotService = Depends(get_chatbot_service)):
    return handle_result(await service.update_prediction(id, body.model_dump(exclude_unset=True)))


@router.delete("/predictions/{id}")
async def delete_prediction(id: str, service: ChatbotService = Depends(get_chatbot_service)):
    return handle_result(await service.delete_prediction(id))
