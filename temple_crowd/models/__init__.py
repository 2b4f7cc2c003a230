from temple_crowd.models.assistant import AssistantReply, AssistantRequest, ChatTurn
from temple_crowd.models.estimate import WaitEstimateRequest, WaitEstimateResponse

__all__ = [
    "AssistantReply",
    "AssistantRequest",
    "ChatTurn",
    "WaitEstimateRequest",
    "WaitEstimateResponse",
]
