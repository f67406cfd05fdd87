"""
AI API - maintenance advice
"""
from fastapi import APIRouter, Depends

from ..models.user import User
from ..schemas.ai import AdviceRequest, AdviceResponse
from ..services.advice_service import AdviceService
from ..utils.dependencies import get_advice_service, get_current_user

router = APIRouter(prefix="/api/ai", tags=["AI"])


@router.post("/maintenance-advice", response_model=AdviceResponse)
def maintenance_advice(
    data: AdviceRequest,
    current_user: User = Depends(get_current_user),
    advice: AdviceService = Depends(get_advice_service)
):
    result = advice.maintenance_advice(data.description)
    return {"advice": result.text, "fallback": result.fallback}
