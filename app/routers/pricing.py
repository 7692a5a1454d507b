from fastapi import APIRouter
from app.schemas.admin import PriceSuggestionRequest, PriceSuggestionResponse
from app.services.pricing import suggest_price
from structlog import get_logger

logger = get_logger()
router = APIRouter(prefix="/api/v1/price-suggestion", tags=["pricing"])

@router.post("", response_model=PriceSuggestionResponse)
async def price_suggestion(data: PriceSuggestionRequest):
    """Rough monthly rent estimate for a property; a guideline, not a valuation."""
    suggestion = suggest_price(data)
    logger.info("Suggested price", city=data.city, property_type=data.property_type, suggested_price=suggestion.suggested_price)
    return suggestion
