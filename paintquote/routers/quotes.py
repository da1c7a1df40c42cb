from fastapi import APIRouter, HTTPException

from .. import schemas
from ..pricing.formatter import format_for_customer
from ..pricing.quote_calculator import QuoteCalculator, QuoteInputError

router = APIRouter(prefix="/quotes", tags=["quotes"])


def _calculate(request: schemas.QuoteRequest) -> dict:
    try:
        return QuoteCalculator().calculate(request)
    except QuoteInputError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/calculate")
def calculate_quote(request: schemas.QuoteRequest):
    """Stateless quote with the default pricing config."""
    return _calculate(request)


@router.post("/format")
def format_quote(request: schemas.QuoteRequest, hide_internal_details: bool = True):
    """Quote plus its plain-text rendering."""
    quote = _calculate(request)
    return {
        "quote": quote,
        "text": format_for_customer(quote, hide_internal_details=hide_internal_details),
    }
