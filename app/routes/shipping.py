from fastapi import APIRouter, Depends

from app.dependencies.services import get_rate_source
from app.schemas.shipping_schemas import ShippingRateRequest, ShippingRatesResponse
from app.services.shipping_service import RateSource, calculate_package_weight, get_shipping_rates

router = APIRouter()


@router.post("/rates", response_model=ShippingRatesResponse)
def shipping_rates(
    data: ShippingRateRequest,
    rate_source: RateSource = Depends(get_rate_source),
):
    # carrier failures fall back to estimated rates, so this is always a 200
    weight = calculate_package_weight(data.items)
    return get_shipping_rates(
        data.origin_zip,
        data.destination_zip,
        weight,
        source=rate_source,
    )
