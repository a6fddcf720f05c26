"""Seller account API endpoints."""

from fastapi import APIRouter, HTTPException, status

from quickinvoice.api.v1.dependencies import Now, SellerServiceDep, UlidPath
from quickinvoice.api.v1.sellers.schemas import SellerResponse
from quickinvoice.services.sellers.exceptions import SellerNotFound
from quickinvoice.services.sellers.seller_service import SellerProfileInput

router = APIRouter(tags=["sellers"])


@router.post(
    "/sellers",
    response_model=SellerResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createSeller",
)
async def create_seller(data: SellerProfileInput, service: SellerServiceDep, now: Now) -> SellerResponse:
    """Create a seller account."""
    seller = await service.create_seller(data, now=now)
    return SellerResponse.from_model(seller, now=now)


@router.get("/sellers/{seller_id}", response_model=SellerResponse, operation_id="getSeller")
async def get_seller(seller_id: UlidPath, service: SellerServiceDep, now: Now) -> SellerResponse:
    """Get a seller profile."""
    try:
        seller = await service.get_seller(seller_id)
    except SellerNotFound:
        raise HTTPException(status_code=404, detail="Seller not found")
    return SellerResponse.from_model(seller, now=now)


@router.patch("/sellers/{seller_id}", response_model=SellerResponse, operation_id="updateSeller")
async def update_seller(
    seller_id: UlidPath,
    data: SellerProfileInput,
    service: SellerServiceDep,
    now: Now,
) -> SellerResponse:
    """Update account settings (business name, phone, MoMo number, subscription)."""
    try:
        seller = await service.update_profile(seller_id, data, now=now)
    except SellerNotFound:
        raise HTTPException(status_code=404, detail="Seller not found")
    return SellerResponse.from_model(seller, now=now)
