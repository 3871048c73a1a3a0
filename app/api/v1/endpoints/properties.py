import logging
from typing import Any, Dict, Optional, Type, TypeVar

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Query, status
from pydantic import BaseModel, Field, ValidationError

from app.api.dependencies import (
    get_current_user,
    get_interest_service,
    get_listing,
    get_listing_service,
    get_owned_listing,
    get_premium_service,
    get_user_service,
)
from app.exceptions import BadRequestError, NotFoundError, PropertyServiceError, UnauthorizedError
from app.models.listing import Listing, ListingCreate, ListingUpdate
from app.models.search import SearchCriteria
from app.models.token import TokenData
from app.services.interest_service import InterestService
from app.services.listing_service import DUPLICATE_RERA_MESSAGE, ListingService
from app.services.notification_service import NotificationService, get_notification_service
from app.services.premium_service import PremiumService
from app.services.search_filter import build_filter
from app.services.user_service import UserService

router = APIRouter()
logger = logging.getLogger(__name__)

EMPTY_BODY_MESSAGE = "Request body is empty and need to have property details!"

ModelT = TypeVar("ModelT", bound=BaseModel)


class PremiumCheckoutRequest(BaseModel):
    """Request model for starting a premium checkout"""
    plan: str
    success_url: str = Field(..., min_length=1)
    cancel_url: str = Field(..., min_length=1)


class PremiumConfirmRequest(BaseModel):
    """Request model for confirming a premium payment"""
    plan: str
    session_id: str = Field(..., pattern=r"^[A-Za-z0-9_]+$", description="Checkout session id from the provider")


def success(data: Any) -> Dict[str, Any]:
    return {"status": "success", "data": data}


def _parse_body(model: Type[ModelT], payload: Optional[Dict[str, Any]]) -> ModelT:
    if not payload:
        raise BadRequestError(EMPTY_BODY_MESSAGE)
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(".".join(str(loc) for loc in err["loc"]) for err in e.errors())
        raise BadRequestError(f"Invalid property details: {fields}") from e


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_property(
    background_tasks: BackgroundTasks,
    payload: Optional[Dict[str, Any]] = Body(None),
    current_user: TokenData = Depends(get_current_user),
    service: ListingService = Depends(get_listing_service),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Create a new property listing owned by the caller"""
    listing_data = _parse_body(ListingCreate, payload)

    try:
        # Early, friendly check; the unique index is the real guard
        if await service.get_by_rera(listing_data.rera_number):
            raise BadRequestError(DUPLICATE_RERA_MESSAGE)

        listing = await service.create_listing(current_user.user_id, listing_data)
    except PropertyServiceError:
        raise
    except Exception as e:
        logger.error("create_property failed: %s", e)
        raise

    # Mail is sent after the response; its failure never undoes the listing
    background_tasks.add_task(notifier.send_message, current_user.email, "Posted a property!", "Under verification!")

    return success(listing)


@router.get("/")
async def search_properties(
    listing_for: str = Query(..., alias="for", description="sale or rent"),
    city: Optional[str] = Query(None, description="Matched against city or description"),
    property_type: Optional[str] = Query(None, alias="type"),
    furnishing: Optional[str] = None,
    no_of_bedrooms: Optional[str] = Query(None, alias="noOfBedrooms"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    min_area: Optional[str] = Query(None, alias="minArea"),
    max_area: Optional[str] = Query(None, alias="maxArea"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    service: ListingService = Depends(get_listing_service),
):
    """Search listings with optional refinements"""
    criteria = SearchCriteria(
        listing_for=listing_for,
        city=city,
        property_type=property_type,
        furnishing=furnishing,
        no_of_bedrooms=no_of_bedrooms,
        min_price=min_price,
        max_price=max_price,
        min_area=min_area,
        max_area=max_area,
    )

    try:
        listings = await service.search_listings(build_filter(criteria), skip=skip, limit=limit)
    except Exception as e:
        logger.error("search_properties failed: %s", e)
        raise

    return success(listings)


@router.get("/mine")
async def get_my_properties(
    current_user: TokenData = Depends(get_current_user),
    service: ListingService = Depends(get_listing_service),
):
    """Get listings posted by the caller"""
    try:
        listings = await service.get_listings_by_owner(current_user.user_id)
    except Exception as e:
        logger.error("get_my_properties failed: %s", e)
        raise

    return success(listings)


@router.get("/queried")
async def get_my_queried_properties(
    current_user: TokenData = Depends(get_current_user),
    interest_service: InterestService = Depends(get_interest_service),
    listing_service: ListingService = Depends(get_listing_service),
):
    """Get listings the caller has expressed interest in"""
    try:
        listing_ids = await interest_service.get_queried_listing_ids(current_user.user_id)
        listings = await listing_service.get_listings_by_ids(listing_ids)
    except Exception as e:
        logger.error("get_my_queried_properties failed: %s", e)
        raise

    return success(listings)


@router.get("/{listing_id}")
async def get_property(listing: Listing = Depends(get_listing)):
    """Get a specific listing"""
    return success(listing)


@router.put("/{listing_id}", status_code=status.HTTP_201_CREATED)
async def update_property(
    listing_id: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    current_user: TokenData = Depends(get_current_user),
    service: ListingService = Depends(get_listing_service),
):
    """Replace a listing's details. Ownership is checked against the stored listing."""
    listing_data = _parse_body(ListingUpdate, payload)

    try:
        stored = await service.get_listing_by_id(listing_id)
        if stored is None:
            raise NotFoundError("Property not found")

        # Any postedBy in the body is ignored
        if stored.posted_by != current_user.user_id:
            raise UnauthorizedError("Only owner can update the details!")

        updated = await service.replace_listing(stored, listing_data)
        if updated is None:
            raise NotFoundError("Property not found")
    except PropertyServiceError:
        raise
    except Exception as e:
        logger.error("update_property failed: %s", e)
        raise

    return success(updated)


@router.delete("/{listing_id}", status_code=status.HTTP_201_CREATED)
async def delete_property(
    listing: Listing = Depends(get_owned_listing),
    listing_service: ListingService = Depends(get_listing_service),
    interest_service: InterestService = Depends(get_interest_service),
):
    """Delete a listing owned by the caller along with its interest queries"""
    try:
        deleted = await listing_service.delete_listing(listing.id)
        if not deleted:
            raise NotFoundError("Property not found")
        await interest_service.delete_queries_for_listing(listing.id)
    except PropertyServiceError:
        raise
    except Exception as e:
        logger.error("delete_property failed: %s", e)
        raise

    return success({"deleted": True, "id": listing.id})


@router.post("/{listing_id}/contact")
async def contact_owner(
    background_tasks: BackgroundTasks,
    listing: Listing = Depends(get_listing),
    current_user: TokenData = Depends(get_current_user),
    listing_service: ListingService = Depends(get_listing_service),
    interest_service: InterestService = Depends(get_interest_service),
    user_service: UserService = Depends(get_user_service),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Record the caller's interest and notify the owner. Returns the owner's contact details."""
    try:
        owner = await user_service.get_user_by_id(listing.posted_by)
        if owner is None:
            raise NotFoundError("Property owner not found")
        buyer = await user_service.get_user_by_id(current_user.user_id)

        await interest_service.add_query(current_user.user_id, listing.id)
        await listing_service.add_interested_user(listing.id, current_user.user_id)
    except PropertyServiceError:
        raise
    except Exception as e:
        logger.error("contact_owner failed: %s", e)
        raise

    buyer_name = (buyer.full_name if buyer else "") or current_user.email or "A buyer"
    background_tasks.add_task(
        notifier.send_message,
        owner.email,
        "Property query!",
        f"{buyer_name} has shown interest in your property!",
    )

    return success(owner.public_profile())


@router.get("/{listing_id}/interested")
async def get_interested_users(
    listing: Listing = Depends(get_owned_listing),
    interest_service: InterestService = Depends(get_interest_service),
):
    """Get the interest queries on a listing (owner only)"""
    try:
        queries = await interest_service.get_queries_for_listing(listing.id)
    except Exception as e:
        logger.error("get_interested_users failed: %s", e)
        raise

    return success(queries)


@router.post("/{listing_id}/premium/checkout")
async def buy_premium(
    request: PremiumCheckoutRequest,
    listing: Listing = Depends(get_owned_listing),
    premium_service: PremiumService = Depends(get_premium_service),
):
    """Start a hosted checkout for a premium plan. The listing is not changed here."""
    try:
        plan, session = await premium_service.start_checkout(
            listing, request.plan, request.success_url, request.cancel_url
        )
    except PropertyServiceError:
        raise
    except Exception as e:
        logger.error("buy_premium failed: %s", e)
        raise

    return {"plan": plan, "url": session.url}


@router.post("/{listing_id}/premium/confirm")
async def payment_successful(
    request: PremiumConfirmRequest,
    listing: Listing = Depends(get_owned_listing),
    premium_service: PremiumService = Depends(get_premium_service),
):
    """Activate premium once the provider reports the checkout session as paid"""
    try:
        updated = await premium_service.confirm_payment(listing.id, request.plan, request.session_id)
    except PropertyServiceError:
        raise
    except Exception as e:
        logger.error("payment_successful failed: %s", e)
        raise

    return success(updated)
