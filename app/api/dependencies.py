from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.core.plans import PlanCatalog, get_plan_catalog
from app.core.security import verify_access_token
from app.exceptions import NotFoundError, UnauthorizedError
from app.models.listing import Listing
from app.models.token import TokenData
from app.services.interest_service import InterestService
from app.services.listing_service import ListingService
from app.services.payment_service import PaymentService, get_payment_service
from app.services.premium_service import PremiumService
from app.services.user_service import UserService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


async def get_current_user(token: str | None = Depends(oauth2_scheme)) -> TokenData:
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_access_token(token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return TokenData(user_id=str(payload["user_id"]), email=payload.get("email"))


def get_listing_service() -> ListingService:
    return ListingService()


def get_interest_service() -> InterestService:
    return InterestService()


def get_user_service() -> UserService:
    return UserService()


def get_premium_service(
    listing_service: ListingService = Depends(get_listing_service),
    payment_service: PaymentService = Depends(get_payment_service),
    plans: PlanCatalog = Depends(get_plan_catalog),
) -> PremiumService:
    return PremiumService(listing_service, payment_service, plans)


async def get_listing(
    listing_id: str,
    _: TokenData = Depends(get_current_user),
    service: ListingService = Depends(get_listing_service),
) -> Listing:
    """Load the listing named in the path"""
    listing = await service.get_listing_by_id(listing_id)
    if listing is None:
        raise NotFoundError("Property not found")
    return listing


async def get_owned_listing(
    listing: Listing = Depends(get_listing),
    current_user: TokenData = Depends(get_current_user),
) -> Listing:
    """Load the listing named in the path and require the caller to be its stored owner"""
    if listing.posted_by != current_user.user_id:
        raise UnauthorizedError("Only owner can manage this property!")
    return listing
