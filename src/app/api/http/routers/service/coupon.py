"""Coupon API router."""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.app.api.http.deps import get_current_user, get_db_session, require_admin
from src.app.api.http.schemas import ApiResponse, ok
from src.app.core.services.commerce import CouponService, CouponValidation
from src.app.entities.core.user import User
from src.app.entities.service.coupon import Coupon
from src.app.entities.service.coupon.entity import CouponType

router = APIRouter(prefix="/coupons", tags=["coupons"])


class CouponCreate(BaseModel):
    code: str
    description: str | None = None
    type: CouponType
    value: float
    max_discount: float = Field(default=0, ge=0)
    start_date: datetime
    end_date: datetime
    max_usage: int | None = Field(default=None, ge=0)
    max_usage_per_user: int = Field(default=1, ge=0)
    min_order_value: float = Field(default=0, ge=0)
    is_active: bool = True
    is_public: bool = True
    allowed_user_ids: list[str] = Field(default_factory=list)
    excluded_product_ids: list[str] = Field(default_factory=list)
    category_ids: list[str] = Field(default_factory=list)
    product_types: list[str] = Field(default_factory=list)


class CouponUpdate(BaseModel):
    code: str | None = None
    description: str | None = None
    type: CouponType | None = None
    value: float | None = None
    max_discount: float | None = Field(default=None, ge=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    max_usage: int | None = Field(default=None, ge=0)
    max_usage_per_user: int | None = Field(default=None, ge=0)
    min_order_value: float | None = Field(default=None, ge=0)
    is_active: bool | None = None
    is_public: bool | None = None
    allowed_user_ids: list[str] | None = None
    excluded_product_ids: list[str] | None = None
    category_ids: list[str] | None = None
    product_types: list[str] | None = None


class ValidateRequest(BaseModel):
    code: str = Field(min_length=1)
    total: float = Field(ge=0)
    product_ids: list[str] = Field(default_factory=list)


class ApplyRequest(BaseModel):
    code: str = Field(min_length=1)
    total: float = Field(ge=0)


class CouponValidationResponse(BaseModel):
    code: str
    discount_amount: float
    final_amount: float
    savings: float

    @classmethod
    def of(cls, validation: CouponValidation) -> "CouponValidationResponse":
        return cls(
            code=validation.coupon.code,
            discount_amount=validation.discount_amount,
            final_amount=validation.final_amount,
            savings=validation.savings,
        )


@router.get("/public", response_model=ApiResponse[list[Coupon]])
def list_public_coupons(
    _: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[Coupon]]:
    return ok(CouponService(session).list_public())


@router.post("/validate", response_model=ApiResponse[CouponValidationResponse])
def validate_coupon(
    payload: ValidateRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CouponValidationResponse]:
    validation = CouponService(session).validate(
        payload.code, user.id, payload.total, payload.product_ids
    )
    return ok(CouponValidationResponse.of(validation), "Coupon is valid")


@router.post("/apply", response_model=ApiResponse[CouponValidationResponse])
def apply_coupon(
    payload: ApplyRequest,
    _: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CouponValidationResponse]:
    validation = CouponService(session).apply(payload.code, payload.total)
    return ok(CouponValidationResponse.of(validation), "Coupon applied")


@router.get("", response_model=ApiResponse[list[Coupon]])
def list_coupons(
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[Coupon]]:
    return ok(CouponService(session).list_all())


@router.get("/{coupon_id}", response_model=ApiResponse[Coupon])
def get_coupon(
    coupon_id: str,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Coupon]:
    return ok(CouponService(session).get(coupon_id))


@router.post("", status_code=201, response_model=ApiResponse[Coupon])
def create_coupon(
    payload: CouponCreate,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Coupon]:
    coupon = CouponService(session).create(payload.model_dump())
    session.commit()
    return ok(coupon, "Coupon created")


@router.put("/{coupon_id}", response_model=ApiResponse[Coupon])
def update_coupon(
    coupon_id: str,
    payload: CouponUpdate,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Coupon]:
    coupon = CouponService(session).update(coupon_id, payload.model_dump(exclude_unset=True))
    session.commit()
    return ok(coupon, "Coupon updated")


@router.delete("/{coupon_id}", response_model=ApiResponse[None])
def delete_coupon(
    coupon_id: str,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[None]:
    CouponService(session).delete(coupon_id)
    session.commit()
    return ok(message="Coupon deleted")
