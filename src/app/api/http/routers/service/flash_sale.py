"""Flash sale API router."""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from src.app.api.http.deps import get_db_session, require_admin
from src.app.api.http.schemas import ApiResponse, ok
from src.app.core.services.catalog import FlashSaleService
from src.app.entities.core.user import User
from src.app.entities.service.flash_sale import FlashSale

router = APIRouter(prefix="/flash-sales", tags=["flash-sales"])


class FlashSaleCreate(BaseModel):
    product_id: str
    discount: float
    start_date: datetime
    end_date: datetime


class FlashSaleUpdate(BaseModel):
    discount: float | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


@router.get("", response_model=ApiResponse[list[FlashSale]])
def list_flash_sales(session: Session = Depends(get_db_session)) -> ApiResponse[list[FlashSale]]:
    return ok(FlashSaleService(session).list_all())


@router.get("/{sale_id}", response_model=ApiResponse[FlashSale])
def get_flash_sale(sale_id: str, session: Session = Depends(get_db_session)) -> ApiResponse[FlashSale]:
    return ok(FlashSaleService(session).get(sale_id))


@router.post("", status_code=201, response_model=ApiResponse[FlashSale])
def create_flash_sale(
    payload: FlashSaleCreate,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[FlashSale]:
    sale = FlashSaleService(session).create(
        payload.product_id, payload.discount, payload.start_date, payload.end_date
    )
    session.commit()
    return ok(sale, "Flash sale created")


@router.put("/{sale_id}", response_model=ApiResponse[FlashSale])
def update_flash_sale(
    sale_id: str,
    payload: FlashSaleUpdate,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[FlashSale]:
    sale = FlashSaleService(session).update(
        sale_id,
        discount=payload.discount,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    session.commit()
    return ok(sale, "Flash sale updated")


@router.delete("/{sale_id}", response_model=ApiResponse[None])
def delete_flash_sale(
    sale_id: str,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[None]:
    FlashSaleService(session).delete(sale_id)
    session.commit()
    return ok(message="Flash sale deleted")
