"""Shipment API router (admin only)."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.app.api.http.deps import get_db_session, require_admin
from src.app.api.http.schemas import ApiResponse, ok, paginated
from src.app.core.models import PageParams
from src.app.core.services.shipment import ShipmentService
from src.app.entities.service.shipment import Shipment, ShipmentStatus

router = APIRouter(prefix="/shipments", tags=["shipments"], dependencies=[Depends(require_admin)])


class ShipmentCreate(BaseModel):
    order_id: str
    carrier: str = Field(min_length=1)
    estimated_delivery: datetime | None = None


class ShipmentUpdate(BaseModel):
    carrier: str | None = None
    status: ShipmentStatus | None = None
    estimated_delivery: datetime | None = None


@router.post("", status_code=201, response_model=ApiResponse[Shipment])
def create_shipment(
    payload: ShipmentCreate, session: Session = Depends(get_db_session)
) -> ApiResponse[Shipment]:
    shipment = ShipmentService(session).create(
        payload.order_id, payload.carrier, payload.estimated_delivery
    )
    session.commit()
    return ok(shipment, "Shipment created")


@router.get("", response_model=ApiResponse[list[Shipment]])
def list_shipments(
    page: int = Query(1),
    limit: int = Query(10),
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[Shipment]]:
    params = PageParams.of(page, limit)
    items, total = ShipmentService(session).list_all(params)
    return paginated(items, total, params)


@router.get("/{shipment_id}", response_model=ApiResponse[Shipment])
def get_shipment(shipment_id: str, session: Session = Depends(get_db_session)) -> ApiResponse[Shipment]:
    return ok(ShipmentService(session).get(shipment_id))


@router.patch("/{shipment_id}", response_model=ApiResponse[Shipment])
def update_shipment(
    shipment_id: str,
    payload: ShipmentUpdate,
    session: Session = Depends(get_db_session),
) -> ApiResponse[Shipment]:
    shipment = ShipmentService(session).update(
        shipment_id,
        carrier=payload.carrier,
        status=payload.status,
        estimated_delivery=payload.estimated_delivery,
    )
    session.commit()
    return ok(shipment, "Shipment updated")


@router.delete("/{shipment_id}", response_model=ApiResponse[None])
def delete_shipment(shipment_id: str, session: Session = Depends(get_db_session)) -> ApiResponse[None]:
    ShipmentService(session).delete(shipment_id)
    session.commit()
    return ok(message="Shipment deleted")
