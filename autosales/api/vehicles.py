from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from autosales.api.deps import admin_only, authenticated, get_db, inventory_or_admin
from autosales.schemas.common import ListResponse
from autosales.schemas.vehicles import VehicleCreate, VehicleRead, VehicleUpdate
from autosales.services import vehicles as vehicles_service

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.get("", response_model=ListResponse[VehicleRead], dependencies=[Depends(authenticated)])
def list_vehicles(
    order_by: str = Query(default="make"),
    order_dir: str = Query(default="asc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return vehicles_service.vehicles.list_response(db, order_by, order_dir, limit, offset)


@router.get("/makes", response_model=list[str], dependencies=[Depends(authenticated)])
def list_vehicle_makes(db: Session = Depends(get_db)):
    return vehicles_service.vehicles.makes(db)


@router.get("/search", response_model=ListResponse[VehicleRead], dependencies=[Depends(authenticated)])
def search_vehicles(
    search: str = Query(default=""),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return vehicles_service.vehicles.paginated_response(
        vehicles_service.vehicles.search, db, search, limit, offset
    )


@router.get("/by-make/{make}", response_model=ListResponse[VehicleRead], dependencies=[Depends(authenticated)])
def list_vehicles_by_make(
    make: str,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return vehicles_service.vehicles.paginated_response(
        vehicles_service.vehicles.by_make, db, make, limit, offset
    )


@router.get("/{vehicle_id}", response_model=VehicleRead, dependencies=[Depends(authenticated)])
def get_vehicle(vehicle_id: str, db: Session = Depends(get_db)):
    return vehicles_service.vehicles.get(db, vehicle_id)


@router.post(
    "",
    response_model=VehicleRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(inventory_or_admin)],
)
def create_vehicle(payload: VehicleCreate, db: Session = Depends(get_db)):
    return vehicles_service.vehicles.create(db, payload)


@router.patch("/{vehicle_id}", response_model=VehicleRead, dependencies=[Depends(inventory_or_admin)])
def update_vehicle(vehicle_id: str, payload: VehicleUpdate, db: Session = Depends(get_db)):
    return vehicles_service.vehicles.update(db, vehicle_id, payload)


@router.delete(
    "/{vehicle_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(admin_only)],
)
def delete_vehicle(vehicle_id: str, db: Session = Depends(get_db)):
    vehicles_service.vehicles.delete(db, vehicle_id)
