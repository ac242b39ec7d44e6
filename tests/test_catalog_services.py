"""Tests for vehicles, pipeline stages and products."""

import uuid
from decimal import Decimal

import pytest
from fastapi import HTTPException

from autosales.models.quotation import QuotationItem
from autosales.models.sale import Sale, SaleLine
from autosales.schemas.products import ProductCreate, ProductUpdate
from autosales.schemas.stages import StageCreate, StageUpdate
from autosales.schemas.vehicles import VehicleCreate, VehicleUpdate
from autosales.services import products as products_service
from autosales.services import stages as stages_service
from autosales.services import vehicles as vehicles_service

# =============================================================================
# Vehicles
# =============================================================================


def _vehicle(db_session, make="Toyota", model="Corolla", year=2023, price="21000.00"):
    return vehicles_service.vehicles.create(
        db_session,
        VehicleCreate(make=make, model=model, year=year, price=Decimal(price)),
    )


def test_create_vehicle(db_session):
    """Test creating a vehicle."""
    vehicle = _vehicle(db_session)
    assert vehicle.make == "Toyota"
    assert vehicle.price == Decimal("21000.00")


def test_create_vehicle_duplicate(db_session):
    """Test make, model and year are unique together."""
    _vehicle(db_session)
    with pytest.raises(HTTPException) as exc_info:
        _vehicle(db_session, price="22000.00")
    assert exc_info.value.status_code == 400


def test_same_model_different_year_allowed(db_session):
    _vehicle(db_session, year=2023)
    assert _vehicle(db_session, year=2024).year == 2024


def test_update_vehicle_duplicate(db_session):
    _vehicle(db_session, model="Corolla")
    yaris = _vehicle(db_session, model="Yaris")
    with pytest.raises(HTTPException) as exc_info:
        vehicles_service.vehicles.update(db_session, str(yaris.id), VehicleUpdate(model="Corolla"))
    assert exc_info.value.status_code == 400


def test_update_vehicle_price(db_session):
    vehicle = _vehicle(db_session)
    updated = vehicles_service.vehicles.update(
        db_session, str(vehicle.id), VehicleUpdate(price=Decimal("19999.99"))
    )
    assert updated.price == Decimal("19999.99")


def test_list_vehicles_ordered_by_make_and_model(db_session):
    _vehicle(db_session, make="Toyota", model="Yaris")
    _vehicle(db_session, make="Mazda", model="CX-5")
    _vehicle(db_session, make="Toyota", model="Corolla")
    vehicles = vehicles_service.vehicles.list(db_session, "make", "asc", 50, 0)
    assert [(v.make, v.model) for v in vehicles] == [
        ("Mazda", "CX-5"),
        ("Toyota", "Corolla"),
        ("Toyota", "Yaris"),
    ]


def test_vehicles_by_make(db_session):
    _vehicle(db_session, make="Toyota", model="Yaris", year=2022)
    _vehicle(db_session, make="Toyota", model="Corolla", year=2024)
    _vehicle(db_session, make="Toyota", model="Corolla", year=2021)
    _vehicle(db_session, make="Mazda", model="3")
    vehicles = vehicles_service.vehicles.by_make(db_session, "toy", 50, 0)
    assert [(v.model, v.year) for v in vehicles] == [
        ("Corolla", 2021),
        ("Corolla", 2024),
        ("Yaris", 2022),
    ]


def test_vehicles_by_make_too_short(db_session):
    with pytest.raises(HTTPException) as exc_info:
        vehicles_service.vehicles.by_make(db_session, "T", 50, 0)
    assert exc_info.value.status_code == 400


def test_search_vehicles_matches_make_or_model(db_session):
    _vehicle(db_session, make="Toyota", model="Hilux")
    _vehicle(db_session, make="Nissan", model="Frontier")
    _vehicle(db_session, make="Mazda", model="BT-50")
    assert [v.make for v in vehicles_service.vehicles.search(db_session, "hil", 50, 0)] == ["Toyota"]
    assert [v.model for v in vehicles_service.vehicles.search(db_session, "NISS", 50, 0)] == ["Frontier"]
    with pytest.raises(HTTPException):
        vehicles_service.vehicles.search(db_session, " ", 50, 0)


def test_vehicle_makes_are_distinct_and_sorted(db_session):
    _vehicle(db_session, make="Toyota", model="Yaris")
    _vehicle(db_session, make="Mazda", model="3")
    _vehicle(db_session, make="Toyota", model="Corolla")
    assert vehicles_service.vehicles.makes(db_session) == ["Mazda", "Toyota"]


def test_delete_vehicle(db_session):
    vehicle = _vehicle(db_session)
    vehicles_service.vehicles.delete(db_session, str(vehicle.id))
    with pytest.raises(HTTPException) as exc_info:
        vehicles_service.vehicles.get(db_session, str(vehicle.id))
    assert exc_info.value.status_code == 404


def test_delete_vehicle_referenced_by_opportunity(db_session, opportunity):
    """Test vehicles linked to an opportunity cannot be deleted."""
    with pytest.raises(HTTPException) as exc_info:
        vehicles_service.vehicles.delete(db_session, str(opportunity.vehicle_id))
    assert exc_info.value.status_code == 400


def test_delete_vehicle_referenced_by_quotation_item(db_session, quotation):
    other = _vehicle(db_session, make="Kia", model="Rio")
    db_session.add(
        QuotationItem(
            quotation_id=quotation.id,
            vehicle_id=other.id,
            quantity=1,
            unit_price=Decimal("15000.00"),
            discount=Decimal("0.00"),
            total=Decimal("15000.00"),
        )
    )
    db_session.commit()
    with pytest.raises(HTTPException) as exc_info:
        vehicles_service.vehicles.delete(db_session, str(other.id))
    assert exc_info.value.status_code == 400


def test_delete_vehicle_referenced_by_sale_line(db_session, crm_client):
    """Test vehicles that were sold cannot be deleted."""
    sold = _vehicle(db_session, make="Chevrolet", model="Onix")
    sale = Sale(client_id=crm_client.id, total=Decimal("18000.00"))
    sale.lines.append(SaleLine(vehicle_id=sold.id, quantity=1, unit_price=Decimal("18000.00")))
    db_session.add(sale)
    db_session.commit()
    with pytest.raises(HTTPException) as exc_info:
        vehicles_service.vehicles.delete(db_session, str(sold.id))
    assert exc_info.value.status_code == 400
    assert "sales" in exc_info.value.detail


# =============================================================================
# Stages
# =============================================================================


def test_create_stage(db_session):
    stage = stages_service.stages.create(db_session, StageCreate(name="Negotiation", order=3))
    assert stage.name == "Negotiation"
    assert stage.order == 3


def test_create_stage_duplicate_name(db_session):
    stages_service.stages.create(db_session, StageCreate(name="Closing", order=1))
    with pytest.raises(HTTPException) as exc_info:
        stages_service.stages.create(db_session, StageCreate(name="Closing", order=2))
    assert exc_info.value.status_code == 400
    assert "name" in exc_info.value.detail


def test_create_stage_duplicate_order(db_session):
    stages_service.stages.create(db_session, StageCreate(name="Lead", order=1))
    with pytest.raises(HTTPException) as exc_info:
        stages_service.stages.create(db_session, StageCreate(name="Qualified", order=1))
    assert exc_info.value.status_code == 400
    assert "order" in exc_info.value.detail


def test_list_stages_by_order(db_session):
    stages_service.stages.create(db_session, StageCreate(name="Closing", order=3))
    stages_service.stages.create(db_session, StageCreate(name="Lead", order=1))
    stages_service.stages.create(db_session, StageCreate(name="Demo", order=2))
    stages = stages_service.stages.list(db_session, "order", "asc", 50, 0)
    assert [stage.name for stage in stages] == ["Lead", "Demo", "Closing"]


def test_update_stage_same_values(db_session):
    """Test a stage may keep its own name and order on update."""
    stage = stages_service.stages.create(db_session, StageCreate(name="Lead", order=1))
    updated = stages_service.stages.update(db_session, str(stage.id), StageUpdate(name="Lead", order=1))
    assert updated.id == stage.id


def test_delete_stage_in_use(db_session, opportunity):
    with pytest.raises(HTTPException) as exc_info:
        stages_service.stages.delete(db_session, str(opportunity.stage_id))
    assert exc_info.value.status_code == 400


def test_delete_stage(db_session):
    stage = stages_service.stages.create(db_session, StageCreate(name="Lost", order=9))
    stages_service.stages.delete(db_session, str(stage.id))
    with pytest.raises(HTTPException):
        stages_service.stages.get(db_session, str(stage.id))


# =============================================================================
# Products
# =============================================================================


def _product(db_session, name="Floor mats"):
    return products_service.products.create(
        db_session,
        ProductCreate(name=name, price=Decimal("45.50"), quantity=10, description="Rubber mats"),
    )


def test_create_product(db_session):
    product = _product(db_session)
    assert product.price == Decimal("45.50")


def test_create_product_duplicate_name(db_session):
    """Test duplicate product names conflict."""
    _product(db_session)
    with pytest.raises(HTTPException) as exc_info:
        _product(db_session)
    assert exc_info.value.status_code == 409


def test_replace_product(db_session):
    _product(db_session)
    updated = products_service.products.replace(
        db_session,
        "Floor mats",
        ProductUpdate(name="Floor mats", price=Decimal("50.00"), quantity=4, description="Premium"),
    )
    assert updated.price == Decimal("50.00")
    assert updated.quantity == 4
    assert updated.description == "Premium"


def test_replace_product_name_mismatch(db_session):
    _product(db_session)
    with pytest.raises(HTTPException) as exc_info:
        products_service.products.replace(
            db_session,
            "Floor mats",
            ProductUpdate(name="Seat covers", price=Decimal("50.00"), quantity=4, description="x"),
        )
    assert exc_info.value.status_code == 400


def test_get_product_not_found(db_session):
    with pytest.raises(HTTPException) as exc_info:
        products_service.products.get(db_session, f"missing-{uuid.uuid4().hex}")
    assert exc_info.value.status_code == 404


def test_delete_product(db_session):
    _product(db_session)
    products_service.products.delete(db_session, "Floor mats")
    with pytest.raises(HTTPException):
        products_service.products.get(db_session, "Floor mats")
