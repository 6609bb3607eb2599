# PATH: trading/services/master_data_service.py

"""
MASTER DATA SERVICE (PRODUCTS / VEHICLES)

- Create / update products and vehicles; "delete" deactivates
- Names are unique among active rows (case-insensitive)
- Trade documents resolve their product id and validate their vehicle
  numbers here before they are written
"""

from __future__ import annotations

import logging
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from accounting.models.activity import ActivityLog
from accounting.services.activity_log_service import log_activity
from trading.models import Product, Vehicle
from trading.services.exceptions import MasterDataError, ProductNotFoundError, VehicleNotFoundError

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = ("name", "description", "is_active")
VEHICLE_FIELDS = ("vehicle_no", "description", "is_active")


def _pk(value, error_cls, label: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise error_cls(f"{label} {value!r} not found") from exc


def _save(obj, clash_message: str) -> None:
    try:
        with transaction.atomic():
            obj.save()
    except ValidationError as exc:
        raise MasterDataError("; ".join(exc.messages)) from exc
    except IntegrityError as exc:
        raise MasterDataError(clash_message) from exc


def _check_fields(fields: dict, allowed: tuple, label: str) -> None:
    unknown = set(fields) - set(allowed)
    if unknown:
        raise MasterDataError(f"Unknown {label} fields: {', '.join(sorted(unknown))}")


# ============================================================
# PRODUCTS
# ============================================================


def get_product(product_id, *, active_only: bool = False, for_update: bool = False) -> Product:
    qs = Product.objects.all()
    if for_update:
        qs = qs.select_for_update()
    if active_only:
        qs = qs.filter(is_active=True)
    product = qs.filter(pk=_pk(product_id, ProductNotFoundError, "Product")).first()
    if product is None:
        raise ProductNotFoundError(f"Product {product_id} not found")
    return product


def list_products(*, active_only: bool = False, search: Optional[str] = None):
    qs = Product.objects.all()
    if active_only:
        qs = qs.filter(is_active=True)
    if search:
        qs = qs.filter(name__icontains=search.strip())
    return qs.order_by("name", "id")


def _ensure_unique_product(product: Product) -> None:
    if not product.is_active:
        return
    name = " ".join((product.name or "").split())
    clash = Product.objects.filter(is_active=True, name__iexact=name).exclude(pk=product.pk)
    if clash.exists():
        raise MasterDataError(f"An active product named {name!r} already exists.")


@transaction.atomic
def create_product(*, user=None, **fields) -> Product:
    _check_fields(fields, PRODUCT_FIELDS, "product")

    product = Product(**fields)
    _ensure_unique_product(product)
    _save(product, f"An active product named {product.name!r} already exists.")

    logger.info("Product created", extra={"product_id": product.id, "product_name": product.name})
    log_activity(
        action=ActivityLog.CREATE,
        entity=ActivityLog.ENTITY_PRODUCT,
        entity_id=product.id,
        description=f"Product {product.name} created",
        user=user,
    )
    return product


@transaction.atomic
def update_product(product_id, *, user=None, **fields) -> Product:
    _check_fields(fields, PRODUCT_FIELDS, "product")

    product = get_product(product_id, for_update=True)

    changed = {}
    for name, value in fields.items():
        if getattr(product, name) != value:
            changed[name] = {"from": str(getattr(product, name)), "to": str(value)}
            setattr(product, name, value)

    if not changed:
        return product

    _ensure_unique_product(product)
    _save(product, f"An active product named {product.name!r} already exists.")

    logger.info("Product updated", extra={"product_id": product.id, "fields": sorted(changed)})
    log_activity(
        action=ActivityLog.UPDATE,
        entity=ActivityLog.ENTITY_PRODUCT,
        entity_id=product.id,
        description=f"Product {product.name} updated",
        user=user,
        metadata={"changes": changed},
    )
    return product


def deactivate_product(product_id, *, user=None) -> Product:
    return update_product(product_id, user=user, is_active=False)


def resolve_product(product_id) -> Optional[Product]:
    """
    Product for a trade document. None / "" clears it; unknown or inactive ids
    raise ProductNotFoundError.
    """
    if product_id in (None, ""):
        return None
    if isinstance(product_id, Product):
        product_id = product_id.pk
    return get_product(product_id, active_only=True)


# ============================================================
# VEHICLES
# ============================================================


def get_vehicle(vehicle_id, *, for_update: bool = False) -> Vehicle:
    qs = Vehicle.objects.select_for_update() if for_update else Vehicle.objects.all()
    vehicle = qs.filter(pk=_pk(vehicle_id, VehicleNotFoundError, "Vehicle")).first()
    if vehicle is None:
        raise VehicleNotFoundError(f"Vehicle {vehicle_id} not found")
    return vehicle


def list_vehicles(*, active_only: bool = False, search: Optional[str] = None):
    qs = Vehicle.objects.all()
    if active_only:
        qs = qs.filter(is_active=True)
    if search:
        qs = qs.filter(vehicle_no__icontains="".join(search.split()))
    return qs.order_by("vehicle_no", "id")


def _ensure_unique_vehicle(vehicle: Vehicle) -> None:
    if not vehicle.is_active:
        return
    number = "".join((vehicle.vehicle_no or "").split()).upper()
    clash = Vehicle.objects.filter(is_active=True, vehicle_no=number).exclude(pk=vehicle.pk)
    if clash.exists():
        raise MasterDataError(f"An active vehicle {number!r} already exists.")


@transaction.atomic
def create_vehicle(*, user=None, **fields) -> Vehicle:
    _check_fields(fields, VEHICLE_FIELDS, "vehicle")

    vehicle = Vehicle(**fields)
    _ensure_unique_vehicle(vehicle)
    _save(vehicle, f"An active vehicle {vehicle.vehicle_no!r} already exists.")

    logger.info("Vehicle created", extra={"vehicle_id": vehicle.id, "vehicle_no": vehicle.vehicle_no})
    log_activity(
        action=ActivityLog.CREATE,
        entity=ActivityLog.ENTITY_VEHICLE,
        entity_id=vehicle.id,
        description=f"Vehicle {vehicle.vehicle_no} created",
        user=user,
    )
    return vehicle


@transaction.atomic
def update_vehicle(vehicle_id, *, user=None, **fields) -> Vehicle:
    _check_fields(fields, VEHICLE_FIELDS, "vehicle")

    vehicle = get_vehicle(vehicle_id, for_update=True)

    changed = {}
    for name, value in fields.items():
        if getattr(vehicle, name) != value:
            changed[name] = {"from": str(getattr(vehicle, name)), "to": str(value)}
            setattr(vehicle, name, value)

    if not changed:
        return vehicle

    _ensure_unique_vehicle(vehicle)
    _save(vehicle, f"An active vehicle {vehicle.vehicle_no!r} already exists.")

    logger.info("Vehicle updated", extra={"vehicle_id": vehicle.id, "fields": sorted(changed)})
    log_activity(
        action=ActivityLog.UPDATE,
        entity=ActivityLog.ENTITY_VEHICLE,
        entity_id=vehicle.id,
        description=f"Vehicle {vehicle.vehicle_no} updated",
        user=user,
        metadata={"changes": changed},
    )
    return vehicle


def deactivate_vehicle(vehicle_id, *, user=None) -> Vehicle:
    return update_vehicle(vehicle_id, user=user, is_active=False)


def normalize_vehicle_numbers(value: Optional[str]) -> str:
    """
    "lea-1 , qta 9," -> "LEA-1, QTA9", every number checked against active vehicles.

    Raises VehicleNotFoundError naming the unregistered numbers.
    """
    numbers: List[str] = []
    for part in (value or "").split(","):
        number = "".join(part.split()).upper()
        if number and number not in numbers:
            numbers.append(number)

    if not numbers:
        return ""

    registered = set(
        Vehicle.objects.filter(is_active=True, vehicle_no__in=numbers).values_list("vehicle_no", flat=True)
    )
    missing = [n for n in numbers if n not in registered]
    if missing:
        raise VehicleNotFoundError(f"Unregistered vehicle(s): {', '.join(missing)}")

    return ", ".join(numbers)
