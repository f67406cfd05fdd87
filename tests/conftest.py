import sys
import os
from datetime import date, datetime, timezone

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lumina_ops.config import Settings  # noqa: E402
from lumina_ops.models import Booking, Property, Role, User  # noqa: E402
from lumina_ops.services.inventory_ledger import InventoryService  # noqa: E402
from lumina_ops.services.job_lifecycle import JobLifecycleService  # noqa: E402
from lumina_ops.store import OperationsStore  # noqa: E402


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the developer's environment"""
    return Settings(
        environment="test",
        gemini_api_key="",
        timezone="Europe/London",
        turnover_deadline_time="15:00",
        notification_limit=10,
        log_json=False,
        bootstrap_admin_id="admin",
    )


@pytest.fixture
def store(test_settings) -> OperationsStore:
    """
    Store with one user per role, two properties with stock lines and
    two bookings, mirroring a small London portfolio.
    """
    store = OperationsStore(notification_limit=test_settings.notification_limit)

    store.add_user(User(id="u1", name="Alice Admin", email="alice@lumina.com", role=Role.ADMIN))
    store.add_user(User(
        id="u2", name="Bob Cleaner", email="bob@lumina.com", role=Role.CLEANER,
        whatsapp="44123456789"
    ))
    store.add_user(User(
        id="u3", name="Charlie Handyman", email="charlie@lumina.com", role=Role.HANDYMAN,
        trade_tags=["Plumbing", "Electrical"], score=4.8, rate=45
    ))
    store.add_user(User(id="u4", name="Dana Contractor", email="dana@lumina.com", role=Role.CONTRACTOR))

    inventory = InventoryService(store)
    inventory.onboard_property(
        Property(
            id="p1", name="The Shard Suite",
            address="32 London Bridge St, London SE1 9SG",
            par_levels={"Toilet Roll": 10, "Coffee Pods": 20},
        ),
        categories={"Toilet Roll": "Linen"},
    )
    inventory.onboard_property(Property(
        id="p2", name="Notting Hill Mews",
        address="12 Kensington Park Rd, London W11 3BU",
        par_levels={"Toilet Roll": 8, "Coffee Pods": 15},
    ))

    store.add_booking(Booking(
        id="b1", property_id="p1", guest_name="John Doe", reference="TK-9981",
        check_in=date(2023, 10, 25), check_out=date(2023, 10, 27)
    ))
    store.add_booking(Booking(
        id="b2", property_id="p2", guest_name="Jane Smith", reference="TK-4421",
        check_in=date(2023, 10, 26), check_out=date(2023, 10, 27)
    ))
    return store


@pytest.fixture
def job_service(store, test_settings) -> JobLifecycleService:
    return JobLifecycleService(store, test_settings)


@pytest.fixture
def turnover_job(job_service):
    """Turnover for booking b1 assigned to the cleaner"""
    return job_service.create_turnover_job("b1", assignee_ids=["u2"])


@pytest.fixture
def after_deadline() -> datetime:
    return datetime(2023, 10, 28, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def before_deadline() -> datetime:
    return datetime(2023, 10, 26, 9, 0, tzinfo=timezone.utc)
