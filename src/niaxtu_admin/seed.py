from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging

from niaxtu_admin.api.dependencies import (
    create_complaint_service,
    create_complaint_type_service,
    create_sector_service,
    create_structure_service,
    create_sub_sector_service,
    create_target_type_service,
)
from niaxtu_admin.catalog import Severity
from niaxtu_admin.complaints import ComplaintPriority, ComplaintStatus
from niaxtu_admin.storage.memory_store import DocumentStore

LOGGER = logging.getLogger(__name__)


async def seed_demo_data(store: DocumentStore, *, now: datetime | None = None) -> None:
    """Populate an empty store with a small, consistent demo catalog and complaints."""

    current_time = now or datetime.now(timezone.utc)
    sectors = create_sector_service(store)
    sub_sectors = create_sub_sector_service(store)
    structures = create_structure_service(store)
    complaint_types = create_complaint_type_service(store)
    target_types = create_target_type_service(store)
    complaints = create_complaint_service(store)

    health = await sectors.create_item(
        name="Santé",
        description="Hôpitaux, centres de santé et pharmacies",
        icon="fa-hospital",
        color="#ef4444",
    )
    education = await sectors.create_item(
        name="Éducation",
        description="Écoles, lycées et universités",
        icon="fa-graduation-cap",
        color="#10b981",
    )
    transport = await sectors.create_item(
        name="Transport",
        description="Transports publics et infrastructures routières",
        icon="fa-bus",
        color="#f59e0b",
    )

    hospitals = await sub_sectors.create_item(sector_id=health.item_id, name="Hôpitaux publics", icon="fa-h-square")
    await sub_sectors.create_item(sector_id=health.item_id, name="Pharmacies", icon="fa-pills")
    universities = await sub_sectors.create_item(sector_id=education.item_id, name="Universités")
    await sub_sectors.create_item(sector_id=transport.item_id, name="Bus urbains")

    main_hospital = await structures.create_item(
        sector_id=health.item_id,
        sub_sector_id=hospitals.item_id,
        name="Hôpital Principal de Dakar",
        structure_type="hopital",
        address="Avenue Nelson Mandela",
        city="Dakar",
        phone="+221 33 839 50 50",
    )
    university = await structures.create_item(
        sector_id=education.item_id,
        sub_sector_id=universities.item_id,
        name="Université Cheikh Anta Diop",
        structure_type="universite",
        city="Dakar",
    )
    await structures.create_item(
        sector_id=transport.item_id,
        name="Dakar Dem Dikk",
        structure_type="transport",
        city="Dakar",
    )

    waiting_time = await complaint_types.create_item(
        name="Temps d'attente excessif",
        sector_id=health.item_id,
        severity=Severity.MOYENNE,
    )
    corruption = await complaint_types.create_item(
        name="Corruption",
        description="Demande de paiement illégal",
        severity=Severity.CRITIQUE,
        auto_assignment=True,
    )
    await complaint_types.create_item(name="Retard de service", sector_id=transport.item_id, severity=Severity.FAIBLE)

    staff = await target_types.create_item(
        name="Personnel",
        category="personne",
        examples=["Agent d'accueil", "Médecin", "Enseignant"],
    )
    await target_types.create_item(name="Service", category="organisation", examples=["Urgences", "Scolarité"])

    await complaints.record(
        title="Attente de six heures aux urgences",
        status=ComplaintStatus.RESOLVED,
        priority=ComplaintPriority.HIGH,
        created_at=(current_time - timedelta(days=12)).isoformat(),
        resolved_at=(current_time - timedelta(days=9)).isoformat(),
        sector_id=health.item_id,
        sub_sector_id=hospitals.item_id,
        structure_id=main_hospital.item_id,
        complaint_type_id=waiting_time.item_id,
        target_type_id=staff.item_id,
    )
    await complaints.record(
        title="Frais d'inscription non justifiés",
        status=ComplaintStatus.IN_PROGRESS,
        priority=ComplaintPriority.URGENT,
        created_at=(current_time - timedelta(days=4)).isoformat(),
        sector_id=education.item_id,
        sub_sector_id=universities.item_id,
        structure_id=university.item_id,
        complaint_type_id=corruption.item_id,
        target_type_id=staff.item_id,
    )
    await complaints.record(
        title="Accueil désagréable au guichet",
        status=ComplaintStatus.PENDING,
        created_at=(current_time - timedelta(days=1)).isoformat(),
        sector_id=health.item_id,
        structure_id=main_hospital.item_id,
        complaint_type_id=waiting_time.item_id,
    )
    await complaints.record(
        title="Plainte sans objet",
        status=ComplaintStatus.REJECTED,
        priority=ComplaintPriority.LOW,
        created_at=(current_time - timedelta(days=40)).isoformat(),
    )
    LOGGER.info(
        "demo data seeded: %s",
        ", ".join(f"{name}={len(store.collection(name))}" for name in store.collection_names()),
    )
