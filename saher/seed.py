"""
saher.seed
==========

Fixed sample dataset used when no saved snapshot exists yet.

The stored statuses are deliberately left out: the gateway hydrates the
seed like any other snapshot, so every record is classified against the
current day.  Ids are unique across all categories.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List

from .models import ARCHIVE_KEY

logger = logging.getLogger(__name__)

SEED_DATA: Dict[str, List[Dict[str, Any]]] = {
    "commercialLicenses": [
        {"id": 1, "name": "General trade license", "number": "CN-1234567", "expiryDate": "2027-05-15",
         "cost": 1500, "notes": "Long-term renewal", "attachments": []},
        {"id": 2, "name": "Import / export license", "number": "CN-7654321", "expiryDate": "2026-03-20",
         "cost": 3500, "notes": "", "attachments": []},
        {"id": 3, "name": "Industrial license", "number": "CN-2468135", "expiryDate": "2025-11-01",
         "cost": 5000, "notes": "Renewal required", "attachments": []},
    ],
    "operationalLicenses": [
        {"id": 4, "name": "Heavy equipment operation", "number": "OP-987654", "expiryDate": "2027-08-20",
         "cost": 800, "notes": "", "attachments": []},
        {"id": 5, "name": "Forklift operation", "number": "OP-123987", "expiryDate": "2025-10-15",
         "cost": 950, "notes": "", "attachments": []},
    ],
    "civilDefenseCerts": [
        {"id": 6, "name": "Building completion certificate", "number": "CD-CERT-001", "expiryDate": "2028-01-01",
         "cost": 1200, "notes": "Annual inspection required", "attachments": []},
        {"id": 7, "name": "Equipment safety certificate", "number": "CD-CERT-002", "expiryDate": "2026-04-10",
         "cost": 1200, "notes": "", "attachments": []},
    ],
    "specialAgencies": [
        {"id": 8, "name": "Branch power of attorney", "number": "AUTH-DXB-01", "expiryDate": "2027-02-01",
         "cost": 500, "notes": "", "attachments": []},
        {"id": 9, "name": "Government liaison authorisation", "number": "AUTH-GOV-02", "expiryDate": "2026-02-15",
         "cost": 750, "notes": "", "attachments": []},
    ],
    "leaseContracts": [
        {"id": 10, "name": "Head office lease", "number": "LC-HQ-001", "documentedExpiryDate": "2027-12-31",
         "internalExpiryDate": "2027-12-31", "contractType": "DocumentedAndInternal",
         "documentedCost": 200000, "internalCost": 50000, "notes": "Long-term lease", "attachments": []},
        {"id": 11, "name": "Warehouse lease", "number": "LC-WH-002", "documentedExpiryDate": "2025-01-01",
         "internalExpiryDate": "", "contractType": "Documented",
         "documentedCost": 120000, "notes": "", "attachments": []},
        {"id": 12, "name": "Cleaning services", "number": "SC-CL-003", "documentedExpiryDate": "",
         "internalExpiryDate": "2028-06-30", "contractType": "Internal",
         "internalCost": 60000, "notes": "", "attachments": []},
    ],
    "generalContracts": [
        {"id": 13, "name": "Office furniture supply", "number": "SC-GEN-001", "expiryDate": "2027-07-20",
         "renewalType": "Manual", "cost": 45000, "notes": "Yearly price review", "attachments": []},
        {"id": 14, "name": "Marketing services", "number": "SC-GEN-002", "expiryDate": "2026-05-25",
         "renewalType": "Automatic", "cost": 120000, "notes": "", "attachments": []},
    ],
    "procedures": [
        {"id": 15, "licenseName": "General trade license renewal", "authority": "Department of Economic Development",
         "contactNumbers": "600-545-555", "email": "info@ded.example", "websiteName": "DED eServices",
         "websiteUrl": "https://eservices.ded.example", "username": "saher_user", "password": "change-me",
         "employeeName": "A. Mahmoud", "employeeNumber": "EMP-001",
         "requirements": "1. Copy of the previous license\n2. No-objection certificate",
         "notes": "Renewed fully online", "attachments": []},
        {"id": 16, "licenseName": "Civil defense license", "authority": "Civil Defense Directorate",
         "contactNumbers": "997", "email": "info@cd.example", "websiteName": "CD Portal",
         "websiteUrl": "https://cd.example", "username": "admin_saher", "password": "change-me",
         "employeeName": "", "employeeNumber": "", "requirements": "Approved building plan",
         "notes": "Site inspection before renewal", "attachments": []},
    ],
    "otherTopicsData": [
        {"id": 17, "name": "Staff parking permit", "number": "PRK-001", "expiryDate": "2027-05-15",
         "cost": 250, "notes": "Yearly renewal", "attachments": []},
        {"id": 18, "name": "PO box subscription", "number": "PO-BOX-456", "expiryDate": "2027-09-01",
         "cost": 300, "notes": "", "attachments": []},
        {"id": 19, "name": "Chamber of commerce membership", "number": "MEM-789", "expiryDate": "2025-12-01",
         "cost": 2200, "notes": "", "attachments": []},
    ],
    "trademarkCerts": [
        {"id": 20, "name": "Logo trademark registration", "number": "TM-001", "registrationDate": "2020-01-01",
         "expiryDate": "2030-01-01", "cost": 5000, "notes": "", "attachments": []},
        {"id": 21, "name": "Trade name certificate", "number": "TM-002", "registrationDate": "2020-06-15",
         "expiryDate": "2026-01-20", "cost": 2000, "notes": "", "attachments": []},
    ],
    ARCHIVE_KEY: [],
}


def seed_snapshot() -> Dict[str, List[Dict[str, Any]]]:
    """Independent copy of :data:`SEED_DATA`."""
    return copy.deepcopy(SEED_DATA)


def seed_database(gateway=None) -> int:
    """
    Overwrite the saved snapshot with the seed dataset.

    Returns the number of live records written.
    """
    from .persistence import PersistenceGateway, store_from_snapshot

    gateway = gateway or PersistenceGateway()
    store = store_from_snapshot(seed_snapshot(), clock=gateway.clock)
    if not gateway.save(store):
        raise RuntimeError(f"could not save seed data: {gateway.last_error}")
    logger.info(f"Seeded {len(store)} records")
    return len(store)
