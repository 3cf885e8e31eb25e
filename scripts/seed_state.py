"""Add demo employees to the remote state document."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.bizledger.bizledger.container import build_container
from src.bizledger.bizledger.sync.serialization import to_storage

DEMO_EMPLOYEES = [
    {
        "fullName": "Ahmed Khan",
        "employeeType": "Labour",
        "designation": "Press Operator",
        "section": "Production",
        "joiningDate": "2021-03-01",
        "basicSalary": 1500,
        "allowance": 200,
    },
    {
        "fullName": "Maria Santos",
        "employeeType": "Office",
        "designation": "Accountant",
        "section": "Accounts",
        "joiningDate": "2018-07-15",
        "basicSalary": 3000,
        "allowance": 500,
        "otherExps": 100,
    },
]


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)
    path = container.sync_engine.doc_path

    snapshot = container.documents.get(path)
    if snapshot.exists:
        container.store.apply_remote(snapshot.data)

    existing = {e.get("fullName") for e in container.employee_service.list_employees()}
    created = container.employee_service.create_many([e for e in DEMO_EMPLOYEES if e["fullName"] not in existing])
    container.documents.set(path, to_storage(container.store.state))
    print(f"OK: Seeded {len(created)} employees -> {path}")


if __name__ == "__main__":
    main()
