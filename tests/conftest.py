"""
Shared test fixtures: test client and sample budget builders.
"""

import pytest
from fastapi.testclient import TestClient

from budget_backend.main import app
from budget_backend.schemas import Budget


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def anyio_backend():
    return "asyncio"


def sample_budget_payload():
    """Complete budget in the camelCase shape the form sends."""
    return {
        "project": {
            "projectName": "Cocina Nueva",
            "beneficiary": "María López",
            "approverName": "Ing. Carlos Ruiz",
            "approvalDate": "2026-03-14",
            "observations": "Incluye retiro de escombros.",
        },
        "workers": [
            {"id": "w1", "name": "Pedro", "role": "Ayudante"},
            {"id": "w2", "name": "Juan Pérez", "role": "Principal"},
            {"id": "w3", "name": "Luis", "role": "Ayudante"},
        ],
        "materials": [
            {"id": "m1", "description": "Cemento gris", "quantity": 3, "unit": "bolsa", "unitPrice": 10.50},
            {"id": "m2", "description": "Arena", "quantity": 1, "unit": "m3", "unitPrice": 5},
        ],
        "labor": [
            {"id": "l1", "description": "Levantar muro", "cost": 100},
            {"id": "l2", "description": "Repello", "cost": 50.25},
        ],
        "diet": {"workersCount": 4, "days": 5, "costPerDay": 25},
    }


def sample_budget(**overrides) -> Budget:
    """Budget model built from the sample payload; top-level keys can be replaced."""
    payload = sample_budget_payload()
    payload.update(overrides)
    return Budget.model_validate(payload)


def empty_budget() -> Budget:
    return Budget()
