"""
Tests de los endpoints HTTP.
"""
import pytest
from fastapi.testclient import TestClient

from liquidaciones.main import app
from liquidaciones.schemas.schemas import (
    RentalPeriodSchema, StatementItemSchema, UnitTaxConfigSchema
)
from liquidaciones.services.rental_periods import BillingFrequency, RentalStatus
from liquidaciones.services.statement_calculator import ItemType
from liquidaciones.services.units import UnitType


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


RENTAL_U1 = {
    "id": "p1",
    "unitId": "u1",
    "tenantId": "t1",
    "startDate": "2025-01-01",
    "endDate": "2025-12-31",
    "priceAmount": "1000",
    "currency": "USD",
}


class TestStatementsEndpoints:

    def test_compute(self, client):
        response = client.post("/api/v1/statements/compute", json={
            "alquiler": "1000",
            "osse": 100,
            "inmob": 50,
            "tsu": 20,
            "obras": 30,
            "otrosTotal": 10,
            "iva": 210,
            "expensas": 80,
        })

        assert response.status_code == 200
        assert response.json() == {
            "ivaAlquiler": 210,
            "totalMes": 1360,
            "neto": 1280,
            "gastos": 210,
            "neteado": 1070,
        }
        assert "X-Process-Time" in response.headers

    def test_compute_with_items_and_rate(self, client):
        response = client.post("/api/v1/statements/compute", json={
            "alquiler": 1000,
            "iva": "",
            "aplicaIvaAlquiler": True,
            "ivaRate": 0.21,
            "items": [{"type": "DEDUCTION", "label": "Arreglo", "amount": "100"}],
        })

        data = response.json()
        assert data["ivaAlquiler"] == 210
        assert data["totalMes"] == 1110
        assert data["gastos"] == 100

    def test_compute_not_strict_accepts_negatives(self, client):
        response = client.post("/api/v1/statements/compute", json={"alquiler": -5})

        assert response.status_code == 200
        assert response.json()["totalMes"] == -5

    def test_compute_strict_rejects_invalid(self, client):
        response = client.post("/api/v1/statements/compute", json={
            "alquiler": -5,
            "ivaRate": 2,
            "strict": True,
        })

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["message"] == "Errores de validación"
        assert "Alquiler no puede ser negativo" in detail["errors"]
        assert len(detail["errors"]) == 2

    def test_compute_strict_allow_negatives(self, client):
        response = client.post("/api/v1/statements/compute", json={
            "alquiler": -5,
            "strict": True,
            "allowNegatives": True,
        })

        assert response.status_code == 200

    def test_validate(self, client):
        response = client.post("/api/v1/statements/validate", json={
            "alquiler": 100,
            "expensas": -1,
        })

        assert response.status_code == 200
        assert response.json() == {
            "valid": False,
            "errors": ["Expensas no puede ser negativo"],
        }

    def test_aggregate(self, client):
        response = client.post("/api/v1/statements/aggregate", json={
            "statements": [
                {"unitId": "u1", "groupId": "g2", "groupName": "Zeta", "totalMes": "100"},
                {"unitId": "u2", "groupId": "g1", "groupName": "Alpha", "totalMes": 50.5},
                {"unitId": "u3", "totalMes": 10},
            ]
        })

        assert response.status_code == 200
        data = response.json()
        assert [g["groupName"] for g in data] == ["Alpha", "Zeta", "Total General"]
        assert data[-1]["groupId"] is None
        assert data[-1]["totalMes"] == 160.5
        assert data[-1]["count"] == 3

    def test_draft(self, client):
        response = client.post("/api/v1/statements/draft", json={
            "unitId": "u1",
            "period": "2025-06",
            "unit": {
                "unitType": "LOCAL_COMERCIAL",
                "aplicaIvaAlquiler": True,
                "ivaRatePercent": 21,
                "monthlyExpensesAmount": 80,
            },
            "rentalPeriods": [RENTAL_U1],
        })

        assert response.status_code == 200
        data = response.json()
        assert data["currency"] == "USD"
        assert data["tenantId"] == "t1"
        assert data["rentalPeriodId"] == "p1"
        assert data["alquiler"] == 1000
        assert data["ivaRate"] == pytest.approx(0.21)
        assert data["totals"]["totalMes"] == 1210
        assert data["totals"]["neto"] == 1130

    def test_draft_invalid_period(self, client):
        response = client.post("/api/v1/statements/draft", json={
            "unitId": "u1",
            "period": "2025-13",
        })

        assert response.status_code == 422


class TestRentalPeriodsEndpoints:

    def test_conflicts(self, client):
        response = client.post("/api/v1/rental-periods/conflicts", json={
            "unitId": "u1",
            "startDate": "2025-12-31",
            "endDate": "2026-01-31",
            "rentalPeriods": [RENTAL_U1],
        })

        assert response.status_code == 200
        assert response.json() == {"hasConflicts": True, "conflictIds": ["p1"]}

    def test_conflicts_excluding_own_period(self, client):
        response = client.post("/api/v1/rental-periods/conflicts", json={
            "unitId": "u1",
            "startDate": "2025-03-01",
            "endDate": "2025-03-31",
            "excludeId": "p1",
            "rentalPeriods": [RENTAL_U1],
        })

        assert response.json()["hasConflicts"] is False

    def test_conflicts_dates_out_of_order(self, client):
        response = client.post("/api/v1/rental-periods/conflicts", json={
            "unitId": "u1",
            "startDate": "2025-03-31",
            "endDate": "2025-03-01",
        })

        assert response.status_code == 400

    def test_validate_conflict(self, client):
        response = client.post("/api/v1/rental-periods/validate", json={
            "unitId": "u1",
            "startDate": "2025-06-01",
            "endDate": "2025-06-30",
            "rentalPeriods": [RENTAL_U1],
        })

        assert response.status_code == 409
        assert response.json()["detail"] == "Conflicto: Ya existe un alquiler activo en este período"

    @pytest.mark.parametrize("rental_periods", [[], [RENTAL_U1]])
    def test_validate_dates_out_of_order(self, client, rental_periods):
        """Un rango invertido se rechaza aunque no haya superposición."""
        response = client.post("/api/v1/rental-periods/validate", json={
            "unitId": "u1",
            "startDate": "2025-06-30",
            "endDate": "2025-06-01",
            "rentalPeriods": rental_periods,
        })

        assert response.status_code == 400
        assert response.json()["detail"] == "La fecha de fin no puede ser anterior a la de inicio"

    def test_validate_available(self, client):
        response = client.post("/api/v1/rental-periods/validate", json={
            "unitId": "u1",
            "startDate": "2026-01-01",
            "endDate": "2026-01-31",
            "rentalPeriods": [RENTAL_U1],
        })

        assert response.status_code == 200
        assert response.json() == {"available": True}


class TestOtherEndpoints:

    def test_payment_status(self, client):
        response = client.post("/api/v1/payments/status", json={
            "period": "2025-06",
            "unitIds": ["u1", "u2"],
            "paymentUnitIds": ["u2"],
        })

        assert response.status_code == 200
        assert response.json() == [
            {"unitId": "u1", "period": "2025-06", "received": False},
            {"unitId": "u2", "period": "2025-06", "received": True},
        ]

    def test_tax_estimate(self, client):
        response = client.post("/api/v1/taxes/estimate", json={
            "year": 2025,
            "month": 6,
            "profile": {"ivaEnabled": True, "ivaRatePercent": 21},
            "rentalPeriods": [RENTAL_U1],
            "expenses": [{"month": "2025-06", "amount": "100", "deductible": True}],
        })

        assert response.status_code == 200
        data = response.json()
        assert data["income"] == 1000
        assert data["deductibleExpenses"] == 100
        assert data["netResult"] == 900
        assert data["ivaAmount"] == 210
        assert data["incomeByMonth"] == {"2025-06": 1000}

    def test_tax_estimate_invalid_month(self, client):
        response = client.post("/api/v1/taxes/estimate", json={"year": 2025, "month": 13})

        assert response.status_code == 422

    def test_unit_iva_defaults(self, client):
        response = client.get(
            "/api/v1/units/iva-defaults", params={"unitType": "LOCAL_COMERCIAL"}
        )

        assert response.status_code == 200
        assert response.json() == {"aplicaIvaAlquiler": True, "ivaRatePercent": 21}

    def test_unit_iva_defaults_dwelling(self, client):
        response = client.get("/api/v1/units/iva-defaults", params={"unitType": "DEPTO"})

        assert response.json() == {"aplicaIvaAlquiler": False, "ivaRatePercent": None}

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestSchemas:
    """Los esquemas entregan directamente los tipos del dominio."""

    def test_item_type(self):
        item = StatementItemSchema.model_validate(
            {"type": "DEDUCTION", "amount": "5", "isDeduction": False}
        ).to_item()

        assert item.type is ItemType.DEDUCTION
        assert item.amount == 5

    def test_rental_period_enums(self):
        period = RentalPeriodSchema.model_validate({
            **RENTAL_U1,
            "billingFrequency": "WEEKLY",
            "status": "RESERVED",
        }).to_period()

        assert period.billing_frequency is BillingFrequency.WEEKLY
        assert period.status is RentalStatus.RESERVED
        assert period.currency == "USD"

    def test_unit_type(self):
        config = UnitTaxConfigSchema.model_validate({"unitType": "COCHERA"}).to_config()

        assert config.unit_type is UnitType.COCHERA
