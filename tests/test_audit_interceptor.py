"""Tests for AuditInterceptor: which changes become AuditLog records and with what values."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from unittest.mock import MagicMock, PropertyMock, patch

from src.audit.interceptor import AuditInterceptor, ChangeKind, EntityChange
from src.authorization.context import SYSTEM_CONTEXT, Identity, RequestContext
from src.models.patient import AUDITED_PATIENT_FIELDS, Patient
from src.models.role import Role
from src.models.tenant import Tenant
from tests.conftest import make_patient

# ── Helpers ──────────────────────────────────────────────────────────


def _make_context(user_id: str = "u1") -> RequestContext:
    return RequestContext(
        identity=Identity(user_id=user_id, role="Admin"),
        ip_address="10.0.0.7",
        user_agent="pytest",
    )


def _make_tenant() -> Tenant:
    return Tenant(
        id=uuid.uuid4(),
        name="Studio Bianchi",
        country="IT",
        timezone="Europe/Rome",
        slug="studio-bianchi",
        logo_url=None,
        is_active=True,
    )


# ── CREATE ───────────────────────────────────────────────────────────


class TestCreate:
    def test_full_snapshot_in_new_values(self):
        tenant = _make_tenant()

        logs = AuditInterceptor().create_audit_logs([EntityChange(tenant, ChangeKind.INSERT)], _make_context())

        assert len(logs) == 1
        log = logs[0]
        assert log.action == "CREATE"
        assert log.entity_type == "Tenant"
        assert log.entity_id == str(tenant.id)
        assert log.old_values is None
        assert log.new_values == {
            "name": "Studio Bianchi",
            "country": "IT",
            "timezone": "Europe/Rome",
            "slug": "studio-bianchi",
            "logo_url": None,
            "is_active": True,
        }
        assert log.user_id == "u1"
        assert log.ip_address == "10.0.0.7"
        assert log.user_agent == "pytest"

    def test_values_are_json_safe(self):
        patient = make_patient()

        [log] = AuditInterceptor().create_audit_logs([EntityChange(patient, ChangeKind.INSERT)], _make_context())

        assert log.new_values["date_of_birth"] == "1990-05-17"
        assert log.new_values["allergies"] == ["penicillin"]


# ── UPDATE ───────────────────────────────────────────────────────────


class TestUpdate:
    def test_only_changed_auditable_properties(self):
        patient = make_patient(city="Milano")
        change = EntityChange(
            patient,
            ChangeKind.UPDATE,
            {
                "city": ("Roma", "Milano"),
                "phone_number": ("+39 333 1234567", "+39 333 1234567"),
                "updated_at": (None, datetime(2026, 2, 1, tzinfo=UTC)),
            },
        )

        [log] = AuditInterceptor().create_audit_logs([change], _make_context())

        assert log.action == "UPDATE"
        assert log.old_values == {"city": "Roma"}
        assert log.new_values == {"city": "Milano"}

    def test_non_auditable_change_records_nothing(self):
        patient = make_patient(archived_at=datetime(2026, 2, 1, tzinfo=UTC))
        change = EntityChange(patient, ChangeKind.UPDATE, {"archived_at": (None, patient.archived_at)})

        assert AuditInterceptor().create_audit_logs([change], _make_context()) == []

    def test_unchanged_values_record_nothing(self):
        change = EntityChange(make_patient(), ChangeKind.UPDATE, {"city": ("Roma", "Roma")})
        assert AuditInterceptor().create_audit_logs([change], _make_context()) == []


# ── DELETE ───────────────────────────────────────────────────────────


class TestDelete:
    def test_patient_deleted_by_user(self):
        patient = make_patient()

        [log] = AuditInterceptor().create_audit_logs([EntityChange(patient, ChangeKind.DELETE)], _make_context("u1"))

        assert log.action == "DELETE"
        assert log.entity_type == "Patient"
        assert log.entity_id == str(patient.id)
        assert log.user_id == "u1"
        assert log.new_values is None
        assert list(log.old_values) == list(AUDITED_PATIENT_FIELDS)
        assert log.old_values["last_name"] == "Rossi"


# ── Filtering & degradation ──────────────────────────────────────────


class TestFiltering:
    def test_non_auditable_entities_ignored(self):
        role = Role(id=uuid.uuid4(), name="Admin", description="")
        assert AuditInterceptor().create_audit_logs([EntityChange(role, ChangeKind.INSERT)], _make_context()) == []

    def test_unchanged_kind_ignored(self):
        change = EntityChange(make_patient(), ChangeKind.UNCHANGED)
        assert AuditInterceptor().create_audit_logs([change], _make_context()) == []

    def test_no_context_no_records(self):
        change = EntityChange(make_patient(), ChangeKind.DELETE)
        assert AuditInterceptor().create_audit_logs([change], None) == []

    def test_anonymous_context_no_records(self):
        change = EntityChange(make_patient(), ChangeKind.DELETE)
        assert AuditInterceptor().create_audit_logs([change], SYSTEM_CONTEXT) == []

    def test_one_record_per_change(self):
        changes = [
            EntityChange(_make_tenant(), ChangeKind.INSERT),
            EntityChange(make_patient(), ChangeKind.DELETE),
        ]
        logs = AuditInterceptor().create_audit_logs(changes, _make_context())
        assert [log.action for log in logs] == ["CREATE", "DELETE"]


class TestDegradation:
    def test_unreadable_origin_stored_as_null(self):
        context = MagicMock()
        context.user_id = "u1"
        type(context).ip_address = PropertyMock(side_effect=RuntimeError("no client"))
        context.user_agent = "pytest"

        [log] = AuditInterceptor().create_audit_logs([EntityChange(make_patient(), ChangeKind.DELETE)], context)

        assert log.ip_address is None
        assert log.user_agent == "pytest"

    def test_failing_entity_skipped_others_kept(self):
        changes = [
            EntityChange(make_patient(), ChangeKind.DELETE),
            EntityChange(_make_tenant(), ChangeKind.INSERT),
        ]

        with patch.object(Patient, "get_auditable_properties", side_effect=RuntimeError("broken")):
            logs = AuditInterceptor().create_audit_logs(changes, _make_context())

        assert [log.entity_type for log in logs] == ["Tenant"]
