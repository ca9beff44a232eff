"""
Unit tests for VariantService against an in-memory database.
"""
import pytest

from backend.models.database import Unit, Variant
from backend.models.schemas import UnitPayload, VariantPayload
from backend.services.variant_service import (
    DuplicateVariantError,
    VariantNotFoundError,
    VariantService,
    name_key,
)


def _payload(name, *units):
    return VariantPayload.model_validate({
        "variantName": name,
        "unitDtos": [
            {"unitId": u[0], "unitName": u[1]} if isinstance(u, tuple) else {"unitName": u}
            for u in units
        ],
    })


@pytest.fixture
def service():
    return VariantService()


class TestCreate:
    """Tests for create_variant()."""

    def test_assigns_ids_and_keeps_order(self, service, db_session):
        variant = service.create_variant(db_session, _payload("Tablet", "Strip", "Box"))

        assert len(variant.id) == 36
        assert [u.name for u in variant.units] == ["Strip", "Box"]
        assert all(u.id for u in variant.units)
        assert variant.name_key == "tablet"

    def test_duplicate_name_rejected(self, service, db_session):
        service.create_variant(db_session, _payload("Tablet", "Box"))

        with pytest.raises(DuplicateVariantError) as exc_info:
            service.create_variant(db_session, _payload(" TABLET ", "Strip"))

        assert str(exc_info.value) == "Variant Name already exists"

    def test_to_dict(self, service, db_session):
        variant = service.create_variant(db_session, _payload("Tablet", "Box"))
        data = variant.to_dict()
        assert data["variantId"] == variant.id
        assert data["variantName"] == "Tablet"
        assert data["unitDtos"] == [{"unitId": variant.units[0].id, "unitName": "Box"}]


class TestRead:
    """Tests for list_variants() and get_variant()."""

    def test_list_ordered_by_name(self, service, db_session):
        for name in ("syrup", "Capsule", "Tablet"):
            service.create_variant(db_session, _payload(name, "Box"))

        names = [v.name for v in service.list_variants(db_session)]

        assert names == ["Capsule", "syrup", "Tablet"]

    def test_get_missing(self, service, db_session):
        with pytest.raises(VariantNotFoundError):
            service.get_variant(db_session, "missing")


class TestUpdate:
    """Tests for update_variant() full-replacement semantics."""

    def test_rename_keep_remove_and_add_units(self, service, db_session):
        variant = service.create_variant(db_session, _payload("Tablet", "Box", "Strip"))
        box_id, strip_id = [u.id for u in variant.units]

        updated = service.update_variant(
            db_session,
            variant.id,
            _payload("Tablets", "Blister", (box_id, "Carton")),
        )

        assert updated.name == "Tablets"
        assert [u.name for u in updated.units] == ["Blister", "Carton"]
        assert updated.units[1].id == box_id
        assert db_session.query(Unit).filter(Unit.id == strip_id).first() is None

    def test_keeping_own_name(self, service, db_session):
        variant = service.create_variant(db_session, _payload("Tablet", "Box"))

        updated = service.update_variant(db_session, variant.id, _payload("tablet", "Box"))

        assert updated.name == "tablet"

    def test_name_taken_by_other(self, service, db_session):
        service.create_variant(db_session, _payload("Tablet", "Box"))
        syrup = service.create_variant(db_session, _payload("Syrup", "Bottle"))

        with pytest.raises(DuplicateVariantError):
            service.update_variant(db_session, syrup.id, _payload("Tablet", "Bottle"))

    def test_unknown_unit_id_creates_unit(self, service, db_session):
        variant = service.create_variant(db_session, _payload("Tablet", "Box"))

        updated = service.update_variant(db_session, variant.id, _payload("Tablet", ("foreign-id", "Strip")))

        assert [u.name for u in updated.units] == ["Strip"]
        assert updated.units[0].id != "foreign-id"

    def test_existing_unit_claimed_once(self, service, db_session):
        variant = service.create_variant(db_session, _payload("Tablet", "Box"))
        box_id = variant.units[0].id
        # Bypasses request validation, which rejects repeated ids
        payload = VariantPayload.model_construct(
            variant_name="Tablet",
            units=[
                UnitPayload.model_construct(unit_id=box_id, unit_name="Box"),
                UnitPayload.model_construct(unit_id=box_id, unit_name="Strip"),
            ],
        )

        updated = service.update_variant(db_session, variant.id, payload)

        assert [u.name for u in updated.units] == ["Box", "Strip"]
        assert updated.units[0].id == box_id
        assert updated.units[1].id != box_id

    def test_missing_variant(self, service, db_session):
        with pytest.raises(VariantNotFoundError):
            service.update_variant(db_session, "missing", _payload("Tablet", "Box"))


class TestDelete:
    """Tests for delete_variant()."""

    def test_deletes_units_too(self, service, db_session):
        variant = service.create_variant(db_session, _payload("Tablet", "Box", "Strip"))

        service.delete_variant(db_session, variant.id)

        assert db_session.query(Variant).count() == 0
        assert db_session.query(Unit).count() == 0

    def test_missing_variant(self, service, db_session):
        with pytest.raises(VariantNotFoundError):
            service.delete_variant(db_session, "missing")


def test_name_key():
    assert name_key("  Soft Gel ") == "soft gel"
