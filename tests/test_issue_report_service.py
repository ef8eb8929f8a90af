"""
ShipTrack Backend: Issue Report Service Tests
==============================================

What we test:
    ✅ Create: defaults, trimming, title and shipment_id validation
    ✅ Weak shipment reference: unknown ids accepted, enrichment is null
    ✅ Listing: newest first, per shipment, per assignee (inner join)
    ✅ Partial update: presence semantics, null handling, resolution rules
    ✅ camelCase keys from the mobile and dashboard clients
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from shiptrack.exceptions import NotFoundError, ValidationError
from shiptrack.schemas.issue_report import IssueReportCreate, IssueReportUpdate
from shiptrack.services.issue_report_service import IssueReportService

FIXED_NOW = datetime(2025, 5, 26, 14, 0, tzinfo=timezone.utc)


class TestCreateIssue:

    def setup_method(self):
        self.service = IssueReportService()

    @pytest.mark.asyncio
    async def test_create_with_defaults(self, db_session):
        with patch("shiptrack.services.issue_report_service.utcnow", return_value=FIXED_NOW):
            result = await self.service.create_issue(
                db_session, IssueReportCreate(title="Doos nat", shipment_id=3)
            )

        assert result.id > 0
        assert result.title == "Doos nat"
        assert result.shipment_id == 3
        assert result.created_at == FIXED_NOW
        assert result.is_important is False
        assert result.is_fixed is False
        assert result.resolved_at is None

    @pytest.mark.asyncio
    async def test_text_fields_trimmed(self, db_session):
        result = await self.service.create_issue(
            db_session,
            IssueReportCreate(title="  Adres onvindbaar ", description=" poort dicht ", image_url=" /img/1.jpg "),
        )

        assert result.title == "Adres onvindbaar"
        assert result.description == "poort dicht"
        assert result.image_url == "/img/1.jpg"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title", ["", "    "])
    async def test_blank_title_rejected(self, db_session, title):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_issue(db_session, IssueReportCreate(title=title))
        assert "title" in exc_info.value.errors

        assert await self.service.list_issues(db_session) == []

    @pytest.mark.asyncio
    async def test_title_length_limit(self, db_session):
        ok = await self.service.create_issue(db_session, IssueReportCreate(title="x" * 255))
        assert len(ok.title) == 255

        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_issue(db_session, IssueReportCreate(title="x" * 256))
        assert "title" in exc_info.value.errors

    @pytest.mark.asyncio
    async def test_negative_shipment_id_rejected(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_issue(
                db_session, IssueReportCreate(title="Kapot", shipment_id=-1)
            )
        assert "shipment_id" in exc_info.value.errors

    @pytest.mark.asyncio
    async def test_multiple_errors_reported_together(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_issue(
                db_session, IssueReportCreate(title="", shipment_id=-5)
            )
        assert set(exc_info.value.errors) == {"title", "shipment_id"}

    @pytest.mark.asyncio
    async def test_unknown_shipment_accepted(self, db_session):
        """A failed QR scan can reference a shipment that does not exist."""
        created = await self.service.create_issue(
            db_session, IssueReportCreate(title="QR onleesbaar", shipment_id=9999)
        )

        listed = await self.service.list_issues(db_session)
        assert [i.id for i in listed] == [created.id]
        assert listed[0].shipment_id == 9999
        assert listed[0].shipment is None

        per_shipment = await self.service.list_for_shipment(db_session, 9999)
        assert [i.id for i in per_shipment] == [created.id]


class TestListIssues:

    def setup_method(self):
        self.service = IssueReportService()

    @pytest.mark.asyncio
    async def test_list_empty(self, db_session):
        assert await self.service.list_issues(db_session) == []

    @pytest.mark.asyncio
    async def test_newest_first_with_shipment(self, db_session, make_shipment, make_issue):
        shipment = await make_shipment(assigned_to="jan")
        older = await make_issue(title="Oud", shipment_id=shipment.id, created_at=FIXED_NOW - timedelta(days=1))
        newer = await make_issue(title="Nieuw", shipment_id=None, created_at=FIXED_NOW)

        result = await self.service.list_issues(db_session)

        assert [i.id for i in result] == [newer.id, older.id]
        assert result[0].shipment is None
        assert result[1].shipment is not None
        assert result[1].shipment.id == shipment.id
        assert result[1].shipment.assigned_to == "jan"

    @pytest.mark.asyncio
    async def test_same_timestamp_ordered_by_id_desc(self, db_session, make_issue):
        first = await make_issue(created_at=FIXED_NOW)
        second = await make_issue(created_at=FIXED_NOW)

        result = await self.service.list_issues(db_session)

        assert [i.id for i in result] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_list_for_shipment(self, db_session, make_issue):
        a = await make_issue(shipment_id=1, created_at=FIXED_NOW - timedelta(hours=1))
        b = await make_issue(shipment_id=1, created_at=FIXED_NOW)
        await make_issue(shipment_id=2)

        result = await self.service.list_for_shipment(db_session, 1)

        assert [i.id for i in result] == [b.id, a.id]
        assert await self.service.list_for_shipment(db_session, 3) == []

    @pytest.mark.asyncio
    async def test_list_for_assignee_uses_current_assignment(self, db_session, make_shipment, make_issue):
        mine = await make_shipment(assigned_to="jan")
        theirs = await make_shipment(assigned_to="piet")
        my_issue = await make_issue(shipment_id=mine.id)
        await make_issue(shipment_id=theirs.id)
        await make_issue(shipment_id=None)
        await make_issue(shipment_id=9999)

        result = await self.service.list_for_assignee(db_session, "jan")

        assert [i.id for i in result] == [my_issue.id]
        assert result[0].shipment.assigned_to == "jan"

        # Reassigning the shipment moves the issue to the new assignee
        theirs.assigned_to = "jan"
        await db_session.flush()
        result = await self.service.list_for_assignee(db_session, "jan")
        assert len(result) == 2
        assert await self.service.list_for_assignee(db_session, "piet") == []

    @pytest.mark.asyncio
    async def test_get_unknown_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_issue(db_session, 1)


class TestUpdateIssue:

    def setup_method(self):
        self.service = IssueReportService()

    @pytest.mark.asyncio
    async def test_unknown_id_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_issue(db_session, 77, IssueReportUpdate(is_important=True))

    @pytest.mark.asyncio
    async def test_empty_update_changes_nothing(self, db_session, make_issue):
        issue = await make_issue(title="Deuk", shipment_id=4)

        result = await self.service.update_issue(db_session, issue.id, IssueReportUpdate())

        assert result.title == "Deuk"
        assert result.shipment_id == 4
        assert result.is_fixed is False
        assert result.resolved_at is None

    @pytest.mark.asyncio
    async def test_only_present_fields_change(self, db_session, make_issue):
        issue = await make_issue(title="Deuk", shipment_id=4)

        result = await self.service.update_issue(
            db_session, issue.id, IssueReportUpdate(is_important=True)
        )

        assert result.is_important is True
        assert result.title == "Deuk"
        assert result.shipment_id == 4

    @pytest.mark.asyncio
    async def test_explicit_null_clears_optional_fields(self, db_session, make_issue):
        issue = await make_issue(shipment_id=4)
        await self.service.update_issue(
            db_session, issue.id, IssueReportUpdate(description="beschrijving")
        )

        result = await self.service.update_issue(
            db_session,
            issue.id,
            IssueReportUpdate.model_validate({"description": None, "shipment_id": None}),
        )

        assert result.description is None
        assert result.shipment_id is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["title", "is_important", "is_fixed"])
    async def test_explicit_null_rejected_for_required_fields(self, db_session, make_issue, field):
        issue = await make_issue()

        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_issue(
                db_session, issue.id, IssueReportUpdate.model_validate({field: None})
            )
        assert field in exc_info.value.errors

    @pytest.mark.asyncio
    async def test_update_validates_title_and_shipment_id(self, db_session, make_issue):
        issue = await make_issue(title="Oud")

        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_issue(
                db_session, issue.id, IssueReportUpdate(title="   ", shipment_id=-2)
            )
        assert set(exc_info.value.errors) == {"title", "shipment_id"}

        stored = await self.service.get_issue(db_session, issue.id)
        assert stored.title == "Oud"

    @pytest.mark.asyncio
    async def test_fix_without_timestamp_uses_now(self, db_session, make_issue):
        issue = await make_issue()

        with patch("shiptrack.services.issue_report_service.utcnow", return_value=FIXED_NOW):
            result = await self.service.update_issue(
                db_session, issue.id, IssueReportUpdate(is_fixed=True)
            )

        assert result.is_fixed is True
        assert result.resolved_at == FIXED_NOW

    @pytest.mark.asyncio
    async def test_fix_with_timestamp_uses_given_value(self, db_session, make_issue):
        issue = await make_issue()
        resolved = datetime(2025, 5, 20, 8, 0, tzinfo=timezone.utc)

        result = await self.service.update_issue(
            db_session, issue.id, IssueReportUpdate(is_fixed=True, resolved_at=resolved)
        )

        assert result.is_fixed is True
        assert result.resolved_at == resolved

    @pytest.mark.asyncio
    async def test_naive_timestamp_treated_as_utc(self, db_session, make_issue):
        issue = await make_issue()

        result = await self.service.update_issue(
            db_session, issue.id, IssueReportUpdate(resolved_at=datetime(2025, 5, 20, 8, 0))
        )

        assert result.resolved_at == datetime(2025, 5, 20, 8, 0, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_unfix_clears_resolved_at(self, db_session, make_issue):
        issue = await make_issue()
        await self.service.update_issue(db_session, issue.id, IssueReportUpdate(is_fixed=True))

        result = await self.service.update_issue(
            db_session, issue.id, IssueReportUpdate(is_fixed=False)
        )

        assert result.is_fixed is False
        assert result.resolved_at is None

    @pytest.mark.asyncio
    async def test_unfix_ignores_supplied_timestamp(self, db_session, make_issue):
        issue = await make_issue()

        result = await self.service.update_issue(
            db_session,
            issue.id,
            IssueReportUpdate(is_fixed=False, resolved_at=FIXED_NOW),
        )

        assert result.is_fixed is False
        assert result.resolved_at is None

    @pytest.mark.asyncio
    async def test_resolved_at_alone_implies_fixed(self, db_session, make_issue):
        issue = await make_issue()

        result = await self.service.update_issue(
            db_session, issue.id, IssueReportUpdate(resolved_at=FIXED_NOW)
        )

        assert result.is_fixed is True
        assert result.resolved_at == FIXED_NOW

    @pytest.mark.asyncio
    async def test_null_resolved_at_alone_is_noop(self, db_session, make_issue):
        issue = await make_issue()
        await self.service.update_issue(
            db_session, issue.id, IssueReportUpdate(resolved_at=FIXED_NOW)
        )

        result = await self.service.update_issue(
            db_session, issue.id, IssueReportUpdate.model_validate({"resolved_at": None})
        )

        assert result.is_fixed is True
        assert result.resolved_at == FIXED_NOW

    @pytest.mark.asyncio
    async def test_repeated_fix_advances_resolved_at(self, db_session, make_issue):
        issue = await make_issue()
        later = FIXED_NOW + timedelta(hours=2)

        with patch("shiptrack.services.issue_report_service.utcnow", return_value=FIXED_NOW):
            await self.service.update_issue(db_session, issue.id, IssueReportUpdate(is_fixed=True))
        with patch("shiptrack.services.issue_report_service.utcnow", return_value=later):
            result = await self.service.update_issue(
                db_session, issue.id, IssueReportUpdate(is_fixed=True)
            )

        assert result.resolved_at == later

    @pytest.mark.asyncio
    async def test_fix_then_unfix_round_trip(self, db_session, make_shipment, make_issue):
        """Dashboard marks an issue fixed by mistake, then reopens it."""
        shipment = await make_shipment(assigned_to="jan")
        issue = await make_issue(shipment_id=shipment.id)

        fixed = await self.service.update_issue(
            db_session, issue.id, IssueReportUpdate(is_fixed=True, is_important=True)
        )
        assert fixed.is_fixed is True
        assert fixed.resolved_at is not None

        reopened = await self.service.update_issue(
            db_session, issue.id, IssueReportUpdate(is_fixed=False)
        )
        assert reopened.is_fixed is False
        assert reopened.resolved_at is None
        assert reopened.is_important is True

        mine = await self.service.list_for_assignee(db_session, "jan")
        assert mine[0].is_fixed is False

    @pytest.mark.asyncio
    async def test_camel_case_keys_count_as_present(self, db_session, make_issue):
        issue = await make_issue(shipment_id=4)
        payload = IssueReportUpdate.model_validate(
            {"isFixed": True, "isImportant": True, "shipmentId": None, "resolvedAt": FIXED_NOW.isoformat()}
        )
        assert payload.model_dump(exclude_unset=True) == {
            "shipment_id": None,
            "is_important": True,
            "is_fixed": True,
            "resolved_at": FIXED_NOW,
        }

        result = await self.service.update_issue(db_session, issue.id, payload)

        assert result.is_fixed is True
        assert result.is_important is True
        assert result.shipment_id is None
        assert result.resolved_at == FIXED_NOW
