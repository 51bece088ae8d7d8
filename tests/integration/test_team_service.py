"""Integration tests for the invitation workflow."""

from uuid import uuid4

import pytest

from src.teamdesk.core.exceptions import (
    DuplicateInvitation,
    Forbidden,
    InvalidInvitationState,
    InvalidRole,
    NotFound,
)
from src.teamdesk.models import MembershipRole, MembershipStatus
from src.teamdesk.repositories import MembershipRepository
from tests.factories import MembershipFactory, UserFactory
from tests.helpers import add_member, create_company

pytestmark = pytest.mark.integration


@pytest.fixture
def team_service(make_team_service, company):
    return make_team_service(company)


@pytest.fixture
def repo(db_session) -> MembershipRepository:
    return MembershipRepository(db_session)


class TestInvite:
    async def test_admin_invites_and_notifies_once(
        self, team_service, db_session, company, notifier
    ):
        admin, _ = await add_member(db_session, company, role="admin", full_name="Ada Admin")

        result = await team_service.invite("alice@example.com", "viewer", admin.id)

        assert result.warnings == []
        assert result.membership.status == MembershipStatus.PENDING.value
        assert len(notifier.sent) == 1
        sent = notifier.sent[0]
        assert sent.contact_address == "alice@example.com"
        assert sent.tenant_name == company.tenant.name
        assert sent.role == "viewer"
        assert sent.inviter_label == "Ada Admin"

    async def test_scenario_duplicate_then_reinvite_after_removal(
        self, team_service, company, repo
    ):
        """Second invite before resolution is rejected; after removal it succeeds."""
        first = await team_service.invite("alice@example.com", "viewer", company.owner.id)
        first_id = first.membership.id

        with pytest.raises(DuplicateInvitation):
            await team_service.invite("alice@example.com", "viewer", company.owner.id)

        await team_service.remove_member(first_id, company.owner.id)
        second = await team_service.invite("alice@example.com", "viewer", company.owner.id)

        assert second.membership.id != first_id
        pending = [
            m for m in await repo.list_memberships(company.id) if m.status == "pending"
        ]
        assert [m.id for m in pending] == [second.membership.id]

    async def test_scenario_delivery_failure_keeps_pending_row(
        self, team_service, company, notifier, repo
    ):
        notifier.mode = "fail"

        result = await team_service.invite("alice@example.com", "viewer", company.owner.id)

        assert result.delivered is False
        assert len(result.warnings) == 1
        stored = await repo.get(result.membership.id)
        assert stored.status == MembershipStatus.PENDING.value
        assert len(notifier.sent) == 1

    async def test_delivery_exception_is_a_warning(self, team_service, company, notifier, repo):
        notifier.mode = "raise"

        result = await team_service.invite("alice@example.com", "admin", company.owner.id)

        assert result.warnings
        assert await repo.get(result.membership.id) is not None

    async def test_existing_member_address_rejected(self, team_service, db_session, company):
        member, _ = await add_member(db_session, company, email="bob@example.com")

        with pytest.raises(DuplicateInvitation):
            await team_service.invite("BOB@example.com", "admin", company.owner.id)

    async def test_owner_address_rejected(self, team_service, company):
        with pytest.raises(DuplicateInvitation):
            await team_service.invite(company.owner.email, "admin", company.owner.id)

    async def test_owner_role_is_invalid(self, team_service, company, repo):
        with pytest.raises(InvalidRole):
            await team_service.invite("alice@example.com", "owner", company.owner.id)
        assert await repo.list_memberships(company.id) == []

    async def test_viewer_cannot_invite(self, team_service, db_session, company, repo, notifier):
        viewer, _ = await add_member(db_session, company, role="viewer")

        with pytest.raises(Forbidden):
            await team_service.invite("alice@example.com", "viewer", viewer.id)

        assert len(await repo.list_memberships(company.id)) == 1
        assert notifier.sent == []

    async def test_pending_invitee_has_no_power(self, team_service, db_session, company):
        invitee = UserFactory.build()
        db_session.add(invitee)
        db_session.add(
            MembershipFactory.admin(
                tenant_id=company.id,
                user_id=invitee.id,
                status=MembershipStatus.PENDING.value,
                invited_email=invitee.email,
            )
        )
        await db_session.commit()

        with pytest.raises(Forbidden):
            await team_service.invite("alice@example.com", "viewer", invitee.id)


class TestChangeRole:
    async def test_admin_promotes_viewer(self, team_service, db_session, company):
        admin, _ = await add_member(db_session, company, role="admin")
        _, viewer_row = await add_member(db_session, company, role="viewer")

        updated = await team_service.change_role(viewer_row.id, "admin", admin.id)

        assert updated.role == MembershipRole.ADMIN.value

    async def test_founder_row_is_forbidden(self, team_service, db_session, company):
        founder_row = MembershipFactory.admin(tenant_id=company.id, user_id=company.owner.id)
        db_session.add(founder_row)
        await db_session.commit()

        with pytest.raises(Forbidden):
            await team_service.change_role(founder_row.id, "viewer", company.owner.id)

    async def test_stored_owner_row_is_forbidden_for_any_actor(
        self, team_service, db_session, company
    ):
        owner_row = MembershipFactory.stored_owner(uuid4(), tenant_id=company.id)
        db_session.add(owner_row)
        await db_session.commit()

        with pytest.raises(Forbidden):
            await team_service.change_role(owner_row.id, "viewer", company.owner.id)

    async def test_viewer_cannot_change_roles(self, team_service, db_session, company, repo):
        viewer, _ = await add_member(db_session, company, role="viewer")
        _, other = await add_member(db_session, company, role="viewer")

        with pytest.raises(Forbidden):
            await team_service.change_role(other.id, "admin", viewer.id)

        assert (await repo.get(other.id)).role == MembershipRole.VIEWER.value

    async def test_membership_in_other_company_is_not_found(
        self, team_service, db_session, company
    ):
        other_company = await create_company(db_session)
        _, foreign = await add_member(db_session, other_company)

        with pytest.raises(NotFound):
            await team_service.change_role(foreign.id, "admin", company.owner.id)


class TestRemoveMember:
    async def test_remove_twice_is_idempotent(self, team_service, db_session, company, repo):
        _, membership = await add_member(db_session, company)

        await team_service.remove_member(membership.id, company.owner.id)
        await team_service.remove_member(membership.id, company.owner.id)

        assert await repo.get(membership.id) is None

    async def test_cancel_pending_invitation(self, team_service, company, repo):
        result = await team_service.invite("alice@example.com", "viewer", company.owner.id)

        await team_service.remove_member(result.membership.id, company.owner.id)

        assert await repo.list_memberships(company.id) == []

    async def test_owner_rows_are_forbidden(self, team_service, db_session, company):
        founder_row = MembershipFactory.viewer(tenant_id=company.id, user_id=company.owner.id)
        db_session.add(founder_row)
        await db_session.commit()
        admin, _ = await add_member(db_session, company, role="admin")

        with pytest.raises(Forbidden):
            await team_service.remove_member(founder_row.id, admin.id)

    async def test_viewer_cannot_remove(self, team_service, db_session, company, repo):
        viewer, _ = await add_member(db_session, company, role="viewer")
        _, other = await add_member(db_session, company, role="admin")

        with pytest.raises(Forbidden):
            await team_service.remove_member(other.id, viewer.id)

        assert await repo.get(other.id) is not None

    async def test_admin_can_remove_self(self, team_service, db_session, company, repo):
        admin, membership = await add_member(db_session, company, role="admin")

        await team_service.remove_member(membership.id, admin.id)

        assert await repo.get(membership.id) is None


class TestResendInvitation:
    async def test_resends_pending(self, team_service, company, notifier):
        result = await team_service.invite("alice@example.com", "viewer", company.owner.id)

        resent = await team_service.resend_invitation(result.membership.id, company.owner.id)

        assert resent.warnings == []
        assert [s.contact_address for s in notifier.sent] == [
            "alice@example.com",
            "alice@example.com",
        ]

    async def test_accepted_membership_cannot_be_resent(
        self, team_service, db_session, company
    ):
        _, membership = await add_member(db_session, company)

        with pytest.raises(InvalidInvitationState):
            await team_service.resend_invitation(membership.id, company.owner.id)

    async def test_missing_invitation_not_found(self, team_service, company):
        with pytest.raises(NotFound):
            await team_service.resend_invitation(uuid4(), company.owner.id)


class TestInviteeResponses:
    @pytest.fixture
    async def invitee(self, db_session):
        user = UserFactory.build(email="alice@example.com", full_name="Alice")
        db_session.add(user)
        await db_session.commit()
        return user

    async def test_accept_resolves_subject(self, team_service, company, invitee):
        result = await team_service.invite("alice@example.com", "admin", company.owner.id)

        accepted = await team_service.accept_invitation(result.membership.id, invitee.id)

        assert accepted.status == MembershipStatus.ACCEPTED.value
        assert accepted.user_id == invitee.id
        assert accepted.accepted_at is not None

    async def test_accepted_invitee_gains_role(self, team_service, company, invitee):
        result = await team_service.invite("alice@example.com", "admin", company.owner.id)
        await team_service.accept_invitation(result.membership.id, invitee.id)

        second = await team_service.invite("carol@example.com", "viewer", invitee.id)

        assert second.membership.invited_by == invitee.id

    async def test_accept_twice_is_invalid_state(self, team_service, company, invitee):
        result = await team_service.invite("alice@example.com", "viewer", company.owner.id)
        await team_service.accept_invitation(result.membership.id, invitee.id)

        with pytest.raises(InvalidInvitationState, match="already processed"):
            await team_service.accept_invitation(result.membership.id, invitee.id)

    async def test_accept_with_other_address_is_forbidden(
        self, team_service, db_session, company, invitee
    ):
        stranger = UserFactory.build()
        db_session.add(stranger)
        await db_session.commit()
        result = await team_service.invite("alice@example.com", "viewer", company.owner.id)

        with pytest.raises(Forbidden):
            await team_service.accept_invitation(result.membership.id, stranger.id)

    async def test_decline_keeps_marker_and_allows_reinvite(
        self, team_service, company, invitee, repo
    ):
        result = await team_service.invite("alice@example.com", "viewer", company.owner.id)

        declined = await team_service.decline_invitation(result.membership.id, invitee.id)
        again = await team_service.invite("alice@example.com", "viewer", company.owner.id)

        assert declined.status == MembershipStatus.DECLINED.value
        statuses = sorted(m.status for m in await repo.list_memberships(company.id))
        assert statuses == ["declined", "pending"]
        assert again.membership.id != declined.id
