"""Unit tests for organizations, provider keys and API keys."""

from uuid import uuid4

import pytest

from promptops import crud, schemas
from promptops.core.api_key_service import api_key_service
from promptops.core.exceptions import NotFoundException
from promptops.core.identifiers import API_KEY_PREFIX, hash_token
from promptops.core.organization_service import organization_service
from promptops.core.provider_key_service import provider_key_service
from promptops.core.shared_models import MembershipRole, ProviderType


@pytest.mark.asyncio
class TestOrganizationService:
    """Tests for organizations and memberships."""

    async def test_owner_membership_created(self, db_session, test_organization, test_user):
        """Creating an organization makes its owner a member."""
        membership = await organization_service.get_user_membership(
            db_session, organization_id=test_organization.id, user_id=test_user.id
        )

        assert membership.role == MembershipRole.OWNER.value
        organizations = await organization_service.list_organizations_for_user(
            db_session, user_id=test_user.id
        )
        assert [o.id for o in organizations] == [test_organization.id]

    async def test_unknown_owner(self, db_session, ctx):
        """The owner must exist."""
        with pytest.raises(NotFoundException, match="Owner user not found"):
            await organization_service.create_organization(
                db_session,
                organization_in=schemas.OrganizationCreate(
                    name="Ghost", slug="ghost", owner_user_id=uuid4()
                ),
                ctx=ctx,
            )

    async def test_add_update_remove_member(self, db_session, test_organization, ctx):
        """Members can be added, promoted and removed."""
        editor = await crud.user.create(
            db_session, obj_in=schemas.UserCreate(email="grace@example.com", name="Grace")
        )

        membership = await organization_service.add_member(
            db_session,
            membership_in=schemas.MembershipCreate(
                organization_id=test_organization.id,
                user_id=editor.id,
                role=MembershipRole.EDITOR,
            ),
            ctx=ctx,
        )
        assert membership.role == "editor"

        membership = await organization_service.update_member_role(
            db_session,
            membership_id=membership.id,
            role=MembershipRole.ADMIN,
        )
        assert membership.role == "admin"

        members = await organization_service.list_members(
            db_session, organization_id=test_organization.id
        )
        assert len(members) == 2

        await organization_service.remove_member(
            db_session, membership_id=membership.id, ctx=ctx
        )
        with pytest.raises(NotFoundException, match="Membership not found"):
            await organization_service.remove_member(
                db_session, membership_id=membership.id, ctx=ctx
            )


@pytest.mark.asyncio
class TestProviderKeys:
    """Tests for encrypted provider keys."""

    async def test_key_is_encrypted(self, db_session, test_organization, ctx):
        """The stored value is not the plaintext, and decrypts back to it."""
        provider_key = await provider_key_service.create_provider_key(
            db_session,
            key_in=schemas.ProviderKeyCreate(
                organization_id=test_organization.id,
                provider=ProviderType.OPENAI,
                label="Production",
                api_key="sk-secret",
            ),
            ctx=ctx,
        )

        assert provider_key.encrypted_api_key != "sk-secret"
        assert provider_key_service.decrypt_api_key(provider_key) == "sk-secret"

        found = await provider_key_service.get_provider_key(
            db_session, organization_id=test_organization.id, provider="openai"
        )
        assert found.id == provider_key.id


@pytest.mark.asyncio
class TestAPIKeys:
    """Tests for organization API keys and webhooks."""

    async def test_only_hash_is_stored(self, db_session, test_api_key):
        """The token is returned once and only its hash is persisted."""
        assert test_api_key.token.startswith(API_KEY_PREFIX)

        stored = await crud.api_key.get(db_session, id=test_api_key.id)
        assert stored.token_hash == hash_token(test_api_key.token)
        assert await crud.api_key.get_by_token(db_session, token=test_api_key.token) is stored

    async def test_revoke(self, db_session, test_api_key, ctx):
        """Revoked tokens no longer resolve."""
        await api_key_service.revoke_api_key(db_session, api_key_id=test_api_key.id, ctx=ctx)

        assert await crud.api_key.get_by_token(db_session, token=test_api_key.token) is None

    async def test_webhooks(self, db_session, test_organization):
        """Webhooks get a generated signing secret."""
        webhook = await api_key_service.create_webhook(
            db_session,
            organization_id=test_organization.id,
            webhook_in=schemas.WebhookCreate(
                url="https://hooks.example.com/promptops", events=["run.created"]
            ),
        )

        assert webhook.secret.startswith("whsec_")
        assert webhook.url == "https://hooks.example.com/promptops"
        listed = await api_key_service.list_webhooks(
            db_session, organization_id=test_organization.id
        )
        assert [w.id for w in listed] == [webhook.id]

        await api_key_service.delete_webhook(db_session, webhook_id=webhook.id)
        with pytest.raises(NotFoundException, match="Webhook not found"):
            await api_key_service.delete_webhook(db_session, webhook_id=webhook.id)


@pytest.mark.parametrize(
    "provider, api_key, valid, error",
    [
        ("anthropic", "sk-ant", True, None),
        ("anthropic", "  ", False, "API key must not be empty"),
        ("mistral", "key", False, "Unsupported provider: mistral"),
    ],
)
def test_check_provider_key(provider, api_key, valid, error):
    """Keys are checked without being stored."""
    result = provider_key_service.test_provider_key(provider, api_key)

    assert result.valid is valid
    assert result.error == error
