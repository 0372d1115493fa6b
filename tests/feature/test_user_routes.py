import pytest

from tests.factories.user import create_fake_user, registration_payload
from userauth.core.exceptions import ConflictError
from userauth.domain.entities import TokenType

API = "/api/v1/user"


class TestRegistration:
    @pytest.mark.asyncio
    async def test_registers_and_starts_verification(self, async_client, user_repository, event_bus):
        # Arrange
        payload = registration_payload()
        stored = create_fake_user(email=payload["email"], username=payload["username"], is_verified=False)
        user_repository.find_by_email.return_value = None
        user_repository.find_by_username.return_value = None
        user_repository.create.return_value = stored
        published = []
        event_bus.subscribe("UserCreated", published.append)

        # Act
        response = await async_client.post(API, json=payload)

        # Assert
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["id"] == stored.id
        assert data["is_verified"] is False
        assert "password" not in data
        assert len(published) == 1

    @pytest.mark.asyncio
    async def test_duplicate_email_is_a_conflict(self, async_client, user_repository):
        payload = registration_payload()
        user_repository.find_by_email.return_value = create_fake_user(email=payload["email"])

        response = await async_client.post(API, json=payload)

        assert response.status_code == 409
        assert response.json()["type"] == "ConflictError"

    @pytest.mark.asyncio
    async def test_concurrent_registration_is_a_conflict(self, async_client, user_repository):
        payload = registration_payload()
        user_repository.find_by_email.return_value = None
        user_repository.find_by_username.return_value = None
        user_repository.create.side_effect = ConflictError(field="email")

        response = await async_client.post(API, json=payload)

        assert response.status_code == 409
        assert response.json()["message"] == f"User with email {payload['email']} already exists."

    @pytest.mark.asyncio
    async def test_mismatched_passwords(self, async_client):
        response = await async_client.post(API, json=registration_payload(repeatPassword="Other1!pass"))

        assert response.status_code == 400
        assert response.json()["message"] == "Passwords do not match."

    @pytest.mark.asyncio
    async def test_weak_password(self, async_client, user_repository):
        response = await async_client.post(
            API, json=registration_payload(password="weak", repeatPassword="weak")
        )

        assert response.status_code == 400
        assert response.json()["type"] == "ValidationError"
        user_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_failure_hides_details(self, async_client, user_repository):
        user_repository.find_by_email.side_effect = RuntimeError("mongo exploded")

        response = await async_client.post(API, json=registration_payload())

        assert response.status_code == 500
        body = response.json()
        assert body["details"] == {"code": "CREATE_USER_FAILED"}
        assert "mongo exploded" not in body["message"]


class TestReads:
    @pytest.mark.asyncio
    async def test_listing_requires_a_token(self, async_client):
        response = await async_client.get(API)

        assert response.status_code == 401
        assert response.json()["message"] == "No token provided"

    @pytest.mark.asyncio
    async def test_members_can_list_users(self, async_client, member_headers, user_repository):
        users = [create_fake_user() for _ in range(2)]
        user_repository.find_all.return_value = (users, 12)

        response = await async_client.get(API, params={"page": 2, "limit": 5}, headers=member_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert [user["id"] for user in data["body"]] == [user.id for user in users]
        assert (data["total"], data["page"], data["limit"], data["last_page"]) == (12, 2, 5, 3)
        user_repository.find_all.assert_awaited_once_with(2, 5)

    @pytest.mark.asyncio
    async def test_page_size_is_bounded(self, async_client, member_headers):
        response = await async_client.get(API, params={"limit": 500}, headers=member_headers)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_get_one(self, async_client, member_headers, member):
        response = await async_client.get(f"{API}/{member.id}", headers=member_headers)

        assert response.status_code == 200
        assert response.json()["data"]["email"] == member.email

    @pytest.mark.asyncio
    async def test_revoked_token_is_rejected(self, async_client, member_headers, token_blacklist):
        token_blacklist.is_blacklisted.return_value = True

        response = await async_client.get(API, headers=member_headers)

        assert response.status_code == 401
        assert response.json()["message"] == "Token has been revoked"

    @pytest.mark.asyncio
    async def test_refresh_token_cannot_be_used_as_access_token(
        self, async_client, container, member, user_repository
    ):
        user_repository.find_by_id.return_value = member
        refresh = container.jwt_token_generator.generate({"userId": member.id}, TokenType.REFRESH, 600)

        response = await async_client.get(API, headers={"Authorization": f"Bearer {refresh}"})

        assert response.status_code == 401


class TestAdminOnly:
    @pytest.mark.asyncio
    async def test_members_cannot_update(self, async_client, member_headers, member):
        response = await async_client.put(f"{API}/{member.id}", json={"name": "Renamed"}, headers=member_headers)

        assert response.status_code == 403
        assert response.json()["message"] == "Insufficient permissions"

    @pytest.mark.asyncio
    async def test_admin_updates_a_user(self, async_client, admin_headers, admin, user_repository):
        target = create_fake_user()
        updated = target.model_copy(update={"name": "Renamed"})
        user_repository.find_by_id.side_effect = lambda user_id: target if user_id == target.id else admin
        user_repository.update.return_value = updated

        response = await async_client.put(f"{API}/{target.id}", json={"name": "Renamed"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Renamed"

    @pytest.mark.asyncio
    async def test_empty_update(self, async_client, admin_headers, admin):
        response = await async_client.put(f"{API}/{admin.id}", json={}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "No fields provided for update."

    @pytest.mark.asyncio
    async def test_update_email_conflict(self, async_client, admin_headers, admin, user_repository):
        user_repository.find_by_email.return_value = create_fake_user(email="taken@example.com")

        response = await async_client.put(
            f"{API}/{admin.id}", json={"email": "taken@example.com"}, headers=admin_headers
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_admin_deletes_a_user(self, async_client, admin_headers, admin, user_repository, event_bus):
        user_repository.delete.return_value = True
        published = []
        event_bus.subscribe("UserDeleted", published.append)

        response = await async_client.delete(f"{API}/{admin.id}", headers=admin_headers)

        assert response.status_code == 204
        assert response.content == b""
        assert [event.user_id for event in published] == [admin.id]

    @pytest.mark.asyncio
    async def test_members_cannot_delete(self, async_client, member_headers, member, user_repository):
        response = await async_client.delete(f"{API}/{member.id}", headers=member_headers)

        assert response.status_code == 403
        user_repository.delete.assert_not_awaited()
