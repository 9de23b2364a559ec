"""
Integration tests for the workspace API.

Requests go through the full application stack (middleware, exception
handlers, dependencies) against an in-memory database and a local blob
store.
"""
import base64
from uuid import uuid4

import pytest
from app.core.config import MAX_IMAGE_SIZE
from app.modules.workspace.models import Member, MemberRole
from sqlalchemy import select

WORKSPACES_URL = "/api/v1/workspaces"


async def create_workspace(client, headers, name="Engineering", **kwargs):
    response = await client.post(WORKSPACES_URL, data={"name": name}, headers=headers, **kwargs)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestWorkspaceLifecycle:
    """End-to-end membership and invite flow."""

    async def test_create_invite_join_reset(self, client, auth_headers, session_factory):
        alice = auth_headers("alice")
        bob = auth_headers("bob")
        carol = auth_headers("carol")

        # Alice creates a workspace and becomes its admin
        workspace = await create_workspace(client, alice, "Engineering")
        workspace_id = workspace["id"]
        first_code = workspace["invite_code"]

        assert workspace["name"] == "Engineering"
        assert workspace["user_id"] == "alice"
        assert len(first_code) == 6

        # Bob joins with the code
        response = await client.post(
            f"{WORKSPACES_URL}/{workspace_id}/join", json={"code": first_code}, headers=bob
        )
        assert response.status_code == 200
        assert response.json()["data"]["id"] == workspace_id

        # Bob cannot join twice
        response = await client.post(
            f"{WORKSPACES_URL}/{workspace_id}/join", json={"code": first_code}, headers=bob
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "ALREADY_MEMBER"

        # Bob is not an admin
        response = await client.post(
            f"{WORKSPACES_URL}/{workspace_id}/reset-invite-code", headers=bob
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

        # Alice rotates the code
        response = await client.post(
            f"{WORKSPACES_URL}/{workspace_id}/reset-invite-code", headers=alice
        )
        assert response.status_code == 200
        second_code = response.json()["data"]["invite_code"]

        # Carol's old code no longer works, the new one does
        if second_code != first_code:
            response = await client.post(
                f"{WORKSPACES_URL}/{workspace_id}/join", json={"code": first_code}, headers=carol
            )
            assert response.status_code == 400
            assert response.json()["error"]["code"] == "INVALID_INVITE_CODE"

        response = await client.post(
            f"{WORKSPACES_URL}/{workspace_id}/join", json={"code": second_code}, headers=carol
        )
        assert response.status_code == 200

        # Everyone sees the workspace in their list
        for headers in (alice, bob, carol):
            response = await client.get(WORKSPACES_URL, headers=headers)
            assert response.status_code == 200
            assert [ws["id"] for ws in response.json()["data"]["documents"]] == [workspace_id]

        async with session_factory() as session:
            result = await session.execute(select(Member).order_by(Member.created_at))
            roles = {member.user_id: member.role for member in result.scalars()}

        assert roles == {
            "alice": MemberRole.ADMIN,
            "bob": MemberRole.MEMBER,
            "carol": MemberRole.MEMBER,
        }

    async def test_delete_leaves_stale_membership(self, client, auth_headers, session_factory):
        alice = auth_headers("alice")
        bob = auth_headers("bob")

        workspace = await create_workspace(client, alice, "Eng")
        join_url = f"{WORKSPACES_URL}/{workspace['id']}/join"

        # A code of the right shape that is not the workspace's
        wrong_code = "XXXXXX" if workspace["invite_code"] != "XXXXXX" else "YYYYYY"
        response = await client.post(join_url, json={"code": wrong_code}, headers=bob)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INVITE_CODE"

        response = await client.post(join_url, json={"code": workspace["invite_code"]}, headers=bob)
        assert response.status_code == 200

        response = await client.delete(f"{WORKSPACES_URL}/{workspace['id']}", headers=alice)
        assert response.status_code == 200

        response = await client.get(WORKSPACES_URL, headers=alice)
        assert response.json()["data"]["documents"] == []

        async with session_factory() as session:
            result = await session.execute(select(Member).where(Member.user_id == "bob"))
            stale = result.scalars().all()

        assert len(stale) == 1
        assert stale[0].role == MemberRole.MEMBER
        assert str(stale[0].workspace_id) == workspace["id"]


class TestWorkspaceEndpoints:
    """Test cases for individual endpoints."""

    async def test_list_empty(self, client, auth_headers):
        response = await client.get(WORKSPACES_URL, headers=auth_headers("alice"))

        assert response.status_code == 200
        assert response.json() == {"data": {"documents": [], "total": 0}}

    async def test_list_newest_first(self, client, auth_headers):
        alice = auth_headers("alice")
        first = await create_workspace(client, alice, "First")
        second = await create_workspace(client, alice, "Second")

        response = await client.get(WORKSPACES_URL, headers=alice)

        data = response.json()["data"]
        assert data["total"] == 2
        assert [ws["id"] for ws in data["documents"]] == [second["id"], first["id"]]

    async def test_create_with_image(self, client, auth_headers):
        response = await client.post(
            WORKSPACES_URL,
            data={"name": "Design"},
            files={"image": ("logo.png", b"png-bytes", "image/png")},
            headers=auth_headers("alice"),
        )

        assert response.status_code == 201
        encoded = base64.b64encode(b"png-bytes").decode("ascii")
        assert response.json()["data"]["image_url"] == f"data:image/png;base64,{encoded}"

    async def test_create_with_unsupported_image(self, client, auth_headers):
        response = await client.post(
            WORKSPACES_URL,
            data={"name": "Design"},
            files={"image": ("doc.pdf", b"%PDF", "application/pdf")},
            headers=auth_headers("alice"),
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize("name", ["", "   ", "x" * 256])
    async def test_create_invalid_name(self, client, auth_headers, name):
        response = await client.post(
            WORKSPACES_URL, data={"name": name}, headers=auth_headers("alice")
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_get_workspace(self, client, auth_headers):
        workspace = await create_workspace(client, auth_headers("alice"))

        response = await client.get(
            f"{WORKSPACES_URL}/{workspace['id']}", headers=auth_headers("alice")
        )

        assert response.status_code == 200
        assert response.json()["data"]["invite_code"] == workspace["invite_code"]

    async def test_get_workspace_as_non_member(self, client, auth_headers):
        workspace = await create_workspace(client, auth_headers("alice"))

        response = await client.get(
            f"{WORKSPACES_URL}/{workspace['id']}", headers=auth_headers("mallory")
        )

        assert response.status_code == 404

    async def test_update_workspace(self, client, auth_headers):
        alice = auth_headers("alice")
        workspace = await create_workspace(
            client, alice, "Old", files={"image": ("logo.png", b"png-bytes", "image/png")}
        )

        response = await client.patch(
            f"{WORKSPACES_URL}/{workspace['id']}",
            data={"name": "New", "image_url": workspace["image_url"]},
            headers=alice,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "New"
        assert data["image_url"] == workspace["image_url"]

    async def test_update_keeps_largest_image(self, client, auth_headers):
        alice = auth_headers("alice")
        image = b"\x89PNG" + b"\x00" * (MAX_IMAGE_SIZE - 4)
        workspace = await create_workspace(
            client, alice, "Eng", files={"image": ("logo.png", image, "image/png")}
        )

        # Rename while sending the stored data URI back unchanged
        response = await client.patch(
            f"{WORKSPACES_URL}/{workspace['id']}",
            data={"name": "Eng2", "image_url": workspace["image_url"]},
            headers=alice,
        )

        assert response.status_code == 200, response.text
        data = response.json()["data"]
        assert data["name"] == "Eng2"
        assert data["image_url"] == workspace["image_url"]
        assert base64.b64decode(data["image_url"].split(",", 1)[1]) == image

    async def test_create_with_image_over_limit(self, client, auth_headers):
        response = await client.post(
            WORKSPACES_URL,
            data={"name": "Eng"},
            files={"image": ("logo.png", b"\x00" * (MAX_IMAGE_SIZE + 1), "image/png")},
            headers=auth_headers("alice"),
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_update_clears_image_when_omitted(self, client, auth_headers):
        alice = auth_headers("alice")
        workspace = await create_workspace(
            client, alice, "Design", files={"image": ("logo.png", b"png-bytes", "image/png")}
        )

        response = await client.patch(
            f"{WORKSPACES_URL}/{workspace['id']}", data={"image_url": ""}, headers=alice
        )

        assert response.status_code == 200
        assert response.json()["data"]["image_url"] is None
        assert response.json()["data"]["name"] == "Design"

    async def test_update_by_member_denied(self, client, auth_headers):
        workspace = await create_workspace(client, auth_headers("alice"))
        await client.post(
            f"{WORKSPACES_URL}/{workspace['id']}/join",
            json={"code": workspace["invite_code"]},
            headers=auth_headers("bob"),
        )

        response = await client.patch(
            f"{WORKSPACES_URL}/{workspace['id']}",
            data={"name": "Hijacked"},
            headers=auth_headers("bob"),
        )

        assert response.status_code == 401

    async def test_delete_workspace(self, client, auth_headers):
        alice = auth_headers("alice")
        workspace = await create_workspace(client, alice)

        response = await client.delete(f"{WORKSPACES_URL}/{workspace['id']}", headers=alice)

        assert response.status_code == 200
        assert response.json() == {"data": {"id": workspace["id"]}}

        response = await client.get(WORKSPACES_URL, headers=alice)
        assert response.json()["data"]["total"] == 0

    async def test_delete_by_non_member_denied(self, client, auth_headers):
        workspace = await create_workspace(client, auth_headers("alice"))

        response = await client.delete(
            f"{WORKSPACES_URL}/{workspace['id']}", headers=auth_headers("mallory")
        )

        assert response.status_code == 401

    async def test_reset_by_non_member_denied(self, client, auth_headers):
        workspace = await create_workspace(client, auth_headers("alice"))

        response = await client.post(
            f"{WORKSPACES_URL}/{workspace['id']}/reset-invite-code", headers=auth_headers("mallory")
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_join_with_wrong_code(self, client, auth_headers):
        workspace = await create_workspace(client, auth_headers("alice"))

        response = await client.post(
            f"{WORKSPACES_URL}/{workspace['id']}/join",
            json={"code": "nope!!"},
            headers=auth_headers("bob"),
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INVITE_CODE"

    async def test_join_missing_workspace(self, client, auth_headers):
        response = await client.post(
            f"{WORKSPACES_URL}/{uuid4()}/join", json={"code": "abc123"}, headers=auth_headers("bob")
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"

    async def test_join_without_code(self, client, auth_headers):
        workspace = await create_workspace(client, auth_headers("alice"))

        response = await client.post(
            f"{WORKSPACES_URL}/{workspace['id']}/join", json={}, headers=auth_headers("bob")
        )

        assert response.status_code == 400

    async def test_malformed_workspace_id(self, client, auth_headers):
        response = await client.get(f"{WORKSPACES_URL}/not-a-uuid", headers=auth_headers("alice"))

        assert response.status_code == 400


class TestAuthentication:
    """Requests without a valid bearer token are rejected."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", WORKSPACES_URL),
            ("DELETE", f"{WORKSPACES_URL}/{uuid4()}"),
            ("POST", f"{WORKSPACES_URL}/{uuid4()}/reset-invite-code"),
        ],
    )
    async def test_missing_token(self, client, method, path):
        response = await client.request(method, path)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"

    async def test_invalid_token(self, client):
        response = await client.get(
            WORKSPACES_URL, headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    async def test_create_without_token(self, client):
        response = await client.post(WORKSPACES_URL, data={"name": "Engineering"})

        assert response.status_code == 401


class TestServiceEndpoints:
    """Test cases for the health and metrics endpoints."""

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_metrics(self, client, auth_headers):
        await client.get(WORKSPACES_URL, headers=auth_headers("alice"))

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text

    async def test_request_id_header(self, client):
        response = await client.get("/health")

        assert "X-Request-ID" in response.headers
