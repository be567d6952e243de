"""Tests for the features API endpoints."""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.feature import Feature, FeatureStatus, VoteType
from tests.conftest import auth, create_comment, create_feature, create_user, create_vote


async def test_list_features_empty(client: AsyncClient):
    """GET /api/features should return empty list when no features exist."""
    resp = await client.get("/api/features")
    assert resp.status_code == 200
    assert resp.json() == []


async def test_list_features(client: AsyncClient, db: AsyncSession):
    """GET /api/features should return features with vote and comment counts."""
    user = await create_user(db)
    feat = await create_feature(
        db, title="Threading", description="Message threads", created_by=user.id
    )
    await create_vote(db, feature_id=feat.id, user_id=user.id)
    await create_comment(db, feature_id=feat.id, user_id=user.id)
    await db.commit()

    resp = await client.get("/api/features")
    assert resp.status_code == 200
    features = resp.json()
    assert len(features) == 1
    assert features[0]["title"] == "Threading"
    assert features[0]["upvotes"] == 1
    assert features[0]["net_votes"] == 1
    assert features[0]["comment_count"] == 1


async def test_list_features_filter_by_status(client: AsyncClient, db: AsyncSession):
    """GET /api/features?status=approved should filter by status."""
    user = await create_user(db)
    await create_feature(
        db, title="Approved One", status=FeatureStatus.approved, created_by=user.id
    )
    await create_feature(
        db, title="Rejected One", status=FeatureStatus.rejected, created_by=user.id
    )
    await db.commit()

    resp = await client.get("/api/features?status=approved")
    features = resp.json()
    assert len(features) == 1
    assert features[0]["title"] == "Approved One"


async def test_list_features_rejects_unknown_status(client: AsyncClient):
    resp = await client.get("/api/features?status=open")
    assert resp.status_code == 422


async def test_create_feature(client: AsyncClient, db: AsyncSession):
    """POST /api/features should create a backlog feature owned by the caller."""
    user = await create_user(db)
    await db.commit()

    resp = await client.post(
        "/api/features",
        json={"title": "Dark Mode", "description": "Support dark theme", "category": "ui"},
        headers=auth(user),
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["title"] == "Dark Mode"
    assert data["status"] == "backlog"
    assert data["category"] == "ui"
    assert data["created_by"] == user.id
    assert data["upvotes"] == 0
    assert data["downvotes"] == 0
    assert data["net_votes"] == 0
    assert data["comment_count"] == 0


async def test_create_feature_anonymous(client: AsyncClient):
    """POST /api/features without an identity should 401."""
    resp = await client.post("/api/features", json={"title": "Test"})
    assert resp.status_code == 401


async def test_create_feature_for_someone_else(client: AsyncClient, db: AsyncSession):
    """Creator must be the caller; impersonation is rejected by the insert policy."""
    alice = await create_user(db)
    bob = await create_user(db)
    await db.commit()

    resp = await client.post(
        "/api/features",
        json={"title": "Sneaky", "created_by": bob.id},
        headers=auth(alice),
    )
    assert resp.status_code == 403


async def test_create_feature_unregistered_user(client: AsyncClient):
    """An identity without a mirrored user row fails the foreign key."""
    resp = await client.post("/api/features", json={"title": "Ghost"}, headers=auth("ghost"))
    assert resp.status_code == 409


async def test_create_feature_requires_title(client: AsyncClient, db: AsyncSession):
    user = await create_user(db)
    await db.commit()

    resp = await client.post("/api/features", json={"title": ""}, headers=auth(user))
    assert resp.status_code == 422


async def test_get_feature(client: AsyncClient, db: AsyncSession):
    user = await create_user(db)
    feat = await create_feature(db, title="Threading", created_by=user.id)
    await db.commit()

    resp = await client.get(f"/api/features/{feat.id}")
    assert resp.status_code == 200
    assert resp.json()["title"] == "Threading"


async def test_get_feature_not_found(client: AsyncClient):
    resp = await client.get("/api/features/nonexistent")
    assert resp.status_code == 404


async def test_creator_updates_status(client: AsyncClient, db: AsyncSession):
    user = await create_user(db)
    feat = await create_feature(db, created_by=user.id, created_at="2024-01-01T00:00:00")
    await db.commit()

    resp = await client.patch(
        f"/api/features/{feat.id}", json={"status": "in_progress"}, headers=auth(user)
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "in_progress"
    assert data["updated_at"] > "2024-01-01T00:00:00"


async def test_status_transitions_are_unconstrained(client: AsyncClient, db: AsyncSession):
    """Any status may follow any other, e.g. rejected straight back to backlog."""
    user = await create_user(db)
    feat = await create_feature(db, created_by=user.id, status=FeatureStatus.rejected)
    await db.commit()

    for status in ("backlog", "approved", "pending", "in_progress", "rejected"):
        resp = await client.patch(
            f"/api/features/{feat.id}", json={"status": status}, headers=auth(user)
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == status


async def test_admin_updates_any_feature(client: AsyncClient, db: AsyncSession):
    owner = await create_user(db)
    admin = await create_user(db, role="admin")
    feat = await create_feature(db, created_by=owner.id)
    await db.commit()

    resp = await client.patch(
        f"/api/features/{feat.id}", json={"status": "approved"}, headers=auth(admin)
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "approved"
    assert resp.json()["created_by"] == owner.id


async def test_stranger_cannot_update_feature(client: AsyncClient, db: AsyncSession):
    """Non-creator, non-admin updates affect zero rows and leave the feature unchanged."""
    owner = await create_user(db)
    stranger = await create_user(db, role="member")
    feat = await create_feature(db, title="Original", created_by=owner.id)
    await db.commit()

    resp = await client.patch(
        f"/api/features/{feat.id}",
        json={"status": "approved", "title": "Hijacked"},
        headers=auth(stranger),
    )
    assert resp.status_code == 404

    await db.refresh(feat)
    assert feat.status == FeatureStatus.backlog
    assert feat.title == "Original"


async def test_update_feature_anonymous(client: AsyncClient, db: AsyncSession):
    owner = await create_user(db)
    feat = await create_feature(db, created_by=owner.id)
    await db.commit()

    resp = await client.patch(f"/api/features/{feat.id}", json={"status": "approved"})
    assert resp.status_code == 401


async def test_update_feature_not_found(client: AsyncClient, db: AsyncSession):
    user = await create_user(db, role="admin")
    await db.commit()

    resp = await client.patch(
        "/api/features/nonexistent", json={"title": "Nope"}, headers=auth(user)
    )
    assert resp.status_code == 404


async def test_features_have_no_delete_endpoint(client: AsyncClient, db: AsyncSession):
    owner = await create_user(db)
    feat = await create_feature(db, created_by=owner.id)
    await db.commit()
    feature_id = feat.id

    resp = await client.delete(f"/api/features/{feature_id}", headers=auth(owner))
    assert resp.status_code == 405
    assert await db.get(Feature, feature_id) is not None


async def test_vote_count_endpoint(client: AsyncClient, db: AsyncSession):
    owner = await create_user(db)
    voter = await create_user(db)
    feat = await create_feature(db, created_by=owner.id)
    await create_vote(db, feat.id, owner.id, VoteType.upvote)
    await create_vote(db, feat.id, voter.id, VoteType.downvote)
    await db.commit()

    resp = await client.get(f"/api/features/{feat.id}/vote-count")
    assert resp.status_code == 200
    assert resp.json() == {"upvotes": 1, "downvotes": 1, "net_votes": 0}

    listed = (await client.get(f"/api/features/{feat.id}")).json()
    assert listed["upvotes"] == 1
    assert listed["downvotes"] == 1
    assert listed["net_votes"] == 0
