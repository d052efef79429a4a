from app import auth
from app.access import engine
from app.catalog import service as catalog
from app.dashboard import dashboard_stats
from app.models import Role


def test_empty_store(session):
    stats = dashboard_stats(session)
    assert (stats.total_software, stats.pending_requests, stats.total_users) == (0, 0, 0)


def test_counts_track_store_state(session):
    admin = auth.signup(session, "adam", "adam1234", Role.ADMIN)
    auth.signup(session, "erin", "erin1234")
    sw = catalog.create_software(session, Role.ADMIN, "Figma", "Design", ["Read"], created_by=admin.id)
    r1 = engine.create_request(session, admin.id, Role.ADMIN, sw.id, "Read", "Reviewing design mockups")
    engine.create_request(session, admin.id, Role.ADMIN, sw.id, "Read", "Second pair of eyes on mockups")

    stats = dashboard_stats(session)
    assert stats.total_software == 1
    assert stats.pending_requests == 2
    assert stats.total_users == 2

    engine.decide(session, admin.id, Role.ADMIN, r1.id, "Rejected")
    catalog.create_software(session, Role.ADMIN, "Slack", "Chat", ["Read", "Write"], created_by=admin.id)
    stats = dashboard_stats(session)
    assert stats.pending_requests == 1
    assert stats.total_software == len(catalog.list_software(session)) == 2
    assert stats.model_dump(by_alias=True) == {"totalSoftware": 2, "pendingRequests": 1, "totalUsers": 2}
