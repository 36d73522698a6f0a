"""
Tests for ProfileRepository and UserRepository against SQLite.
"""

from core.models import Experience, Profile, User
from core.repositories import ProfileRepository, UserRepository


class TestUpsert:
    def test_creates_profile_once(self, db_session, make_user):
        user = make_user()
        repo = ProfileRepository(db_session)

        profile, created = repo.upsert(user.id, {"status": "Developer"})
        db_session.commit()
        assert created is True
        assert profile.status == "Developer"
        assert profile.skills == []

        profile, created = repo.upsert(user.id, {"status": "Lead"})
        db_session.commit()
        assert created is False
        assert profile.status == "Lead"

        assert db_session.query(Profile).filter(Profile.user_id == user.id).count() == 1

    def test_partial_update_leaves_other_fields(self, db_session, make_user):
        user = make_user()
        repo = ProfileRepository(db_session)
        repo.upsert(user.id, {"status": "Developer", "company": "Acme", "skills": ["Go"]})
        db_session.commit()

        profile, _ = repo.upsert(user.id, {"bio": "Hello"})
        db_session.commit()

        assert profile.status == "Developer"
        assert profile.company == "Acme"
        assert profile.skills == ["Go"]
        assert profile.bio == "Hello"

    def test_social_links_merge(self, db_session, make_user):
        user = make_user()
        repo = ProfileRepository(db_session)
        repo.upsert(user.id, {}, {"twitter": "t1", "youtube": "y1"})
        db_session.commit()

        profile, _ = repo.upsert(user.id, {}, {"youtube": "y2", "linkedin": "l1"})
        db_session.commit()
        db_session.expire_all()

        stored = repo.get_by_user_id(user.id)
        assert stored.social == {"twitter": "t1", "youtube": "y2", "linkedin": "l1"}

    def test_separate_sessions_share_one_row(self, test_db, make_user):
        _, TestingSessionLocal, _ = test_db
        user = make_user()

        for status in ("a", "b"):
            session = TestingSessionLocal()
            ProfileRepository(session).upsert(user.id, {"status": status})
            session.commit()
            session.close()

        session = TestingSessionLocal()
        assert session.query(Profile).count() == 1
        session.close()


class TestQueries:
    def test_get_by_user_id_loads_owner(self, db_session, make_user):
        user = make_user("Owner")
        repo = ProfileRepository(db_session)
        repo.upsert(user.id, {"status": "Developer"})
        db_session.commit()

        profile = repo.get_by_user_id(user.id)
        assert profile.user.name == "Owner"
        assert repo.get_by_user_id(user.id + 100) is None

    def test_list_all_in_creation_order(self, db_session, make_user):
        repo = ProfileRepository(db_session)
        users = [make_user(), make_user(), make_user()]
        for user in reversed(users):
            repo.upsert(user.id, {"status": "x"})
        db_session.commit()

        assert [p.user_id for p in repo.list_all()] == [u.id for u in reversed(users)]

    def test_has_profile(self, db_session, make_user):
        user = make_user()
        repo = ProfileRepository(db_session)
        assert repo.has_profile(user.id) is False

        repo.upsert(user.id, {})
        assert repo.has_profile(user.id) is True


class TestDeletion:
    def test_delete_by_user_id(self, db_session, make_user):
        user = make_user()
        repo = ProfileRepository(db_session)
        repo.upsert(user.id, {"status": "Developer"})
        db_session.commit()

        assert repo.delete_by_user_id(user.id) is True
        assert repo.delete_by_user_id(user.id) is False
        db_session.commit()
        assert db_session.query(Profile).count() == 0

    def test_deleting_user_cascades_to_profile(self, db_session, make_user):
        user = make_user()
        repo = ProfileRepository(db_session)
        profile, _ = repo.upsert(user.id, {"status": "Developer"})
        profile.experiences.insert(
            0, Experience(title="Engineer", company="Acme", from_date=profile.created_at.date())
        )
        db_session.commit()
        db_session.expunge_all()

        assert UserRepository(db_session).delete_account(user.id) is True
        db_session.commit()

        assert db_session.get(User, user.id) is None
        assert db_session.query(Profile).count() == 0
        assert db_session.query(Experience).count() == 0

    def test_delete_unknown_user(self, db_session):
        assert UserRepository(db_session).delete_account(12345) is False


class TestOrdering:
    def test_insert_at_front_renumbers_positions(self, db_session, make_user):
        user = make_user()
        profile, _ = ProfileRepository(db_session).upsert(user.id, {})
        for title in ("one", "two", "three"):
            profile.experiences.insert(
                0, Experience(title=title, company="Acme", from_date=profile.created_at.date())
            )
        db_session.commit()
        db_session.expire_all()

        stored = ProfileRepository(db_session).get_by_user_id(user.id)
        assert [e.title for e in stored.experiences] == ["three", "two", "one"]
        assert [e.position for e in stored.experiences] == [0, 1, 2]
