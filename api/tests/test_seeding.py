from study_partner import repo
from study_partner.schemas import ProfileRequest
from study_partner.services.seeding import build_demo_profiles, seed_demo_profiles


def test_demo_profiles_are_deterministic_and_valid():
    first = build_demo_profiles(25, seed=7)
    assert first == build_demo_profiles(25, seed=7)
    assert len({p["user_id"] for p in first}) == 25
    assert len({p["name"] for p in first}) == 25
    for p in first:
        ProfileRequest(**{k: v for k, v in p.items() if k != "user_id"})


def test_seeding_is_idempotent(db_sessionmaker):
    assert seed_demo_profiles(n_profiles=5) == {"profiles_upserted": 5}
    seed_demo_profiles(n_profiles=5)
    assert len(repo.list_candidate_profiles("nobody")) == 5
