import random
from typing import Any

from study_partner import repo

FIRST_NAMES = [
    "Alice", "Bob", "Carmen", "Deepak", "Elena", "Farah", "Gabriel", "Hana", "Ivan", "Jia",
    "Kofi", "Lucia", "Mateo", "Nadia", "Omar", "Priya", "Quinn", "Rosa", "Sami", "Tomas",
]
SUBJECTS = ["Math", "Physics", "Chemistry", "Biology", "History", "English", "Computer Science", "Art", "Spanish", "Economics"]
BIOS = [
    "Looking for someone to review notes with before exams.",
    "Prefers quiet study sessions and flashcards.",
    "Happy to explain concepts out loud.",
    "",
]


def _grade_for_age(age: int) -> str:
    if age <= 17:
        return f"Grade {max(1, min(12, age - 5))}"
    if age <= 22:
        return f"University Year {age - 17}"
    return "Graduate"


def build_demo_profiles(n_profiles: int, seed: int = 42) -> list[dict[str, Any]]:
    rng = random.Random(seed)
    profiles = []
    for i in range(n_profiles):
        age = rng.randint(12, 24)
        base = FIRST_NAMES[i % len(FIRST_NAMES)]
        name = base if i < len(FIRST_NAMES) else f"{base} {i // len(FIRST_NAMES) + 1}"
        profiles.append(
            {
                "user_id": f"demo-{i + 1:04d}",
                "name": name,
                "age": age,
                "grade": _grade_for_age(age),
                "favorite_subjects": ", ".join(rng.sample(SUBJECTS, k=rng.randint(1, 3))),
                "bio": rng.choice(BIOS),
            }
        )
    return profiles


def seed_demo_profiles(n_profiles: int = 20, seed: int = 42) -> dict[str, int]:
    profiles = build_demo_profiles(n_profiles, seed=seed)
    for p in profiles:
        repo.upsert_profile(**p)
    return {"profiles_upserted": len(profiles)}
