"""
Epic Registry - Epic Seed Script

Seeds the database with a seed user, a few cases and sample epics, then
prints an autocomplete preview.
"""

import logging
import random
import sys
from datetime import date, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from epic_registry.config import get_settings
from epic_registry.database.connection import drop_db, get_session, init_db
from epic_registry.database.models import Case, Gender, User
from epic_registry.repositories import (
    CurrentUser,
    EpicRepository,
    RepositoryOptions,
)

SEED_USER_EMAIL = "seed@epic-registry.local"

SAMPLE_NAMES = [
    "Alice Moreau",
    "Bruno Silva",
    "Chen Wei",
    "Dana O'Neil",
    "Emeka Obi",
    "Farah Haddad",
    "Gustav Lind",
    "Hana Sato",
    "Ivan Petrov",
    "Julia Rossi",
]

SAMPLE_CASES = [
    ("Intake review", "New arrivals awaiting first assessment"),
    ("Follow-up", "Scheduled follow-up visits"),
    ("Closed", "Finished cases kept for reference"),
]


def get_or_create_seed_user(session) -> User:
    """Return the seed user, creating it on first run."""
    user = session.query(User).filter_by(email=SEED_USER_EMAIL).first()
    if user is None:
        user = User(email=SEED_USER_EMAIL, full_name="Seed User")
        session.add(user)
        session.flush()
    return user


def get_or_create_cases(session) -> list[Case]:
    """
    Return the sample cases, creating only those missing.

    Cases are matched by title so repeated runs do not duplicate them.
    """
    cases = []
    for title, description in SAMPLE_CASES:
        case = session.query(Case).filter_by(title=title).first()
        if case is None:
            case = Case(title=title, description=description)
            session.add(case)
        cases.append(case)
    session.flush()
    return cases


def seed_epics(count: int = 10, reset: bool = False) -> int:
    """
    Seed sample epics into the database.

    Args:
        count: Number of epics to create.
        reset: If True, drop and recreate all tables first.

    Returns:
        Number of epics created.
    """
    if reset:
        print("Dropping existing tables...")
        drop_db()

    print("Initializing database...")
    init_db()

    rng = random.Random(42)

    with get_session() as session:
        user = get_or_create_seed_user(session)
        cases = get_or_create_cases(session)

        options = RepositoryOptions(
            session=session,
            current_user=CurrentUser(id=user.id, email=user.email),
        )
        repo = EpicRepository()

        created = []
        for index in range(count):
            name = SAMPLE_NAMES[index % len(SAMPLE_NAMES)]
            if index >= len(SAMPLE_NAMES):
                name = f"{name} {index // len(SAMPLE_NAMES) + 1}"

            epic = repo.create(
                {
                    "name": name,
                    "gender": rng.choice(list(Gender)),
                    "phone": f"+1-555-{rng.randint(1000, 9999)}",
                    "birthdate": date(1950, 1, 1) + timedelta(days=rng.randint(0, 25000)),
                    "assign_case_id": rng.choice(cases).id,
                },
                options,
            )
            created.append(epic)

        print(f"\nSuccessfully seeded {len(created)} epics!")

        settings = get_settings()
        print("\nAutocomplete preview:")
        for option in repo.find_all_autocomplete("", settings.autocomplete_limit, options):
            print(f"  - {option.label} ({option.id})")

        return len(created)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Seed sample epics")
    parser.add_argument(
        "--count",
        type=int,
        default=10,
        help="Number of epics to create",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate all tables before seeding",
    )
    args = parser.parse_args()

    logging.basicConfig(level=get_settings().log_level)

    created_count = seed_epics(count=args.count, reset=args.reset)
    print(f"\nProcessed {created_count} epics.")
