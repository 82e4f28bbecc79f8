from pathlib import Path
import sys

if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.db.session import get_session_factory
from app.services.demo_data import seed_demo_data


def main() -> None:
    session_factory = get_session_factory()
    with session_factory() as db:
        school_class = seed_demo_data(db)
    if school_class is None:
        print("Ledger is not empty, nothing seeded")
    else:
        print(f"Seeded demo class: {school_class.id}")


if __name__ == "__main__":
    main()
