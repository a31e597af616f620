"""Create the attendance tables and, for the given companies, a settings row holding the configured defaults.

Usage: python scripts/init_db.py [company_id ...]
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from workforce.database import engine, Base, SessionLocal
import workforce.models  # noqa: F401 - registers all models
from workforce.services import attendance_settings_service


def ensure_default_settings(db, company_id: int) -> bool:
    """Store the configured defaults for a company without a settings row. Returns True when a row was created."""
    if attendance_settings_service.get_settings_row(db, company_id) is not None:
        return False
    defaults = attendance_settings_service.describe_settings(db, company_id)
    defaults.pop("company_id")
    defaults.pop("is_default")
    attendance_settings_service.upsert_settings(db, company_id, defaults)
    return True


def init_db(company_ids=()):
    print("Creating attendance tables...")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        for company_id in company_ids:
            created = ensure_default_settings(db, company_id)
            print(f"company {company_id}: {'default settings stored' if created else 'settings already present'}")
    finally:
        db.close()
    print("Database initialized successfully.")


if __name__ == "__main__":
    init_db([int(arg) for arg in sys.argv[1:]])
