"""
Seed script for StaffDesk: a demo employee, a few projects and an open
appraisal cycle.

Run: python -m staffdesk.seed   (from backend/)
"""
import logging
import sys
from datetime import datetime, timedelta

from staffdesk.database import SessionLocal
from staffdesk.models.appraisal import AppraisalCycle, AppraisalStatus
from staffdesk.models.project import Project, ProjectStatus
from staffdesk.models.user import User
from staffdesk.services.auth import hash_password

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_EMAIL = "employee@staffdesk.local"
DEMO_PASSWORD = "StaffDesk@2026!"
DEMO_NAME = "Demo Employee"

DEMO_PROJECTS = [
    ("Website Redesign", ProjectStatus.ACTIVE),
    ("Internal Tools", ProjectStatus.ACTIVE),
    ("Mobile App", ProjectStatus.PLANNING),
]


def seed_demo_user(db):
    user = db.query(User).filter(User.email == DEMO_EMAIL).first()
    if user:
        logger.info("Demo user already exists, skipping.")
        return user
    user = User(
        email=DEMO_EMAIL,
        name=DEMO_NAME,
        password_hash=hash_password(DEMO_PASSWORD),
        role="EMPLOYEE",
        is_active=True,
    )
    db.add(user)
    db.commit()
    logger.info("Created demo user: %s (%s)", DEMO_NAME, DEMO_EMAIL)
    logger.info("  Password: %s", DEMO_PASSWORD)
    return user


def seed_projects(db):
    created = 0
    for name, status in DEMO_PROJECTS:
        if db.query(Project).filter(Project.name == name).first():
            continue
        db.add(Project(name=name, status=status.value))
        created += 1
    db.commit()
    return created


def seed_appraisal_cycle(db):
    now = datetime.now()
    open_cycle = db.query(AppraisalCycle).filter(
        AppraisalCycle.start_date <= now,
        AppraisalCycle.end_date >= now,
    ).first()
    if open_cycle:
        logger.info("Appraisal cycle %s already open, skipping.", open_cycle.name)
        return
    db.add(AppraisalCycle(
        name=f"{now.year} Annual Review",
        start_date=now - timedelta(days=7),
        end_date=now + timedelta(days=30),
        status=AppraisalStatus.IN_PROGRESS.value,
    ))
    db.commit()
    logger.info("Opened appraisal cycle for %s", now.year)


def run_seed():
    db = SessionLocal()
    try:
        seed_demo_user(db)

        created = seed_projects(db)
        if created:
            logger.info("Seeded %d projects.", created)
        else:
            logger.info("Projects already exist, skipping.")

        seed_appraisal_cycle(db)

        logger.info("Seed complete.")
    except Exception:
        logger.exception("Seed failed")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    run_seed()
