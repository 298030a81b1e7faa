"""Seed a demo account with a family and a few records.

Creates the account, its profile and "Self" member, two family members and
sample diagnoses, visits and tests, plus a bearer session so the API can be
tried immediately.

Usage:
    python -m kinchart.scripts.seed_demo [email]

Idempotent: skips if an account with the email already exists.
"""

import asyncio
import sys
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import select, text

from kinchart.database import async_session_maker, engine
from kinchart.models import User
from kinchart.repositories import (
    DiagnosisRepository,
    FamilyRepository,
    MedicalTestRepository,
    VisitRepository,
)
from kinchart.schemas.medical_test import TestCategory
from kinchart.schemas.profile import ProfileComplete
from kinchart.services import accounts
from kinchart.services.catalog import build_results
from kinchart.services.onboarding import mark_onboarding_as_seen

DEFAULT_EMAIL = "demo@kinchart.local"


async def seed_demo(email: str) -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    print("  Database: connected")

    async with async_session_maker() as session:
        result = await session.execute(select(User).where(User.email == email))
        existing = result.scalar_one_or_none()
        if existing:
            print(f"  Demo account already exists: {email} (id={existing.id})")
            return

        user, _ = await accounts.get_or_create_user(session, email)
        await accounts.complete_profile(
            session,
            user,
            ProfileComplete(full_name="Asha Rao", dob=date(1988, 4, 12), gender="Female", blood_group="B+"),
        )
        await mark_onboarding_as_seen(session, user.id)

        family = FamilyRepository(session)
        mom = await family.create(user.id, full_name="Lakshmi Rao", relation="Mother", dob=date(1960, 9, 2))
        son = await family.create(user.id, full_name="Arjun Rao", relation="Son", dob=date(2016, 1, 20))

        now = datetime.now(timezone.utc)
        diagnoses = DiagnosisRepository(session)
        await diagnoses.create(
            member_id=mom.id,
            title="Type 2 Diabetes",
            diagnosed_on=date(2019, 6, 1),
            status="Monitoring",
            severity="Moderate",
        )
        await diagnoses.create(
            member_id=son.id,
            title="Seasonal allergies",
            diagnosed_on=date(2023, 3, 15),
            status="Active",
            severity="Mild",
        )

        visits = VisitRepository(session)
        await visits.create(
            member_id=mom.id,
            visit_date=now + timedelta(days=10),
            status="upcoming",
            visit_type="Follow-up",
            reason="Quarterly diabetes review",
            specialty="General Medicine",
        )
        await visits.create(
            member_id=user.id,
            visit_date=now - timedelta(days=30),
            status="completed",
            visit_type="Routine Checkup",
            reason="Annual physical",
        )

        await MedicalTestRepository(session).create(
            member_id=mom.id,
            test_name="Blood Sugar",
            test_category=TestCategory.BLOOD.value,
            test_date=now - timedelta(days=7),
            status="abnormal",
            results=build_results(
                TestCategory.BLOOD,
                "Blood Sugar",
                parameter_values={"Fasting Glucose": "132", "HbA1c": "7.1"},
            ),
        )

        auth_session = await accounts.open_session(session, user, provider="email")
        await session.commit()

        print(f"  Demo account created: {email} (id={user.id})")
        print(f"  Bearer token: {auth_session.token}")


if __name__ == "__main__":
    asyncio.run(seed_demo(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_EMAIL))
