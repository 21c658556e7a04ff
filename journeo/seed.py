"""
Journeo Backend — Demo Data
=============================

What:  Inserts a small demo data set: one admin, two users, a handful of
       guides with their activities and user assignments.
When:  At startup when SEED_DEMO_DATA=true, or by hand:

           python -m journeo.seed

Idempotent: does nothing when the users table already holds a row.

Demo accounts:
    admin@hws.com / admin123   (ADMIN)
    user1@hws.com / user123    (USER)
    user2@hws.com / user123    (USER)
"""

import asyncio
import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from journeo.models import (
    Activity,
    ActivityType,
    Guide,
    Mobility,
    Role,
    Season,
    TargetAudience,
    User,
)
from journeo.security import hash_password

logger = logging.getLogger(__name__)


def _activity(title, type_, day, order, start, minutes, lat, lng, address=None, website=None) -> Activity:
    return Activity(
        title=title,
        type=type_,
        day_number=day,
        order_in_day=order,
        start_time=start,
        duration_minutes=minutes,
        latitude=lat,
        longitude=lng,
        address=address,
        website=website,
    )


def _demo_guides(admin: User, user1: User, user2: User) -> List[Guide]:
    return [
        Guide(
            title="Châteaux de la Loire à vélo",
            description="Trois jours entre Blois, Chambord et Amboise le long de la Loire.",
            number_of_days=3,
            mobility=Mobility.VELO,
            season=Season.PRINTEMPS,
            target_audience=TargetAudience.ENTRE_AMIS,
            activities=[
                _activity("Château royal de Blois", ActivityType.CHATEAU, 1, 1, "09:30", 120,
                          47.5857, 1.3310, "Place du Château, 41000 Blois",
                          "https://www.chateaudeblois.fr"),
                _activity("Domaine de Chambord", ActivityType.CHATEAU, 2, 1, "10:00", 180,
                          47.6162, 1.5170, "41250 Chambord", "https://www.chambord.org"),
                _activity("Parc du Clos Lucé", ActivityType.PARC, 3, 1, "10:00", 150,
                          47.4100, 0.9912, "2 Rue du Clos Lucé, 37400 Amboise"),
                _activity("Château d'Amboise", ActivityType.CHATEAU, 3, 2, "14:30", 90,
                          47.4130, 0.9861, "Montée de l'Emir Abd el Kader, 37400 Amboise"),
            ],
            users=[admin, user1],
        ),
        Guide(
            title="Paris en famille",
            description="Musées et jardins parisiens adaptés aux enfants.",
            number_of_days=2,
            mobility=Mobility.A_PIED,
            season=Season.ETE,
            target_audience=TargetAudience.FAMILLE,
            activities=[
                _activity("Muséum national d'Histoire naturelle", ActivityType.MUSEE, 1, 1,
                          "10:00", 150, 48.8418, 2.3561, "57 Rue Cuvier, 75005 Paris"),
                _activity("Jardin du Luxembourg", ActivityType.PARC, 1, 2, "15:00", 90,
                          48.8462, 2.3372, "75006 Paris"),
                _activity("Cité des sciences et de l'industrie", ActivityType.MUSEE, 2, 1,
                          "10:00", 240, 48.8956, 2.3880, "30 Av. Corentin Cariou, 75019 Paris"),
            ],
            users=[admin],
        ),
        Guide(
            title="Dordogne souterraine",
            description="Grottes ornées et gouffres du Périgord noir.",
            number_of_days=2,
            mobility=Mobility.VOITURE,
            season=Season.AUTOMNE,
            target_audience=TargetAudience.EN_GROUPE,
            activities=[
                _activity("Lascaux IV", ActivityType.GROTTE, 1, 1, "09:00", 150,
                          45.0537, 1.1686, "Avenue de Lascaux, 24290 Montignac"),
                _activity("Gouffre de Padirac", ActivityType.GROTTE, 2, 1, "10:30", 120,
                          44.8583, 1.7500, "46500 Padirac"),
            ],
            users=[user1],
        ),
        Guide(
            title="Alpes en hiver",
            description="Raquettes et chiens de traîneau autour d'Annecy.",
            number_of_days=2,
            mobility=Mobility.VOITURE,
            season=Season.HIVER,
            target_audience=TargetAudience.SEUL,
            activities=[
                _activity("Sortie raquettes au Semnoz", ActivityType.ACTIVITE, 1, 1,
                          "09:00", 180, 45.7958, 6.1036),
                _activity("Chiens de traîneau", ActivityType.ACTIVITE, 2, 1,
                          "10:00", 120, 45.9000, 6.4300),
            ],
            users=[user2],
        ),
    ]


async def seed_demo_data(session: AsyncSession) -> bool:
    """
    Insert the demo data set unless users already exist.

    Returns:
        True when rows were inserted, False when the database was left untouched.
    """
    existing = await session.scalar(select(func.count()).select_from(User))
    if existing:
        logger.info("Demo data skipped: %d user(s) already present", existing)
        return False

    admin = User(email="admin@hws.com", password_hash=hash_password("admin123"), role=Role.ADMIN,
                 first_name="Admin", last_name="Journeo")
    user1 = User(email="user1@hws.com", password_hash=hash_password("user123"), role=Role.USER,
                 first_name="Alice", last_name="Martin")
    user2 = User(email="user2@hws.com", password_hash=hash_password("user123"), role=Role.USER,
                 first_name="Bruno", last_name="Durand")

    guides = _demo_guides(admin, user1, user2)
    session.add_all([admin, user1, user2, *guides])
    await session.flush()

    logger.info("Demo data inserted: 3 users, %d guides", len(guides))
    return True


async def _main() -> None:
    from journeo.database import async_session_factory, dispose_engine
    from journeo.main import setup_logging

    setup_logging()
    try:
        async with async_session_factory() as session:
            async with session.begin():
                await seed_demo_data(session)
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(_main())
