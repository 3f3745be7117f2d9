import argparse
import asyncio

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from cineverse.applications.use_cases.payment.plans import SeedPlansUseCase
from cineverse.infrastructure.adapters.repositories.sqlalchemy_commerce_repository import SQLAlchemyPlanRepository
from cineverse.infrastructure.config.settings import Settings
from cineverse.infrastructure.persistence.database import create_tables


async def seed_plans(database_url: str) -> None:
    engine = create_async_engine(database_url)
    try:
        await create_tables(engine)
        async with AsyncSession(engine, expire_on_commit=False) as session:
            plans = await SeedPlansUseCase(SQLAlchemyPlanRepository(session)).execute()
        for plan in plans:
            print(f"{plan.id}: {plan.name} ({plan.price} / {plan.duration_days} days, {plan.max_resolution})")
    finally:
        await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--database_url", type=str, default=None)
    args = parser.parse_args()

    asyncio.run(seed_plans(args.database_url or Settings().DATABASE_URL))


if __name__ == "__main__":
    main()
