import asyncio
import typer
from sqlalchemy.ext.asyncio import AsyncSession

import app.db_models # noqa: F401

from app.database import Base, async_session_factory, engine
from app.exceptions import BlogError
from app.users.schema import UserCreate
from app.users.service import create_user
from app.users.models import User as UserModel # 타입 힌트를 위해 임포트
from app.seed import seed_default_categories

cli = typer.Typer()

async def create_user_runner(user_data: UserCreate, db: AsyncSession) -> None:
    """비동기 로직을 실행하는 실제 러너 함수"""
    print("--- User Creation ---")
    try:
        print(f"Creating user '{user_data.username}'...")
        user: UserModel = await create_user(user_data=user_data, db=db)

        print("\n✅ User created successfully!")
        print(f"   ID: {user.id}")
        print(f"   Username: {user.username}")
        print(f"   Email: {user.email}")
    except BlogError as e:
        print(f"\n❌ Error creating user: {e.detail}")
        raise typer.Exit(code=1)
    finally:
        print("--- Task Finished ---")


@cli.command(name="create-user")
def createuser(
    username: str = typer.Option(..., "--username", "-u", help="Login name (must be unique)."),
    email: str = typer.Option(..., "--email", "-e", help="Email address (must be unique)."),
    password: str = typer.Option(..., "--password", "-p", help="Password (min 6 characters)."),
    first_name: str = typer.Option(None, "--first-name", help="Optional first name."),
    last_name: str = typer.Option(None, "--last-name", help="Optional last name."),
):
    """
    Registers a new user directly in the database.
    """
    user_data = UserCreate(
        username=username,
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
    )

    async def main():
        async with async_session_factory() as session:
            await create_user_runner(user_data, db=session)

    asyncio.run(main())


@cli.command(name="seed")
def seed():
    """
    Creates the default categories (Technology, Lifestyle, Travel, Food, Health).
    Categories that already exist are skipped.
    """
    async def runner():
        async with async_session_factory() as session:
            created, skipped = await seed_default_categories(session)
        print(f"✅ Seed finished: created={created}, skipped={skipped}")

    asyncio.run(runner())


@cli.command(name="create-tables")
def create_tables():
    """
    Creates all tables from the SQLAlchemy models (local development only; use alembic elsewhere).
    """
    async def runner():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await engine.dispose()
        print("✅ Tables created")

    asyncio.run(runner())

if __name__ == "__main__":
    cli()
