import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import text  # noqa: E402

from app.db.session import AsyncSessionLocal  # noqa: E402


async def reset_database():
    """Resets the payout tables.

    Performs the following operations:
        1. Truncates history, summary and banking tables
        2. Resets the history identity

    Returns:
        bool: True if reset was successful, False otherwise.
    """
    print("Starting database reset...")
    print("-" * 60)

    tables = [
        ("payouts_history", "Payouts History"),
        ("payouts_summary", "Payouts Summary"),
        ("trainer_banking", "Trainer Banking"),
    ]

    async with AsyncSessionLocal() as session:
        try:
            for table_name, display_name in tables:
                await session.execute(
                    text(f"TRUNCATE TABLE {table_name} RESTART IDENTITY CASCADE;")
                )
                print(f"Truncated table: {display_name}")

            await session.commit()
            print("-" * 60)
            print("Database reset successful")
            print("\nCurrent state:")

            for table_name, display_name in tables:
                result = await session.execute(
                    text(f"SELECT COUNT(*) FROM {table_name}")
                )
                print(f"  {display_name}: {result.scalar()} records")

            return True

        except Exception as e:
            await session.rollback()
            print(f"\nError during reset: {e}")
            return False


async def confirm_reset() -> bool:
    print("\nWARNING: This operation will delete ALL payout data")
    print("Only use in development/testing environments")
    print("\nDo you want to continue? (yes/no): ", end="")

    response = input().strip().lower()
    return response in ["yes", "y"]


async def main():
    print("\n" + "=" * 60)
    print("DATABASE RESET")
    print("=" * 60)

    if not await confirm_reset():
        print("\nOperation cancelled by user")
        sys.exit(0)

    success = await reset_database()

    if success:
        print("\nReset complete. Database is clean.")
        sys.exit(0)
    else:
        print("\nReset failed. Check logs for details.")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
