# app/db/seed.py
"""Create the setup admin and a batch of fake clients.

    python -m app.db.seed --admin-user admin --admin-password secret --clients 50
"""
import asyncio
import logging
import random
from datetime import date, timedelta
import click
from faker import Faker
from tqdm import tqdm

from app.core.config import Settings
from app.core.exceptions import ConflictError
from app.core.security import hash_password
from app.db.session import connect_db_pool, close_db_pool
from app.repositories.admin_repo import AdminRepository
from app.repositories.client_repo import ClientRepository

fake = Faker("en_IN")

DEFAULT_CLIENT_PASSWORD = "client123"
VEHICLE_CLASSES = ["LMV", "MCWG", "MCWOG", "LMV-TR", "HMV"]
RELATIONS = ["S/O", "D/O", "W/O"]


def fake_client(hashed_password: str) -> dict:
    enrolled = fake.date_between(start_date="-180d", end_date="today")
    total_classes = random.choice([15, 20, 30])
    total_fee = random.choice([4500, 6000, 8500])
    return {
        "mobile": f"9{random.randint(100000000, 999999999)}",
        "hashed_password": hashed_password,
        "first_name": fake.first_name(),
        "application_no": f"APP{fake.unique.random_number(digits=7):07d}",
        "phone": fake.phone_number(),
        "relation": f"{random.choice(RELATIONS)} {fake.name()}",
        "permanent_address": fake.address(),
        "temporary_address": fake.address(),
        "dob": fake.date_of_birth(minimum_age=18, maximum_age=60),
        "class_of_vehicle": random.choice(VEHICLE_CLASSES),
        "date_of_enrolment": enrolled,
        "learners_license_no": f"LL{fake.unique.random_number(digits=9):09d}",
        "expiry_of_ll": enrolled + timedelta(days=180),
        "main_test_date": min(enrolled + timedelta(days=45), date.today() + timedelta(days=30)),
        "photo": None,
        "license_file": None,
        "total_fee": total_fee,
        "paid_fee": random.randint(0, total_fee),
        "fee_discount": random.choice([0, 0, 250, 500]),
        "total_classes": total_classes,
        "classes_attended": random.randint(0, total_classes),
    }


async def seed(admin_user: str, admin_password: str, num_clients: int):
    settings = Settings()
    pool = await connect_db_pool(settings)

    try:
        async with pool.acquire() as conn:
            admin_repo = AdminRepository(conn)
            if await admin_repo.get_by_username(admin_user):
                logging.info(f"Admin '{admin_user}' already exists, skipping.")
            else:
                await admin_repo.create(admin_user, hash_password(admin_password))
                logging.info(f"Admin '{admin_user}' created.")

            client_repo = ClientRepository(conn)
            # hashing is slow; every seeded client shares one password
            hashed_password = hash_password(DEFAULT_CLIENT_PASSWORD)
            created = 0
            for _ in tqdm(range(num_clients), desc="Creating clients"):
                try:
                    await client_repo.create(fake_client(hashed_password))
                    created += 1
                except ConflictError:
                    # random mobile collided with an existing client
                    continue
            logging.info(f"✅ Seed complete: {created} clients (password '{DEFAULT_CLIENT_PASSWORD}').")
    finally:
        await close_db_pool(pool)


@click.command()
@click.option("--admin-user", default="admin", show_default=True, help="Username of the setup admin.")
@click.option("--admin-password", required=True, help="Password of the setup admin.")
@click.option("--clients", "num_clients", type=int, default=50, show_default=True,
              help="Number of fake clients to create.")
def main(admin_user: str, admin_password: str, num_clients: int):
    """Seed the driving school database."""
    logging.basicConfig(level=logging.INFO)
    click.echo(f"Seeding admin '{admin_user}' and {num_clients} clients")
    asyncio.run(seed(admin_user, admin_password, num_clients))


if __name__ == "__main__":
    main()
