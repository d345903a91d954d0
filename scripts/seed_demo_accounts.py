import argparse
import asyncio
import os
import random
import sys
from datetime import datetime, timedelta, timezone
from typing import List

from faker import Faker

# Add the project root to Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from app.auth import AuthService
from app.db import Database
from app.models.blog import Blog
from app.models.enums import UserRole
from app.models.user import User
from app.permissions import CallerIdentity

fake = Faker()

DEMO_ACCOUNTS = [
    {
        "name": "Demo Student",
        "email": "student@example.com",
        "password": "password123",
        "phone": "+1234567890",
        "role": UserRole.STUDENT,
    },
    {
        "name": "Demo Admin",
        "email": "admin@example.com",
        "password": "admin123",
        "phone": "+1234567891",
        "role": UserRole.ADMIN,
    },
]

TOPICS = ["neet", "jee", "strategy", "motivation", "syllabus", "news", "revision"]


async def create_demo_accounts() -> List[User]:
    """Replace the demo accounts with fresh copies"""
    emails = [account["email"] for account in DEMO_ACCOUNTS]
    await User.find({"email": {"$in": emails}}).delete()

    users = []
    for account in DEMO_ACCOUNTS:
        user = User(
            name=account["name"],
            email=account["email"],
            password_hash=AuthService.get_password_hash(account["password"]),
            phone=account["phone"],
            role=account["role"],
            is_active=True,
        )
        await user.insert()
        users.append(user)
        print(f"👤 {user.role.value}: {user.email} / {account['password']}")
    return users


async def create_demo_blogs(author: User, count: int) -> List[Blog]:
    """Published blogs with Faker text, spread over the last 90 days"""
    snapshot = CallerIdentity.from_user(author).snapshot()
    blogs = []
    for _ in range(count):
        published_at = datetime.now(timezone.utc) - timedelta(days=random.randint(0, 90))
        blog = Blog(
            title=fake.sentence(nb_words=6).rstrip("."),
            content="".join(f"<p>{p}</p>" for p in fake.paragraphs(nb=4)),
            excerpt=fake.text(max_nb_chars=200),
            author=snapshot,
            tags=random.sample(TOPICS, k=random.randint(1, 3)),
            published=True,
            published_at=published_at,
            created_at=published_at,
            updated_at=published_at,
        )
        await blog.insert()
        blogs.append(blog)
    return blogs


async def main(with_blogs: int) -> None:
    database = Database()
    await database.connect()
    try:
        print("🔧 Creating demo accounts...")
        users = await create_demo_accounts()

        if with_blogs > 0:
            admin = next(u for u in users if u.role == UserRole.ADMIN)
            print(f"📝 Creating {with_blogs} demo blogs...")
            await create_demo_blogs(admin, with_blogs)

        print("✅ Demo data seeded successfully!")
    finally:
        database.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo accounts (and blogs)")
    parser.add_argument(
        "--with-blogs", type=int, default=0, metavar="N",
        help="also create N published demo blogs authored by the admin",
    )
    args = parser.parse_args()
    asyncio.run(main(args.with_blogs))
