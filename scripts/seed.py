"""Seed a Newsdesk database with demo users, categories, news and comments."""
import asyncio
import argparse
import random
import time
from datetime import datetime, timezone, timedelta

from newsdesk.database import engine, async_session, Base
from newsdesk.models import Category, Comment, CommentStatus, News, NewsStatus, User, UserRole
from newsdesk.security import hash_password

CATEGORIES = [
    ("Technology", "technology"),
    ("Politics", "politics"),
    ("Business", "business"),
    ("Science", "science"),
    ("Sports", "sports"),
    ("Culture", "culture"),
]

DEMO_PASSWORD = "password123"


async def seed(small: bool = False):
    num_users = 5 if small else 50
    num_news = 50 if small else 2000
    max_comments_per_news = 2 if small else 6

    print(f"Seeding: {num_users} users, {num_news} news, up to {num_news * max_comments_per_news} comments")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        categories = [
            Category(name=name, slug=slug, description=f"Latest {name.lower()} stories")
            for name, slug in CATEGORIES
        ]
        session.add_all(categories)
        await session.flush()
        print(f"  Created {len(categories)} categories")

        # Every demo account shares one hash; bcrypt is slow by design.
        password_hash = hash_password(DEMO_PASSWORD)
        users = [
            User(
                username="admin",
                email="admin@example.com",
                password_hash=password_hash,
                full_name="Site Admin",
                role=UserRole.ADMIN,
            )
        ]
        for i in range(1, num_users):
            users.append(
                User(
                    username=f"reader_{i:04d}",
                    email=f"reader_{i:04d}@example.com",
                    password_hash=password_hash,
                    full_name=f"Reader {i}",
                )
            )
        session.add_all(users)
        await session.flush()
        print(f"  Created {len(users)} users (password: {DEMO_PASSWORD})")

        news_items = []
        for i in range(num_news):
            category = random.choice(categories)
            created = datetime.now(timezone.utc) - timedelta(days=random.randint(0, 365))
            status = random.choices(
                [NewsStatus.PUBLISHED, NewsStatus.DRAFT, NewsStatus.ARCHIVED], weights=[8, 1, 1]
            )[0]
            news_items.append(
                News(
                    title=f"{category.name} story {i}",
                    slug=f"{category.slug}-story-{i}",
                    content=f"This is the full text of {category.name.lower()} story {i}. " * 20,
                    excerpt=f"A short summary of {category.name.lower()} story {i}.",
                    category_id=category.id,
                    author_id=users[0].id,
                    status=status,
                    views_count=random.randint(0, 10000),
                    published_at=created if status is NewsStatus.PUBLISHED else None,
                    created_at=created,
                    updated_at=created,
                )
            )
        session.add_all(news_items)
        await session.flush()
        print(f"  Created {len(news_items)} news")

        total_comments = 0
        for item in news_items:
            for _ in range(random.randint(0, max_comments_per_news)):
                session.add(
                    Comment(
                        content=f"Thoughts on {item.title}: very informative.",
                        news_id=item.id,
                        user_id=random.choice(users).id,
                        status=random.choice(list(CommentStatus)),
                    )
                )
                total_comments += 1
        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Comments: {total_comments}")


def main():
    parser = argparse.ArgumentParser(description="Seed the newsdesk database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (50 news)")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
