"""Database seeder: demo users, follows, tagged articles, favorites and comments."""
import argparse
import asyncio
import random
import time
from datetime import datetime, timedelta, timezone

from conduit.database import Base, async_session, engine
from conduit.models import Article, ArticleFavorite, Comment, Tag, User, UserFollow
from conduit.security import hash_password
from conduit.services.article_service import slugify, to_base36

TAGS = ["python", "fastapi", "postgresql", "redis", "docker", "kubernetes",
        "react", "typescript", "aws", "devops", "testing", "performance",
        "security", "microservices", "graphql", "rest-api"]

DEMO_PASSWORD = "password123"


async def seed(small: bool = False):
    num_users = 10 if small else 50
    num_articles = 100 if small else 2000
    max_comments = 2 if small else 5

    print(f"Seeding: {num_users} users, {num_articles} articles")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        tags = [Tag(name=name) for name in TAGS]
        session.add_all(tags)
        await session.flush()
        print(f"  Created {len(tags)} tags")

        # One hash for everyone: bcrypt is deliberately slow.
        password = hash_password(DEMO_PASSWORD)
        users = []
        for i in range(num_users):
            user = User(
                username=f"user_{i:04d}",
                email=f"user_{i:04d}@example.com",
                password=password,
                bio=f"I am demo user number {i}. I write about technology.",
                image="",
            )
            users.append(user)
        session.add_all(users)
        await session.flush()
        print(f"  Created {len(users)} users (password: {DEMO_PASSWORD})")

        follows = 0
        for user in users:
            for target in random.sample(users, k=min(5, num_users)):
                if target.id != user.id:
                    session.add(UserFollow(follower_id=user.id, following_id=target.id))
                    follows += 1
        await session.flush()
        print(f"  Created {follows} follows")

        now = datetime.now(timezone.utc)
        articles = []
        for i in range(num_articles):
            topic = random.choice(TAGS)
            title = f"Article {i}: How to build {topic} applications"
            created = now - timedelta(days=random.randint(0, 365), seconds=i)
            stamp = int(created.timestamp() * 1000) + i
            article = Article(
                title=title,
                slug=f"{slugify(title)}-{to_base36(stamp)}",
                description=f"A practical guide to {topic} in production.",
                body=f"This is the full body of article {i}. " * 20,
                created_at=created,
                updated_at=created,
                author_id=random.choice(users).id,
            )
            article.tags = random.sample(tags, k=random.randint(1, 4))
            articles.append(article)
        session.add_all(articles)
        await session.flush()
        print(f"  Created {len(articles)} articles")

        favorites = 0
        comments = 0
        for article in articles:
            for fan in random.sample(users, k=random.randint(0, min(3, num_users))):
                session.add(ArticleFavorite(user_id=fan.id, article_id=article.id))
                favorites += 1
            for _ in range(random.randint(0, max_comments)):
                session.add(Comment(
                    body="Great article! Very helpful for understanding the topic.",
                    author_id=random.choice(users).id,
                    article_id=article.id,
                ))
                comments += 1
        await session.flush()

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Favorites: {favorites}")
    print(f"  Comments: {comments}")


def main():
    parser = argparse.ArgumentParser(description="Seed the Conduit database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (100 articles)")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
