#!/usr/bin/env python3
"""Seed database with sample social data.

Creates (through the Storage facade, so every store path gets exercised):
- Activated users
- Posts with tags
- Comments on random posts
- Follow edges between users

Re-running against a seeded database stops at the first existing user.

Usage:
    python -m scripts.seed
"""

import asyncio
from datetime import timedelta
import os
import random
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

from social.models import Comment, Post, User
from social.services.registration import register_user
from social.settings import get_settings
from social.stores.errors import ConflictError, DuplicateEmailError, DuplicateUsernameError
from social.stores.postgres import create_engine
from social.stores.storage import Storage, new_storage

load_dotenv()

USERNAMES = [
    "alice", "bob", "charlie", "dave", "eve", "frank", "grace", "heidi",
    "ivan", "judy", "mallory", "niaj", "olivia", "peggy", "rupert", "sybil",
]

TITLES = [
    "Morning coffee thoughts",
    "Weekend hiking report",
    "Why I switched editors",
    "Notes on async Python",
    "Favourite books this year",
    "Home lab upgrade",
    "Learning to bake bread",
    "Conference takeaways",
]

CONTENTS = [
    "Short update today, more tomorrow.",
    "Took a while to get right but it finally works.",
    "Curious what everyone else thinks about this.",
    "Photos coming soon.",
    "This one surprised me more than I expected.",
]

TAGS = ["python", "life", "travel", "food", "tech", "books", "music", "sports"]

COMMENTS = [
    "Great post!",
    "Thanks for sharing.",
    "I disagree, but interesting read.",
    "Following for updates.",
    "This helped a lot.",
]

SEED_PASSWORD = "seed-password"
POSTS_PER_USER = 3
COMMENT_COUNT = 40
FOLLOWS_PER_USER = 4


async def seed_database(storage: Storage) -> None:
    print("🌱 Seeding database...")

    print("\n👤 Creating users...")
    users = await seed_users(storage)
    if not users:
        return

    print("\n📝 Creating posts...")
    posts = await seed_posts(storage, users)

    print("\n💬 Creating comments...")
    await seed_comments(storage, users, posts)

    print("\n🔗 Creating follow edges...")
    await seed_followers(storage, users)

    print("\n✅ Database seeded successfully!")


async def seed_users(storage: Storage) -> list[User]:
    users: list[User] = []
    for name in USERNAMES:
        try:
            user, token = await register_user(
                storage.users,
                username=name,
                email=f"{name}@example.com",
                password=SEED_PASSWORD,
                invitation_ttl=timedelta(days=1),
            )
        except (DuplicateEmailError, DuplicateUsernameError):
            print(f"  ⏭️  {name} (exists) - database already seeded")
            return []
        await storage.users.activate(token)
        users.append(user)
        print(f"  ✅ {name}")
    return users


async def seed_posts(storage: Storage, users: list[User]) -> list[Post]:
    posts: list[Post] = []
    for user in users:
        for _ in range(POSTS_PER_USER):
            post = Post(
                title=random.choice(TITLES),
                content=random.choice(CONTENTS),
                user_id=user.id,
                tags=random.sample(TAGS, k=2),
            )
            await storage.posts.create(post)
            posts.append(post)
    print(f"  ✅ {len(posts)} posts")
    return posts


async def seed_comments(storage: Storage, users: list[User], posts: list[Post]) -> None:
    for _ in range(COMMENT_COUNT):
        comment = Comment(
            post_id=random.choice(posts).id,
            user_id=random.choice(users).id,
            content=random.choice(COMMENTS),
        )
        await storage.comments.create(comment)
    print(f"  ✅ {COMMENT_COUNT} comments")


async def seed_followers(storage: Storage, users: list[User]) -> None:
    edges = 0
    for user in users:
        others = [u for u in users if u.id != user.id]
        for followee in random.sample(others, k=min(FOLLOWS_PER_USER, len(others))):
            try:
                await storage.followers.follow(user.id, followee.id)
                edges += 1
            except ConflictError:
                continue
    print(f"  ✅ {edges} follow edges")


async def main() -> None:
    settings = get_settings()
    engine = create_engine(settings)
    try:
        await seed_database(new_storage(engine, query_timeout=settings.query_timeout_seconds))
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
