#!/usr/bin/env python3
"""
Local Seed Script
Prepare a local environment for the play arena

Features:
1. Apply the PostgreSQL schema (bookings, slot claims, score ledger)
2. Write a sample roster to Kvrocks under ROSTER_CACHE_KEY
   (in production an external directory sync job owns this key)
3. Print a signed token per sample user for calling the API

Usage:
    uv run python -m script.seed_data
"""

import asyncio

import jwt
import orjson

from src.platform.config.core_setting import settings
from src.platform.database.asyncpg_setting import close_all_asyncpg_pools, ensure_schema
from src.platform.state.kvrocks_client import kvrocks_client
from src.service.play_arena.driven_adapter.state.key_str_generator import make_roster_key


SAMPLE_USERS = [
    {'attuid': 'aa111a', 'name': 'Avery Adams'},
    {'attuid': 'bb222b', 'name': 'Blake Brown'},
    {'attuid': 'cc333c', 'name': 'Casey Clark'},
    {'attuid': 'dd444d', 'name': 'Drew Davis'},
    {'attuid': 'ee555e', 'name': 'Emery Evans'},
]


async def _seed_roster() -> None:
    client = await kvrocks_client.initialize()
    key = make_roster_key(roster_key=settings.ROSTER_CACHE_KEY)
    await client.set(key, orjson.dumps(SAMPLE_USERS))
    print(f'   ✅ Roster written to {key} ({len(SAMPLE_USERS)} users)')


def _print_tokens() -> None:
    print('🔑 Sample tokens (Authorization: Bearer <token>):')
    for user in SAMPLE_USERS:
        token = jwt.encode(
            {'attuid': user['attuid']},
            settings.SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
        )
        print(f'   {user["attuid"]}: {token}')


async def main() -> None:
    print('🌱 Starting play arena seeding...')
    print('=' * 50)

    try:
        await ensure_schema()
        print('   ✅ Schema applied')

        await _seed_roster()
        print()
        _print_tokens()

        print('=' * 50)
        print('🌱 Seeding completed!')

    except Exception as e:
        print(f'❌ Seeding failed: {e}')
        exit(1)

    finally:
        await close_all_asyncpg_pools()
        await kvrocks_client.disconnect()


if __name__ == '__main__':
    asyncio.run(main())
