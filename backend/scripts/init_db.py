#!/usr/bin/env python3
"""
数据库初始化脚本 - 创建所有表，可选写入演示数据

    python scripts/init_db.py           # tables only
    python scripts/init_db.py --seed    # tables + demo users and pets
"""

import argparse
import asyncio
import sys
from pathlib import Path

# 添加项目根目录到路径
backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))

from sqlalchemy import select

from petcrush.common.base import Base
from petcrush.common.database import db_manager
from petcrush.domains.pet.models import Pet
from petcrush.domains.user.models import User

DEMO_VIDEO = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

DEMO_USERS = [
    {
        "username": "ana_silva",
        "email": "ana@example.com",
        "display_name": "Ana Silva",
        "region": "São Paulo, SP",
        "verified": True,
        "whatsapp": "11999999999",
    },
    {
        "username": "carlos_souza",
        "email": "carlos@example.com",
        "display_name": "Carlos Souza",
        "region": "Rio de Janeiro, RJ",
        "verified": True,
    },
]

# (owner username, pet fields)
DEMO_PETS = [
    ("ana_silva", {
        "display_name": "Thor",
        "species": "Dog",
        "breed": "Golden Retriever",
        "gender": "MALE",
        "size": "LARGE",
        "colors": ["Gold"],
        "age_months": 24,
        "pedigree": True,
        "objective": "BREEDING",
        "region": "São Paulo, SP",
        "about": "Thor is a very friendly and energetic Golden Retriever. He loves to play and is looking for a girlfriend.",
        "photos": [
            "https://images.unsplash.com/photo-1552053831-71594a27632d?auto=format&fit=crop&q=80&w=1000",
            "https://images.unsplash.com/photo-1633722715463-d30f4f325e27?auto=format&fit=crop&q=80&w=1000",
            "https://images.unsplash.com/photo-1543466835-00a7907e9de1?auto=format&fit=crop&q=80&w=1000",
        ],
        "vaccinated": True,
        "is_active": True,
    }),
    ("carlos_souza", {
        "display_name": "Luna",
        "species": "Dog",
        "breed": "Golden Retriever",
        "gender": "FEMALE",
        "size": "LARGE",
        "colors": ["Cream"],
        "age_months": 20,
        "pedigree": True,
        "objective": "BREEDING",
        "region": "Rio de Janeiro, RJ",
        "about": "Luna is a sweet and calm Golden Retriever.",
        "photos": [
            "https://images.unsplash.com/photo-1633722715463-d30f4f325e27?auto=format&fit=crop&q=80&w=1000",
            "https://images.unsplash.com/photo-1552053831-71594a27632d?auto=format&fit=crop&q=80&w=1000",
            "https://images.unsplash.com/photo-1543466835-00a7907e9de1?auto=format&fit=crop&q=80&w=1000",
        ],
        "vaccinated": True,
        "is_active": True,
    }),
    ("ana_silva", {
        "display_name": "Mia",
        "species": "Cat",
        "breed": "Siamese",
        "gender": "FEMALE",
        "size": "SMALL",
        "colors": ["White", "Brown"],
        "age_months": 12,
        "objective": "COMPANIONSHIP",
        "region": "São Paulo, SP",
        "about": "Mia needs a new home.",
        "photos": [
            "https://images.unsplash.com/photo-1513245543132-31f507417b26?auto=format&fit=crop&q=80&w=1000",
            "https://images.unsplash.com/photo-1514888286974-6c03e2ca1dba?auto=format&fit=crop&q=80&w=1000",
            "https://images.unsplash.com/photo-1518791841217-8f162f1e1131?auto=format&fit=crop&q=80&w=1000",
        ],
        "is_donation": True,
        "vaccinated": True,
        "neutered": True,
    }),
]


async def seed_demo_data():
    """写入演示数据（已存在则跳过）"""
    async with db_manager.get_session() as session:
        existing = await session.execute(select(User).where(User.username == "ana_silva"))
        if existing.scalar_one_or_none() is not None:
            print("ℹ️  Demo data already present, skipping seed")
            return

        users = {}
        for fields in DEMO_USERS:
            user = User(**fields)
            session.add(user)
            users[fields["username"]] = user
        await session.flush()

        for owner, fields in DEMO_PETS:
            session.add(Pet(
                owner_id=users[owner].id,
                video_url=DEMO_VIDEO,
                video_duration=15,
                **fields
            ))

    print(f"🌱 Seeded {len(DEMO_USERS)} users and {len(DEMO_PETS)} pets")


async def init_database(seed: bool = False):
    """初始化数据库 - 创建所有表"""
    print("🔧 Initializing database...")

    # 初始化数据库连接
    await db_manager.initialize()

    print("📦 Creating tables...")
    await db_manager.create_all()
    print("✅ All tables created successfully!")

    # 显示创建的表
    print("\n📋 Created tables:")
    for table in sorted(Base.metadata.tables.keys()):
        print(f"  - {table}")

    if seed:
        await seed_demo_data()

    await db_manager.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create PetCrushes tables")
    parser.add_argument("--seed", action="store_true", help="insert demo users and pets")
    args = parser.parse_args()
    asyncio.run(init_database(seed=args.seed))
