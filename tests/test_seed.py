from sqlalchemy import select, func

from fleetops.core.security import get_password_hash
from fleetops.models.user import User
from fleetops.models.goods_type import GoodsType
from fleetops.scripts.seed_demo_data import seed_demo_data, DEFAULT_GOODS_TYPES


async def test_seed_is_idempotent(db_session):
    user = User(email="demo@example.com", password_hash=get_password_hash("demo123"), full_name="Demo")
    db_session.add(user)
    await db_session.commit()

    created = await seed_demo_data(db_session, user)
    assert created == {"goods_types": len(DEFAULT_GOODS_TYPES), "vehicles": 2, "drivers": 2, "expenses": 1}

    created = await seed_demo_data(db_session, user)
    assert created == {"goods_types": 0, "vehicles": 0, "drivers": 0, "expenses": 0}

    count = (await db_session.execute(
        select(func.count(GoodsType.id)).where(GoodsType.user_id == user.id)
    )).scalar()
    assert count == len(DEFAULT_GOODS_TYPES)
