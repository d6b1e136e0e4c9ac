# mealmatch/db/indexes.py
# 컬렉션 인덱스 생성 — 앱 스타트업에서 한 번 ensure_indexes()를 await로 호출한다.

from mealmatch.db.init import get_db

async def ensure_favorite_indexes(db):
    col = db["favorites"]
    # 코퍼스 레시피: 사용자별 sourceId 유일
    await col.create_index(
        [("anon_id", 1), ("sourceId", 1)],
        unique=True,
        partialFilterExpression={"sourceId": {"$type": "string"}},
        name="anon_source_1",
    )
    # 생성형 레시피: 제목+재료 키로 중복 방지
    await col.create_index([("anon_id", 1), ("dedup_key", 1)], unique=True, name="anon_dedup_1")
    await col.create_index([("anon_id", 1), ("created_at", -1)])

async def ensure_indexes():
    db = get_db()
    await ensure_favorite_indexes(db)
