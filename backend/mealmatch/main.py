# mealmatch/main.py
# FastAPI 앱 초기화 및 라우터 설정
# 라우터는 각 기능별로 분리하여 관리

from __future__ import annotations

from asyncio import sleep
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mealmatch.api.routes_recipes import router as recipes_router       # 재료 매칭/생성/탐색
from mealmatch.api.routes_favorites import router as favorites_router   # 즐겨찾기
from mealmatch.db.init import get_db, init_db, close_db
from mealmatch.db.indexes import ensure_indexes

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
log = logging.getLogger("mealmatch")

app = FastAPI(title="MealMatch - API", version="0.1.0")

# CORS: 프론트 localhost:3000 허용 + 쿠키 전달
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 앱 시작/종료 이벤트 핸들러
@app.on_event("startup")
async def on_startup() -> None:
    # 1) DB 먼저 붙는다 (최대 20회, 1초 간격). 실패해도 매칭 API는 동작
    db = None
    for i in range(20):
        try:
            db = await init_db()
            log.info("[startup] db ready")
            break
        except Exception as e:
            log.warning("[startup] db init retry %d: %s", i + 1, e)
            await sleep(1.0)
    if db is None:
        log.error("[startup] db init failed after retries; favorites disabled")
        return

    # 2) 인덱스 보장
    try:
        await ensure_indexes()
        log.info("[startup] indexes ensured")
    except Exception as e:
        log.warning("[startup] ensure_indexes failed: %s", e)

@app.on_event("shutdown")
async def on_shutdown() -> None:
    # 몽고db 커넥션 정리
    await close_db()

@app.get("/")
async def root():
    return {"status": "ok"}

@app.get("/health")
async def health():
    ok = {"status": "ok", "db": "skip"}
    try:
        db = get_db()
        await db.command("ping")
        ok["db"] = "ok"
    except Exception as e:
        ok["db"] = f"error: {e}"
    return ok

# 라우터 prefix는 각 파일 내에서 정의함 , 중복 prefix 금지
app.include_router(recipes_router)
app.include_router(favorites_router)
