# 환경변수 로딩 (.env)
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # 레시피 코퍼스 (TheMealDB)
    MEALDB_API_URL: str = "https://www.themealdb.com/api/json/v1/1"
    CORPUS_TIMEOUT: float = 10.0   # 재료 하나가 전체 매칭을 붙잡지 않도록
    MATCH_TOP_K: int = 5           # 상세 조회 fan-out 상한

    # 생성형 폴백 (OpenAI)
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    GENERATION_TIMEOUT: float = 30.0
    PLACEHOLDER_IMAGE: str = (
        "https://plus.unsplash.com/premium_photo-1673108852141-e8c3c22a4a22"
        "?w=900&auto=format&fit=crop&q=60"
    )

    # 카드 기본값 (코퍼스는 조리시간/난이도를 안 줌)
    DEFAULT_COOK_TIME: str = "30"
    DEFAULT_DIFFICULTY: str = "Medium"

    # 즐겨찾기 저장소
    MONGO_URI: str = "mongodb://localhost:27017"  # 필요 시 prod/staging로 분리
    MONGO_DB: str = "mealmatch"

    class Config:
        env_file = ".env"

settings = Settings()
