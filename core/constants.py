"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent

# db_file에 이 값을 지정하면 휘발성 저장소 사용
MEMORY_DB_SENTINEL: str = "memory"


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 4000

    DB_FILE: str = MEMORY_DB_SENTINEL
    POOL_SIZE: int = 4
    ACQUIRE_TIMEOUT_SEC: float = 5.0
    BUSY_TIMEOUT_MS: int = 30000

    LOG_LEVEL: str = "INFO"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    CONFIG_FILE: Path = CONFIG_DIR / "ledger.yaml"


# 설정 파일 경로 override 환경변수
CONFIG_PATH_ENV: str = "LEDGER_CONFIG"
