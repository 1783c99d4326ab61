"""
설정 로더

ledger.yaml 로드 (없으면 기본값으로 생성)
"""

import ipaddress
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import yaml

from core.constants import CONFIG_PATH_ENV, Defaults, Paths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerConfig:
    """서비스 설정 (ledger.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    address: str = Defaults.WEB_HOST
    port: int = Defaults.WEB_PORT
    db_file: str = Defaults.DB_FILE
    pool_size: int = Defaults.POOL_SIZE
    acquire_timeout: float = Defaults.ACQUIRE_TIMEOUT_SEC
    busy_timeout_ms: int = Defaults.BUSY_TIMEOUT_MS
    log_level: str = Defaults.LOG_LEVEL

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class ConfigLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def default_config_path() -> Path:
    """설정 파일 경로 (환경변수 LEDGER_CONFIG 우선)"""
    override = os.environ.get(CONFIG_PATH_ENV)
    return Path(override) if override else Paths.CONFIG_FILE


def write_default_config(path: Path) -> LedgerConfig:
    """기본 설정 파일 생성

    Returns:
        기본값 LedgerConfig
    """
    config = LedgerConfig()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(config.to_dict(), sort_keys=False, allow_unicode=True),
        encoding="utf-8",
    )
    logger.info(f"기본 설정 파일 생성: {path}")
    return config


def load_config(path: Path | None = None) -> LedgerConfig:
    """ledger.yaml 파일 로드

    파일이 없으면 기본값으로 생성 후 반환.
    파일에 없는 키는 기본값 사용.

    Args:
        path: 설정 파일 경로 (None이면 기본 경로 사용)

    Returns:
        LedgerConfig 인스턴스

    Raises:
        ConfigLoadError: 형식이 잘못되었거나 값이 유효하지 않은 경우
    """
    if path is None:
        path = default_config_path()

    if not path.exists():
        try:
            return write_default_config(path)
        except OSError as e:
            raise ConfigLoadError(f"설정 파일을 생성할 수 없습니다: {path}: {e}") from e

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"설정 파일 파싱 실패: {e}") from e
    except OSError as e:
        raise ConfigLoadError(f"설정 파일을 읽을 수 없습니다: {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigLoadError("설정 파일 최상위는 매핑이어야 합니다")

    unknown = set(data) - set(LedgerConfig.__dataclass_fields__)
    if unknown:
        raise ConfigLoadError(f"알 수 없는 설정 키: {', '.join(sorted(unknown))}")

    return _build_config(data)


def _build_config(data: dict[str, Any]) -> LedgerConfig:
    """값 검증 후 LedgerConfig 생성"""
    defaults = LedgerConfig()

    address = str(data.get("address", defaults.address))
    try:
        ipaddress.ip_address(address)
    except ValueError as e:
        raise ConfigLoadError(f"유효하지 않은 address입니다: '{address}'") from e

    port = _require_int(data, "port", defaults.port)
    if not 0 < port < 65536:
        raise ConfigLoadError(f"유효하지 않은 port입니다: {port}")

    db_file = data.get("db_file", defaults.db_file)
    if not isinstance(db_file, str) or not db_file.strip():
        raise ConfigLoadError("db_file은 비어 있지 않은 문자열이어야 합니다")

    pool_size = _require_int(data, "pool_size", defaults.pool_size)
    if pool_size < 1:
        raise ConfigLoadError(f"pool_size는 1 이상이어야 합니다: {pool_size}")

    acquire_timeout = data.get("acquire_timeout", defaults.acquire_timeout)
    if isinstance(acquire_timeout, bool) or not isinstance(acquire_timeout, (int, float)):
        raise ConfigLoadError("acquire_timeout은 숫자여야 합니다")
    if acquire_timeout <= 0:
        raise ConfigLoadError(f"acquire_timeout은 0보다 커야 합니다: {acquire_timeout}")

    busy_timeout_ms = _require_int(data, "busy_timeout_ms", defaults.busy_timeout_ms)
    if busy_timeout_ms < 0:
        raise ConfigLoadError(f"busy_timeout_ms는 0 이상이어야 합니다: {busy_timeout_ms}")

    log_level = str(data.get("log_level", defaults.log_level)).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigLoadError(f"유효하지 않은 log_level입니다: '{log_level}'")

    return LedgerConfig(
        address=address,
        port=port,
        db_file=db_file.strip(),
        pool_size=pool_size,
        acquire_timeout=float(acquire_timeout),
        busy_timeout_ms=busy_timeout_ms,
        log_level=log_level,
    )


def _require_int(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigLoadError(f"{key}는 정수여야 합니다: {value!r}")
    return value


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    ledger.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: LedgerConfig | None = None

    def __new__(cls, config_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_config(config_path)

    @property
    def config(self) -> LedgerConfig:
        assert self._config is not None
        return self._config

    @property
    def address(self) -> str:
        """바인드 주소"""
        return self.config.address

    @property
    def port(self) -> int:
        """포트"""
        return self.config.port

    @property
    def db_file(self) -> str:
        """DB 파일 경로 또는 "memory" """
        return self.config.db_file

    @property
    def pool_size(self) -> int:
        return self.config.pool_size

    @property
    def acquire_timeout(self) -> float:
        return self.config.acquire_timeout

    @property
    def busy_timeout_ms(self) -> int:
        return self.config.busy_timeout_ms

    @property
    def log_level(self) -> str:
        return self.config.log_level

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(config_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        config_path: ledger.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(config_path)
