"""
core/constants.py 테스트

경로는 pathlib.Path 타입, 기본 바인드 주소와 DB 설정 확인
"""

from pathlib import Path

from core.constants import (
    MEMORY_DB_SENTINEL,
    PROJECT_ROOT,
    Defaults,
    Paths,
)


class TestProjectRoot:
    """PROJECT_ROOT 테스트"""

    def test_project_root_is_path(self) -> None:
        """PROJECT_ROOT가 Path 타입인지 확인"""
        assert isinstance(PROJECT_ROOT, Path)

    def test_project_root_is_absolute(self) -> None:
        """PROJECT_ROOT가 절대 경로인지 확인"""
        assert PROJECT_ROOT.is_absolute()

    def test_project_root_contains_core_directory(self) -> None:
        """PROJECT_ROOT에 core 디렉토리가 있는지 확인"""
        assert (PROJECT_ROOT / "core").exists()


class TestDefaults:
    """Defaults 테스트"""

    def test_bind_defaults(self) -> None:
        """기본 바인드 주소/포트"""
        assert Defaults.WEB_HOST == "127.0.0.1"
        assert Defaults.WEB_PORT == 4000

    def test_db_file_is_memory_sentinel(self) -> None:
        """기본 DB는 휘발성 저장소"""
        assert Defaults.DB_FILE == MEMORY_DB_SENTINEL == "memory"

    def test_pool_defaults_positive(self) -> None:
        assert Defaults.POOL_SIZE >= 1
        assert Defaults.ACQUIRE_TIMEOUT_SEC > 0


class TestPaths:
    """Paths 테스트"""

    def test_all_paths_are_path_type(self) -> None:
        """모든 경로가 Path 타입"""
        for path in (
            Paths.CONFIG_DIR,
            Paths.LOGS_DIR,
            Paths.WEB_LOGS_DIR,
            Paths.CONFIG_FILE,
        ):
            assert isinstance(path, Path)

    def test_config_file_under_config_dir(self) -> None:
        assert Paths.CONFIG_FILE.parent == Paths.CONFIG_DIR
        assert Paths.CONFIG_FILE.suffix == ".yaml"
