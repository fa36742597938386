"""JSON 파일 저장소 모듈."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonFileStore:
    """JSON 파일에 값을 저장한다.

    CLI 실행 사이에 access token을 유지하기 위해 사용한다.
    """

    def __init__(self, path: Path) -> None:
        """
        Args:
            path: 저장 파일 경로. 없으면 첫 저장 시 생성한다.
        """
        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(f"Ignoring corrupted store file: {self.path}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring unexpected store content: {self.path}")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        # 토큰이 담기므로 소유자만 읽을 수 있게 한다
        self.path.chmod(0o600)

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
