from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union
import json
import logging
import os
import tempfile
import threading

from story_planner.db.exceptions import StorageCorruptedError
from story_planner.db.migration import CurrentShape, decode_shape, migrate_legacy
from story_planner.domains.documents.entities import Document

logger = logging.getLogger(__name__)


class DocumentStore:
    """Хранилище единственного документа в JSON-файле"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        # Сериализация циклов загрузка-изменение-запись внутри процесса
        self._lock = threading.RLock()

    @contextmanager
    def lock(self) -> Iterator[None]:
        """Эксклюзивный доступ на время load-modify-save"""
        with self._lock:
            yield

    def load(self) -> Document:
        """Загрузка документа с созданием или миграцией при первом обращении"""
        if not self.path.exists():
            with self._lock:
                if not self.path.exists():
                    document = Document.create_seed()
                    self.save(document)
                    logger.info(f"Created seed document at {self.path}")
                    return document

        shape = decode_shape(self._read_raw())
        if isinstance(shape, CurrentShape):
            return self._from_current(shape)

        with self._lock:
            # Повторное чтение: файл мог быть мигрирован или изменен другим потоком
            shape = decode_shape(self._read_raw())
            if isinstance(shape, CurrentShape):
                return self._from_current(shape)

            document = migrate_legacy(shape.entries)
            self.save(document)
        logger.info(
            f"Migrated legacy document at {self.path}: {len(document.fields)} fields"
        )
        return document

    def save(self, document: Document) -> None:
        """Атомарная перезапись всего документа"""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                json.dump(document.to_dict(), tmp_file, ensure_ascii=False, indent=2)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _read_raw(self):
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Stored document at {self.path} is not valid JSON: {e}")
            raise StorageCorruptedError(f"Stored document at {self.path} is not valid JSON") from e

    def _from_current(self, shape: CurrentShape) -> Document:
        try:
            return Document.from_dict(shape.payload)
        except (KeyError, ValueError, OverflowError) as e:
            raise StorageCorruptedError(f"Stored document at {self.path} is invalid: {e}") from e
