# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: CaseFileStore
# -----------------------------------------------------------------------------
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from cases.CaseRecord import CaseRecord
from utility.logging_utils import get_class_logger


@dataclass
class CaseFileStore:
    """
    Read-only view over a JSON array of cases on disk.

    Every load() re-reads the file, so each ranking request works on its own
    snapshot and edits made by other tools are picked up on the next request.
    """
    path: str
    logger: Optional[logging.Logger] = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

    def load(self) -> List[CaseRecord]:
        file_path = Path(self.path)
        self.logger.debug("Reading cases from %s", file_path)
        with file_path.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)

        if not isinstance(raw, list):
            raise ValueError(f"{file_path} must contain a JSON array of cases")

        records: List[CaseRecord] = []
        for i, item in enumerate(raw):
            try:
                records.append(CaseRecord.from_dict(item))
            except ValueError as e:
                self.logger.warning("Skipping case #%d in %s: %s", i, file_path, e)
        return records

    def first(self, n: int) -> List[CaseRecord]:
        return self.load()[:n]

    def get(self, case_number: str) -> Optional[CaseRecord]:
        for rec in self.load():
            if rec.matches(case_number):
                return rec
        return None

    def test_connection(self) -> bool:
        try:
            self.load()
            return True
        except Exception as e:
            self.logger.error("Case file %s is not readable: %s", self.path, e)
            return False
