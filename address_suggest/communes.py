from __future__ import annotations

"""
Minimal commune directory.

Persistence of communes belongs to the admin side of the platform; this
module only loads a JSON export of them and turns a record into the
`CommuneGeoContext` the engine works with.

Expected file layout (list of objects):

    [{"id": "...", "name": "Latresne", "postalCode": "33360",
      "bbox": [44.76, 44.80, -0.53, -0.47],
      "latitude": 44.78, "longitude": -0.50, "isVisible": true}]
"""

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from .config import COMMUNES_PATH
from .errors import CommuneNotFoundError
from .normalize import split_postal_codes
from .pipeline_types import CommuneGeoContext, parse_bbox


class CommuneRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    postal_code: str = Field("", alias="postalCode")
    bbox: Optional[List] = None
    latitude: float
    longitude: float
    is_visible: bool = Field(True, alias="isVisible")

    def to_geo_context(self) -> CommuneGeoContext:
        box = parse_bbox(self.bbox)
        if self.bbox and box is None:
            logger.warning("Commune {} has an invalid bbox {!r}; ignoring it", self.id, self.bbox)
        return CommuneGeoContext(
            id=self.id,
            name=self.name,
            postal_codes=tuple(split_postal_codes(self.postal_code)),
            bounding_box=box,
            latitude=self.latitude,
            longitude=self.longitude,
        )


class CommuneDirectory:
    def __init__(self, records: Iterable[CommuneRecord] = ()) -> None:
        self._by_id: Dict[str, CommuneRecord] = {r.id: r for r in records}

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, commune_id: str) -> Optional[CommuneRecord]:
        return self._by_id.get(commune_id)

    def resolve(self, commune_id: str) -> CommuneRecord:
        """Visible commune for `commune_id`, else CommuneNotFoundError."""
        record = self._by_id.get((commune_id or "").strip())
        if record is None or not record.is_visible:
            raise CommuneNotFoundError()
        return record


def load_communes(path: Path = COMMUNES_PATH) -> CommuneDirectory:
    path = Path(path)
    if not path.exists():
        logger.warning("Communes file missing ({}); starting with an empty directory.", path)
        return CommuneDirectory()

    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    records = [CommuneRecord.model_validate(item) for item in raw]
    logger.info("Loaded {} communes from {}", len(records), path)
    return CommuneDirectory(records)
