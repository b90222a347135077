"""
Export Service

Writes a snapshot of records to EXPORT_DIR as CSV or JSON.
"""

import csv
import io
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import aiofiles
import aiofiles.os

from campuscore.core.config import settings
from campuscore.core.exceptions import ValidationError
from campuscore.core.logging_config import logger
from campuscore.modules.entities.base import EntitySchema
from campuscore.schemas.records import RecordBase


class ExportService:
    """
    Usage:
        exporter = ExportService()
        path = await exporter.export(students.projection, STUDENT_SCHEMA, "csv")
    """

    def __init__(self, export_dir: Optional[Path] = None, formats: Optional[List[str]] = None):
        self.export_dir = Path(export_dir) if export_dir is not None else settings.EXPORT_PATH
        self.formats = formats or settings.EXPORT_FORMATS

    @staticmethod
    def columns(schema: EntitySchema) -> List[str]:
        return ["id"] + (["name"] if "name" not in schema.stored_keys else []) + schema.stored_keys

    def rows(self, records: Iterable[RecordBase], schema: EntitySchema) -> List[Dict[str, Any]]:
        columns = self.columns(schema)
        return [{column: getattr(record, column, None) for column in columns} for record in records]

    def render(self, records: Iterable[RecordBase], schema: EntitySchema, fmt: str) -> str:
        rows = self.rows(records, schema)
        if fmt == "json":
            return json.dumps(rows, indent=2, default=str)

        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=self.columns(schema), lineterminator="\n")
        writer.writeheader()
        for row in rows:
            writer.writerow({key: "" if value is None else value for key, value in row.items()})
        return buffer.getvalue()

    async def export(self, records: Iterable[RecordBase], schema: EntitySchema, fmt: str = "csv") -> Path:
        fmt = (fmt or "").lower()
        if fmt not in self.formats:
            raise ValidationError(
                f"Unsupported export format '{fmt}'. Use one of: {', '.join(self.formats)}",
                field="format",
            )

        content = self.render(list(records), schema, fmt)

        await aiofiles.os.makedirs(self.export_dir, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        path = self.export_dir / f"{schema.name}-{stamp}.{fmt}"
        async with aiofiles.open(path, "w", encoding="utf-8", newline="") as f:
            await f.write(content)

        logger.info(f"Exported {schema.name} to {path}")
        return path
