# models/storage.py

"""
Whole-file JSON persistence for the Registry.

`RecordStore` reads and writes a single snapshot document. There are no partial
updates: every save rewrites the whole file, and every load rebuilds the whole
registry through `Registry.from_snapshot()`.

Saves are written to a temporary file in the target directory and then moved into
place, so a failed save leaves the previous file intact.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Any

from core.config import MIN_FAIL_GRADE, PASSING_GRADE
from core.response import ErrorCode, Response
from models.registry import Registry

logger = logging.getLogger(__name__)


class RecordStore:

    def __init__(self, path: str):
        self._path: str = path

    # === properties ===

    @property
    def path(self) -> str:
        return self._path

    @property
    def exists(self) -> bool:
        return os.path.isfile(self._path)

    # === persistence and import ===

    def load(
        self,
        passing_grade: float = PASSING_GRADE,
        min_fail_grade: float = MIN_FAIL_GRADE,
    ) -> Response:
        """
        Loads the snapshot file and returns a rebuilt `Registry`.

        Args:
            passing_grade (float): Minimum average for a pass in the loaded registry.
            min_fail_grade (float): Hard-fail threshold in the loaded registry.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the file was read and every record imported, or the file did not exist.
                    - False for unreadable files, JSON decoding issues, or invalid records.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, a summary of what was loaded.
                - error (ErrorCode | None):
                    - `ErrorCode.INVALID_INPUT` if the file is not valid JSON or has the wrong shape.
                    - Any error code returned by `Registry.from_snapshot()`.
                    - `ErrorCode.INTERNAL_ERROR` if the file cannot be read or the empty snapshot cannot be written.
                - data (dict): Payload with the following keys:
                    - On success:
                        - "registry" (Registry): The loaded `Registry`.
                        - "created" (bool): True if the file was absent and an empty snapshot was written.

        Notes:
            - An absent file is treated as an empty registry, and the empty snapshot is written immediately.
            - This method never raises. On failure the caller should not proceed with a registry.
        """
        if not self.exists:
            registry = Registry(passing_grade, min_fail_grade)

            logger.info("Records file %s not found, creating an empty one", self._path)

            save_response = self.save(registry)

            if not save_response.success:
                return save_response

            return Response.succeed(
                detail=f"No records file found. Created an empty one at {self._path}.",
                data={
                    "registry": registry,
                    "created": True,
                },
            )

        try:
            data = self._read_json()

        except json.JSONDecodeError as e:
            logger.error("Failed to parse %s: %s", self._path, e)
            return Response.fail(
                detail=f"Failed to parse JSON data: {e}",
                error=ErrorCode.INVALID_INPUT,
            )

        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read %s: %s", self._path, e)
            return Response.fail(
                detail=f"Failed to read data from disk: {e}",
                error=ErrorCode.INTERNAL_ERROR,
            )

        snapshot_response = Registry.from_snapshot(data, passing_grade, min_fail_grade)

        if not snapshot_response.success:
            logger.error("Rejected records file %s: %s", self._path, snapshot_response.detail)
            return snapshot_response

        logger.info("Loaded %s: %s", self._path, snapshot_response.detail)

        return Response.succeed(
            detail=snapshot_response.detail,
            data={
                "registry": snapshot_response.data["registry"],
                "created": False,
            },
        )

    def save(self, registry: Registry) -> Response:
        """
        Serializes the registry and writes it to disk, replacing the previous file.

        Returns:
            Response: Succeeds with a confirmation message, or fails with `ErrorCode.INVALID_INPUT` if the
            snapshot cannot be serialized and `ErrorCode.INTERNAL_ERROR` if the file cannot be written.

        Notes:
            - The registry is marked saved only if the write succeeds.
            - Parent directories are created as needed.
        """
        try:
            self._write_json(registry.to_snapshot())

        except (TypeError, ValueError) as e:
            logger.error("Failed to serialize registry: %s", e)
            return Response.fail(
                detail=f"Object not JSON serializable: {e}",
                error=ErrorCode.INVALID_INPUT,
            )

        except OSError as e:
            logger.error("Failed to write %s: %s", self._path, e)
            return Response.fail(
                detail=f"Failed to write data to disk: {e}",
                error=ErrorCode.INTERNAL_ERROR,
            )

        registry.mark_saved()

        logger.debug("Saved %r to %s", registry, self._path)

        return Response.succeed(detail="Records successfully saved to disk.")

    # === helper methods ===

    def _read_json(self) -> Any:
        with open(self._path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write_json(self, data: dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self._path))
        os.makedirs(directory, exist_ok=True)

        payload = json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False)

        fd, temp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(temp_path, self._path)

        except BaseException:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"RecordStore({self._path})"
