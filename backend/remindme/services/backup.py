"""
Backups of the data file: a timestamped local copy, an optional rclone sync
to remote object storage, and pruning of old local copies.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles

from remindme.errors import BackupError


logger = logging.getLogger(__name__)

BACKUP_PREFIX = "reminders_"
BACKUP_GLOB = "reminders_*.json"


@dataclass
class BackupResult:
    backup_file: str
    remote_synced: bool = False
    remote_errors: List[str] = field(default_factory=list)
    pruned: int = 0
    finished_at: Optional[int] = None


class BackupService:
    """
    Produces backups of the data file.

    ``run()`` performs one backup and reports the result. ``trigger()`` is the
    fire-and-forget variant used after every save: it schedules ``run()`` on
    the running loop, never runs two backups at once and coalesces saves that
    arrive during a run into one follow-up run.
    """

    def __init__(
        self,
        data_file: str,
        backup_dir: str,
        retention_days: int = 180,
        remote: Optional[str] = None,
        rclone_binary: str = "rclone",
        timeout_seconds: float = 120.0,
    ):
        self.data_file = Path(data_file)
        self.backup_dir = Path(backup_dir)
        self.retention_days = retention_days
        self.remote = remote.rstrip("/") if remote else None
        self.rclone_binary = rclone_binary
        self.timeout_seconds = timeout_seconds
        self.current_task: Optional[asyncio.Task] = None
        self.last_result: Optional[BackupResult] = None
        self.last_error: Optional[str] = None
        self._rerun = False

    async def run(self) -> BackupResult:
        """
        Copy the data file into the backup directory and sync it remotely.

        Raises:
            BackupError: if the local copy cannot be made
        """
        if not self.data_file.exists():
            raise BackupError(f"No data file at {self.data_file}")

        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        try:
            target = await self._copy(stamp)
        except OSError as exc:
            raise BackupError(f"Could not write backup to {self.backup_dir}: {exc}") from exc

        result = BackupResult(backup_file=target.name)

        if self.remote:
            errors = []
            for source, destination in (
                (self.data_file, f"{self.remote}/"),
                (self.backup_dir, f"{self.remote}/backups/"),
            ):
                error = await self._rclone_copy(source, destination)
                if error:
                    errors.append(error)
            result.remote_synced = not errors
            result.remote_errors = errors

        result.pruned = await asyncio.to_thread(self.prune)
        result.finished_at = int(time.time() * 1000)
        self.last_result = result
        logger.info("Backup completed: %s", target)
        return result

    async def _copy(self, stamp: str) -> Path:
        """Copy the data file to a backup name no other backup has claimed."""
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.data_file, "rb") as src:
            content = await src.read()

        attempt = 0
        while True:
            suffix = f"_{attempt}" if attempt else ""
            target = self.backup_dir / f"{BACKUP_PREFIX}{stamp}{suffix}.json"
            try:
                async with aiofiles.open(target, "xb") as dst:
                    await dst.write(content)
            except FileExistsError:
                attempt += 1
                continue
            return target

    async def _rclone_copy(self, source: Path, destination: str) -> Optional[str]:
        """Run ``rclone copy``; return an error message or None on success."""
        try:
            proc = await asyncio.create_subprocess_exec(
                self.rclone_binary, "copy", str(source), destination,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.warning("Could not start %s: %s", self.rclone_binary, exc)
            return str(exc)

        try:
            _, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            logger.warning("Remote sync to %s timed out after %ss", destination, self.timeout_seconds)
            return f"timeout syncing to {destination}"

        if proc.returncode != 0:
            message = stderr.decode(errors="replace").strip() or f"exit code {proc.returncode}"
            logger.warning("Remote sync to %s failed: %s", destination, message)
            return message
        return None

    def prune(self, now: Optional[float] = None) -> int:
        """Delete local backups older than the retention period."""
        if not self.backup_dir.is_dir():
            return 0
        cutoff = (now if now is not None else time.time()) - self.retention_days * 86400
        removed = 0
        for path in self.backup_dir.glob(BACKUP_GLOB):
            try:
                if path.stat().st_mtime < cutoff:
                    path.unlink()
                    removed += 1
            except OSError as exc:
                logger.warning("Could not prune %s: %s", path, exc)
        if removed:
            logger.info("Pruned %d old backups", removed)
        return removed

    def list_backups(self) -> List[Dict[str, Any]]:
        """Local backups, newest first."""
        if not self.backup_dir.is_dir():
            return []
        entries = []
        for path in self.backup_dir.glob(BACKUP_GLOB):
            stat = path.stat()
            entries.append({
                "name": path.name,
                "size": stat.st_size,
                "modified": int(stat.st_mtime * 1000),
            })
        entries.sort(key=lambda e: (e["modified"], e["name"]), reverse=True)
        return entries

    def trigger(self) -> Optional[asyncio.Task]:
        """Schedule a backup in the background; returns the task, if any."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, skipping background backup")
            return None

        if self.current_task is not None and not self.current_task.done():
            self._rerun = True
            return self.current_task

        self.current_task = loop.create_task(self._run_in_background(), name="backup")
        return self.current_task

    async def _run_in_background(self) -> None:
        while True:
            self._rerun = False
            try:
                await self.run()
                self.last_error = None
            except BackupError as exc:
                self.last_error = exc.message
                logger.error("Background backup failed: %s", exc.message)
            except Exception as exc:
                self.last_error = str(exc)
                logger.exception("Background backup failed")
            if not self._rerun:
                break
