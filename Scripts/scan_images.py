#!/usr/bin/env python3
"""
PNG Parameters Scanner
Crawls a directory tree depth-first and collects the generation parameters
embedded in every PNG file it finds.
"""

import os
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Set

from png_parameters import ParseError, read_parameters

PNG_EXTENSION = ".png"


@dataclass(frozen=True)
class ImageRecord:
    filename: str
    parameters: str


@dataclass(frozen=True)
class SkippedPath:
    path: str
    reason: str


@dataclass
class ScanResult:
    records: List[ImageRecord] = field(default_factory=list)
    skipped: List[SkippedPath] = field(default_factory=list)
    interrupted: bool = False

    def __len__(self):
        return len(self.records)


class ParameterScanner:
    """Depth-first PNG crawler.

    Directory entries are visited in listing order. Failures on a single file
    or directory are reported and recorded in ScanResult.skipped; they never
    stop the rest of the walk.
    """

    def __init__(self, max_depth: Optional[int] = None,
                 stop_event: Optional[threading.Event] = None,
                 verbose: bool = True):
        if max_depth is not None and max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        self.max_depth = max_depth
        self.stop_event = stop_event
        self.verbose = verbose

    def scan(self, root) -> ScanResult:
        """Scan root and everything below it."""
        result = ScanResult()
        visited: Set[str] = set()

        try:
            self._scan_directory(os.fspath(root), 0, result, visited)
        except KeyboardInterrupt:
            self._report("\nScan interrupted by user")
            result.interrupted = True

        return result

    def _report(self, message: str):
        if self.verbose:
            print(message)

    def _skip(self, result: ScanResult, path: str, reason: str):
        result.skipped.append(SkippedPath(path, reason))

    def _scan_directory(self, directory: str, depth: int,
                        result: ScanResult, visited: Set[str]):
        if result.interrupted:
            return
        if self.stop_event is not None and self.stop_event.is_set():
            self._report(f"⏹ Scan stopped before {directory}")
            result.interrupted = True
            return

        real_path = os.path.realpath(directory)
        if real_path in visited:
            self._report(f"⏭️ Skipping {directory} - already visited")
            self._skip(result, directory, "already visited")
            return
        visited.add(real_path)

        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            self._report(f"✗ Error reading directory {directory}: {e}")
            self._skip(result, directory, f"unreadable directory: {e}")
            return

        found_before = len(result.records)

        for entry in entries:
            try:
                is_dir = entry.is_dir()
            except OSError as e:
                self._report(f"✗ Cannot stat {entry.path}: {e}")
                self._skip(result, entry.path, f"stat failed: {e}")
                continue

            if is_dir:
                if self.max_depth is not None and depth >= self.max_depth:
                    continue
                self._scan_directory(entry.path, depth + 1, result, visited)
                if result.interrupted:
                    return
            elif os.path.splitext(entry.name)[1].lower() == PNG_EXTENSION:
                self._scan_file(entry, result)

        found = len(result.records) - found_before
        self._report(f"📁 {directory}: {found} images with parameters")

    def _scan_file(self, entry: os.DirEntry, result: ScanResult):
        try:
            parameters = read_parameters(entry.path)
        except ParseError as e:
            self._report(f"⚠ {e}")
            self._skip(result, entry.path, str(e))
            return

        if not parameters:
            self._skip(result, entry.path, "no parameters")
            return

        result.records.append(ImageRecord(entry.name, parameters))


def scan_directory(root, max_depth: Optional[int] = None,
                   stop_event: Optional[threading.Event] = None,
                   verbose: bool = True) -> ScanResult:
    """Convenience wrapper around ParameterScanner.scan."""
    return ParameterScanner(max_depth=max_depth, stop_event=stop_event,
                            verbose=verbose).scan(root)
