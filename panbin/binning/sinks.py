#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Output sinks driven by the binning engine.

Two wire formats are supported:
- tsv:  one line per (path, bin) with non-zero coverage, after a fixed header
- json: newline-delimited JSON records (header, bins, one record per path)

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TextIO, Tuple

from .accumulator import PathBinRecord, merge_records

logger = logging.getLogger(__name__)

# Version of the NDJSON layout written by JsonSink
JSON_FORMAT_VERSION = 10

NA = "NA"

TSV_COLUMNS = [
    "path.name", "path.prefix", "path.suffix", "bin",
    "mean.cov", "mean.inv", "mean.pos", "first.nucl", "last.nucl",
]

OUTPUT_FORMATS = ('tsv', 'json')


@dataclass
class PathRow:
    """Finalized binning result of one path, as handed to a sink."""
    name: str
    prefix: str
    suffix: str
    links: List[Tuple[int, int]] = field(default_factory=list)
    bins: Dict[int, PathBinRecord] = field(default_factory=dict)


class OutputSink(ABC):
    """Callbacks the engine invokes, in order: header, bins, rows, close."""

    # False when the format discards bin sequences, so the engine skips them
    wants_sequences = True

    @abstractmethod
    def on_header(self, total_length: int, bin_width: int, format_version: int):
        ...

    @abstractmethod
    def on_bin_sequence(self, bin_id: int, sequence: Optional[str]):
        """sequence is None when bin sequences are suppressed."""
        ...

    @abstractmethod
    def on_path_row(self, row: PathRow):
        ...

    def close(self):
        """Called once after the last row."""
        pass


def _fmt(value: float) -> str:
    return f"{value:g}"


class TsvSink(OutputSink):
    """Tab-separated rows; links and bin sequences are not part of this format."""

    wants_sequences = False

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.rows_written = 0

    def on_header(self, total_length: int, bin_width: int, format_version: int):
        self.stream.write("\t".join(TSV_COLUMNS) + "\n")

    def on_bin_sequence(self, bin_id: int, sequence: Optional[str]):
        pass

    def on_path_row(self, row: PathRow):
        for bin_id, info in row.bins.items():
            if not info.mean_cov:
                continue
            self.stream.write("\t".join([
                row.name,
                row.prefix,
                row.suffix,
                str(bin_id),
                _fmt(info.mean_cov),
                _fmt(info.mean_inv),
                _fmt(info.mean_pos),
                str(info.first_nucleotide),
                str(info.last_nucleotide),
            ]) + "\n")
            self.rows_written += 1

    def close(self):
        self.stream.flush()


class JsonSink(OutputSink):
    """
    Newline-delimited JSON records.

    Args:
        stream: Writable text stream
        include_name_parts: Write path_name_prefix/path_name_suffix fields
    """

    def __init__(self, stream: TextIO, include_name_parts: bool = False):
        self.stream = stream
        self.include_name_parts = include_name_parts

    def _write(self, record: Dict[str, Any]):
        self.stream.write(json.dumps(record) + "\n")

    def on_header(self, total_length: int, bin_width: int, format_version: int):
        self._write({
            "version": format_version,
            "bin_width": bin_width,
            "pangenome_length": total_length,
        })

    def on_bin_sequence(self, bin_id: int, sequence: Optional[str]):
        record = {"bin_id": bin_id}
        if sequence is not None:
            record["sequence"] = sequence
        self._write(record)

    def on_path_row(self, row: PathRow):
        record = {"path_name": row.name}
        if self.include_name_parts:
            record["path_name_prefix"] = row.prefix
            record["path_name_suffix"] = row.suffix
        record["bins"] = [info.as_row() for info in row.bins.values()]
        record["links"] = [[a, b] for a, b in row.links]
        self._write(record)

    def close(self):
        self.stream.flush()


class RecordingSink(OutputSink):
    """Keeps every callback in memory; handy for library use and tests."""

    def __init__(self):
        self.header: Optional[Tuple[int, int, int]] = None
        self.bin_sequences: Dict[int, Optional[str]] = {}
        self.rows: List[PathRow] = []
        self.closed = False

    def on_header(self, total_length: int, bin_width: int, format_version: int):
        self.header = (total_length, bin_width, format_version)

    def on_bin_sequence(self, bin_id: int, sequence: Optional[str]):
        self.bin_sequences[bin_id] = sequence

    def on_path_row(self, row: PathRow):
        self.rows.append(row)

    def close(self):
        self.closed = True


class AggregatingSink(OutputSink):
    """
    Merge the rows of paths sharing a name prefix before forwarding them.

    Rows are grouped by the text before the first delimiter (first-seen
    group order). Bins are merged with merge_records(), links are the
    first-seen union over the group. One row per group is forwarded on
    close(), named after the prefix with "NA" prefix/suffix.
    """

    def __init__(self, inner: OutputSink, delimiter: str):
        if not delimiter:
            raise ValueError("AggregatingSink needs a non-empty delimiter")
        self.inner = inner
        self.delimiter = delimiter
        self._groups: Dict[str, List[PathRow]] = {}

    @property
    def wants_sequences(self) -> bool:
        return self.inner.wants_sequences

    def on_header(self, total_length: int, bin_width: int, format_version: int):
        self.inner.on_header(total_length, bin_width, format_version)

    def on_bin_sequence(self, bin_id: int, sequence: Optional[str]):
        self.inner.on_bin_sequence(bin_id, sequence)

    def on_path_row(self, row: PathRow):
        group = row.name.split(self.delimiter, 1)[0]
        self._groups.setdefault(group, []).append(row)

    def close(self):
        for group, rows in self._groups.items():
            by_bin: Dict[int, List[PathBinRecord]] = {}
            links: List[Tuple[int, int]] = []
            seen = set()
            for row in rows:
                for bin_id, info in row.bins.items():
                    by_bin.setdefault(bin_id, []).append(info)
                for link in row.links:
                    if link not in seen:
                        seen.add(link)
                        links.append(link)
            bins = {bin_id: merge_records(by_bin[bin_id]) for bin_id in sorted(by_bin)}
            logger.debug(f"Aggregated {len(rows)} paths into group {group}")
            self.inner.on_path_row(PathRow(name=group, prefix=NA, suffix=NA,
                                           links=links, bins=bins))
        self._groups = {}
        self.inner.close()


def make_sink(output_format: str, stream: TextIO,
              name_delimiter: Optional[str] = None,
              aggregate_by_delimiter: bool = False) -> OutputSink:
    """
    Build the sink for an output format.

    Args:
        output_format: 'tsv' or 'json'
        stream: Output text stream
        name_delimiter: Path name delimiter (enables prefix/suffix fields in JSON)
        aggregate_by_delimiter: Merge paths sharing a prefix

    Raises:
        ValueError: On an unknown output format
    """
    if output_format == 'tsv':
        sink = TsvSink(stream)
    elif output_format == 'json':
        sink = JsonSink(stream, include_name_parts=bool(name_delimiter))
    else:
        raise ValueError(f"Unknown output format: {output_format} "
                         f"(expected one of {', '.join(OUTPUT_FORMATS)})")

    if aggregate_by_delimiter and name_delimiter:
        sink = AggregatingSink(sink, name_delimiter)
    return sink


# panbin v0.1.0
# Any usage is subject to this software's license.
