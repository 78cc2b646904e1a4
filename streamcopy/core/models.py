from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


@dataclass
class CopyStatistics:
    """
    Counters of one or more copies done by a copier.

    `input_bytes` counts what was read, `output_bytes` what was handed to the
    output stream. Both are equal after a copy that finished cleanly.
    """

    name: Optional[str] = None
    read_num: int = 0
    write_num: int = 0
    input_bytes: int = 0
    output_bytes: int = 0
    cumulative_time_ns: int = 0
    errors: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get_human_readable_values(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "read_num": self.read_num,
            "write_num": self.write_num,
            "input_MB": (self.input_bytes / 1000**2),
            "output_MB": (self.output_bytes / 1000**2),
            "cumulative_time": (self.cumulative_time_ns / 10**9),
            "errors": self.errors,
        }

    def update(self, other: "CopyStatistics") -> None:
        """
        Update the statistics by adding another CopyStatistics object.
        """
        self.read_num += other.read_num
        self.write_num += other.write_num
        self.input_bytes += other.input_bytes
        self.output_bytes += other.output_bytes
        self.cumulative_time_ns += other.cumulative_time_ns
        self.errors += other.errors

    def reset(self) -> "CopyStatistics":
        self.read_num = 0
        self.write_num = 0
        self.input_bytes = 0
        self.output_bytes = 0
        self.cumulative_time_ns = 0
        self.errors = 0
        return self

    @staticmethod
    def add(x: "CopyStatistics", y: "CopyStatistics") -> "CopyStatistics":
        """
        Add two CopyStatistics objects together.
        The names of both objects must match, otherwise an AssertionError is raised.
        """
        assert x.name == y.name, "Copier names must match"
        return CopyStatistics(
            name=x.name,
            read_num=x.read_num + y.read_num,
            write_num=x.write_num + y.write_num,
            input_bytes=x.input_bytes + y.input_bytes,
            output_bytes=x.output_bytes + y.output_bytes,
            cumulative_time_ns=x.cumulative_time_ns + y.cumulative_time_ns,
            errors=x.errors + y.errors,
        )
