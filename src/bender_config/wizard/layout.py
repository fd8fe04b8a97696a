from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional, Tuple, Type, Union
from uuid import uuid4

from pydantic import BaseModel

from ..models import CleanupTiming, Config, Flask, Janitor, Paths, Rabbitmq, Worker
from .values import FieldKind


class Policy(Enum):
    ASK = "ask"
    # Freshly computed on every rebuild, never asked or preserved
    REGENERATE = "regenerate"
    # Always the documented default, never asked
    FIXED = "fixed"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    kind: FieldKind
    policy: Policy = Policy.ASK
    fresh: Optional[Callable[[], object]] = None
    maximum: Optional[int] = None


@dataclass(frozen=True)
class SectionSpec:
    name: str
    title: str
    model: Type[BaseModel]
    members: Tuple[Union[FieldSpec, "SectionSpec"], ...]

    def member(self, name: str) -> Union[FieldSpec, "SectionSpec"]:
        for m in self.members:
            if m.name == name:
                return m
        raise KeyError(name)

    def sections(self) -> Iterator["SectionSpec"]:
        return (m for m in self.members if isinstance(m, SectionSpec))


PATHS = SectionSpec(
    name="paths",
    title="Paths",
    model=Paths,
    members=(
        FieldSpec("config", "Configuration file", FieldKind.TEXT, Policy.FIXED),
        FieldSpec("private", "Private data directory", FieldKind.TEXT),
        FieldSpec("upload", "Upload directory", FieldKind.TEXT),
        FieldSpec("blend", "Blendfile directory", FieldKind.TEXT),
    ),
)

FLASK = SectionSpec(
    name="flask",
    title="Upload server",
    model=Flask,
    members=(
        FieldSpec("upload_limit", "Upload limit in GB", FieldKind.UNSIGNED_INT),
        FieldSpec("port", "Port", FieldKind.UNSIGNED_INT, maximum=65535),
    ),
)

RABBITMQ = SectionSpec(
    name="rabbitmq",
    title="Message queue",
    model=Rabbitmq,
    members=(FieldSpec("url", "AMQP URL", FieldKind.TEXT),),
)


def _cleanup(name: str, title: str) -> SectionSpec:
    return SectionSpec(
        name=name,
        title=title,
        model=CleanupTiming,
        members=(
            FieldSpec("delete_data_after", "Delete data after seconds (negative: never)", FieldKind.SIGNED_INT),
            FieldSpec("delete_history_after", "Delete history after seconds (negative: never)", FieldKind.SIGNED_INT),
        ),
    )


JANITOR = SectionSpec(
    name="janitor",
    title="Janitor",
    model=Janitor,
    members=(
        FieldSpec("check_interval", "Check interval in seconds", FieldKind.UNSIGNED_INT),
        _cleanup("finished", "Janitor: finished jobs"),
        _cleanup("canceled", "Janitor: canceled jobs"),
        _cleanup("errored", "Janitor: errored jobs"),
    ),
)

WORKER = SectionSpec(
    name="worker",
    title="Worker",
    model=Worker,
    members=(
        FieldSpec("id", "Worker ID", FieldKind.IDENTIFIER, Policy.REGENERATE, fresh=uuid4),
        FieldSpec("workload", "Parallel jobs", FieldKind.UNSIGNED_INT),
        FieldSpec("grace_period", "Grace period in seconds", FieldKind.UNSIGNED_INT),
        FieldSpec("disk_limit", "Disk limit in percent", FieldKind.UNSIGNED_INT, maximum=100),
        FieldSpec("heartbeat_interval", "Heartbeat interval in seconds", FieldKind.UNSIGNED_INT),
    ),
)

DOCUMENT = SectionSpec(
    name="",
    title="bender configuration",
    model=Config,
    members=(
        FieldSpec("servername", "Server name", FieldKind.TEXT),
        PATHS,
        FLASK,
        RABBITMQ,
        JANITOR,
        WORKER,
    ),
)
