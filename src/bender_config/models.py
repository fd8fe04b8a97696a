from __future__ import annotations

from typing import Any, Dict
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, NonNegativeInt

DEFAULT_CONFIG_PATH = "/etc/bender/config.toml"

# Fields regenerated on every rebuild; ignored when comparing against defaults
REGENERATED_FIELDS: Dict[str, Any] = {"worker": {"id"}}


class Paths(BaseModel):
    config: str = DEFAULT_CONFIG_PATH
    private: str = "/etc/bender/private"
    upload: str = "/data/bender/uploads"
    blend: str = "/data/bender/blendfiles"


class Flask(BaseModel):
    # Gigabytes
    upload_limit: NonNegativeInt = 2
    port: NonNegativeInt = Field(default=5000, le=65535)


class Rabbitmq(BaseModel):
    url: str = "amqp://localhost:5672/%2f"


class CleanupTiming(BaseModel):
    # Seconds; a negative value disables the cleanup
    delete_data_after: int = 60 * 60 * 24 * 2
    delete_history_after: int = 60 * 60 * 24 * 30


class Janitor(BaseModel):
    check_interval: NonNegativeInt = 60
    finished: CleanupTiming = Field(default_factory=CleanupTiming)
    canceled: CleanupTiming = Field(
        default_factory=lambda: CleanupTiming(delete_data_after=60 * 60, delete_history_after=60 * 60 * 24 * 7)
    )
    errored: CleanupTiming = Field(
        default_factory=lambda: CleanupTiming(delete_data_after=60 * 60 * 24 * 7, delete_history_after=-1)
    )


class Worker(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    workload: NonNegativeInt = 1
    grace_period: NonNegativeInt = 60
    # Percent of the disk a worker may fill before it stops taking jobs
    disk_limit: NonNegativeInt = Field(default=90, le=100)
    heartbeat_interval: NonNegativeInt = 10


class Config(BaseModel):
    servername: str = "Bender"
    paths: Paths = Field(default_factory=Paths)
    flask: Flask = Field(default_factory=Flask)
    rabbitmq: Rabbitmq = Field(default_factory=Rabbitmq)
    janitor: Janitor = Field(default_factory=Janitor)
    worker: Worker = Field(default_factory=Worker)

    def comparable(self) -> Dict[str, Any]:
        """
        Dump the document without regenerated identifiers.
        """
        return self.model_dump(exclude=REGENERATED_FIELDS)

    def is_default(self) -> bool:
        return self.comparable() == default_config().comparable()


def default_config() -> Config:
    return Config()
