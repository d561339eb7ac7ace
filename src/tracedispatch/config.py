import os
from dataclasses import dataclass, field

from typing_extensions import Self

from tracedispatch.low.core import Appliance

logging_config = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "tracedispatch": {
            "level": os.environ.get("TRACEDISPATCH_LOGLEVEL", "INFO"),
            "handlers": ["console"],
            "propagate": False,
        },
    },
}


@dataclass
class Config:
    processing_power: float = 0.001  # per cpu, tiny on purpose -- allows under-provisioning
    minimum_power: bool = False
    instance_memory_bytes: int = 512_000_000
    time_unit_ms: int = 1000  # trace times are in seconds, the timer ticks in ms
    appliance: Appliance = field(default_factory=Appliance)

    @classmethod
    def from_env(cls) -> Self:
        config = cls()
        if (power := os.environ.get("TRACEDISPATCH_PROCESSING_POWER")) is not None:
            config.processing_power = float(power)
        if (minimum := os.environ.get("TRACEDISPATCH_MINIMUM_POWER")) is not None:
            config.minimum_power = minimum.lower() in ("1", "true", "yes")
        if (memory := os.environ.get("TRACEDISPATCH_INSTANCE_MEMORY")) is not None:
            config.instance_memory_bytes = int(memory)
        return config
