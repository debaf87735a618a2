"""Configuration loading and validation."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .protocol import ProtocolRevision


@dataclass
class SerialConfig:
    port: str
    baud: int = 230400
    write_timeout: float = 1.0


@dataclass
class ProtocolConfig:
    revision: ProtocolRevision = ProtocolRevision.SINGLE
    strict_numeric: bool = False


@dataclass
class StorageConfig:
    path: Path = Path("doodler-data-save.bin")


@dataclass
class ClockConfig:
    interval: float = 30  # seconds, 0 disables


@dataclass
class MqttConfig:
    broker: str
    port: int = 1883
    username: str | None = None
    password: str | None = None
    root_topic: str = "doodle"
    device_id: str = "stm32"


@dataclass
class Config:
    serial: SerialConfig
    protocol: ProtocolConfig = field(default_factory=ProtocolConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    clock: ClockConfig = field(default_factory=ClockConfig)
    mqtt: MqttConfig | None = None


def load_config(path: Path) -> Config:
    """Load and validate configuration from YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    errors = []

    # Validate required sections
    if "serial" not in raw:
        errors.append("missing 'serial' section")
    elif "port" not in raw["serial"]:
        errors.append("serial.port is required")

    protocol_raw = raw.get("protocol") or {}
    revision = protocol_raw.get("revision", ProtocolRevision.SINGLE.value)
    valid_revisions = [r.value for r in ProtocolRevision]
    if revision not in valid_revisions:
        errors.append(
            f"protocol.revision must be one of {', '.join(valid_revisions)}"
        )

    if not isinstance(protocol_raw.get("strict_numeric", False), bool):
        errors.append("protocol.strict_numeric must be true or false")

    clock_raw = raw.get("clock") or {}
    interval = clock_raw.get("interval", 30)
    if not isinstance(interval, (int, float)) or interval < 0:
        errors.append("clock.interval must be a non-negative number")

    if "mqtt" in raw and "broker" not in (raw["mqtt"] or {}):
        errors.append("mqtt.broker is required")

    if errors:
        raise ValueError(f"configuration validation failed: {'; '.join(errors)}")

    serial_raw = raw["serial"]
    serial = SerialConfig(
        port=serial_raw["port"],
        baud=serial_raw.get("baud", 230400),
        write_timeout=serial_raw.get("write_timeout", 1.0),
    )

    protocol = ProtocolConfig(
        revision=ProtocolRevision(revision),
        strict_numeric=protocol_raw.get("strict_numeric", False),
    )

    storage_raw = raw.get("storage") or {}
    storage = StorageConfig(
        path=Path(storage_raw.get("path", "doodler-data-save.bin")),
    )

    mqtt = None
    if "mqtt" in raw:
        mqtt_raw = raw["mqtt"]
        mqtt = MqttConfig(
            broker=mqtt_raw["broker"],
            port=mqtt_raw.get("port", 1883),
            username=mqtt_raw.get("username"),
            password=mqtt_raw.get("password"),
            root_topic=mqtt_raw.get("root_topic", "doodle"),
            device_id=mqtt_raw.get("device_id", "stm32"),
        )

    return Config(
        serial=serial,
        protocol=protocol,
        storage=storage,
        clock=ClockConfig(interval=interval),
        mqtt=mqtt,
    )
