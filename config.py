import json
import os
from datetime import datetime, timezone
from pathlib import Path

from codec.check_digit import CheckDigit
from core.errors import InvalidArgument
from utils.timestamp import as_utc, to_millis

_DEFAULT_CONFIG = Path(__file__).parent / "config.json"

DEFAULT_EPOCH = datetime(2020, 1, 1, tzinfo=timezone.utc)
WORKER_ID_ENV = "APP_WORKER_ID"
MAX_WORKER_ID = 0x3FF


def parse_epoch(value):
    """Epoch from a datetime, a year (``2020``) or an ISO-8601 string."""
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return datetime(value, 1, 1, tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return datetime(int(text), 1, 1, tzinfo=timezone.utc)
        try:
            return as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError as exc:
            raise InvalidArgument(f"cannot read epoch {value!r}", field="epoch", value=value, cause=exc) from exc
    raise InvalidArgument(f"cannot read epoch {value!r}", field="epoch", value=repr(value))


def check_worker_id(worker_id):
    """Validated worker id (0..1023)."""
    try:
        worker_id = int(worker_id)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"worker id must be an integer, not {worker_id!r}",
                              field="worker_id", value=repr(worker_id), cause=exc) from exc
    if not 0 <= worker_id <= MAX_WORKER_ID:
        raise InvalidArgument(f"worker id must be between 0 and {MAX_WORKER_ID}, not {worker_id}",
                              field="worker_id", value=worker_id)
    return worker_id


def worker_id_from_env(default=0):
    value = os.environ.get(WORKER_ID_ENV, "").strip()
    return check_worker_id(value) if value else default


class GeneratorConfig:
    """Epoch, worker id and check-digit strategy shared by a generator.

    Read-only once built; use :meth:`replace` to derive a variant.
    """

    __slots__ = ("_epoch", "_worker_id", "_check_digit")

    def __init__(self, epoch=DEFAULT_EPOCH, worker_id=None, check_digit=None):
        self._epoch = parse_epoch(epoch)
        self._worker_id = worker_id_from_env() if worker_id is None else check_worker_id(worker_id)
        if check_digit is None:
            check_digit = CheckDigit()
        elif not isinstance(check_digit, CheckDigit):
            check_digit = CheckDigit(check_digit)
        self._check_digit = check_digit

    @property
    def epoch(self):
        return self._epoch

    @property
    def epoch_ms(self):
        return to_millis(self._epoch)

    @property
    def worker_id(self):
        return self._worker_id

    @property
    def check_digit(self):
        return self._check_digit

    def replace(self, **changes):
        options = {"epoch": self._epoch, "worker_id": self._worker_id, "check_digit": self._check_digit}
        options.update(changes)
        return GeneratorConfig(**options)

    def to_dict(self):
        return {"epoch": self._epoch.isoformat(), "worker_id": self._worker_id}


class ServerConfig:
    __slots__ = ("host", "port")

    def __init__(self, host="127.0.0.1", port=8080):
        self.host = host
        self.port = port


class LoggingConfig:
    __slots__ = ("level",)

    def __init__(self, level="INFO"):
        self.level = level


class Config:
    __slots__ = ("generator", "server", "logging")

    def __init__(self, generator=None, server=None, logging=None):
        self.generator = generator or GeneratorConfig()
        self.server = server or ServerConfig()
        self.logging = logging or LoggingConfig()

    @classmethod
    def from_dict(cls, d):
        generator = dict(d.get("generator", {}))
        # the environment wins over the file so each process can get its own id
        env_worker = os.environ.get(WORKER_ID_ENV, "").strip()
        if env_worker:
            generator["worker_id"] = env_worker
        return cls(
            GeneratorConfig(**generator),
            ServerConfig(**d.get("server", {})),
            LoggingConfig(**d.get("logging", {})),
        )


def load_config(path=None):
    config_path = Path(path) if path else _DEFAULT_CONFIG

    if not config_path.exists():
        return Config()

    with open(config_path) as file:
        return Config.from_dict(json.load(file))
