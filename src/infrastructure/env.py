from dataclasses import dataclass, field
from pathlib import Path
from dotenv import dotenv_values
from returns.result import safe
import os

EnvValue = str | bool | int | float


@dataclass(frozen=True)
class Env:
    vars: dict[str, EnvValue] = field(default_factory=dict)

    @safe
    def load(self, path_to_dotenv: str | Path = ".env") -> "Env":
        """Merge the dotenv file with the process environment, the latter winning."""
        raw: dict[str, str | None] = {}
        if Path(path_to_dotenv).is_file():
            raw.update(dotenv_values(dotenv_path=path_to_dotenv))
        raw.update(os.environ)
        loaded_vars = {
            k: self._parse_value(v)
            for k, v in raw.items()
            if v
        }
        return Env(vars={**self.vars, **loaded_vars})

    def get(self, key: str, default: EnvValue | None = None) -> EnvValue | None:
        return self.vars.get(key, default)

    @staticmethod
    def _parse_value(value: str) -> EnvValue:
        if value.lower() in {"true", "false"}:
            return value.lower() == "true"
        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            return value
