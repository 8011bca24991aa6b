import functools
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import PydanticBaseSettingsSource
from pydantic_settings import SettingsError

import moyenne.lib.util as util
from moyenne.model import DeploymentEnvironment


class CurrentState(t.TypedDict, total=False):
    root: t.Required[p.AnyUrl]
    env: t.Required[DeploymentEnvironment]
    override: t.Required[tuple[str, ...]]


SkipKeys = frozenset({"env", "root", "override"})


class SettingsSource(PydanticBaseSettingsSource):
    def __call__(self) -> dict[str, t.Any]:
        # we expect init kwargs to have config root and env in them
        data: dict[str, t.Any] = {}

        for field_name, field in self.settings_cls.model_fields.items():
            if field_name in SkipKeys:
                continue
            try:
                field_value, field_key, value_is_complex = self.get_field_value(field, field_name)
                field_value = self.prepare_field_value(field_name, field, field_value, value_is_complex)
            except KeyError:
                continue
            except ValueError as e:
                raise SettingsError(f"error parsing value for field {field_name!r} from source {self!r}") from e

            data[field_key] = field_value
        return data

    @property
    def state(self) -> CurrentState:
        return t.cast(CurrentState, self.current_state)


class OverrideSettingsSource(SettingsSource):
    """
    Applies `-o path.to.key=value` overrides on top of the YAML documents;
    values are parsed as YAML so `-o averaging.use_math=true` yields a bool.

    Sources listed first win, so this one must come before the YAML source;
    its partial mappings are deep-merged over the YAML documents.
    """

    @functools.cached_property
    def parsed_options(self) -> dict[str, t.Any]:
        od: dict[str, t.Any] = {}
        for o in self.state.get("override", ()):
            if "=" not in o:
                raise ValueError(f"override {o!r} is not of the form key=value")
            k, v = [s.strip() for s in o.split("=", 1)]

            target = od
            path = k.split(".")
            for key in path[:-1]:
                target = target.setdefault(key, {})
            target[path[-1]] = yaml.safe_load(v)
        return od

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        if field_name not in self.parsed_options:
            raise KeyError(field_name)
        value = self.parsed_options[field_name]
        return value, field_name, isinstance(value, dict)

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        return value


class YAMLCascadingSettingsSource(SettingsSource):
    """
    Reads `<root>/<field>.yaml`, then merges `<root>/env.d/<env>/<field>.yaml`
    over it for every environment but local
    """

    @functools.cached_property
    def load_paths(self) -> list[Path]:
        root = self.state["root"]
        assert root.scheme == "file" and root.path is not None, "root is not a legible location of YAML files"
        env = self.state["env"]
        paths = [Path(root.path)]
        if env is not DeploymentEnvironment.Local:
            # we don't have a special directory for local/ that's just root
            paths.append(Path(root.path) / "env.d" / env.value)
        return paths

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        yamls: list[str] = []
        for path in self.load_paths:
            fn = path / f"{field_name}.yaml"
            if fn.exists():
                yamls.append(fn.read_text(encoding="utf8"))
        if not yamls:
            raise KeyError(field_name)
        return yamls, field_name, True

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        # we are given the list of YAML documents found along load_paths
        if not isinstance(value, list):
            raise ValueError(field_name)
        merged: dict[str, t.Any] = {}
        for doc in t.cast(list[str], value):
            loaded = yaml.safe_load(doc) or {}
            if not isinstance(loaded, dict):
                raise ValueError(f"{field_name}.yaml must contain a mapping")
            merged = util.deep_update(merged, t.cast(dict[str, t.Any], loaded))
        return merged
