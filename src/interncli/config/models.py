#
# config/models.py
#
"""
Attrs-based data models describing a single test run.
"""

from collections.abc import Mapping
from typing import Any, TypeAlias

from attrs import define, field, validators


# --- Validators ---
def _validate_optional_str(inst: Any, attr: Any, value: str | None) -> None:
    """Validator for optional string fields."""
    if value is not None and not isinstance(value, str):
        raise ValueError(f"Field '{attr.name}' must be a string, got {type(value).__name__}")


def _validate_inject(inst: Any, attr: Any, value: Any) -> None:
    """Validator for the externals 'inject' option: bool, str or list of str."""
    if value is None or isinstance(value, bool | str):
        return
    if isinstance(value, list | tuple) and all(isinstance(item, str) for item in value):
        return
    raise ValueError(f"Field 'inject' must be a bool, a string or a list of strings, got {value!r}")


def _to_tuple(value: Any) -> tuple:
    if value is None:
        return ()
    return tuple(value)


# --- Externals ---
@define(frozen=True, slots=True)
class ExternalDependency:
    """A structured external dependency entry, as consumed by the externals loader."""

    from_: str = field(validator=validators.instance_of(str))
    type: str | None = field(default=None, validator=_validate_optional_str)
    to: str | None = field(default=None, validator=_validate_optional_str)
    name: str | None = field(default=None, validator=_validate_optional_str)
    inject: bool | str | list[str] | None = field(default=None, validator=_validate_inject)

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.type is not None:
            data["type"] = self.type
        data["from"] = self.from_
        if self.to is not None:
            data["to"] = self.to
        if self.name is not None:
            data["name"] = self.name
        if self.inject is not None:
            data["inject"] = list(self.inject) if isinstance(self.inject, tuple) else self.inject
        return data


Dependency: TypeAlias = str | ExternalDependency


@define(frozen=True, slots=True)
class ExternalsConfig:
    """Externals descriptor handed verbatim to the externals loader script."""

    output_path: str | None = field(default=None, validator=_validate_optional_str)
    dependencies: tuple[Dependency, ...] = field(factory=tuple, converter=_to_tuple)

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.output_path is not None:
            data["outputPath"] = self.output_path
        data["dependencies"] = [
            dep if isinstance(dep, str) else dep.to_json() for dep in self.dependencies
        ]
        return data


_is_bool = validators.instance_of(bool)


def _to_dependency(value: Any) -> Any:
    if not isinstance(value, Mapping):
        return value
    if "from" not in value:
        raise ValueError("Externals dependency is missing required key 'from'")
    return ExternalDependency(
        from_=value["from"],
        type=value.get("type"),
        to=value.get("to"),
        name=value.get("name"),
        inject=value.get("inject"),
    )


def _to_externals(value: Any) -> Any:
    """Builds an ExternalsConfig from the JSON-shaped descriptor; models pass through."""
    if not isinstance(value, Mapping):
        return value
    return ExternalsConfig(
        output_path=value.get("outputPath", value.get("output_path")),
        dependencies=[_to_dependency(dep) for dep in value.get("dependencies", ())],
    )


# --- Root model ---
@define(frozen=True, slots=True, kw_only=True)
class TestRunConfig:
    """
    Immutable description of one test run.

    The 'externals requires child_config' rule is checked by the argument
    builder, not here, so that invalid configs can still be loaded and shown.
    """

    __test__ = False  # Not a pytest test class.

    node_unit: bool = field(default=False, validator=_is_bool)
    remote_unit: bool = field(default=False, validator=_is_bool)
    remote_functional: bool = field(default=False, validator=_is_bool)
    watch: bool = field(default=False, validator=_is_bool)
    verbose: bool = field(default=False, validator=_is_bool)

    child_config: str | None = field(default=None, validator=_validate_optional_str)
    intern_config: str = field(default="intern.json", validator=validators.instance_of(str))
    reporters: str | None = field(default=None, validator=_validate_optional_str)
    user_name: str | None = field(default=None, validator=_validate_optional_str)
    secret: str | None = field(default=None, validator=_validate_optional_str, repr=False)
    testing_key: str | None = field(default=None, validator=_validate_optional_str, repr=False)
    filter: str | None = field(default=None, validator=_validate_optional_str)

    externals: ExternalsConfig | None = field(
        default=None,
        converter=_to_externals,
        validator=validators.optional(validators.instance_of(ExternalsConfig)),
    )
    loader_plugins: tuple[str, ...] = field(factory=tuple, converter=_to_tuple)


# 🔼⚙️
