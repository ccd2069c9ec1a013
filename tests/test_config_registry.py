from __future__ import annotations

import pytest

from lentic_engine.blocks import BlockDirection, Overlay, UncommentedBlock
from lentic_engine.buffer import Buffer
from lentic_engine.config import (
    DEFAULT_CONFIGURATIONS,
    ConfigurationError,
    ConfigurationRegistry,
    ConfigurationSpec,
    load_default_configurations,
)
from lentic_engine.link import clone

BEGIN = r"#\+BEGIN_SRC emacs-lisp"
END = r"#\+END_SRC"


def make_spec(
    *,
    name: str = "custom",
    direction: BlockDirection | str = BlockDirection.UNCOMMENTED,
    **overrides: object,
) -> ConfigurationSpec:
    settings: dict[str, object] = {
        "comment": ";; ",
        "region_start": BEGIN,
        "region_end": END,
    }
    settings.update(overrides)
    return ConfigurationSpec(
        name=name, direction=direction, **settings  # type: ignore[arg-type]
    )


def make_registry(**kwargs: object) -> ConfigurationRegistry:
    registry = ConfigurationRegistry()
    load_default_configurations(registry, **kwargs)  # type: ignore[arg-type]
    return registry


def test_defaults_register_every_builtin() -> None:
    registry = make_registry()

    stats = registry.stats()
    assert stats.spec_count == len(DEFAULT_CONFIGURATIONS) == 8
    assert stats.directions == ("commented", "uncommented")
    assert stats.extensions == (".clj", ".el", ".org", ".py")
    assert {"org-el", "el-org", "org-orgel", "orgel-org"} <= {
        spec.name for spec in registry.iter_specs()
    }


def test_default_loading_respects_filters() -> None:
    registry = make_registry(include=["org-el", "el-org", "org-python"])

    assert len(registry) == 3

    registry = make_registry(exclude=["org-clojure", "clojure-org"])

    assert "org-clojure" not in registry
    assert "org-el" in registry
    assert len(registry) == 6


def test_default_loading_registers_extra_specs() -> None:
    extra = make_spec(name="org-scheme", extension=".scm")

    registry = make_registry(include=["org-el"], extra=[extra])

    assert registry.get("org-scheme") is extra
    assert len(registry) == 2


def test_duplicate_registration_is_rejected() -> None:
    registry = ConfigurationRegistry()
    registry.register(make_spec())

    with pytest.raises(ValueError):
        registry.register(make_spec())


def test_replace_swaps_the_spec_and_bumps_revision() -> None:
    registry = ConfigurationRegistry()
    registry.register(make_spec())
    revision = registry.revision()
    replacement = make_spec(comment="# ")

    registry.register(replacement, replace=True)

    assert registry.get("custom") is replacement
    assert registry.revision() == revision + 1


def test_unregister_removes_spec() -> None:
    registry = ConfigurationRegistry()
    spec = registry.register(make_spec())
    revision = registry.revision()

    assert registry.unregister("custom") is spec
    assert "custom" not in registry
    assert registry.revision() == revision + 1
    assert registry.unregister("custom") is None
    assert registry.revision() == revision + 1


def test_get_unknown_name_raises_key_error() -> None:
    with pytest.raises(KeyError):
        ConfigurationRegistry().get("missing")


def test_iter_specs_filters_by_direction_and_extension() -> None:
    registry = make_registry()

    forward = {spec.name for spec in registry.iter_specs(direction="uncommented")}
    python = [spec.name for spec in registry.iter_specs(extension=".py")]

    assert forward == {"org-el", "org-orgel", "org-clojure", "org-python"}
    assert python == ["org-python"]


@pytest.mark.parametrize(
    ("name", "inverse"),
    [
        ("org-el", "el-org"),
        ("el-org", "org-el"),
        ("org-orgel", "orgel-org"),
        ("orgel-org", "org-orgel"),
        ("org-clojure", "clojure-org"),
        ("org-python", "python-org"),
    ],
)
def test_default_pairs_are_structural_inverses(name: str, inverse: str) -> None:
    registry = make_registry()

    assert registry.inverse_of(name).name == inverse


def test_inverse_of_rejects_mismatched_pair() -> None:
    registry = ConfigurationRegistry()
    registry.register(make_spec(name="forward", inverse="backward"))
    registry.register(
        make_spec(name="backward", direction="commented", comment="# ")
    )

    with pytest.raises(ConfigurationError) as info:
        registry.inverse_of("forward")

    assert info.value.field == "inverse"


def test_inverse_of_requires_declared_inverse() -> None:
    registry = ConfigurationRegistry()
    registry.register(make_spec())

    with pytest.raises(KeyError):
        registry.inverse_of("custom")


def test_initialize_builds_configuration_with_linked_buffer() -> None:
    registry = make_registry()
    org = Buffer.from_text("prose\n", name="notes.org", path="/tmp/notes.org")

    configuration = registry.initialize("org-el", org, "/tmp/notes.el")

    assert configuration.name == "org-el"
    assert configuration.inverse_name == "el-org"
    assert configuration.target.path == "/tmp/notes.el"
    assert isinstance(configuration.strategy, UncommentedBlock)
    clone(configuration)
    assert configuration.target.text == ";; prose\n"


def test_initialize_overlay_spec_builds_overlay() -> None:
    registry = make_registry()
    org = Buffer.from_text("# # demo.el --- summary", name="demo.org")

    configuration = registry.initialize("org-orgel", org, that=Buffer(name="demo.el"))

    assert isinstance(configuration.strategy, Overlay)
    clone(configuration)
    assert configuration.target.text == ";;; demo.el --- summary"


def test_clojure_markers_are_case_sensitive() -> None:
    registry = make_registry()
    text = "#+begin_src clojure\nprose\n#+BEGIN_SRC clojure\n(ns demo)\n#+END_SRC"
    org = Buffer.from_text(text, name="demo.org")

    configuration = registry.initialize("org-clojure", org, "demo.clj")
    clone(configuration)

    assert configuration.target.text == (
        ";; #+begin_src clojure\n;; prose\n#+BEGIN_SRC clojure\n(ns demo)\n#+END_SRC"
    )


def test_emacs_lisp_markers_are_case_insensitive() -> None:
    registry = make_registry()
    text = "prose\n#+begin_src emacs-lisp\n(foo)\n#+end_src"
    org = Buffer.from_text(text, name="demo.org")

    configuration = registry.initialize("org-el", org, "demo.el")
    clone(configuration)

    assert configuration.target.text == (
        ";; prose\n#+begin_src emacs-lisp\n(foo)\n#+end_src"
    )


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"extension": "el"}, "extension"),
        ({"inverse": "custom"}, "inverse"),
        ({"direction": "sideways"}, "direction"),
        ({"comment": ""}, "comment"),
        ({"region_start": "("}, "region_start"),
        ({"overlay": True, "header": ""}, "header"),
    ],
)
def test_spec_validates_eagerly(overrides: dict[str, object], field: str) -> None:
    with pytest.raises(ConfigurationError) as info:
        make_spec(**overrides)  # type: ignore[arg-type]

    assert info.value.field == field


def test_spec_normalizes_direction_and_tags() -> None:
    spec = make_spec(direction="commented", tags=(" org ", "org", "", "lisp"))

    assert spec.direction is BlockDirection.COMMENTED
    assert spec.tags == ("org", "lisp")
