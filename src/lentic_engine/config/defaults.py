"""Built-in configurations linking org documents with source files."""

from __future__ import annotations

from typing import Iterable, Sequence

from lentic_engine.blocks import BlockDirection

from .models import ConfigurationSpec
from .registry import ConfigurationRegistry

LISP_COMMENT = ";; "
PYTHON_COMMENT = "# "
ORG_SRC_END = r"#\+END_SRC"


def _org_src(language: str) -> str:
    return rf"#\+BEGIN_SRC {language}"


DEFAULT_CONFIGURATIONS: tuple[ConfigurationSpec, ...] = (
    ConfigurationSpec(
        name="org-el",
        direction=BlockDirection.UNCOMMENTED,
        comment=LISP_COMMENT,
        region_start=_org_src("emacs-lisp"),
        region_end=ORG_SRC_END,
        extension=".el",
        inverse="el-org",
        description="Org document to emacs-lisp source",
        tags=("org", "emacs-lisp"),
    ),
    ConfigurationSpec(
        name="el-org",
        direction=BlockDirection.COMMENTED,
        comment=LISP_COMMENT,
        region_start=_org_src("emacs-lisp"),
        region_end=ORG_SRC_END,
        extension=".org",
        inverse="org-el",
        description="Emacs-lisp source to org document",
        tags=("org", "emacs-lisp"),
    ),
    ConfigurationSpec(
        name="org-orgel",
        direction=BlockDirection.UNCOMMENTED,
        comment=LISP_COMMENT,
        region_start=_org_src("emacs-lisp"),
        region_end=ORG_SRC_END,
        overlay=True,
        extension=".el",
        inverse="orgel-org",
        description="Org document to emacs-lisp with summary line and headers",
        tags=("org", "emacs-lisp", "orgel"),
    ),
    ConfigurationSpec(
        name="orgel-org",
        direction=BlockDirection.COMMENTED,
        comment=LISP_COMMENT,
        region_start=_org_src("emacs-lisp"),
        region_end=ORG_SRC_END,
        overlay=True,
        extension=".org",
        inverse="org-orgel",
        description="Emacs-lisp with summary line and headers to org document",
        tags=("org", "emacs-lisp", "orgel"),
    ),
    # Case-sensitive so a quoted "#+begin_src clojure" in prose is not a marker.
    ConfigurationSpec(
        name="org-clojure",
        direction=BlockDirection.UNCOMMENTED,
        comment=LISP_COMMENT,
        region_start=_org_src("clojure"),
        region_end=ORG_SRC_END,
        case_sensitive=True,
        extension=".clj",
        inverse="clojure-org",
        description="Org document to clojure source",
        tags=("org", "clojure"),
    ),
    ConfigurationSpec(
        name="clojure-org",
        direction=BlockDirection.COMMENTED,
        comment=LISP_COMMENT,
        region_start=_org_src("clojure"),
        region_end=ORG_SRC_END,
        case_sensitive=True,
        extension=".org",
        inverse="org-clojure",
        description="Clojure source to org document",
        tags=("org", "clojure"),
    ),
    ConfigurationSpec(
        name="org-python",
        direction=BlockDirection.UNCOMMENTED,
        comment=PYTHON_COMMENT,
        region_start=_org_src("python"),
        region_end=ORG_SRC_END,
        extension=".py",
        inverse="python-org",
        description="Org document to python source",
        tags=("org", "python"),
    ),
    ConfigurationSpec(
        name="python-org",
        direction=BlockDirection.COMMENTED,
        comment=PYTHON_COMMENT,
        region_start=_org_src("python"),
        region_end=ORG_SRC_END,
        extension=".org",
        inverse="org-python",
        description="Python source to org document",
        tags=("org", "python"),
    ),
)


def load_default_configurations(
    registry: ConfigurationRegistry,
    *,
    replace: bool = False,
    extra: Iterable[ConfigurationSpec] | None = None,
    include: Sequence[str] | None = None,
    exclude: Sequence[str] | None = None,
) -> None:
    """Register the built-in specs, optionally filtered, then ``extra``."""

    filters = _build_filters(include, exclude)
    for spec in DEFAULT_CONFIGURATIONS:
        if _selected(spec.name, filters):
            registry.register(spec, replace=replace)

    for spec in extra or ():
        registry.register(spec, replace=replace)


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    return include_set, set(exclude or ())


def _selected(name: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and name not in include:
        return False
    return name not in exclude


__all__ = [
    "DEFAULT_CONFIGURATIONS",
    "LISP_COMMENT",
    "ORG_SRC_END",
    "PYTHON_COMMENT",
    "load_default_configurations",
]
