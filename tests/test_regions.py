from __future__ import annotations

from typing import Any, Dict, List

import pytest

from lentic_engine.blocks import RegionKind, classify
from lentic_engine.runtime import telemetry

BEGIN = r"#\+BEGIN_SRC emacs-lisp"
END = r"#\+END_SRC"


def split(text: str) -> List[str]:
    return text.split("\n")


def rebuild(lines: List[str], partition) -> List[str]:
    rebuilt: List[str] = []
    for region in partition.regions:
        rebuilt.extend(region.lines(lines))
    return rebuilt


@pytest.mark.parametrize(
    "text",
    [
        "",
        "only prose",
        "prose\n#+BEGIN_SRC emacs-lisp\n(foo)\n#+END_SRC\nmore prose",
        "#+BEGIN_SRC emacs-lisp\n(a)\n#+END_SRC\n"
        "#+BEGIN_SRC emacs-lisp\n(b)\n#+END_SRC",
        "prose\n#+BEGIN_SRC emacs-lisp\n(never closed)",
        "#+END_SRC\nstray end first",
        "trailing newline\n",
    ],
)
def test_regions_cover_every_line_once(text: str) -> None:
    lines = split(text)

    partition = classify(lines, BEGIN, END)

    assert rebuild(lines, partition) == lines
    assert [index for index, _, _ in partition.iter_lines()] == list(
        range(len(lines))
    )


def test_delimiter_lines_close_their_region() -> None:
    lines = split("prose line\n#+BEGIN_SRC emacs-lisp\n(foo)\n#+END_SRC\nmore prose")

    partition = classify(lines, BEGIN, END)

    kinds = [region.kind for region in partition.regions]
    assert kinds == [RegionKind.PROSE, RegionKind.CODE, RegionKind.PROSE]
    assert partition.regions[0].delimiter == 1
    assert partition.regions[1].delimiter == 3
    assert partition.regions[2].delimiter is None
    assert list(partition.regions[1].body) == [2]
    assert partition.is_delimiter(1)
    assert partition.kind_at(2) is RegionKind.CODE
    assert partition.kind_at(4) is RegionKind.PROSE
    assert partition.valid


def test_regions_alternate_between_kinds() -> None:
    lines = split(
        "a\n#+BEGIN_SRC emacs-lisp\nb\n#+END_SRC\n"
        "c\n#+BEGIN_SRC emacs-lisp\nd\n#+END_SRC"
    )

    partition = classify(lines, BEGIN, END)

    kinds = [region.kind for region in partition.regions]
    for left, right in zip(kinds, kinds[1:]):
        assert left is not right


def test_empty_buffer_is_a_single_prose_region() -> None:
    partition = classify([], BEGIN, END)

    assert len(partition.regions) == 1
    assert partition.regions[0].kind is RegionKind.PROSE
    assert len(partition.regions[0]) == 0


def test_matching_is_case_insensitive_by_default() -> None:
    lines = ["prose", "#+begin_src emacs-lisp", "(foo)", "#+end_src"]

    partition = classify(lines, BEGIN, END)

    assert partition.kind_at(2) is RegionKind.CODE


def test_case_sensitive_matching_ignores_lowercase_marker() -> None:
    lines = ["prose", "#+begin_src clojure", "(foo)", "#+END_SRC"]

    partition = classify(
        lines, r"#\+BEGIN_SRC clojure", END, case_sensitive=True
    )

    assert partition.kind_at(1) is RegionKind.PROSE
    assert partition.kind_at(2) is RegionKind.PROSE
    assert not partition.is_delimiter(1)


def test_indented_markers_are_recognised() -> None:
    lines = ["  #+BEGIN_SRC emacs-lisp", "(foo)", "  #+END_SRC"]

    partition = classify(lines, BEGIN, END)

    assert partition.kind_at(1) is RegionKind.CODE


def test_marker_in_middle_of_sentence_is_prose() -> None:
    lines = ["see #+BEGIN_SRC emacs-lisp for details", "(foo)"]

    partition = classify(lines, BEGIN, END)

    assert partition.kind_at(1) is RegionKind.PROSE


def test_unterminated_code_region_runs_to_end() -> None:
    lines = split("prose\n#+BEGIN_SRC emacs-lisp\n(foo)\n(bar)")

    partition = classify(lines, BEGIN, END)

    assert partition.kind_at(2) is RegionKind.CODE
    assert partition.kind_at(3) is RegionKind.CODE
    assert not partition.valid
    assert [error.reason for error in partition.errors] == ["unterminated"]
    assert partition.errors[0].line == 1


def test_stray_end_marker_stays_prose() -> None:
    lines = split("#+END_SRC\nprose")

    partition = classify(lines, BEGIN, END)

    assert partition.kind_at(0) is RegionKind.PROSE
    assert not partition.is_delimiter(0)
    assert [error.reason for error in partition.errors] == ["stray_end"]


def test_nested_start_marker_is_recorded() -> None:
    lines = split(
        "#+BEGIN_SRC emacs-lisp\n#+BEGIN_SRC emacs-lisp\n(foo)\n#+END_SRC\nprose"
    )

    partition = classify(lines, BEGIN, END)

    assert partition.kind_at(1) is RegionKind.CODE
    assert partition.kind_at(4) is RegionKind.PROSE
    assert [error.reason for error in partition.errors] == ["nested_start"]


def test_malformed_regions_emit_warning_events(monkeypatch: pytest.MonkeyPatch) -> None:
    events: List[Dict[str, Any]] = []

    def fake_record_event(name: str, **kwargs: Any) -> None:
        events.append({"name": name, **kwargs})

    monkeypatch.setattr(telemetry, "record_event", fake_record_event)

    classify(split("prose\n#+BEGIN_SRC emacs-lisp\n(foo)"), BEGIN, END)

    assert events
    assert events[0]["name"] == "regions.malformed"
    assert events[0]["level"] == "warning"
    assert events[0]["data"]["reason"] == "unterminated"
