#!/usr/bin/env python3

from docport.doxygen import to_markdown


def test_plain_text_passes_through():
    lines = ["Opens a file.", "", "The handle must be closed."]
    assert to_markdown(lines) == lines


def test_brief_marker_is_dropped():
    assert to_markdown(["@brief Opens a file."]) == ["Opens a file."]
    assert to_markdown(["\\brief Opens a file."]) == ["Opens a file."]


def test_params_and_return():
    lines = [
        "@brief Adds numbers.",
        "",
        "@param a first",
        "@param[in] b second",
        "  continued",
        "@return the sum",
    ]
    assert to_markdown(lines) == [
        "Adds numbers.",
        "",
        "# Parameters",
        "",
        "* `a` first",
        "* `b` (in) second continued",
        "",
        "# Returns",
        "",
        "the sum",
    ]


def test_retval_items():
    lines = ["Closes a file.", "@retval 0 on success", "@retval -1 on failure"]
    assert to_markdown(lines) == [
        "Closes a file.",
        "",
        "# Returns",
        "",
        "* `0` on success",
        "* `-1` on failure",
    ]


def test_unknown_commands_are_kept():
    lines = ["Frees memory.", "@note Not thread safe."]
    assert to_markdown(lines) == lines


def test_blank_line_ends_a_section():
    lines = ["@param buf the buffer", "", "Trailing remark."]
    assert to_markdown(lines) == [
        "Trailing remark.",
        "",
        "# Parameters",
        "",
        "* `buf` the buffer",
    ]
