# domain/structure/test_markup_rules.py

import pytest

from data_detective.domain.structure import check_xml, check_yaml, count_xml_tags

pytestmark = pytest.mark.unit


def test_count_xml_tags_skips_self_closing() -> None:
    """
    ARRANGE: element holding a self-closing child
    ACT:     count_xml_tags
    ASSERT:  one opening and one closing tag
    """
    actual = count_xml_tags("<a><b/></a>")

    assert actual == (1, 1)


def test_check_xml_balanced() -> None:
    """
    ARRANGE: balanced document with a declaration
    ACT:     check_xml
    ASSERT:  no issues
    """
    actual = check_xml('<?xml version="1.0"?><a><b>x</b></a>')

    assert actual == ()


def test_check_xml_mismatched() -> None:
    """
    ARRANGE: element never closed
    ACT:     check_xml
    ASSERT:  XML_MISMATCHED_TAGS error
    """
    (actual,) = check_xml("<a><b></a>")

    assert (actual.pattern, actual.original_text) == (
        "XML_MISMATCHED_TAGS",
        "Multiple lines",
    )


def test_check_yaml_flags_bare_text() -> None:
    """
    ARRANGE: YAML with a key, bare text, a comment and a list item
    ACT:     check_yaml
    ASSERT:  only the bare text is reported
    """
    (actual,) = check_yaml("name: x\njust text\n# note\n- item\n")

    assert (actual.type, actual.observed) == ("warning", "just text")
