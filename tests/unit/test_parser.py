#
# tests/unit/test_parser.py
#
"""
Tests for reading Catch XML reporter output.
"""

import xml.etree.ElementTree as ET

import pytest

from catchrun.exceptions import (
    FailureLocationError,
    NoFailureExpressionFoundError,
    ReportParseError,
    TestCaseNotFoundError,
)
from catchrun.execution import parser
from catchrun.models import FailureLocation, TestOutcome

CATCH_REPORT = """\
<?xml version="1.0" encoding="UTF-8"?>
<Catch name="vector_tests">
  <Group name="vector_tests">
    <TestCase name="vectors can be sized" filename="vector.cpp" line="10">
      <Section name="resizing bigger" filename="vector.cpp" line="14">
        <Expression success="true" type="REQUIRE" filename="vector.cpp" line="17">
          <Original>v.size() == 10</Original>
          <Expanded>10 == 10</Expanded>
        </Expression>
        <Expression success="false" type="CHECK" filename="vector.cpp" line="18">
          <Original>v.capacity() >= 10</Original>
          <Expanded>5 >= 10</Expanded>
        </Expression>
        <OverallResults successes="1" failures="1" expectedFailures="0"/>
      </Section>
      <Expression success="false" type="REQUIRE" filename="vector.cpp" line="25">
        <Original>v.empty()</Original>
        <Expanded>false</Expanded>
      </Expression>
      <OverallResult success="false"/>
    </TestCase>
    <TestCase name="vectors start empty" filename="vector.cpp" line="30">
      <OverallResult success="true"/>
    </TestCase>
    <OverallResults successes="2" failures="2" expectedFailures="0"/>
  </Group>
</Catch>
"""


def _element(xml: str) -> ET.Element:
    return ET.fromstring(xml)


class TestParseReport:
    """Tests for parse_report."""

    def test_parses_document_with_xml_declaration(self) -> None:
        root = parser.parse_report(CATCH_REPORT)
        assert root.tag == "Catch"

    @pytest.mark.parametrize("raw", ["", "   \n", "<Catch><TestCase>", "not xml at all"])
    def test_rejects_empty_or_malformed_output(self, raw: str) -> None:
        with pytest.raises(ReportParseError):
            parser.parse_report(raw)


class TestLocate:
    """Tests for locate."""

    def test_finds_nested_test_case_by_name(self) -> None:
        element = parser.locate(parser.parse_report(CATCH_REPORT), "vectors start empty")
        assert element.get("line") == "30"

    def test_root_element_can_be_the_test_case(self) -> None:
        document = _element('<TestCase name="T1"><OverallResult success="true"/></TestCase>')
        assert parser.locate(document, "T1") is document

    def test_missing_name_raises(self) -> None:
        with pytest.raises(TestCaseNotFoundError) as exc_info:
            parser.locate(parser.parse_report(CATCH_REPORT), "no such test")
        assert exc_info.value.test_name == "no such test"

    def test_first_match_in_document_order_wins(self) -> None:
        document = _element(
            '<Catch><TestCase name="dup" line="1"/><Group><TestCase name="dup" line="2"/></Group></Catch>'
        )
        assert parser.locate(document, "dup").get("line") == "1"

    def test_name_must_match_exactly(self) -> None:
        document = _element('<Catch><TestCase name="T10"/><TestCase/></Catch>')
        with pytest.raises(TestCaseNotFoundError):
            parser.locate(document, "T1")


class TestClassify:
    """Tests for classify."""

    @pytest.mark.parametrize("success", ["true", "True", "TRUE"])
    def test_true_in_any_case_is_passed(self, success: str) -> None:
        element = _element(f'<TestCase name="T"><OverallResult success="{success}"/></TestCase>')
        assert parser.classify(element) is TestOutcome.PASSED

    @pytest.mark.parametrize("success", ["false", "", "yes"])
    def test_anything_else_is_failed(self, success: str) -> None:
        element = _element(f'<TestCase name="T"><OverallResult success="{success}"/></TestCase>')
        assert parser.classify(element) is TestOutcome.FAILED

    def test_missing_success_attribute_is_failed(self) -> None:
        element = _element('<TestCase name="T"><OverallResult/></TestCase>')
        assert parser.classify(element) is TestOutcome.FAILED

    def test_no_overall_result_is_unknown(self) -> None:
        element = _element('<TestCase name="T"><OverallResults successes="1"/></TestCase>')
        assert parser.classify(element) is TestOutcome.UNKNOWN


class TestLocateFailure:
    """Tests for locate_failure."""

    def test_returns_first_failing_expression_in_document_order(self) -> None:
        element = parser.locate(parser.parse_report(CATCH_REPORT), "vectors can be sized")
        assert parser.locate_failure(element) == FailureLocation(file_path="vector.cpp", line_number=18)

    def test_passing_expressions_are_skipped(self) -> None:
        element = _element(
            '<TestCase name="T">'
            '<Expression success="true" filename="a.cpp" line="1"/>'
            '<Expression success="false" filename="b.cpp" line="2"/>'
            "</TestCase>"
        )
        assert parser.locate_failure(element) == FailureLocation(file_path="b.cpp", line_number=2)

    def test_success_must_be_exactly_false(self) -> None:
        element = _element('<TestCase name="T"><Expression success="FALSE" filename="a.cpp" line="1"/></TestCase>')
        with pytest.raises(NoFailureExpressionFoundError):
            parser.locate_failure(element)

    def test_no_failing_expression_raises(self) -> None:
        element = _element('<TestCase name="T"><OverallResult success="false"/></TestCase>')
        with pytest.raises(NoFailureExpressionFoundError):
            parser.locate_failure(element)

    @pytest.mark.parametrize(
        "attributes",
        ['filename="a.cpp"', 'filename="a.cpp" line="forty-two"', 'line="42"'],
    )
    def test_unusable_location_attributes_raise(self, attributes: str) -> None:
        element = _element(f'<TestCase name="T"><Expression success="false" {attributes}/></TestCase>')
        with pytest.raises(FailureLocationError):
            parser.locate_failure(element)


class TestEnrichment:
    """Tests for the error message and enrichment helpers."""

    def test_error_message_is_empty(self) -> None:
        element = parser.locate(parser.parse_report(CATCH_REPORT), "vectors can be sized")
        assert parser.extract_error_message(element) == ""

    def test_enrich_failure_collects_location(self) -> None:
        element = parser.locate(parser.parse_report(CATCH_REPORT), "vectors can be sized")
        enrichment = parser.enrich_failure(element)
        assert enrichment.error_message == ""
        assert enrichment.location == FailureLocation(file_path="vector.cpp", line_number=18)
        assert enrichment.problem is None

    def test_enrich_failure_reports_problem_instead_of_raising(self) -> None:
        element = _element('<TestCase name="T"><OverallResult success="false"/></TestCase>')
        enrichment = parser.enrich_failure(element)
        assert enrichment.location is None
        assert enrichment.error_message == ""
        assert isinstance(enrichment.problem, NoFailureExpressionFoundError)
