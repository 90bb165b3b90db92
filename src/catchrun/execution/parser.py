#
# src/catchrun/execution/parser.py
#
"""
Reads the output of Catch's XML reporter into outcomes and failure diagnostics.

Only the attributes that matter for reporting are read:

    <TestCase name="...">
      <OverallResult success="true|false" />
      <Expression success="false" filename="..." line="123" />
    </TestCase>

When several elements qualify, the first one in document order wins.
"""
import xml.etree.ElementTree as ET

from attrs import define, field

from catchrun.exceptions import (
    EnrichmentError,
    FailureLocationError,
    NoFailureExpressionFoundError,
    ReportParseError,
    TestCaseNotFoundError,
)
from catchrun.models import FailureLocation, TestOutcome


@define(frozen=True, slots=True)
class Enrichment:
    """
    Best-effort diagnostics for a failed test case.

    'problem' holds the error that stopped the location lookup, if any; the
    message and location that could be extracted are still usable.
    """
    error_message: str = field(default="")
    location: FailureLocation | None = field(default=None)
    problem: EnrichmentError | None = field(default=None)


def parse_report(raw_output: str) -> ET.Element:
    """Parses the reporter output into its root element."""
    if not raw_output or not raw_output.strip():
        raise ReportParseError("Reporter output is empty")
    try:
        return ET.fromstring(raw_output)
    except ET.ParseError as e:
        raise ReportParseError(f"Reporter output is not well-formed XML: {e}") from e


def locate(document: ET.Element, test_name: str) -> ET.Element:
    """
    Finds the TestCase element named 'test_name'.

    The search covers 'document' itself and all of its descendants.

    Raises:
        TestCaseNotFoundError: If no TestCase element carries that name.
    """
    for element in document.iter("TestCase"):
        if element.get("name") == test_name:
            return element
    raise TestCaseNotFoundError(test_name)


def classify(test_case_element: ET.Element) -> TestOutcome:
    """Maps the nested OverallResult element to an outcome."""
    overall_result = test_case_element.find(".//OverallResult")
    if overall_result is None:
        return TestOutcome.UNKNOWN

    status = overall_result.get("success", "")
    if status.casefold() == "true":
        return TestOutcome.PASSED
    return TestOutcome.FAILED


def locate_failure(test_case_element: ET.Element) -> FailureLocation:
    """
    Returns the file and line of the first failing Expression.

    Raises:
        NoFailureExpressionFoundError: If no Expression has success="false".
        FailureLocationError: If that Expression lacks a filename or an integer line.
    """
    failing = next(
        (el for el in test_case_element.iter("Expression") if el.get("success") == "false"),
        None,
    )
    if failing is None:
        raise NoFailureExpressionFoundError("Could not find a failing Expression element when looking for filename")

    filename = failing.get("filename")
    if not filename:
        raise FailureLocationError("Failing Expression element has no filename attribute")
    try:
        line = int(failing.get("line", ""))
    except ValueError as e:
        raise FailureLocationError(f"Failing Expression element has an invalid line attribute: {e}") from e
    return FailureLocation(file_path=filename, line_number=line)


def extract_error_message(test_case_element: ET.Element) -> str:
    """
    Returns the human-readable error message of a failed test case.

    No message format is defined for the XML reporter yet, so this is always
    the empty string.
    """
    return ""


def enrich_failure(test_case_element: ET.Element) -> Enrichment:
    """Collects the error message and failure location without raising."""
    message = extract_error_message(test_case_element)
    try:
        location = locate_failure(test_case_element)
    except EnrichmentError as e:
        return Enrichment(error_message=message, problem=e)
    return Enrichment(error_message=message, location=location)

# 🔼⚙️
