# structure/validator.py

import logging
from collections.abc import Callable, Sequence

from data_detective.domain.source_map import SourceMapper
from data_detective.schemas import (
    FileType,
    StructureEvidence,
    StructureIssue,
    StructureSummary,
    StructureValidationResult,
)

from ._issues import IssueDraft
from .csv_rules import check_csv
from .fixes import apply_fix
from .json_rules import check_json
from .markup_rules import check_xml, check_yaml

logger = logging.getLogger(__name__)

_CHECKS: dict[str, Callable[[str], tuple[IssueDraft, ...]]] = {
    "json": check_json,
    "csv": check_csv,
    "xml": check_xml,
    "yaml": check_yaml,
}


class StructureValidator:
    """
    Validates the syntax of one document and repairs what can be repaired.

    Only syntax is checked, never meaning. Validation is pure: calling
    ``validate`` twice yields equal results.
    """

    def __init__(self, content: str, file_type: FileType) -> None:
        self._content = content
        self._file_type = file_type

    @property
    def content(self) -> str:
        return self._content

    @property
    def file_type(self) -> FileType:
        return self._file_type

    def validate(self) -> StructureValidationResult:
        """
        Check the document against its format's syntax rules.

        Returns:
            StructureValidationResult: Numbered issues and their summary;
                valid when no issue is an error.
        """
        drafts = _CHECKS[self._file_type](self._content)
        issues = build_issues(self._content, drafts)

        logger.debug(
            "Structure validation found %d issue(s) in %s content",
            len(issues),
            self._file_type,
        )
        return build_result(issues)

    def auto_fix(self, issues: Sequence[StructureIssue] | None = None) -> str:
        """
        Apply every auto-fixable repair and return the corrected text.

        Repairs are applied from the end of the document backwards, ordered by
        descending line then column, so no repair moves the position of one
        still to come.

        Args:
            issues: Issues from a previous ``validate`` call; validated afresh
                when omitted.

        Returns:
            str: The repaired document, unchanged when nothing was fixable.
        """
        if issues is None:
            issues = self.validate().issues

        fixable = sorted(
            (issue for issue in issues if issue.can_auto_fix),
            key=lambda issue: (issue.line, issue.column),
            reverse=True,
        )

        fixed = self._content
        for issue in fixable:
            fixed = apply_fix(fixed, issue)
        return fixed


def repair_structure(content: str, file_type: FileType) -> StructureValidationResult:
    """
    Validate a document and apply its automatic repairs in one step.

    Args:
        content: The raw document text.
        file_type: The document's format.

    Returns:
        StructureValidationResult: The validation result, with
            ``fixed_content`` set when the repairs changed the text.
    """
    validator = StructureValidator(content, file_type)
    result = validator.validate()
    fixed = validator.auto_fix(result.issues)

    if fixed == content:
        return result

    return StructureValidationResult(
        is_valid=result.is_valid,
        issues=result.issues,
        summary=result.summary,
        fixed_content=fixed,
    )


def build_issues(
    content: str,
    drafts: Sequence[IssueDraft],
) -> tuple[StructureIssue, ...]:
    """
    Number issue drafts and derive their display positions.

    Args:
        content: The document the drafts were produced from.
        drafts: Issues in production order.

    Returns:
        tuple[StructureIssue, ...]: Issues numbered struct-1, struct-2, ...
    """
    mapper = SourceMapper(content)
    return tuple(
        _build_issue(mapper, draft, number)
        for number, draft in enumerate(drafts, start=1)
    )


def build_result(issues: tuple[StructureIssue, ...]) -> StructureValidationResult:
    errors = sum(1 for issue in issues if issue.type == "error")
    warnings = sum(1 for issue in issues if issue.type == "warning")
    auto_fixable = sum(1 for issue in issues if issue.can_auto_fix)

    return StructureValidationResult(
        is_valid=errors == 0,
        issues=issues,
        summary=StructureSummary(
            total_issues=len(issues),
            errors=errors,
            warnings=warnings,
            auto_fixable=auto_fixable,
        ),
    )


def _build_issue(
    mapper: SourceMapper,
    draft: IssueDraft,
    number: int,
) -> StructureIssue:
    position = mapper.offset_to_position(draft.offset)
    original_text = draft.original_text
    if original_text is None:
        original_text = mapper.get_line_text(position.line)

    return StructureIssue(
        id=f"struct-{number}",
        type=draft.type,
        pattern=draft.pattern,
        line=position.line,
        column=position.column,
        offset=position.offset,
        message=draft.message,
        original_text=original_text,
        suggested_fix=draft.suggested_fix,
        can_auto_fix=draft.can_auto_fix,
        evidence=StructureEvidence(
            observed=draft.observed,
            context=draft.context,
            rule_violated=draft.rule_violated,
        ),
    )
