"""
Conformance Validator
======================
Lints UCDF documents for problems in their field and type tokens and for
content the one-line notation cannot carry losslessly.

Returns structured ValidationResult objects with pass/fail/warn per rule.
No schema validation happens here: field types are checked as tokens, never
against actual data.

Example::

    from ucdf.validator.conformance import DocumentValidator

    result = DocumentValidator().validate(document)
    if not result.passed:
        for issue in result.issues:
            print(f"[{issue.severity}] {issue.rule_id}: {issue.message}")
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

from ..errors import ParseError
from ..models.document import Document
from ..models.values import DataType


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


class Severity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


@dataclass
class ValidationIssue:
    rule_id: str
    severity: Severity
    message: str
    field: str | None = None


@dataclass
class ValidationResult:
    """Result of a validation run."""
    passed: bool
    source_type: str
    issues: list[ValidationIssue] = field(default_factory=list)
    rule_count: int = 0

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    def __str__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return (
            f"[{status}] {self.source_type} "
            f"– {len(self.errors)} error(s), {len(self.warnings)} warning(s)"
        )


HTTP_METHODS = {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"}

SECRET_MARKERS = ("password", "passwd", "pwd", "secret", "token", "apikey", "api_key")

# A key containing any of these would be split differently on re-parse.
RESERVED_KEY_CHARS = set('=;"')
# Field and endpoint tokens live inside a comma list of colon pairs.
RESERVED_TOKEN_CHARS = set(',:;')


def is_secret_key(key: str) -> bool:
    """True for connection keys that usually hold credentials."""
    lowered = key.lower()
    return any(marker in lowered for marker in SECRET_MARKERS)


# ---------------------------------------------------------------------------
# Document Validator
# ---------------------------------------------------------------------------


class DocumentValidator:
    """
    Validates a Document against the UCDF token rules.

    Rules implemented:
    - UCDF-000  Input must parse (string validation only)
    - UCDF-001  Source category/subtype must be non-empty and free of '.;="'
    - UCDF-002  Field names should be unique within s.fields
    - UCDF-003  Field dtype outside the built-in tag set is a custom type
    - UCDF-004  A field value must match its declared dtype
    - UCDF-005  Endpoint path:method pairs should be unique
    - UCDF-006  Endpoint method should be a standard HTTP verb
    - UCDF-007  Access mode should be declared
    - UCDF-008  Connection carries credential-like parameters
    - UCDF-009  Keys and field/endpoint tokens must not contain reserved characters
    """

    def validate(self, document: Document) -> ValidationResult:
        issues: list[ValidationIssue] = []
        rules_run = 0

        def add(rule_id: str, sev: Severity, msg: str, fld: str | None = None) -> None:
            issues.append(ValidationIssue(rule_id, sev, msg, fld))

        fields = document.field_list()
        endpoints = document.endpoint_list()

        # UCDF-001 Source type tokens
        rules_run += 1
        st = document.source_type
        for label, token in (("category", st.category), ("subtype", st.subtype)):
            if token is None:
                continue
            if not token or any(ch in '.;="' for ch in token):
                add("UCDF-001", Severity.ERROR, f"Invalid source {label}: {token!r}", "source_type")

        # UCDF-002 Duplicate field names
        rules_run += 1
        for name, count in Counter(f.name for f in fields).items():
            if count > 1:
                add(
                    "UCDF-002",
                    Severity.WARNING,
                    f"Field '{name}' is declared {count} times",
                    "structure.fields",
                )

        # UCDF-003 Custom dtypes
        rules_run += 1
        for f in fields:
            if not DataType.is_builtin(f.dtype):
                add(
                    "UCDF-003",
                    Severity.INFO,
                    f"Field '{f.name}' uses custom type '{f.dtype}'",
                    "structure.fields",
                )

        # UCDF-004 Value/dtype agreement
        rules_run += 1
        for f in fields:
            if f.value is not None and f.value.type_tag != f.dtype:
                add(
                    "UCDF-004",
                    Severity.ERROR,
                    f"Field '{f.name}' is declared {f.dtype} but carries a "
                    f"{f.value.type_tag} value",
                    "structure.fields",
                )

        # UCDF-005 Duplicate endpoints
        rules_run += 1
        for ep, count in Counter(str(e) for e in endpoints).items():
            if count > 1:
                add(
                    "UCDF-005",
                    Severity.WARNING,
                    f"Endpoint '{ep}' is declared {count} times",
                    "structure.endpoints",
                )

        # UCDF-006 HTTP verbs
        rules_run += 1
        for e in endpoints:
            if e.method.upper() not in HTTP_METHODS:
                add(
                    "UCDF-006",
                    Severity.WARNING,
                    f"Endpoint '{e.path}' uses non-standard method '{e.method}'",
                    "structure.endpoints",
                )

        # UCDF-007 Access mode
        rules_run += 1
        if document.access_mode is None:
            add(
                "UCDF-007",
                Severity.INFO,
                "No access mode declared. Consider a=r, a=w or a=rw.",
                "access_mode",
            )

        # UCDF-008 Credentials
        rules_run += 1
        secret_keys = sorted(k for k in document.connection if is_secret_key(k))
        if secret_keys:
            add(
                "UCDF-008",
                Severity.INFO,
                f"Connection carries credentials ({', '.join(secret_keys)}). "
                "Avoid sharing this string unredacted.",
                "connection",
            )

        # UCDF-009 Reserved characters
        rules_run += 1
        for section, mapping in (
            ("connection", document.connection),
            ("structure", document.structure),
            ("metadata", document.metadata),
        ):
            for key in mapping:
                if not key or RESERVED_KEY_CHARS & set(key):
                    add("UCDF-009", Severity.ERROR, f"Invalid {section} key: {key!r}", section)
        for f in fields:
            if RESERVED_TOKEN_CHARS & set(f.name + f.dtype):
                add("UCDF-009", Severity.ERROR, f"Invalid field token: '{f}'", "structure.fields")
        for e in endpoints:
            if RESERVED_TOKEN_CHARS & set(e.path + e.method):
                add(
                    "UCDF-009",
                    Severity.ERROR,
                    f"Invalid endpoint token: '{e}'",
                    "structure.endpoints",
                )

        passed = not any(i.severity == Severity.ERROR for i in issues)
        return ValidationResult(
            passed=passed,
            source_type=str(document.source_type),
            issues=issues,
            rule_count=rules_run,
        )

    def validate_string(self, text: str) -> ValidationResult:
        """Parse ``text`` then validate it; a parse failure is reported as UCDF-000."""
        from ..parser.assembler import parse

        try:
            document = parse(text)
        except ParseError as e:
            return ValidationResult(
                passed=False,
                source_type="unknown",
                issues=[ValidationIssue("UCDF-000", Severity.ERROR, str(e), e.kind)],
                rule_count=1,
            )
        result = self.validate(document)
        result.rule_count += 1
        return result

    def validate_batch(self, documents: list[Document]) -> list[ValidationResult]:
        """Validate a list of Documents and return all results."""
        return [self.validate(d) for d in documents]
