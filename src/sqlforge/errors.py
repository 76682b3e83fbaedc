from __future__ import annotations

from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    BUILDER_MISUSE = "SQLFORGE_BUILDER_MISUSE"
    ARITY_MISMATCH = "SQLFORGE_ARITY_MISMATCH"
    UNSUPPORTED_FEATURE = "SQLFORGE_UNSUPPORTED_FEATURE"
    BAD_CUSTOM_PLACEHOLDER = "SQLFORGE_BAD_CUSTOM_PLACEHOLDER"
    VALUE_TYPE_MISMATCH = "SQLFORGE_VALUE_TYPE_MISMATCH"


@dataclass(frozen=True)
class SqlProblem:
    code: ErrorCode           # stable machine code
    category: str             # "builder" | "dialect" | "template" | "value"
    message: str              # short human message
    details: Dict[str, Any] = field(default_factory=dict)  # structured details for debugging
    remediation: Optional[str] = None  # actionable next step


class SqlForgeError(Exception):
    category = "builder"
    default_code = ErrorCode.BUILDER_MISUSE

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        remediation: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.problem = SqlProblem(
            code=self.default_code,
            category=self.category,
            message=message,
            details=dict(details or {}),
            remediation=remediation,
        )
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def code(self) -> ErrorCode:
        return self.problem.code


class BuilderMisuseError(SqlForgeError):
    """A statement was assembled in a way no dialect can render."""


class ArityMismatchError(BuilderMisuseError):
    default_code = ErrorCode.ARITY_MISMATCH


class UnsupportedFeatureError(BuilderMisuseError):
    category = "dialect"
    default_code = ErrorCode.UNSUPPORTED_FEATURE

    def __init__(self, dialect: str, feature: str, *, remediation: Optional[str] = None) -> None:
        super().__init__(
            f"{dialect} does not support {feature}",
            details={"dialect": dialect, "feature": feature},
            remediation=remediation,
        )
        self.dialect = dialect
        self.feature = feature


class CustomPlaceholderError(SqlForgeError):
    category = "template"
    default_code = ErrorCode.BAD_CUSTOM_PLACEHOLDER


class ValueTypeMismatchError(SqlForgeError, TypeError):
    category = "value"
    default_code = ErrorCode.VALUE_TYPE_MISMATCH


def problem_to_dict(p: SqlProblem) -> Dict[str, Any]:
    d = asdict(p)
    d["code"] = p.code.value
    if d.get("remediation") is None:
        d.pop("remediation", None)
    return d
