import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml

from . import errors
from .config import MachineConfig
from .errors import BrainfError
from .machine import TapeMachine
from .program import build

logger = logging.getLogger(__name__)

# error names a case may expect, e.g. "InputExhausted"
ERROR_TYPES = {
    cls.__name__: cls
    for cls in (
        errors.BrainfError,
        errors.ParseError,
        errors.UnmatchedCloseBracket,
        errors.UnterminatedLoop,
        errors.ExecutionError,
        errors.UndefinedCommand,
        errors.InputExhausted,
        errors.BackwardBoundaryUnderflow,
    )
}


@dataclass
class Case:
    name: str
    program: bytes
    input: bytes = b""
    expected: Optional[bytes] = None
    error: Optional[str] = None


@dataclass
class CaseResult:
    case: Case
    passed: bool
    output: Optional[bytes] = None
    error: Optional[BrainfError] = None

    def describe(self) -> str:
        """One-line summary of what happened vs. what was expected."""
        if self.error is not None:
            got = f"{type(self.error).__name__}: {self.error}"
        else:
            got = repr(self.output)
        if self.case.error is not None:
            want = self.case.error
        else:
            want = repr(self.case.expected)
        return f"expected {want}, got {got}"


def _coerce_bytes(value: Any, field_name: str, encoding: str) -> bytes:
    """Accept either text or a list of byte values."""
    if isinstance(value, str):
        return value.encode(encoding)
    if isinstance(value, (list, tuple)):
        out = bytearray()
        for v in value:
            if not isinstance(v, int) or not 0 <= v <= 255:
                raise ValueError(f"{field_name} elements must be integers in [0, 255]")
            out.append(v)
        return bytes(out)
    raise ValueError(f"{field_name} must be a string or a list of integers")


def _coerce_case(obj: Any, encoding: str) -> Case:
    if not isinstance(obj, dict):
        raise ValueError("Each case must be a mapping")
    name = obj.get("name")
    if not name:
        raise ValueError("Each case must have 'name'")
    if "program" not in obj:
        raise ValueError(f"Case {name!r} must have 'program'")
    if ("expected" in obj) == ("error" in obj):
        raise ValueError(f"Case {name!r} must have exactly one of 'expected' or 'error'")

    error = obj.get("error")
    if error is not None and error not in ERROR_TYPES:
        raise ValueError(f"Case {name!r}: unknown error {error!r}")

    return Case(
        name=str(name),
        program=_coerce_bytes(obj["program"], "program", encoding),
        input=_coerce_bytes(obj.get("input", ""), "input", encoding),
        expected=(_coerce_bytes(obj["expected"], "expected", encoding)
                  if "expected" in obj else None),
        error=error,
    )


def load_cases(path: str, encoding: str = "utf-8") -> List[Case]:
    """Load evaluation cases from a YAML file.
    Supported formats:
      1) { cases: [ { name, program, input?, expected | error }, ... ] }
      2) A bare list of such case mappings
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    items: List[Dict[str, Any]]
    if isinstance(data, dict) and isinstance(data.get("cases"), list):
        items = data["cases"]
    elif isinstance(data, list):
        items = data
    else:
        raise ValueError(f"Unsupported suite structure in {path}; expected a 'cases' list")

    return [_coerce_case(obj, encoding) for obj in items]


def run_case(case: Case, config: Optional[MachineConfig] = None) -> CaseResult:
    machine = TapeMachine(config)
    try:
        output = machine.run(build(case.program), case.input)
    except BrainfError as e:
        passed = case.error is not None and isinstance(e, ERROR_TYPES[case.error])
        return CaseResult(case, passed, error=e)
    return CaseResult(case, case.error is None and output == case.expected, output=output)


def run_suite(cases: List[Case], config: Optional[MachineConfig] = None) -> List[CaseResult]:
    results = []
    for case in cases:
        result = run_case(case, config)
        if not result.passed:
            logger.warning("Case %s failed: %s", case.name, result.describe())
        results.append(result)
    return results
