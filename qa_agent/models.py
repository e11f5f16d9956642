"""Data models shared by the agents, integrations and the facade."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional


class TestStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    TIMEDOUT = "timedout"


class SuggestionType(str, Enum):
    PERFORMANCE = "performance"
    RELIABILITY = "reliability"
    MAINTAINABILITY = "maintainability"
    COVERAGE = "coverage"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class HelperCategory(str, Enum):
    DATABASE = "database"
    API = "api"
    UI = "ui"
    UTILS = "utils"
    AUTH = "auth"
    PERFORMANCE = "performance"


@dataclass
class TestResult:
    """Outcome of one test from the latest run."""

    __test__ = False

    title: str
    status: TestStatus
    error: Optional[str] = None
    screenshot: Optional[str] = None
    duration: Optional[int] = None  # ms
    file: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "status": self.status.value,
            "error": self.error,
            "screenshot": self.screenshot,
            "duration": self.duration,
            "file": self.file,
        }


@dataclass
class FlakyTest:
    """A test whose outcome is inconsistent across runs."""

    name: str
    file: str
    failure_pattern: str
    code: Optional[str] = None
    failure_rate: Optional[float] = None  # 0.0 - 1.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Suggestion:
    """One actionable recommendation for one test file."""

    type: SuggestionType
    description: str
    file: str
    line: Optional[int] = None
    code: Optional[str] = None
    priority: Priority = Priority.MEDIUM

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "description": self.description,
            "file": self.file,
            "line": self.line,
            "code": self.code,
            "priority": self.priority.value,
        }


@dataclass
class AnalysisResult:
    """Aggregate outcome of analyzing a batch of failures."""

    message: str
    suggestions: list[str] = field(default_factory=list)
    root_causes: Optional[list[str]] = None
    affected_tests: Optional[list[str]] = None
    confidence: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class FixResult:
    """Suggested remediation for one flaky test."""

    test_file: str
    issue: str
    suggested_fix: str
    confidence: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PageObjectModel:
    """A generated page object and its metadata."""

    file_name: str
    class_name: str
    url: str
    code: str
    methods: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ReportEnhancement:
    reporter_code: str
    html_template: str
    notification_code: str
    dashboard_code: str
    features: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class HelperClassSuggestion:
    class_name: str
    description: str
    code: str
    test_code: str
    category: HelperCategory = HelperCategory.UTILS

    def to_dict(self) -> dict:
        data = asdict(self)
        data["category"] = self.category.value
        return data


@dataclass
class ArchitectureOptimization:
    improvements: list[str] = field(default_factory=list)
    files_created: list[str] = field(default_factory=list)
    performance_gain: int = 0  # percent
    config_changes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class DataManagementSystem:
    factories: list[str] = field(default_factory=list)
    providers: list[str] = field(default_factory=list)
    cleanup_scripts: list[str] = field(default_factory=list)
    configuration: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RepositoryStructure:
    """Coarse structural flags of the test repository."""

    has_tests: bool = False
    has_page_objects: bool = False
    has_helpers: bool = False
    has_config: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TestSummary:
    """Counts over the latest test run."""

    __test__ = False

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    pass_rate: int = 0  # percent, rounded

    def __post_init__(self):
        if self.total > 0 and not self.pass_rate:
            self.pass_rate = round(self.passed / self.total * 100)

    def to_dict(self) -> dict:
        return asdict(self)
