"""Prompt templates for the QA automation agents.

Provides:
- Named prompt templates with variable substitution
- Typed builders that serialize agent inputs into those templates
- A fluent builder for agent system prompts
"""

import json
from dataclasses import dataclass
from typing import Optional

from ..models import FlakyTest, TestResult


@dataclass
class PromptTemplate:
    """A reusable prompt template with variable substitution.

    Usage:
        template = PromptTemplate(
            name="fix_flaky_test",
            template="Fix {test_name} in {test_file}",
            required_vars=["test_name", "test_file"],
        )
        prompt = template.render(test_name="login", test_file="tests/test_login.py")
    """

    name: str
    template: str
    required_vars: list[str]
    optional_vars: list[str] = None
    description: str = ""

    def __post_init__(self):
        if self.optional_vars is None:
            self.optional_vars = []

    def render(self, **kwargs) -> str:
        """Render the template with variables.

        Raises:
            ValueError: If required variables are missing
        """
        missing = self.validate(**kwargs)
        if missing:
            raise ValueError(f"Missing required variables: {missing}")

        for var in self.optional_vars:
            kwargs.setdefault(var, "")

        return self.template.format(**kwargs)

    def validate(self, **kwargs) -> list[str]:
        """Return the names of required variables not provided."""
        return [var for var in self.required_vars if var not in kwargs]


PROMPTS = {
    "analyze_failures": PromptTemplate(
        name="analyze_failures",
        description="Analyze a batch of failed Playwright tests",
        template="""Analyze these Playwright test failures and provide insights:

{failures_json}

Please provide:
1. Common patterns in failures
2. Possible root causes
3. Specific suggestions to fix each failure
4. Recommendations to prevent similar issues

Format your response as JSON with the structure:
{{
  "message": "Summary of analysis",
  "rootCauses": ["cause1", "cause2"],
  "suggestions": ["suggestion1", "suggestion2"],
  "affectedTests": ["test1", "test2"],
  "confidence": 0.0-1.0
}}""",
        required_vars=["failures_json"],
    ),

    "suggest_improvements": PromptTemplate(
        name="suggest_improvements",
        description="Review one test file and suggest improvements",
        template="""Review this Playwright test file and suggest improvements:

File: {file_path}
Content:
{file_content}

Focus on:
- Test reliability and stability
- Performance optimizations
- Code maintainability
- Missing test coverage areas

Return suggestions as JSON array with format:
[{{
  "type": "performance|reliability|maintainability|coverage",
  "description": "Description of improvement",
  "line": 42,
  "code": "suggested code change",
  "priority": "low|medium|high"
}}]""",
        required_vars=["file_path", "file_content"],
    ),

    "fix_flaky_test": PromptTemplate(
        name="fix_flaky_test",
        description="Suggest a reliability fix for one flaky test",
        template="""This Playwright test is flaky. Suggest specific fixes:

Test: {test_name}
File: {test_file}
Failure pattern: {failure_pattern}
Code: {code}
Failure rate: {failure_rate}

Provide specific code changes to make it more reliable. Focus on:
- Adding proper wait conditions
- Improving selector strategies
- Adding retry logic where appropriate
- Handling timing issues
- Making assertions more robust

Format your response with the suggested fix and explanation.""",
        required_vars=["test_name", "test_file", "failure_pattern", "code", "failure_rate"],
    ),

    "generate_page_object": PromptTemplate(
        name="generate_page_object",
        description="Generate a Python page object for one URL",
        template="""Create a comprehensive Page Object Model for this URL: {url}
Application base URL: {base_url}

The page object should include:
1. All interactive elements (buttons, inputs, dropdowns, etc.)
2. Navigation methods
3. Form submission methods
4. Validation methods
5. Wait conditions
6. Data extraction methods
7. Typed dataclasses for page data

Use Playwright for Python with:
- Proper locator strategies (get_by_role, get_by_label, get_by_placeholder)
- The sync Page API
- Error handling
- Type hints
- A class extending BasePage from pages.base_page

Generate complete Python code in a single ```python block with docstrings.
Include the class name and list of methods at the end.""",
        required_vars=["url", "base_url"],
    ),

    "generate_tests": PromptTemplate(
        name="generate_tests",
        description="Generate test cases from requirements",
        template="""Generate Playwright for Python test cases (pytest-playwright) for these requirements:

{requirements}

Existing test patterns to follow:
{existing_tests}

Generate comprehensive test cases including:
- Happy path scenarios
- Edge cases
- Error conditions
- Accessibility tests

Use proper Playwright for Python syntax with:
- Page Object Model patterns
- expect() assertions
- Descriptive test names
- Appropriate locators

Return the test cases as separate code blocks wrapped in ```python markers.""",
        required_vars=["requirements"],
        optional_vars=["existing_tests"],
    ),
}


def get_prompt(name: str, **kwargs) -> str:
    """Get a rendered prompt by name.

    Raises:
        KeyError: If prompt name not found
        ValueError: If required variables missing
    """
    if name not in PROMPTS:
        raise KeyError(f"Unknown prompt template: {name}")

    return PROMPTS[name].render(**kwargs)


def format_failure_rate(failure_rate: Optional[float]) -> str:
    """Render a 0-1 failure rate as a percentage, or Unknown."""
    if not failure_rate:
        return "Unknown"
    return f"{failure_rate * 100:.1f}%"


def build_failure_analysis_prompt(failures: list[TestResult]) -> str:
    failure_details = [
        {
            "testName": f.title,
            "error": f.error,
            "screenshot": f.screenshot,
            "duration": f.duration,
            "file": f.file,
        }
        for f in failures
    ]
    return get_prompt("analyze_failures", failures_json=json.dumps(failure_details, indent=2))


def build_improvement_prompt(file_path: str, file_content: str) -> str:
    return get_prompt("suggest_improvements", file_path=file_path, file_content=file_content)


def build_flaky_fix_prompt(test: FlakyTest) -> str:
    return get_prompt(
        "fix_flaky_test",
        test_name=test.name,
        test_file=test.file,
        failure_pattern=test.failure_pattern,
        code=test.code or "Code not provided",
        failure_rate=format_failure_rate(test.failure_rate),
    )


def build_page_object_prompt(url: str, base_url: str) -> str:
    return get_prompt("generate_page_object", url=url, base_url=base_url)


def build_test_generation_prompt(requirements: str, existing_tests: list[str]) -> str:
    """Build the requirements prompt; only the first three existing tests are used as patterns."""
    return get_prompt(
        "generate_tests",
        requirements=requirements,
        existing_tests="\n---\n".join(existing_tests[:3]),
    )


class PromptBuilder:
    """Builder for agent system prompts.

    Usage:
        prompt = (PromptBuilder()
            .add_context("You are a test automation reviewer")
            .add_list("RULES", ["Respond with valid JSON only"])
            .build())
    """

    def __init__(self):
        self._parts: list[str] = []

    def add_context(self, context: str) -> "PromptBuilder":
        self._parts.append(context)
        return self

    def add_list(self, title: str, items: list[str]) -> "PromptBuilder":
        bullets = "\n".join(f"- {item}" for item in items)
        self._parts.append(f"\n{title}:\n{bullets}")
        return self

    def build(self) -> str:
        return "\n".join(self._parts)
