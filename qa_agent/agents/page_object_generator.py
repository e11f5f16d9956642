"""Page Object Generator - Playwright page objects from application URLs.

Each URL yields exactly one PageObjectModel. When the API call fails or the
reply holds no usable code, a stub page object is generated instead. Every
model is then written to the configured pages directory.
"""

from pathlib import Path

from ..core.code_blocks import extract_class_name, extract_code_blocks, extract_method_names
from ..errors import ResponseParseError
from ..models import PageObjectModel
from ..utils.prompts import build_page_object_prompt
from .base import BaseAgent

DEFAULT_CLASS_NAME = "GeneratedPageObject"
FALLBACK_CLASS_NAME = "FallbackPageObject"
FALLBACK_METHODS = ["navigate_to_page", "verify_page_loaded"]

FALLBACK_TEMPLATE = '''from playwright.sync_api import Page

from pages.base_page import BasePage


class {class_name}(BasePage):
    r"""Fallback page object for {url}

    Generated due to error: {error}
    """

    URL = {url!r}

    def __init__(self, page: Page):
        super().__init__(page)

    def navigate_to_page(self) -> None:
        self.navigate_to(self.URL)

    def verify_page_loaded(self) -> None:
        self.wait_for_load_state()
'''


def file_name_for(class_name: str) -> str:
    return f"{class_name.lower()}.py"


def parse_page_object(text: str, url: str) -> PageObjectModel:
    """Build a page object model from a reply.

    Raises:
        ResponseParseError: If the reply holds no code
    """
    blocks = extract_code_blocks(text, "python")
    code = next((b for b in blocks if extract_class_name(b)), blocks[0])
    if not code.strip():
        raise ResponseParseError("Page object reply is empty")

    class_name = extract_class_name(code, DEFAULT_CLASS_NAME)
    return PageObjectModel(
        file_name=file_name_for(class_name),
        class_name=class_name,
        url=url,
        code=code,
        methods=extract_method_names(code),
    )


def fallback_page_object(url: str, error: str) -> PageObjectModel:
    """Stub page object that navigates to ``url`` and waits for load."""
    code = FALLBACK_TEMPLATE.format(
        class_name=FALLBACK_CLASS_NAME,
        url=url,
        error=error.replace('"""', "'''"),
    )
    return PageObjectModel(
        file_name=file_name_for(FALLBACK_CLASS_NAME),
        class_name=FALLBACK_CLASS_NAME,
        url=url,
        code=code.strip() + "\n",
        methods=list(FALLBACK_METHODS),
    )


class PageObjectGenerator(BaseAgent):
    """Agent that writes Playwright for Python page objects."""

    MAX_TOKENS = 3000

    def _get_system_prompt(self) -> str:
        return """You are an expert Playwright for Python engineer who writes page objects for an HR web application.

Page objects must:
- Extend BasePage and keep locators as attributes set in __init__
- Prefer role, label and placeholder locators over CSS
- Expose one method per user interaction
- Never contain assertions about business rules"""

    @property
    def output_dir(self) -> Path:
        return Path(self.settings.page_objects_dir)

    async def generate_page_objects(self, urls: list[str]) -> list[PageObjectModel]:
        """Generate one page object per URL, in input order, and persist them."""
        page_objects: list[PageObjectModel] = []
        base_url = self.settings.environment.base_url

        for url in urls:
            try:
                text = await self._complete(build_page_object_prompt(url, base_url), self.MAX_TOKENS)
                page_object = parse_page_object(text, url)
            except Exception as e:
                self.log.error("Error generating page object", url=url, error=str(e))
                page_object = fallback_page_object(url, str(e))

            page_objects.append(page_object)

        self.write_page_objects(page_objects)
        return page_objects

    def write_page_objects(self, page_objects: list[PageObjectModel]) -> None:
        """Write each model's code under the output directory; errors are logged.

        Models sharing a file name overwrite each other in order, so the last
        one wins and a warning names the URL that was replaced.
        """
        written: dict[str, str] = {}
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            for page_object in page_objects:
                file_path = self.output_dir / page_object.file_name
                if page_object.file_name in written:
                    self.log.warning(
                        "Page object file overwritten",
                        path=str(file_path),
                        replaced_url=written[page_object.file_name],
                        url=page_object.url,
                    )
                written[page_object.file_name] = page_object.url
                file_path.write_text(page_object.code, encoding="utf-8")
                self.log.info("Created page object", path=str(file_path))
        except OSError as e:
            self.log.error("Error creating page object files", error=str(e))
