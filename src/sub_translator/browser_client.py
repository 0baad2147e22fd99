"""Translation provider backed by a controlled browser session."""

from __future__ import annotations

import time
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence
from urllib.parse import quote

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from .config import TranslatorConfig

logger = logging.getLogger(__name__)

TRANSLATE_URL = "https://translate.google.com/?sl={sl}&tl={tl}&text={text}&op=translate"

# 翻译结果和性别提示的页面元素
RESULT_SELECTOR = "span[jsname='W297wb']"
GENDER_NOTE_SELECTOR = "div[jsname='yGhiMc']"

# 结果以 "..." 结尾表示仍在渲染
PENDING_SUFFIX = "..."
PENDING_REREADS = 3


def choose_candidate(candidates: Sequence[str], gender_variant: bool = False) -> str:
    """
    Pick one canonical rendering from the provider's candidates.

    When the page flags a gender-specific translation and shows exactly two
    versions, the second one is used. Otherwise all candidates are joined.
    """
    if gender_variant and len(candidates) == 2:
        return candidates[1].strip()
    return " ".join(c.strip() for c in candidates).strip()


class TranslationProvider(ABC):
    """
    A single translation session.

    Implementations may block for several seconds and may raise any error;
    callers treat every failure as transient. Use as a context manager so
    the session is closed on every exit path.
    """

    def open(self) -> None:
        """Acquire the underlying session."""

    def close(self) -> None:
        """Release the underlying session."""

    @abstractmethod
    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """Translate ``text`` and return the result."""

    def __enter__(self) -> "TranslationProvider":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def get_provider_name(self) -> str:
        """Return the name of this provider."""
        return self.__class__.__name__


class GoogleTranslateProvider(TranslationProvider):
    """Reads translations from the Google Translate web page via Selenium."""

    def __init__(
        self,
        driver_factory: Optional[Callable[[], WebDriver]] = None,
        page_timeout: float = 30.0,
        settle_delay: float = 2.0,
        result_selector: str = RESULT_SELECTOR,
        gender_note_selector: str = GENDER_NOTE_SELECTOR,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._driver_factory = driver_factory or create_chrome_driver
        self.page_timeout = page_timeout
        self.settle_delay = settle_delay
        self.result_selector = result_selector
        self.gender_note_selector = gender_note_selector
        self._sleep = sleep
        self._driver: Optional[WebDriver] = None

    @property
    def driver(self) -> WebDriver:
        if self._driver is None:
            raise RuntimeError("Browser session is not open")
        return self._driver

    def open(self) -> None:
        if self._driver is None:
            logger.info("Starting browser session...")
            self._driver = self._driver_factory()

    def close(self) -> None:
        if self._driver is None:
            return
        driver, self._driver = self._driver, None
        try:
            driver.quit()
            logger.info("Browser session closed")
        except WebDriverException as e:
            logger.warning(f"Failed to close browser cleanly: {e}")

    def _read_candidates(self) -> List[str]:
        elements = self.driver.find_elements(By.CSS_SELECTOR, self.result_selector)
        return [e.text for e in elements if e.text.strip()]

    def _has_gender_note(self) -> bool:
        return bool(self.driver.find_elements(By.CSS_SELECTOR, self.gender_note_selector))

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        url = TRANSLATE_URL.format(sl=source_lang, tl=target_lang, text=quote(text, safe=""))
        self.driver.get(url)

        WebDriverWait(self.driver, self.page_timeout).until(
            EC.presence_of_element_located((By.CSS_SELECTOR, self.result_selector))
        )
        self._sleep(self.settle_delay)

        candidates = self._read_candidates()
        for _ in range(PENDING_REREADS):
            if candidates and not candidates[-1].endswith(PENDING_SUFFIX):
                break
            self._sleep(self.settle_delay)
            candidates = self._read_candidates()

        if not candidates:
            raise TimeoutException(f"No translation rendered for: {text[:50]!r}")

        return choose_candidate(candidates, self._has_gender_note())


def create_chrome_driver(headless: bool = False) -> WebDriver:
    """Start a Chrome WebDriver session."""
    options = webdriver.ChromeOptions()
    if headless:
        options.add_argument("--headless=new")
    options.add_argument("--disable-gpu")
    options.add_argument("--lang=en-US")
    return webdriver.Chrome(options=options)


def create_provider(config: TranslatorConfig) -> GoogleTranslateProvider:
    """
    Create the browser-backed provider from configuration.

    The session is not started until the provider is opened.
    """
    return GoogleTranslateProvider(
        driver_factory=lambda: create_chrome_driver(config.headless),
        page_timeout=config.page_timeout,
        settle_delay=config.settle_delay,
    )
