import time
from contextlib import contextmanager
from typing import Iterator, Optional

from selenium import webdriver
from selenium.common.exceptions import (
    JavascriptException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service

from app.platform.config import settings
from app.platform.exceptions import RenderError
from app.platform.logger import get_logger

logger = get_logger(__name__)

RESOURCE_COUNT_SCRIPT = "return window.performance.getEntriesByType('resource').length;"


class BrowserRenderer:
    """
    Full render through headless Chrome.

    Blocking: callers on the event loop should run ``render`` in a worker
    thread.
    """

    def __init__(
        self,
        idle_window: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ):
        self.idle_window = settings.NETWORK_IDLE_WINDOW if idle_window is None else idle_window
        self.poll_interval = (
            settings.NETWORK_IDLE_POLL_INTERVAL if poll_interval is None else poll_interval
        )

    @staticmethod
    def build_driver(user_agent: str) -> webdriver.Chrome:
        chrome_options = Options()
        chrome_options.add_argument("--headless=new")
        chrome_options.add_argument("--disable-gpu")
        chrome_options.add_argument("--no-sandbox")
        chrome_options.add_argument("--disable-dev-shm-usage")
        chrome_options.add_argument(f"--user-agent={user_agent}")

        if settings.CHROME_BINARY_PATH:
            chrome_options.binary_location = settings.CHROME_BINARY_PATH

        if settings.CHROMEDRIVER_PATH:
            driver_service = Service(executable_path=settings.CHROMEDRIVER_PATH)
            return webdriver.Chrome(service=driver_service, options=chrome_options)

        return webdriver.Chrome(options=chrome_options)

    @staticmethod
    @contextmanager
    def chrome_driver(user_agent: str) -> Iterator[webdriver.Chrome]:
        """Launch Chrome and guarantee ``quit()`` on every exit path."""
        driver = BrowserRenderer.build_driver(user_agent)
        try:
            yield driver
        finally:
            try:
                driver.quit()
            except WebDriverException as e:
                logger.warning(f"Failed to quit Chrome driver cleanly: {e}")

    def wait_for_network_idle(self, driver: webdriver.Chrome, deadline: float) -> bool:
        """
        Poll the resource-timing buffer until no new entries appear for
        ``idle_window`` seconds. Returns False if ``deadline`` passes first.
        """
        try:
            last_count = driver.execute_script(RESOURCE_COUNT_SCRIPT)
        except JavascriptException:
            return True
        stable_since = time.monotonic()

        while True:
            now = time.monotonic()
            if now - stable_since >= self.idle_window:
                return True
            if now >= deadline:
                return False

            time.sleep(self.poll_interval)
            try:
                count = driver.execute_script(RESOURCE_COUNT_SCRIPT)
            except JavascriptException:
                return True
            if count != last_count:
                last_count = count
                stable_since = time.monotonic()

    def render(
        self,
        url: str,
        user_agent: Optional[str] = None,
        navigation_timeout: Optional[float] = None,
    ) -> str:
        """
        Navigate to ``url`` and return the rendered DOM as HTML.

        Raises:
            RenderError: browser launch, navigation or capture failed.
        """
        user_agent = user_agent or settings.USER_AGENT
        navigation_timeout = (
            settings.RENDER_NAVIGATION_TIMEOUT if navigation_timeout is None else navigation_timeout
        )

        try:
            with BrowserRenderer.chrome_driver(user_agent) as driver:
                driver.set_page_load_timeout(navigation_timeout)
                deadline = time.monotonic() + navigation_timeout

                driver.get(url)
                if not self.wait_for_network_idle(driver, deadline):
                    logger.info(f"Network did not go idle for {url}; capturing DOM at timeout")

                return driver.page_source
        except TimeoutException as e:
            raise RenderError(
                f"Navigation to {url} timed out after {navigation_timeout}s"
            ) from e
        except WebDriverException as e:
            raise RenderError(f"Browser rendering failed for {url}: {e.msg or e}") from e
