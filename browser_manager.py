"""
Browser Management Module for the lesson scraper

Starts the Chrome or Firefox WebDriver that acts as the logged-in student,
injects the session cookie and wraps the few page operations the scraper
needs: navigation, waits, first-match lookup and clicks.
"""
import time
import platform
from selenium import webdriver
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.firefox.service import Service as FirefoxService
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC
from selenium.common.exceptions import TimeoutException
from webdriver_manager.chrome import ChromeDriverManager
from webdriver_manager.firefox import GeckoDriverManager

from url_utils import PLATFORM_BASE, PLATFORM_HOST

import logger
log = logger

# Where package managers usually put the driver binaries
DRIVER_PATHS = {
    "chrome": {
        "Darwin": "/usr/local/bin/chromedriver",
        "Linux": "/usr/bin/chromedriver",
        "Windows": "C:\\Program Files\\Google\\Chrome\\Application\\chromedriver.exe",
    },
    "firefox": {
        "Darwin": "/usr/local/bin/geckodriver",
        "Linux": "/usr/bin/geckodriver",
        "Windows": "C:\\Program Files\\Mozilla Firefox\\geckodriver.exe",
    },
}


class BrowserManager:
    """
    Owns the WebDriver for a scraping run.
    """

    def __init__(self, headless=True, browser_type="chrome", base_url=PLATFORM_BASE):
        """
        Args:
            headless (bool): Whether to run browser in headless mode
            browser_type (str): The browser to use ("chrome" or "firefox")
            base_url (str): Platform page loaded before cookies are set
        """
        self.driver = None
        self.headless = headless
        self.browser_type = "firefox" if browser_type.lower() == "firefox" else "chrome"
        self.base_url = base_url

    def initialize(self):
        """
        Start the browser.

        Returns:
            webdriver.Chrome/Firefox: The WebDriver, or None if no driver could be started
        """
        if self.browser_type == "firefox":
            options = self._configure_firefox_options()
        else:
            options = self._configure_chrome_options()

        self.driver = self._start_driver(options)
        if self.driver:
            self.driver.set_window_size(1366, 768)
        return self.driver

    def _configure_chrome_options(self):
        chrome_options = webdriver.ChromeOptions()

        # driver.get returns once DOMContentLoaded fires
        chrome_options.page_load_strategy = "eager"

        for argument in ("--disable-notifications", "--disable-extensions", "--no-sandbox",
                         "--disable-dev-shm-usage", "--mute-audio"):
            chrome_options.add_argument(argument)

        if self.headless:
            chrome_options.add_argument("--headless=new")

        chrome_options.add_argument("--user-agent=Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/134.0.0.0 Safari/537.36")
        return chrome_options

    def _configure_firefox_options(self):
        firefox_options = webdriver.FirefoxOptions()
        firefox_options.page_load_strategy = "eager"

        firefox_options.set_preference("media.volume_scale", "0.0")
        firefox_options.set_preference("media.autoplay.default", 5)  # Block autoplay

        if self.headless:
            firefox_options.add_argument("--headless")
        return firefox_options

    def _driver_sources(self):
        """
        Ways of locating the driver binary, tried in order.

        Returns:
            list: (description, service factory) pairs; a factory returning None
                  lets Selenium Manager find the driver itself
        """
        if self.browser_type == "firefox":
            service_class, driver_manager = FirefoxService, GeckoDriverManager
        else:
            service_class, driver_manager = ChromeService, ChromeDriverManager

        os_path = DRIVER_PATHS[self.browser_type].get(platform.system())

        return [
            ("Selenium Manager", lambda: None),
            ("webdriver-manager", lambda: service_class(executable_path=driver_manager().install())),
            (f"driver at {os_path}", lambda: service_class(executable_path=os_path)),
        ]

    def _start_driver(self, options):
        """
        Start the WebDriver from the first driver source that works.

        Returns:
            WebDriver: The started driver, or None if every source failed
        """
        driver_class = webdriver.Firefox if self.browser_type == "firefox" else webdriver.Chrome

        for source, make_service in self._driver_sources():
            try:
                log.debug(f"Starting {self.browser_type} with {source}")
                service = make_service()
                if service is None:
                    driver = driver_class(options=options)
                else:
                    driver = driver_class(service=service, options=options)
                log.info(f"Started {self.browser_type} with {source}")
                return driver
            except Exception as e:
                log.warning(f"Could not start {self.browser_type} with {source}: {e}")

        log.error(f"No {self.browser_type} driver could be started")
        return None

    def add_session_cookie(self, name, value, domain=PLATFORM_HOST):
        """
        Add an authentication cookie for the platform.

        WebDriver only accepts cookies for the current document's domain, so the
        platform base URL is loaded first.

        Args:
            name (str): Cookie name
            value (str): Cookie value
            domain (str): Cookie domain
        """
        log.debug(f"Loading {self.base_url} before setting cookie {name}")
        self.driver.get(self.base_url)
        time.sleep(1)

        self.driver.add_cookie({
            'name': name,
            'value': value,
            'domain': domain,
            'path': '/',
            'secure': True,
            'httpOnly': True,
        })
        log.debug(f"Added cookie: {name}")

    def navigate(self, url):
        """Load a URL; returns after DOMContentLoaded with the eager load strategy."""
        log.debug(f"Navigating to {url}")
        self.driver.get(url)

    def wait_for_element(self, by, value, timeout=10, clickable=False):
        """
        Wait for an element to be present, or clickable.

        Args:
            by (selenium.webdriver.common.by.By): The method to locate the element
            value (str): The locator value
            timeout (float): Maximum time to wait (seconds)
            clickable (bool): Wait until the element can be clicked

        Returns:
            WebElement: The element if found, None otherwise
        """
        condition = EC.element_to_be_clickable if clickable else EC.presence_of_element_located
        try:
            return WebDriverWait(self.driver, timeout).until(condition((by, value)))
        except TimeoutException:
            log.warning(f"Timeout waiting for element: {value}")
            return None

    def find_first(self, by, value):
        """Return the first matching element on the current document, or None."""
        elements = self.driver.find_elements(by, value)
        return elements[0] if elements else None

    def click_element(self, by, value, timeout=10):
        """
        Click an element once it becomes clickable.

        Returns:
            bool: True if the element was clicked, False if it never appeared
        """
        element = self.wait_for_element(by, value, timeout=timeout, clickable=True)
        if element is None:
            return False
        element.click()
        return True

    def close(self):
        """Close the browser."""
        if self.driver:
            try:
                self.driver.quit()
                log.debug("Browser closed successfully")
            except Exception as e:
                log.warning(f"Error closing browser: {e}")
