"""
Media Extractor Module

Reads the embedded player inside a lesson's iframe. The player injects a
script whose source URL carries the media identifier; this module lists the
script sources inside the frame and polls until the player script shows up.
"""
from selenium.webdriver.support.ui import WebDriverWait
from selenium.common.exceptions import TimeoutException

from url_utils import extract_media_ids

import logger
log = logger


class MediaExtractor:
    """
    Extracts media identifiers from the player frame of a lesson page.
    """

    def __init__(self, driver, poll_frequency=0.5):
        self.driver = driver
        self.poll_frequency = poll_frequency

    @staticmethod
    def get_script_sources_script():
        """
        Returns the JavaScript that lists the src of every script element.

        Inline scripts have an empty src and are left out.

        Returns:
            str: JavaScript code as a string
        """
        return """
        return Array.from(document.querySelectorAll('script'))
            .map(s => s.src)
            .filter(src => !!src);
        """

    @staticmethod
    def get_content_html_script():
        """Returns the JavaScript that reads the inner HTML of a selector."""
        return """
        const element = document.querySelector(arguments[0]);
        return element ? element.innerHTML : null;
        """

    def collect_script_sources(self):
        """
        List script sources in the current browsing context.

        Returns:
            list: Script src values in document order
        """
        sources = self.driver.execute_script(self.get_script_sources_script())
        return list(sources or [])

    def _find_media_ids(self, driver):
        # WebDriverWait keeps polling while this returns a falsy value
        media_ids = extract_media_ids(self.collect_script_sources())
        return media_ids or False

    def extract_media_ids_from_frame(self, iframe, timeout=15):
        """
        Switch into a player frame and wait for its media script.

        Always switches back to the top-level document, even on failure.

        Args:
            iframe (WebElement): The frame element holding the player
            timeout (float): Maximum time to wait for a media script (seconds)

        Returns:
            list: Media identifiers found in the frame, in document order.
                  Empty if no media script appeared within the timeout.
        """
        self.driver.switch_to.frame(iframe)
        try:
            wait = WebDriverWait(self.driver, timeout, poll_frequency=self.poll_frequency)
            media_ids = wait.until(self._find_media_ids)
        except TimeoutException:
            log.debug(f"No media script appeared within {timeout} seconds")
            return []
        finally:
            self.driver.switch_to.default_content()

        log.debug(f"Media ids in frame: {media_ids}")
        return media_ids

    def get_content_html(self, selector):
        """
        Read the inner HTML of the first element matching a CSS selector.

        Returns:
            str: The HTML, or None if no element matches
        """
        return self.driver.execute_script(self.get_content_html_script(), selector)
