"""
Lesson Scraper Module

This module provides the LessonScraper class, which walks the lessons of a
course manifest in an authenticated browser session, reads the media id of
each lesson's embedded player and writes the collected records to
jsons/<course name>.json.
"""
import os
import time
from selenium.webdriver.common.by import By

from browser_manager import BrowserManager
from media_extractor import MediaExtractor
from records import DEFAULT_OUTPUT_DIR, TEXT, ExtractionRecord, OutputDocument, write_output_document
from url_utils import (
    LESSON_URL_TEMPLATE,
    SESSION_COOKIE_NAME,
    TEXT_URL_TEMPLATE,
    build_lesson_url,
    is_text_lesson,
    sanitize_filename
)

# Import the logger module
import logger
log = logger

COMPLETE_BUTTON_SELECTOR = '[data-qa="complete-continue__btn"]'
TEXT_CONTENT_SELECTOR = ".course-player__content-inner"


class ScrapeError(Exception):
    """Base class for failures while scraping a single lesson."""

    def __init__(self, message, url=None):
        super().__init__(message)
        self.url = url


class NoIframeError(ScrapeError):
    """The lesson page has no iframe, so there is no player to read."""

    def __init__(self, url):
        super().__init__(f"No iframe found in {url}", url)


class NoMediaScriptError(ScrapeError):
    """The player frame never loaded a script from the media host."""

    def __init__(self, url, timeout):
        super().__init__(f"No media script found in {url} within {timeout} seconds", url)


class TextContentError(ScrapeError):
    """A text lesson page has no content container."""

    def __init__(self, url):
        super().__init__(f"No text content found in {url}", url)


class ScrapeConfig:
    """
    Settings for one scraping run.

    Args:
        session_cookie (str): Value of the remember_user_token cookie
        url_template (str): Lesson URL template with two '%s' placeholders
        settle_delay (float): Pause after navigation for client-side rendering (seconds)
        script_timeout (float): Maximum wait for any script element (seconds)
        media_timeout (float): Maximum wait for the player's media script (seconds)
        lesson_delay (float): Pause between lessons (seconds)
        output_dir (str): Directory for the output JSON
        include_text (bool): Save text lessons as HTML instead of scraping them for media
        text_dir (str, optional): Directory for saved text lessons, defaults to the course name
        complete_lessons (bool): Click "complete and continue" after each lesson
    """

    def __init__(self, session_cookie, url_template=LESSON_URL_TEMPLATE, settle_delay=5,
                 script_timeout=30, media_timeout=15, lesson_delay=0,
                 output_dir=DEFAULT_OUTPUT_DIR, include_text=False, text_dir=None,
                 complete_lessons=True):
        self.session_cookie = session_cookie
        self.url_template = url_template
        self.settle_delay = settle_delay
        self.script_timeout = script_timeout
        self.media_timeout = media_timeout
        self.lesson_delay = lesson_delay
        self.output_dir = output_dir
        self.include_text = include_text
        self.text_dir = text_dir
        self.complete_lessons = complete_lessons


class LessonScraper:
    """
    Scrapes media ids from every lesson of a course.
    Lessons are processed one at a time in a single browser page.
    """

    def __init__(self, config, headless=True, browser_type="chrome"):
        """
        Initialize the scraper and launch the browser.

        Args:
            config (ScrapeConfig): Settings for the run
            headless (bool): Whether to run the browser in headless mode
            browser_type (str): Browser to use ("chrome" or "firefox")
        """
        self.config = config
        self.browser_manager = BrowserManager(headless=headless, browser_type=browser_type)
        self.driver = self.browser_manager.initialize()

        if not self.driver:
            raise ScrapeError(f"Failed to initialize {browser_type} browser")

        self.extractor = MediaExtractor(self.driver)
        self.authenticated = False

    def authenticate(self):
        """Attach the session cookie to the browser."""
        log.info("Setting session cookie")
        self.browser_manager.add_session_cookie(SESSION_COOKIE_NAME, self.config.session_cookie)
        self.authenticated = True

    def run(self, manifest):
        """
        Scrape every lesson of a course and write the output document.

        A failure on one lesson is logged and the next lesson is attempted.

        Args:
            manifest (CourseManifest): The course to scrape

        Returns:
            OutputDocument: The records of all successfully scraped lessons
        """
        if not self.authenticated:
            self.authenticate()

        records = []
        total = len(manifest)
        log.info(f"Scraping {total} lessons of '{manifest.course_name}'")

        for index, lesson in enumerate(manifest.lessons):
            if index > 0 and self.config.lesson_delay:
                time.sleep(self.config.lesson_delay)

            text = self.config.include_text and is_text_lesson(lesson)
            template = TEXT_URL_TEMPLATE if text else self.config.url_template
            url = build_lesson_url(manifest.course_slug, lesson.slug, template)
            log.info(f"Processing {lesson.name} ({'Text' if text else 'Video'}) ({index + 1}/{total})")

            record = None
            try:
                if text:
                    record = self.save_text_lesson(index, lesson, url, manifest.course_name)
                else:
                    record = self.scrape_lesson(index, lesson, url)
            except NoIframeError as e:
                log.error(str(e))
                continue
            except NoMediaScriptError as e:
                # Nothing to record, but the lesson can still be completed
                log.warning(str(e))
            except Exception as e:
                log.error(f"Error processing {url}: {e}")
                continue

            if record is not None:
                records.append(record)

            self.complete_lesson(url)

        document = OutputDocument(manifest.course_name, records)
        path = write_output_document(document, self.config.output_dir)
        log.info(f"Extracted {document.item_count} of {total} lessons, saved to {path}")
        return document

    def scrape_lesson(self, index, lesson, url):
        """
        Read the media id of one lesson.

        Args:
            index (int): Position of the lesson in the manifest
            lesson (LessonDescriptor): The lesson
            url (str): The lesson URL

        Returns:
            ExtractionRecord: Record carrying the first media id found

        Raises:
            NoIframeError: If the page has no iframe
            NoMediaScriptError: If the frame has no media script
            ScrapeError: If the page never loads any script element
        """
        self.browser_manager.navigate(url)

        # Fixed pause for client-side rendering before looking at the DOM
        time.sleep(self.config.settle_delay)

        if self.browser_manager.wait_for_element(By.TAG_NAME, "script", timeout=self.config.script_timeout) is None:
            raise ScrapeError(f"No script elements loaded on {url}", url)

        iframe = self.browser_manager.find_first(By.TAG_NAME, "iframe")
        if iframe is None:
            raise NoIframeError(url)

        media_ids = self.extractor.extract_media_ids_from_frame(iframe, timeout=self.config.media_timeout)
        if not media_ids:
            raise NoMediaScriptError(url, self.config.media_timeout)

        log.info(f"Found media ids {media_ids} in {url}")
        return ExtractionRecord(index, lesson.name, media_id=media_ids[0])

    def save_text_lesson(self, index, lesson, url, course_name):
        """
        Save the HTML of a text lesson.

        Args:
            index (int): Position of the lesson in the manifest
            lesson (LessonDescriptor): The lesson
            url (str): The text lesson URL
            course_name (str): Course name, used for the default text directory

        Returns:
            ExtractionRecord: A text record marked as downloaded
        """
        self.browser_manager.navigate(url)
        time.sleep(self.config.settle_delay)

        if self.browser_manager.wait_for_element(By.CSS_SELECTOR, TEXT_CONTENT_SELECTOR,
                                                 timeout=self.config.script_timeout) is None:
            raise TextContentError(url)

        html = self.extractor.get_content_html(TEXT_CONTENT_SELECTOR)
        if html is None:
            raise TextContentError(url)

        text_dir = self.config.text_dir or sanitize_filename(course_name)
        os.makedirs(text_dir, exist_ok=True)
        path = os.path.join(text_dir, f"{index}_{sanitize_filename(lesson.name)}.html")
        with open(path, "w", encoding="utf-8") as f:
            f.write(html)

        log.info(f"Saved HTML content to {path}")
        return ExtractionRecord(index, lesson.name, downloaded=True, kind=TEXT)

    def complete_lesson(self, url):
        """Click "complete and continue" so the platform marks the lesson done."""
        if not self.config.complete_lessons:
            return

        try:
            if self.browser_manager.click_element(By.CSS_SELECTOR, COMPLETE_BUTTON_SELECTOR):
                log.debug(f"Marked lesson complete: {url}")
            else:
                log.warning(f"Complete button not found on {url}")
        except Exception as e:
            log.error(f"Error processing {url}: {e}")

    def close(self):
        """Close the browser."""
        self.browser_manager.close()
