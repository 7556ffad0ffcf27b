"""
Page controller: the fetch, sanitize, translate cycle and its state machine.

States move Idle -> Fetching -> Translating -> Ready, with Failed reachable
from Fetching and Translating. A new submission from any state starts a new
cycle at Fetching with all previous content cleared.

Every cycle is tagged with a monotonically increasing request id. A
transition is applied only while its id is still the latest one submitted,
so a slow cycle can never overwrite the state of a newer one.
"""

import logging
import threading
from typing import Callable

from ..config import Config, load_config
from ..ingestion.fetcher import ContentFetcher, FetchError
from ..ingestion.sanitizer import extract_title, sanitize_html
from ..models import DEFAULT_LANGUAGE, Language, PageState, PageStatus
from ..translation.client import TranslationClient, TranslationError
from ..understanding.llm_provider import LLMProvider, get_llm_provider

logger = logging.getLogger(__name__)

FETCHING_MESSAGE = "Fetching webpage content..."
TRANSLATING_MESSAGE = "Analyzing and translating page content..."
EMPTY_PAGE_MESSAGE = "The page has no displayable content."

StateListener = Callable[[PageState], None]


class PageController:
    """Owns the page state for one user session.

    Collaborators are injected so tests can substitute fakes.
    """

    def __init__(
        self,
        fetcher: ContentFetcher,
        translator: TranslationClient,
        sanitizer: Callable[[str], str] = sanitize_html,
    ):
        """Initialize the controller.

        Args:
            fetcher: Retrieves raw page HTML.
            translator: Translates sanitized HTML.
            sanitizer: Applied to fetched HTML and to the model's output.
        """
        self.fetcher = fetcher
        self.translator = translator
        self.sanitizer = sanitizer
        self._state = PageState()
        self._latest_request_id = 0
        self._lock = threading.RLock()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> PageState:
        with self._lock:
            return self._state

    @property
    def latest_request_id(self) -> int:
        with self._lock:
            return self._latest_request_id

    def is_current(self, request_id: int) -> bool:
        """Whether a request id still belongs to the latest submission."""
        with self._lock:
            return request_id == self._latest_request_id

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with every new state snapshot.

        Returns:
            A function that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def begin(self, url: str, language: Language = DEFAULT_LANGUAGE) -> int:
        """Start a new cycle: clear content and enter Fetching.

        Args:
            url: Page to translate.
            language: Target language.

        Returns:
            The new cycle's request id.

        Raises:
            ValueError: If the URL is empty. The state is left unchanged.
        """
        url = (url or "").strip()
        if not url:
            raise ValueError("URL must not be empty")

        with self._lock:
            self._latest_request_id += 1
            request_id = self._latest_request_id
            self._set_state(
                PageState(
                    status=PageStatus.FETCHING,
                    request_id=request_id,
                    url=url,
                    language=language,
                    message=FETCHING_MESSAGE,
                )
            )
        logger.info("Request %d: translating %s into %s", request_id, url, language.name)
        return request_id

    def execute(self, request_id: int, url: str, language: Language = DEFAULT_LANGUAGE) -> PageState:
        """Run the fetch and translate steps of a cycle started with ``begin``.

        Returns:
            The final state of this cycle. It is only the controller's
            current state if no newer cycle was submitted meanwhile.
        """
        url = url.strip()
        base = PageState(
            status=PageStatus.FETCHING,
            request_id=request_id,
            url=url,
            language=language,
        )

        try:
            raw_html = self.fetcher.fetch(url)
            clean_html = self.sanitizer(raw_html)
            if not clean_html.strip():
                raise FetchError(EMPTY_PAGE_MESSAGE)

            translating = base.model_copy(
                update={"status": PageStatus.TRANSLATING, "message": TRANSLATING_MESSAGE}
            )
            if not self._apply(translating):
                return translating

            outcome = self.translator.translate_outcome(clean_html, language.prompt_name)
            if not outcome.succeeded:
                raise TranslationError(outcome.error)
            # Model output is untrusted markup
            translated_html = self.sanitizer(outcome.translated_html)
            if not translated_html.strip():
                raise TranslationError("Translation failed: the model returned no content.")
        except (FetchError, TranslationError) as e:
            logger.error("Request %d failed: %s", request_id, e)
            failed = self._failed(base, str(e))
            self._apply(failed)
            return failed
        except Exception as e:
            logger.exception("Request %d crashed", request_id)
            self._apply(self._failed(base, str(e)))
            raise

        ready = base.model_copy(
            update={
                "status": PageStatus.READY,
                "original_html": clean_html,
                "translated_html": translated_html,
                "title": extract_title(raw_html),
                "truncated": outcome.truncated,
                "message": "",
            }
        )
        self._apply(ready)
        return ready

    def run(self, url: str, language: Language = DEFAULT_LANGUAGE) -> PageState:
        """Submit a URL and run the whole cycle synchronously."""
        request_id = self.begin(url, language)
        return self.execute(request_id, url, language)

    def reset(self) -> None:
        """Return to Idle, discarding any in-flight cycle."""
        with self._lock:
            self._latest_request_id += 1
            self._set_state(PageState(request_id=self._latest_request_id))

    def _failed(self, base: PageState, reason: str) -> PageState:
        return base.model_copy(
            update={"status": PageStatus.FAILED, "message": f"Error: {reason}"}
        )

    def _apply(self, new_state: PageState) -> bool:
        """Apply a cycle's transition if the cycle is still the latest."""
        with self._lock:
            if new_state.request_id != self._latest_request_id:
                logger.info(
                    "Discarding %s result of stale request %d (latest is %d)",
                    new_state.status.value,
                    new_state.request_id,
                    self._latest_request_id,
                )
                return False
            self._set_state(new_state)
            return True

    def _set_state(self, new_state: PageState) -> None:
        # Caller holds the lock; listeners see transitions in order.
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.exception("State listener failed")


def build_controller(config: Config | None = None, provider: LLMProvider | None = None) -> PageController:
    """Wire a controller from configuration.

    Args:
        config: Application configuration. Loads the default if not provided.
        provider: LLM provider to use instead of the configured one.
    """
    if config is None:
        config = load_config()
    if provider is None:
        provider = get_llm_provider(config)
    return PageController(
        fetcher=ContentFetcher(config.proxy),
        translator=TranslationClient.from_config(provider, config.translation),
    )
