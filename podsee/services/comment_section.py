"""
Comment section state: review filter, paging, fade transitions and the write flow

One instance backs one centre's review panel. Filter changes are debounced
through a single cancellable timer so that only the last selection made
within the fade window triggers a reload.
"""
import threading
from typing import Optional

from flask import current_app, has_app_context

from podsee.services.centre_catalog import (
    ALL_REVIEWS, Centre, sort_offerings, group_offerings, offering_key
)
from podsee.services.sanitizer import sanitize_text, validate_username

USERNAME_SESSION_KEY = 'podsee_username'

PAGE_SIZE = 20
FADE_SECONDS = 0.15


class WriteState:
    IDLE = 'idle'
    USERNAME_PROMPT = 'username_prompt'
    CLASS_SELECTION = 'class_selection'
    COMPOSING = 'composing'
    SUBMITTING = 'submitting'
    ERROR = 'error'


class CommentSubmitError(Exception):
    """Raised when a review cannot be submitted; the message is user-facing"""


class CommentSectionView:
    """Review panel for one centre"""

    def __init__(self, centre: Centre, comment_service, username_store=None,
                 level: Optional[str] = None, subject: Optional[str] = None,
                 timer_factory=threading.Timer, page_size: int = PAGE_SIZE):
        self.centre = centre
        self.service = comment_service
        self.username_store = username_store if username_store is not None else {}
        self.timer_factory = timer_factory
        self.page_size = page_size

        self.offerings = sort_offerings(centre.offerings)
        self.grouped_offerings = group_offerings(self.offerings)
        self._offerings_by_key = {o.key: o for o in self.offerings}

        self.view_filter = self._initial_filter(level, subject)

        self.comments = []
        self.loading = False
        self.loading_more = False
        self.error = ''
        self.has_more = False
        self.offset = 0

        # Two-phase fade
        self.content_opacity = 1
        self._fade_timer = None
        self._pending_filter = None
        self._switch_generation = 0
        self._lock = threading.RLock()

        # Scroll preservation
        self.scroll_top = 0
        self.saved_scroll_top = 0
        self.user_scrolled_during_load = False

        self.write_state = WriteState.IDLE
        self.write_class = ''
        self.submit_error = ''

    def _initial_filter(self, level, subject):
        if level and subject:
            key = offering_key(level, subject)
            if key in self._offerings_by_key:
                return key
        return ALL_REVIEWS

    # ---- Derived state ----

    @property
    def centre_id(self):
        return self.centre.centre_id

    @property
    def username(self) -> str:
        return self.username_store.get(USERNAME_SESSION_KEY) or ''

    @property
    def single_offering(self):
        return self.offerings[0] if len(self.offerings) == 1 else None

    @property
    def active_filter(self):
        if self.view_filter == ALL_REVIEWS:
            return None
        return self._offerings_by_key.get(self.view_filter)

    @property
    def view_filter_label(self) -> str:
        offering = self.active_filter
        return offering.label if offering else 'All Reviews'

    @property
    def selected_write_offering(self):
        return self._offerings_by_key.get(self.write_class)

    @property
    def write_placeholder(self) -> str:
        offering = self.selected_write_offering or self.single_offering
        if offering:
            return f"Share your experience with {offering.label} at {self.centre.name}..."
        return 'Share your experience...'

    # ---- Loading ----

    def _filter_args(self):
        offering = self.active_filter
        if offering is None:
            return None, None
        return offering.level, offering.subject

    def load(self):
        """Load the first page for the active filter"""
        self.loading = True
        self.error = ''

        level, subject = self._filter_args()
        data, error = self.service.fetch_comments(self.centre_id, self.page_size, 0, level, subject)

        if error:
            self.error = error
        else:
            self.comments = list(data)
            self.has_more = len(data) == self.page_size
            self.offset = self.page_size

        self.loading = False

        if not self.user_scrolled_during_load:
            self.scroll_top = self.saved_scroll_top
        self.user_scrolled_during_load = False
        return self.comments

    def load_more(self):
        """Append the next page"""
        self.loading_more = True

        level, subject = self._filter_args()
        data, error = self.service.fetch_comments(self.centre_id, self.page_size, self.offset, level, subject)

        if error:
            self.error = error
        else:
            self.comments.extend(data)
            self.has_more = len(data) == self.page_size
            self.offset += self.page_size

        self.loading_more = False
        return self.comments

    def on_scroll(self, position):
        self.scroll_top = position
        if self.loading:
            self.user_scrolled_during_load = True

    # ---- Filter switching ----

    def select_view_filter(self, value: str) -> bool:
        """
        Switch the review filter after a fade-out

        A newer selection within the fade replaces the pending one, so
        only the last selection reloads. Selecting the filter already
        shown while a switch is pending cancels that switch instead, and
        nothing reloads.

        Returns:
            True if a switch was scheduled
        """
        if value != ALL_REVIEWS and value not in self._offerings_by_key:
            raise ValueError(f'Unknown review filter: {value}')

        with self._lock:
            if value == self.view_filter:
                # Back to the filter already shown: drop any pending switch
                if self._fade_timer is not None:
                    self._fade_timer.cancel()
                    self._fade_timer = None
                    self._pending_filter = None
                    self.content_opacity = 1
                return False

            self.saved_scroll_top = self.scroll_top
            self.user_scrolled_during_load = False

            self.content_opacity = 0
            if self._fade_timer is not None:
                self._fade_timer.cancel()

            app = current_app._get_current_object() if has_app_context() else None
            self._pending_filter = value
            self._switch_generation += 1
            self._fade_timer = self.timer_factory(
                FADE_SECONDS, self._finish_filter_switch, args=(value, app, self._switch_generation)
            )
            self._fade_timer.daemon = True
            self._fade_timer.start()
            return True

    def _finish_filter_switch(self, value, app=None, generation=None):
        with self._lock:
            # Superseded or cancelled switches do nothing
            if self._pending_filter != value or generation != self._switch_generation:
                return
            self._fade_timer = None
            self._pending_filter = None
            self.view_filter = value
            self.content_opacity = 1

        if app is not None:
            with app.app_context():
                self.load()
        else:
            self.load()

    def close(self):
        """Cancel any pending filter switch"""
        with self._lock:
            if self._fade_timer is not None:
                self._fade_timer.cancel()
            self._fade_timer = None
            self._pending_filter = None

    # ---- Write flow ----

    def start_write(self) -> str:
        if not self.username:
            self.write_state = WriteState.USERNAME_PROMPT
        elif self.single_offering:
            self.write_class = self.single_offering.key
            self.write_state = WriteState.COMPOSING
        elif not self.offerings:
            # No classes listed: the review is a general one
            self.write_state = WriteState.COMPOSING
        else:
            self.write_state = WriteState.CLASS_SELECTION
        return self.write_state

    def submit_username(self, username: str) -> str:
        name = sanitize_text(username)
        errors = validate_username(name)
        if errors:
            raise CommentSubmitError('. '.join(errors))

        self.username_store[USERNAME_SESSION_KEY] = name
        if self.write_state == WriteState.USERNAME_PROMPT:
            return self.start_write()
        return self.write_state

    def select_write_class(self, key: str) -> str:
        if key not in self._offerings_by_key:
            raise ValueError(f'Unknown class: {key}')
        self.write_class = key
        self.write_state = WriteState.COMPOSING
        return self.write_state

    def cancel_write(self):
        self.write_state = WriteState.IDLE
        self.write_class = ''
        self.submit_error = ''

    def submit(self, text: str) -> dict:
        """
        Submit a new top-level review for the selected class

        Returns:
            The stored comment with a zero reply count

        Raises:
            CommentSubmitError: username missing, class missing, or the
                comment service rejected the review
        """
        if not self.username:
            self.write_state = WriteState.USERNAME_PROMPT
            raise CommentSubmitError('Username required')

        class_info = self.single_offering or self.selected_write_offering
        if class_info is None and self.offerings:
            raise CommentSubmitError('Please select a class first')

        level = class_info.level if class_info else None
        subject = class_info.subject if class_info else None

        self.write_state = WriteState.SUBMITTING
        data, error = self.service.create_comment(self.centre_id, self.username, text, None, level, subject)

        if error:
            self.write_state = WriteState.ERROR
            self.submit_error = error
            raise CommentSubmitError(error)

        comment = {**data, 'reply_count': 0}
        self.comments.append(comment)
        self.write_state = WriteState.IDLE
        self.write_class = ''
        self.submit_error = ''
        return comment

    def to_dict(self) -> dict:
        return {
            'viewFilter': self.view_filter,
            'viewFilterLabel': self.view_filter_label,
            'offerings': self.grouped_offerings,
            'comments': self.comments,
            'hasMore': self.has_more,
            'offset': self.offset,
            'error': self.error,
            'writeState': self.write_state,
            'writePlaceholder': self.write_placeholder,
        }
