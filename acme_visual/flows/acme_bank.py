"""Browser interactions for the ACME bank demo site."""

from __future__ import annotations

import logging

from playwright.sync_api import Page

from acme_visual.models.config import LoginConfig

logger = logging.getLogger(__name__)


class AcmeBankLogin:
    """Login page of the demo bank. Uses only goto, fill and click."""

    def __init__(self, page: Page, login: LoginConfig):
        self.page = page
        self.login = login

    def load(self) -> None:
        logger.debug("Loading %s", self.login.url)
        self.page.goto(self.login.url)

    def log_in(self, username: str | None = None, password: str | None = None) -> None:
        username = self.login.username if username is None else username
        password = self.login.password if password is None else password
        logger.debug("Logging in as %s", username)
        self.page.locator(self.login.username_selector).fill(username)
        self.page.locator(self.login.password_selector).fill(password)
        self.page.locator(self.login.submit_selector).click()
