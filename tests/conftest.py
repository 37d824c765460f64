import functools
import http.server
import socketserver
import threading
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest
import pytest_asyncio
from playwright.async_api import Error as PwError

from pagekit.core.logging import configure_logging
from pagekit.core.session import Session
from pagekit.core.settings import settings
from pagekit.io.playwright_driver import PlaywrightDriver

from fakes import FakeDriver, FakePage

FIXTURES = Path(__file__).resolve().parent / "fixtures"

ROUTES = {
    "/": "index.html",
    "/create-image": "create-image.html",
    "/contact": "contact.html",
}


def pytest_configure(config: pytest.Config) -> None:
    configure_logging(settings)


# ------------------------------------------------------------------------------
# unit tests: in-memory driver
# ------------------------------------------------------------------------------


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def page() -> FakePage:
    return FakePage(url="https://example.com/")


@pytest.fixture
def session(driver: FakeDriver, page: FakePage) -> Session:
    return Session(
        driver=driver,
        ctx=page,
        base_url="https://example.com/",
        timeout_ms=300,
        poll_interval_ms=10,
    )


# ------------------------------------------------------------------------------
# e2e: local fixture site + Playwright
# ------------------------------------------------------------------------------


class _SiteHandler(http.server.SimpleHTTPRequestHandler):
    def do_GET(self) -> None:  # noqa: N802
        path = self.path.split("?", 1)[0]
        if path in ROUTES:
            self.path = "/" + ROUTES[path]
        super().do_GET()

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        return


@pytest.fixture(scope="session")
def web_server() -> Iterator[str]:
    handler = functools.partial(_SiteHandler, directory=str(FIXTURES))
    httpd = socketserver.TCPServer(("127.0.0.1", 0), handler)
    port = httpd.server_address[1]
    t = threading.Thread(target=httpd.serve_forever, daemon=True)
    t.start()
    try:
        yield f"http://127.0.0.1:{port}/"
    finally:
        httpd.shutdown()
        httpd.server_close()


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)


@pytest_asyncio.fixture
async def browser_session(web_server: str, request: pytest.FixtureRequest) -> AsyncIterator[Session]:
    driver = PlaywrightDriver(
        headless=True, viewport=(settings.window_width, settings.window_height)
    )
    try:
        await driver.start()
    except PwError as e:
        pytest.skip(f"chromium not available: {e}")
    ctx = await driver.new_context()
    session = Session.from_settings(driver, ctx, settings, base_url=web_server)
    await session.reset()
    try:
        yield session
    finally:
        rep = getattr(request.node, "rep_call", None)
        if rep is not None and rep.failed and settings.screenshot_on_failure:
            png = settings.artifacts_dir / f"{request.node.name}.png"
            await driver.screenshot(ctx, str(png), full_page=True)
        await driver.close_context(ctx)
        await driver.stop()
