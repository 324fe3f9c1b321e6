import re

from sitecms.domain.exceptions import InvariantViolation

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def assert_page(page):
    if not page.title or not page.title.strip():
        raise InvariantViolation("Page title must not be empty.")

    if not page.slug or not SLUG_PATTERN.match(page.slug):
        raise InvariantViolation(
            f"Page slug must be lowercase words joined by hyphens: {page.slug!r}"
        )

    assert_nav_order(page.nav_order)


def assert_nav_order(nav_order):
    if isinstance(nav_order, bool) or not isinstance(nav_order, int):
        raise InvariantViolation(f"Navigation order must be an integer: {nav_order!r}")
