import pytest

from pagekit.core.locator import element
from pagekit.core.validation import ErrorIndicator, has_validation_error, normalize_css_value
from pagekit.sites.contact import ContactPage
from pagekit.sites.gallery import CreateImagePage

from fakes import el


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("rgb(255,0,0)", "rgb(255,0,0)"),
        ("rgb(255, 0, 0)", "rgb(255,0,0)"),
        ("rgba(255, 0, 0, 1)", "rgb(255,0,0)"),
        ("rgba(255, 0, 0, 0.5)", "rgba(255,0,0,0.5)"),
        ("  RED ", "red"),
        (None, ""),
    ],
)
def test_normalize_css_value(raw, expected) -> None:
    assert normalize_css_value(raw) == expected


def test_indicator_needs_exactly_one_source() -> None:
    with pytest.raises(ValueError):
        ErrorIndicator(value="red")
    with pytest.raises(ValueError):
        ErrorIndicator(value="red", style_property="color", attribute_name="warning-color")


def test_indicator_matches_regardless_of_formatting() -> None:
    indicator = ErrorIndicator.style("background-color", "rgb(255,0,0)")
    assert indicator.matches("rgb(255, 0, 0)")
    assert indicator.matches("rgba(255, 0, 0, 1)")
    assert not indicator.matches("rgb(255, 255, 255)")
    assert not indicator.matches("")


@pytest.mark.asyncio
async def test_style_indicator(session, page) -> None:
    body = page.root.children[0]
    body.append(
        el(
            "form",
            el(
                "div",
                el("input", id="name", style={"background-color": "rgb(255, 0, 0)"}),
                el("textarea", id="description", style={"background-color": "rgb(255, 255, 255)"}),
                class_="fields",
            ),
        )
    )
    form = CreateImagePage().form

    assert await form.has_error(session, form.name_field)
    assert not await form.has_error(session, form.description_field)


@pytest.mark.asyncio
async def test_attribute_indicator(session, page) -> None:
    body = page.root.children[0]
    body.append(
        el(
            "form",
            el(
                "div",
                el("input", id="name"),
                el("textarea", id="message", **{"warning-color": "red"}),
                class_="fields",
            ),
        )
    )
    form = ContactPage().form

    assert await form.has_error(session, form.fields.message)
    assert not await form.has_error(session, form.fields.name)
    assert await has_validation_error(
        session, element("#message"), ErrorIndicator.attribute("warning-color", "RED")
    )
