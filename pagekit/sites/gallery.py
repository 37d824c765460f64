# pagekit/sites/gallery.py
"""
Image gallery site: the "create image" screen.

Layout assumed by the selectors:
- <header><h1> links back to the home page
- <form> with .fields (#name, #description, #image-url) and .actions (cancel, submit)
- .preview shows the title and an <img> whose src follows the image URL field
Invalid fields are painted with a red background.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel

from ..core import forms
from ..core.component import child, component, field, nested, page
from ..core.locator import By, Locator
from ..core.session import Session
from ..core.validation import ErrorIndicator, has_validation_error


class ImageData(BaseModel):
    """Form input for a new image. Empty strings leave the field untouched."""

    name: str = ""
    description: str = ""
    image_url: str = ""


@component(By.css("header"))
class Header:
    heading = child(By.css("h1"))


@component(By.css("form"))
class ImageForm:
    name_field = field(By.css(".fields #name"), key="name")
    description_field = field(By.css(".fields #description"), key="description")
    image_url_field = field(By.css(".fields #image-url"), key="image_url")
    cancel_button = child(By.css(".actions .cancel-button"))
    submit_button = child(By.css(".actions input[type='submit']"), submit=True)

    error_indicator = ErrorIndicator.style("background-color", "rgb(255, 0, 0)")

    @property
    def required_fields(self) -> List[Locator]:
        return [self.name_field, self.description_field, self.image_url_field]

    async def fill_with_data_and_submit(self, session: Session, data: ImageData) -> List[str]:
        return await forms.fill_form_and_submit(session, self, data)

    async def has_error(self, session: Session, field_locator: Locator) -> bool:
        return await has_validation_error(session, field_locator, self.error_indicator)


@component(By.css(".preview"))
class Preview:
    title = child(By.css("h1"))
    image = child(By.css("img"))


@page("/create-image", name="create-image")
class CreateImagePage:
    header = nested(Header)
    form = nested(ImageForm)
    preview = nested(Preview)
    success_message = child(By.css(".success-message"))
