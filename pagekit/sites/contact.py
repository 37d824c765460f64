# pagekit/sites/contact.py
"""
Contact site: a form assembled from smaller components (header, fields, buttons).

Invalid fields carry warning-color="red".
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel

from ..core import forms
from ..core.component import child, component, field, nested, page
from ..core.locator import By, Locator
from ..core.session import Session
from ..core.validation import ErrorIndicator, has_validation_error


class ContactData(BaseModel):
    name: str = ""
    message: str = ""


@component(By.css("header"))
class FormHeader:
    heading = child(By.css("h1"))


@component(By.class_name("fields"))
class Fields:
    name = field(By.id("name"))
    message = field(By.id("message"))


@component(By.class_name("actions"))
class Buttons:
    cancel = child(By.class_name("cancel-button"))
    submit = child(By.css("input[type='submit']"), submit=True)


@component(By.css("form"))
class ContactForm:
    header = nested(FormHeader)
    fields = nested(Fields)
    buttons = nested(Buttons)

    error_indicator = ErrorIndicator.attribute("warning-color", "red")

    @property
    def required_fields(self) -> List[Locator]:
        return [self.fields.name, self.fields.message]

    async def fill_with_data_and_submit(self, session: Session, data: ContactData) -> List[str]:
        return await forms.fill_form_and_submit(session, self, data)

    async def has_error(self, session: Session, field_locator: Locator) -> bool:
        return await has_validation_error(session, field_locator, self.error_indicator)


@page("/contact", name="contact")
class ContactPage:
    form = nested(ContactForm)
    success_message = child(By.css(".success-message"))
