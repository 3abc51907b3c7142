"""Page layout options for the print-to-PDF step."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class PageSize(str, Enum):
    A3 = "A3"
    A4 = "A4"
    A5 = "A5"
    LETTER = "Letter"
    LEGAL = "Legal"
    TABLOID = "Tabloid"


class Margins(BaseModel):
    model_config = ConfigDict(frozen=True)

    top: str = "20px"
    right: str = "20px"
    bottom: str = "20px"
    left: str = "20px"

    @classmethod
    def uniform(cls, value: str) -> Margins:
        return cls(top=value, right=value, bottom=value, left=value)


class PageOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    page_size: PageSize = PageSize.A4
    print_background: bool = True
    margins: Margins = Margins()

    def to_pdf_kwargs(self) -> dict:
        """Keyword arguments for the engine's ``page.pdf`` call."""
        return {
            "format": self.page_size.value,
            "print_background": self.print_background,
            "margin": self.margins.model_dump(),
        }

    @classmethod
    def from_pdf_kwargs(cls, kwargs: dict) -> PageOptions:
        """Inverse of ``to_pdf_kwargs``."""
        return cls(
            page_size=PageSize(kwargs.get("format", PageSize.A4.value)),
            print_background=kwargs.get("print_background", True),
            margins=Margins(**(kwargs.get("margin") or {})),
        )

    def to_page_css(self) -> str:
        """Equivalent CSS for engines that lay out from stylesheets.

        Sizes without a CSS page-size keyword are spelled out as dimensions.
        Backgrounds are stripped when ``print_background`` is off, matching
        what a browser does when printing without background graphics.
        """
        m = self.margins
        size = _CSS_PAGE_SIZES.get(self.page_size, self.page_size.value)
        css = f"@page {{ size: {size}; margin: {m.top} {m.right} {m.bottom} {m.left}; }}"
        if not self.print_background:
            css += "\nhtml, body, body * { background: none !important; }"
        return css


# portrait width then height
_CSS_PAGE_SIZES = {
    PageSize.TABLOID: "11in 17in",
}
