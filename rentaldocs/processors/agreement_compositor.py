"""Rental agreement PDF composition.

The layout is fixed: header with logo, title, three detail tables, the
insurance declaration, numbered clauses, a two-column signature block and a
footer. Images are resolved up front and concurrently; a missing or broken
image never aborts composition, it is replaced by a text-only header or a
blank signature rule and reported as a ``Degradation``.
"""

import asyncio
import re
from io import BytesIO
from typing import List, Optional, Sequence, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen.canvas import Canvas

from ..config import Config
from ..models.data_models import AgreementFacts, ComposedDocument, Degradation, ResolvedImage
from ..utils.exceptions import ConfigurationError, ImageResolutionError, LayoutError
from ..utils.image_resolver import ImageResolver
from ..utils.logging_config import LoggerMixin, log_performance
from .layout_engine import (BLACK, BODY_FONT_SIZE, LINE_HEIGHT, MUTED_TEXT, SECTION_BLUE, SIGNATURE_RULE,
                            TITLE_RED, LayoutEngine)

LOGO = "logo"
CUSTOMER_SIGNATURE = "customer_signature"
ADMIN_SIGNATURE = "admin_signature"

# Geometry, mm
LOGO_WIDTH = 50
LOGO_TEXT_GAP = 8
DETAIL_COLUMNS = (60, 120)
CLAUSE_SPACING = 3
SIGNATURE_CELL_WIDTH = 85
SIGNATURE_CELL_HEIGHT = 40
SIGNATURE_IMAGE_WIDTH = 50
SIGNATURE_IMAGE_HEIGHT = 15
SIGNATURE_IMAGE_TOP = 10
SIGNATURE_RULE_WIDTH = 60
DATE_BOTTOM_OFFSET = 6


def agreement_filename(agreement_number: str) -> str:
    slug = re.sub(r'[^A-Za-z0-9._-]+', '-', agreement_number or '').strip('-')
    return f"agreement-{slug or 'draft'}.pdf"


class _CompositionRun:
    """Canvas, cursor and degradations for a single compose call."""

    def __init__(self, facts: AgreementFacts, logo: Optional[ResolvedImage],
                 signatures: Sequence[Tuple[str, str, Optional[ResolvedImage], Optional[str], Optional[str]]],
                 degradations: List[Degradation]):
        self.facts = facts
        self.logo = logo
        self.signatures = signatures
        self.degradations = degradations

        self.buffer = BytesIO()
        self.canvas = Canvas(self.buffer, pagesize=A4, invariant=1)
        self.canvas.setTitle(f"Rental Agreement {facts.agreement_number}")
        self.canvas.setAuthor(facts.company.name)
        self.layout = LayoutEngine(self.canvas, A4)
        self.cursor = self.layout.margin
        self.page_count = 1

    def ensure_space(self, required: float):
        if self.cursor + required > self.layout.bottom_limit:
            self.canvas.showPage()
            self.page_count += 1
            self.cursor = self.layout.margin

    def render(self) -> bytes:
        self._header()
        self._title()
        self._details_table("CUSTOMER DETAILS", self._customer_rows(), after=5)
        self._details_table("VEHICLE DETAILS", self._vehicle_rows(), after=5)
        self._details_table("RENTAL PERIOD", self._rental_rows(), after=10)
        self._insurance()
        self._clauses()
        self._signatures()
        self._footer()
        self.canvas.save()
        return self.buffer.getvalue()

    def _header(self):
        layout = self.layout
        company = self.facts.company
        x = layout.margin
        top = self.cursor

        if self.logo is not None:
            logo_height = self.logo.aspect_ratio * LOGO_WIDTH
            try:
                layout.draw_image(self.logo, x, top, LOGO_WIDTH, logo_height)
            except ImageResolutionError as e:
                self.degradations.append(Degradation(LOGO, e.message))
            else:
                text_x = x + LOGO_WIDTH + LOGO_TEXT_GAP
                layout.draw_text(text_x, top + 5, company.name, size=9, bold=True)
                layout.draw_text(text_x, top + 10, company.address, size=8, color=MUTED_TEXT)
                layout.draw_text(text_x, top + 15, f"Phone: {company.phone}", size=8, color=MUTED_TEXT)
                layout.draw_text(text_x, top + 20, f"Email: {company.email}", size=8, color=MUTED_TEXT)
                self.cursor = max(top + logo_height, top + 25) + 10
                return

        layout.draw_text(x, self.cursor, company.name, size=9, bold=True)
        self.cursor += 5
        layout.draw_text(x, self.cursor, company.address, size=8, color=MUTED_TEXT)
        self.cursor += 4
        layout.draw_text(x, self.cursor, f"Phone: {company.phone}", size=8, color=MUTED_TEXT)
        self.cursor += 4
        layout.draw_text(x, self.cursor, f"Email: {company.email}", size=8, color=MUTED_TEXT)
        self.cursor += 10

    def _title(self):
        self.ensure_space(20)
        self.layout.draw_centered_text(self.layout.page_width / 2, self.cursor, "AGREEMENT",
                                       size=16, bold=True, color=TITLE_RED)
        self.cursor += 12

    def _section_title(self, title: str, required: float):
        self.ensure_space(required)
        self.layout.draw_text(self.layout.margin, self.cursor, title, size=11, bold=True, color=SECTION_BLUE)
        self.cursor += 8

    def _customer_rows(self) -> List[List[str]]:
        customer = self.facts.customer
        return [
            ["Name", customer.name],
            ["Email", customer.email],
            ["Phone", customer.phone],
            ["Driving License", customer.license_number],
            ["Address", customer.address],
        ]

    def _vehicle_rows(self) -> List[List[str]]:
        vehicle = self.facts.vehicle
        return [
            ["Vehicle", vehicle.description],
            ["Registration", vehicle.registration],
            ["Initial Odometer", vehicle.odometer],
            ["Fuel Level", vehicle.fuel],
        ]

    def _rental_rows(self) -> List[List[str]]:
        rental = self.facts.rental
        return [
            ["Pickup", rental.pickup],
            ["Dropoff", rental.dropoff],
            ["Pickup Location", rental.pickup_location],
            ["Dropoff Location", rental.dropoff_location],
        ]

    def _details_table(self, title: str, rows: List[List[str]], after: float):
        table_height = self.layout.table_height(rows, DETAIL_COLUMNS)
        self._section_title(title, max(30, 8 + table_height))
        self.cursor = self.layout.render_table((self.layout.margin, self.cursor), rows, DETAIL_COLUMNS) + after

    def _paragraph_lines(self, text: str):
        for line in self.layout.wrap_text(text, self.layout.content_width, BODY_FONT_SIZE):
            self.ensure_space(6)
            self.layout.draw_text(self.layout.margin, self.cursor, line, size=BODY_FONT_SIZE, color=BLACK)
            self.cursor += LINE_HEIGHT

    def _insurance(self):
        self._section_title("INSURANCE DECLARATION", 40)
        self._paragraph_lines(self.facts.insurance_text)
        self.cursor += 5

    def _clauses(self):
        self._section_title("TERMS & CONDITIONS", 30)
        for clause in self.facts.clauses:
            self.ensure_space(10)
            self._paragraph_lines(clause)
            self.cursor += CLAUSE_SPACING

    def _signatures(self):
        layout = self.layout
        self.ensure_space(10 + SIGNATURE_CELL_HEIGHT)
        self.cursor += 10
        top = self.cursor

        for column, (element, label, image, reason, name) in enumerate(self.signatures):
            x = layout.margin + column * SIGNATURE_CELL_WIDTH
            layout.draw_rect(x, top, SIGNATURE_CELL_WIDTH, SIGNATURE_CELL_HEIGHT)
            layout.draw_centered_text(x + SIGNATURE_CELL_WIDTH / 2, top + 6, label, size=10, bold=True)

            drawn = False
            if image is not None:
                try:
                    layout.draw_image(
                        image,
                        x + (SIGNATURE_CELL_WIDTH - SIGNATURE_IMAGE_WIDTH) / 2,
                        top + SIGNATURE_IMAGE_TOP,
                        SIGNATURE_IMAGE_WIDTH,
                        SIGNATURE_IMAGE_HEIGHT
                    )
                    drawn = True
                except ImageResolutionError as e:
                    reason = e.message

            if not drawn:
                rule_x = x + (SIGNATURE_CELL_WIDTH - SIGNATURE_RULE_WIDTH) / 2
                rule_y = top + SIGNATURE_CELL_HEIGHT / 2
                layout.draw_line(rule_x, rule_y, rule_x + SIGNATURE_RULE_WIDTH, rule_y, color=SIGNATURE_RULE)
                self.degradations.append(Degradation(element, reason or "Signature not provided"))

            if name:
                layout.draw_centered_text(x + SIGNATURE_CELL_WIDTH / 2, top + 29, name, size=8, color=MUTED_TEXT)

            date_y = top + SIGNATURE_CELL_HEIGHT - DATE_BOTTOM_OFFSET
            layout.draw_text(x + 5, date_y, "Date:", size=9)
            if self.facts.signed_date:
                layout.draw_text(x + 20, date_y, self.facts.signed_date, size=9)

        self.cursor = top + SIGNATURE_CELL_HEIGHT + 10

    def _footer(self):
        self.ensure_space(15)
        self.layout.draw_centered_text(
            self.layout.page_width / 2, self.cursor,
            f"{self.facts.agreement_number}  |  Created: {self.facts.created_date}",
            size=9, color=MUTED_TEXT
        )


class AgreementCompositor(LoggerMixin):
    """Composes an ``AgreementFacts`` into a finished PDF.

    Instances hold no per-document state and can compose concurrently.
    """

    def __init__(self, resolver: ImageResolver, config: Optional[Config] = None):
        self.resolver = resolver
        self.config = (config or Config()).require_valid()

    async def _resolve_first(self, candidates: Sequence[str],
                             timeout: Optional[float]) -> Tuple[Optional[ResolvedImage], Optional[str]]:
        reason = "No logo configured"
        for candidate in candidates:
            try:
                return await self.resolver.resolve(candidate, timeout), None
            except ImageResolutionError as e:
                reason = e.message
        return None, reason

    async def _resolve_optional(self, reference: Optional[str],
                                timeout: Optional[float]) -> Tuple[Optional[ResolvedImage], Optional[str]]:
        if not reference:
            return None, "Signature not provided"
        try:
            return await self.resolver.resolve(reference, timeout), None
        except ImageResolutionError as e:
            return None, e.message

    async def compose(self, facts: AgreementFacts, timeout: Optional[float] = None) -> ComposedDocument:
        """Render the agreement.

        Args:
            facts: Agreement content
            timeout: Per-image resolution deadline in seconds

        Returns:
            ComposedDocument with the PDF bytes and any visual fallbacks taken

        Raises:
            LayoutError: Malformed geometry or an unrenderable document
            ConfigurationError: Invalid compositor configuration
        """
        if not isinstance(facts, AgreementFacts):
            raise ConfigurationError(f"Expected AgreementFacts, got {type(facts).__name__}",
                                     config_key='facts', expected_type='AgreementFacts')

        with log_performance("compose_agreement", self.logger, agreement_number=facts.agreement_number):
            (logo, logo_reason), (customer, customer_reason), (admin, admin_reason) = await asyncio.gather(
                self._resolve_first(self.config.logo_candidates(facts.company.logo_path), timeout),
                self._resolve_optional(facts.customer_signature, timeout),
                self._resolve_optional(facts.admin_signature, timeout),
            )

            degradations: List[Degradation] = []
            if logo is None:
                degradations.append(Degradation(LOGO, logo_reason))

            run = _CompositionRun(
                facts,
                logo,
                (
                    (CUSTOMER_SIGNATURE, "Client Signature", customer, customer_reason, facts.customer_name_signed),
                    (ADMIN_SIGNATURE, "Administration Signature", admin, admin_reason, facts.admin_name),
                ),
                degradations
            )
            try:
                content = run.render()
            except (LayoutError, ConfigurationError):
                raise
            except Exception as e:
                raise LayoutError(f"Failed to render agreement: {e}") from e

        for degradation in degradations:
            self.log_warning(f"Agreement rendered without {degradation.element}: {degradation.reason}",
                             agreement_number=facts.agreement_number)

        return ComposedDocument(
            content=content,
            filename=agreement_filename(facts.agreement_number),
            page_count=run.page_count,
            degradations=tuple(degradations)
        )
